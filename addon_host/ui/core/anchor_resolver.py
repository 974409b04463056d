"""
anchor_resolver.py
------------------
Derives effective frame width/height from anchor constraints.

A frame pinned on two opposing edges to the same relative frame takes its
size from that frame; otherwise its explicit size stands. Width and height
are resolved independently.
"""

from typing import Optional

from addon_host.ui.core.frame import (
    Anchor,
    Frame,
    LEFT_POINTS,
    RIGHT_POINTS,
    TOP_POINTS,
    BOTTOM_POINTS,
)


def calculate_width(registry, frame_id: int) -> float:
    """
    Resolve a frame's effective width.

    Args:
        registry: WidgetRegistry holding the frame
        frame_id: Frame to measure

    Returns:
        ``max(0, relative_width - left.x + right.x)`` when a left and a right
        anchor share a relative frame, else the explicit width (0 for
        unknown ids)
    """
    frame = registry.get(frame_id)
    if frame is None:
        return 0.0

    left = frame.first_anchor_in(LEFT_POINTS)
    right = frame.first_anchor_in(RIGHT_POINTS)
    relative_id = _shared_relative(frame, left, right)
    if relative_id is None or registry.get(relative_id) is None:
        return frame.width

    relative_width = calculate_width(registry, relative_id)
    return max(0.0, relative_width - left.x_offset + right.x_offset)


def calculate_height(registry, frame_id: int) -> float:
    """
    Resolve a frame's effective height.

    Offsets are Y-up, so the bottom anchor is the near edge:
    ``max(0, relative_height - bottom.y + top.y)``.
    """
    frame = registry.get(frame_id)
    if frame is None:
        return 0.0

    top = frame.first_anchor_in(TOP_POINTS)
    bottom = frame.first_anchor_in(BOTTOM_POINTS)
    relative_id = _shared_relative(frame, bottom, top)
    if relative_id is None or registry.get(relative_id) is None:
        return frame.height

    relative_height = calculate_height(registry, relative_id)
    return max(0.0, relative_height - bottom.y_offset + top.y_offset)


def calculate_size(registry, frame_id: int):
    """(width, height) tuple."""
    return calculate_width(registry, frame_id), calculate_height(registry, frame_id)


def _shared_relative(frame: Frame, near: Optional[Anchor], far: Optional[Anchor]) -> Optional[int]:
    """Relative frame id both anchors point at, falling back to the parent."""
    if near is None or far is None:
        return None
    if near.relative_to_id != far.relative_to_id:
        return None
    if near.relative_to_id is not None:
        return near.relative_to_id
    return frame.parent_id
