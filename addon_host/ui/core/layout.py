"""
layout.py
---------
Screen-space rectangles for frames and point hit testing.

Coordinates are screen-style (origin top-left, Y down). Anchor offsets are
Y-up, so a positive y_offset moves a frame towards the top of the screen.
"""

from typing import Optional, Tuple

import pygame

from addon_host.core.runtime.host_settings import Strata
from addon_host.ui.core.anchor_resolver import calculate_width, calculate_height
from addon_host.ui.core.frame import AnchorPoint


class FrameLayout:
    """Resolves frame rectangles against a virtual screen."""

    # (x, y) multipliers from a rect's top-left to each named point
    _POINT_MULTIPLIERS = {
        AnchorPoint.TOPLEFT: (0, 0),
        AnchorPoint.TOP: (0.5, 0),
        AnchorPoint.TOPRIGHT: (1, 0),
        AnchorPoint.LEFT: (0, 0.5),
        AnchorPoint.CENTER: (0.5, 0.5),
        AnchorPoint.RIGHT: (1, 0.5),
        AnchorPoint.BOTTOMLEFT: (0, 1),
        AnchorPoint.BOTTOM: (0.5, 1),
        AnchorPoint.BOTTOMRIGHT: (1, 1),
    }

    def __init__(self, registry, screen_width: int, screen_height: int):
        """
        Args:
            registry: WidgetRegistry to read frames from
            screen_width: Virtual screen width
            screen_height: Virtual screen height
        """
        self.registry = registry
        self.screen_width = screen_width
        self.screen_height = screen_height

    @property
    def screen_rect(self) -> pygame.Rect:
        return pygame.Rect(0, 0, self.screen_width, self.screen_height)

    # ===========================================================
    # Rect Resolution
    # ===========================================================

    def compute_frame_rect(self, frame_id: int) -> pygame.Rect:
        """
        Calculate a frame's screen rectangle.

        The first anchor positions the frame against its relative frame (or
        parent, or the screen); size comes from the anchor resolver.

        Returns:
            Positioned rect (empty rect for unknown ids)
        """
        return self._compute(frame_id, set())

    def _compute(self, frame_id: int, visiting: set) -> pygame.Rect:
        frame = self.registry.get(frame_id)
        if frame is None:
            return pygame.Rect(0, 0, 0, 0)

        visiting = visiting | {frame_id}
        width = calculate_width(self.registry, frame_id)
        height = calculate_height(self.registry, frame_id)

        if not frame.anchors:
            base = self._reference_rect(frame.parent_id, visiting)
            return pygame.Rect(base.x, base.y, round(width), round(height))

        anchor = frame.anchors[0]
        relative_id = anchor.relative_to_id if anchor.relative_to_id is not None else frame.parent_id
        ref = self._reference_rect(relative_id, visiting)

        ref_x, ref_y = self.point_position(anchor.relative_point, ref.x, ref.y, ref.width, ref.height)
        target_x = ref_x + anchor.x_offset
        target_y = ref_y - anchor.y_offset

        mult_x, mult_y = self._POINT_MULTIPLIERS[anchor.point]
        x = target_x - width * mult_x
        y = target_y - height * mult_y
        return pygame.Rect(round(x), round(y), round(width), round(height))

    def _reference_rect(self, frame_id: Optional[int], visiting: set) -> pygame.Rect:
        """Rect of a relative frame, or the screen when there is none."""
        if frame_id is None or frame_id in visiting or self.registry.get(frame_id) is None:
            return self.screen_rect
        return self._compute(frame_id, visiting)

    def point_position(self, point: AnchorPoint, x: float, y: float,
                       w: float, h: float) -> Tuple[float, float]:
        """Position of a named point on a rect."""
        mult_x, mult_y = self._POINT_MULTIPLIERS[point]
        return x + w * mult_x, y + h * mult_y

    # ===========================================================
    # Hit Testing
    # ===========================================================

    def frame_at_point(self, pos: Tuple[int, int]) -> Optional[int]:
        """
        Topmost visible, mouse-enabled frame under a screen point.

        Ties are broken by strata, then frame level, then creation order.
        """
        best_id = None
        best_key = None
        for frame in self.registry:
            if not frame.mouse_enabled or not self.registry.is_visible(frame.id):
                continue
            if not self.compute_frame_rect(frame.id).collidepoint(pos):
                continue
            key = (_strata_rank(frame.frame_strata), frame.frame_level, frame.id)
            if best_key is None or key > best_key:
                best_id, best_key = frame.id, key
        return best_id


def _strata_rank(strata: str) -> int:
    try:
        return Strata.ORDER.index(strata)
    except ValueError:
        return Strata.ORDER.index(Strata.DEFAULT)
