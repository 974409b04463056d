"""
frame_handle.py
---------------
Lightweight (state, id) reference handed to scripted callbacks.

A handle never holds a Frame; every call goes back through the owning
SimState, so a handle stays valid across any amount of mutation.
"""

from typing import Any, Callable, Optional, Tuple, Union


def _frame_id(value) -> Optional[int]:
    """Accept either a FrameHandle or a raw frame id."""
    if isinstance(value, FrameHandle):
        return value.id
    return value


class FrameHandle:
    """Script-facing view of one frame."""

    __slots__ = ("_state", "id")

    def __init__(self, state, frame_id: int):
        self._state = state
        self.id = frame_id

    def __eq__(self, other):
        return isinstance(other, FrameHandle) and other.id == self.id and other._state is self._state

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"FrameHandle({self._state.ctx.describe(self.id)})"

    @property
    def _frames(self):
        return self._state.frames

    # ===========================================================
    # Identity & Hierarchy
    # ===========================================================

    def get_name(self) -> Optional[str]:
        frame = self._state.registry.get(self.id)
        return frame.name if frame else None

    def get_object_type(self) -> Optional[str]:
        frame = self._state.registry.get(self.id)
        return frame.widget_type.value if frame else None

    def get_parent(self) -> Optional["FrameHandle"]:
        parent_id = self._frames.get_parent(self.id)
        return self._state.handle(parent_id) if parent_id is not None else None

    def set_parent(self, parent: Union["FrameHandle", int, None]) -> bool:
        return self._frames.set_parent(self.id, _frame_id(parent))

    def get_children(self):
        return [self._state.handle(cid) for cid in self._frames.get_children(self.id)]

    def get_regions(self):
        return [self._state.handle(cid) for cid in self._frames.get_regions(self.id)]

    def set_parent_key(self, key: str) -> bool:
        return self._frames.set_parent_key(self.id, key)

    def get_parent_key(self) -> Optional[str]:
        return self._frames.get_parent_key(self.id)

    def child(self, key: str) -> Optional["FrameHandle"]:
        """Child registered under a parent key."""
        child_id = self._frames.get_child_by_key(self.id, key)
        return self._state.handle(child_id) if child_id is not None else None

    # ===========================================================
    # Layout
    # ===========================================================

    def set_point(self, point, relative_to=None, relative_point=None,
                  x: float = 0.0, y: float = 0.0) -> bool:
        return self._frames.set_point(self.id, point, _frame_id(relative_to), relative_point, x, y)

    def set_all_points(self, relative_to=None) -> bool:
        return self._frames.set_all_points(self.id, _frame_id(relative_to))

    def clear_all_points(self) -> bool:
        return self._frames.clear_all_points(self.id)

    def clear_point(self, point) -> bool:
        return self._frames.clear_point(self.id, point)

    def adjust_points_offset(self, dx: float, dy: float) -> bool:
        return self._frames.adjust_points_offset(self.id, dx, dy)

    def get_point(self, index: int = 0):
        return self._frames.get_point(self.id, index)

    def get_num_points(self) -> int:
        return self._frames.get_num_points(self.id)

    def set_size(self, width: float, height: float) -> bool:
        return self._frames.set_size(self.id, width, height)

    def set_width(self, width: float) -> bool:
        return self._frames.set_width(self.id, width)

    def set_height(self, height: float) -> bool:
        return self._frames.set_height(self.id, height)

    def get_width(self) -> float:
        return self._frames.get_width(self.id)

    def get_height(self) -> float:
        return self._frames.get_height(self.id)

    def get_size(self) -> Tuple[float, float]:
        return self._frames.get_size(self.id)

    def get_rect(self):
        """Screen rect (pygame.Rect)."""
        return self._state.layout.compute_frame_rect(self.id)

    # ===========================================================
    # Visibility & Ordering
    # ===========================================================

    def show(self) -> bool:
        return self._frames.show(self.id)

    def hide(self) -> bool:
        return self._frames.hide(self.id)

    def set_shown(self, shown: bool) -> bool:
        return self._frames.set_shown(self.id, shown)

    def is_shown(self) -> bool:
        return self._frames.is_shown(self.id)

    def is_visible(self) -> bool:
        return self._frames.is_visible(self.id)

    def set_frame_strata(self, strata: str) -> bool:
        return self._frames.set_frame_strata(self.id, strata)

    def get_frame_strata(self) -> Optional[str]:
        return self._frames.get_frame_strata(self.id)

    def set_frame_level(self, level: int) -> bool:
        return self._frames.set_frame_level(self.id, level)

    def get_frame_level(self) -> int:
        return self._frames.get_frame_level(self.id)

    # ===========================================================
    # Flags & Attributes
    # ===========================================================

    def enable_mouse(self, enabled: bool = True) -> bool:
        return self._frames.enable_mouse(self.id, enabled)

    def set_movable(self, movable: bool = True) -> bool:
        return self._frames.set_movable(self.id, movable)

    def set_resizable(self, resizable: bool = True) -> bool:
        return self._frames.set_resizable(self.id, resizable)

    def set_clamped_to_screen(self, clamped: bool = True) -> bool:
        return self._frames.set_clamped_to_screen(self.id, clamped)

    def set_attribute(self, name: str, value: Any) -> bool:
        return self._frames.set_attribute(self.id, name, value)

    def get_attribute(self, name: str) -> Any:
        return self._frames.get_attribute(self.id, name)

    # ===========================================================
    # Scripts & Events
    # ===========================================================

    def set_script(self, handler: str, callback: Optional[Callable]) -> bool:
        return self._state.scripts.set_script(self.id, handler, callback)

    def get_script(self, handler: str) -> Optional[Callable]:
        return self._state.scripts.get_script(self.id, handler)

    def has_script(self, handler: str) -> bool:
        return self._state.scripts.has_handler(self.id, handler)

    def hook_script(self, handler: str, callback: Callable) -> bool:
        return self._state.scripts.hook_script(self.id, handler, callback)

    def register_event(self, event: str) -> bool:
        return self._state.events.register_event(self.id, event)

    def register_unit_event(self, event: str, *units) -> bool:
        return self._state.events.register_unit_event(self.id, event, *units)

    def unregister_event(self, event: str) -> bool:
        return self._state.events.unregister_event(self.id, event)

    def register_all_events(self) -> bool:
        return self._state.events.register_all_events(self.id)

    def unregister_all_events(self) -> bool:
        return self._state.events.unregister_all_events(self.id)

    def is_event_registered(self, event: str) -> bool:
        return self._state.events.is_event_registered(self.id, event)
