"""
frame_manager.py
----------------
Frame-level operations scripts perform on widgets.

Responsibilities
----------------
- Create frames (name substitution, parent link, strata/level inheritance,
  template sizes, OnLoad).
- Reparent frames without ever creating a parent or anchor cycle.
- Edit anchors, size, visibility, strata/level, parent keys and attributes,
  firing the matching script handlers.

Every mutator returns False (and changes nothing) when the target id is
unknown or the change would make the parent or anchor graph cyclic.
"""

import re
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Tuple

from addon_host.core.debug.debug_logger import DebugLogger
from addon_host.core.runtime.host_settings import Strata
from addon_host.systems.scripts.script_handler import ScriptHandler
from addon_host.ui.core.anchor_resolver import calculate_width, calculate_height
from addon_host.ui.core.frame import Anchor, AnchorPoint, AttributeValue, Frame, WidgetType


_PARENT_TOKEN = re.compile(r"\$parent", re.IGNORECASE)


class FrameManager:
    """Applies frame operations against the registry and fires their scripts."""

    def __init__(self, registry, ctx, templates=None):
        """
        Args:
            registry: WidgetRegistry
            ctx: DispatchContext used to run OnLoad/OnShow/... handlers
            templates: Optional TemplateCatalog for create_frame templates
        """
        self.registry = registry
        self.ctx = ctx
        self.templates = templates
        DebugLogger.init_entry("FrameManager")

    # ===========================================================
    # Creation
    # ===========================================================

    def create_frame(self, widget_type, name: Optional[str] = None,
                     parent: Optional[int] = None, template: Optional[str] = None,
                     scripts: Optional[Dict[str, Callable]] = None) -> Optional[int]:
        """
        Create and register a frame.

        Args:
            widget_type: WidgetType or type name ("Button", "frame", ...)
            name: Global name; ``$parent`` expands to the parent's name
            parent: Parent frame id
            template: Comma-separated template names applied in order
            scripts: Handler name -> callback, installed before OnLoad runs

        Returns:
            New frame id, or None for an unknown widget type
        """
        kind = WidgetType.from_name(widget_type)
        if kind is None:
            DebugLogger.warn(f"Unknown widget type {widget_type!r}", category="registry")
            return None

        parent_frame = self.registry.get(parent)
        if parent is not None and parent_frame is None:
            DebugLogger.warn(f"Unknown parent id={parent}, creating unparented", category="registry")

        if name and parent_frame is not None:
            name = _PARENT_TOKEN.sub(parent_frame.name or "", name)
        elif name:
            name = _PARENT_TOKEN.sub("", name)

        frame = Frame(widget_type=kind, name=name or None,
                      parent_id=parent_frame.id if parent_frame else None)
        if parent_frame is not None:
            frame.frame_strata = parent_frame.frame_strata
            frame.frame_level = parent_frame.frame_level + 1

        if template:
            self._apply_templates(frame, template)

        frame_id = self.registry.register(frame)
        if parent_frame is not None:
            self.registry.add_child(parent_frame.id, frame_id)

        for handler, callback in (scripts or {}).items():
            self.ctx.scripts.set_script(frame_id, handler, callback)
        self.ctx.scripts.run(self.ctx, frame_id, ScriptHandler.ON_LOAD)

        DebugLogger.state(f"Created {kind.value} {self.ctx.describe(frame_id)}", category="registry")
        return frame_id

    def _apply_templates(self, frame: Frame, template: str):
        if self.templates is None:
            return
        for template_name in (t.strip() for t in template.split(",")):
            info = self.templates.get_template_info(template_name)
            if info is None:
                DebugLogger.trace(f"No template info for '{template_name}'", category="loading")
                continue
            if info.width > 0:
                frame.width = info.width
            if info.height > 0:
                frame.height = info.height

    # ===========================================================
    # Hierarchy
    # ===========================================================

    def set_parent(self, frame_id: int, parent_id: Optional[int]) -> bool:
        """
        Move a frame under a new parent (None detaches it).

        Rejected when the new parent is the frame itself or one of its
        descendants, or when the frame's parent-relative anchors would then
        form a cycle.
        """
        frame = self.registry.get(frame_id)
        if frame is None:
            return False
        if parent_id is not None:
            if parent_id not in self.registry:
                DebugLogger.trace(f"set_parent: unknown parent id={parent_id}", category="registry")
                return False
            if parent_id == frame_id or self.registry.is_ancestor(frame_id, parent_id):
                DebugLogger.trace(f"set_parent: id={parent_id} is inside id={frame_id}'s subtree",
                                  category="registry")
                return False
            uses_parent = any(a.relative_to_id is None for a in frame.anchors)
            if uses_parent and self.registry.would_create_anchor_cycle(frame_id, parent_id):
                DebugLogger.trace(f"set_parent: anchor cycle via id={parent_id}", category="layout")
                return False
        if frame.parent_id == parent_id:
            return True

        def move():
            if frame.parent_id is not None:
                self.registry.remove_child(frame.parent_id, frame_id)
            frame.parent_id = parent_id
            if parent_id is not None:
                self.registry.add_child(parent_id, frame_id)
                self._inherit_from_parent(frame_id)

        self._with_visibility_events(frame_id, move)
        return True

    def get_parent(self, frame_id: int) -> Optional[int]:
        frame = self.registry.get(frame_id)
        return frame.parent_id if frame else None

    def get_children(self, frame_id: int) -> List[int]:
        """Child frames, excluding regions."""
        return [cid for cid in self._child_ids(frame_id) if not self._is_region(cid)]

    def get_regions(self, frame_id: int) -> List[int]:
        """Texture and FontString children."""
        return [cid for cid in self._child_ids(frame_id) if self._is_region(cid)]

    def _child_ids(self, frame_id: int) -> List[int]:
        frame = self.registry.get(frame_id)
        return list(frame.children) if frame else []

    def _is_region(self, frame_id: int) -> bool:
        frame = self.registry.get(frame_id)
        return frame is not None and frame.widget_type.is_region

    def set_parent_key(self, frame_id: int, key: str) -> bool:
        """Expose a frame on its parent under ``key`` (parent.key)."""
        frame = self.registry.get(frame_id)
        if frame is None or frame.parent_id is None:
            return False
        parent = self.registry.get_mut(frame.parent_id)
        if parent is None:
            return False
        parent.children_keys[key] = frame_id
        return True

    def get_parent_key(self, frame_id: int) -> Optional[str]:
        frame = self.registry.get(frame_id)
        parent = self.registry.get(frame.parent_id) if frame else None
        if parent is None:
            return None
        for key, child_id in parent.children_keys.items():
            if child_id == frame_id:
                return key
        return None

    def get_child_by_key(self, parent_id: int, key: str) -> Optional[int]:
        parent = self.registry.get(parent_id)
        return parent.children_keys.get(key) if parent else None

    # ===========================================================
    # Anchors
    # ===========================================================

    def set_point(self, frame_id: int, point, relative_to: Optional[int] = None,
                  relative_point=None, x: float = 0.0, y: float = 0.0) -> bool:
        """
        Set (or replace) the anchor for one point.

        Args:
            frame_id: Frame to anchor
            point: AnchorPoint or point name
            relative_to: Relative frame id; None anchors to the parent
            relative_point: Point on the relative frame (defaults to ``point``)
            x: Horizontal offset
            y: Vertical offset, positive is up

        Returns:
            False for unknown ids/points or a write that would create a cycle
        """
        frame = self.registry.get(frame_id)
        anchor_point = AnchorPoint.from_name(point)
        if frame is None or anchor_point is None:
            DebugLogger.trace(f"set_point ignored: id={frame_id} point={point!r}", category="layout")
            return False
        rel_point = AnchorPoint.from_name(relative_point) if relative_point is not None else anchor_point
        if rel_point is None:
            DebugLogger.trace(f"set_point ignored: relative point {relative_point!r}", category="layout")
            return False
        if relative_to is not None and relative_to not in self.registry:
            DebugLogger.trace(f"set_point ignored: unknown relative id={relative_to}", category="layout")
            return False
        if not self._anchor_target_ok(frame, relative_to):
            return False

        anchor = Anchor(anchor_point, relative_to, rel_point, float(x), float(y))
        existing = frame.find_anchor(anchor_point)
        if existing == anchor:
            return True

        frame = self.registry.get_mut(frame_id)
        if existing is not None:
            frame.anchors[frame.anchors.index(existing)] = anchor
        else:
            frame.anchors.append(anchor)
        return True

    def set_all_points(self, frame_id: int, relative_to: Optional[int] = None) -> bool:
        """Pin TOPLEFT and BOTTOMRIGHT to the same points of ``relative_to`` (or the parent)."""
        frame = self.registry.get(frame_id)
        if frame is None:
            return False
        if relative_to is not None and relative_to not in self.registry:
            return False
        if not self._anchor_target_ok(frame, relative_to):
            return False

        frame = self.registry.get_mut(frame_id)
        frame.anchors = [
            Anchor(AnchorPoint.TOPLEFT, relative_to, AnchorPoint.TOPLEFT),
            Anchor(AnchorPoint.BOTTOMRIGHT, relative_to, AnchorPoint.BOTTOMRIGHT),
        ]
        return True

    def clear_all_points(self, frame_id: int) -> bool:
        frame = self.registry.get_mut(frame_id)
        if frame is None:
            return False
        frame.anchors.clear()
        return True

    def clear_point(self, frame_id: int, point) -> bool:
        frame = self.registry.get(frame_id)
        anchor_point = AnchorPoint.from_name(point)
        if frame is None or anchor_point is None:
            return False
        existing = frame.find_anchor(anchor_point)
        if existing is None:
            return False
        self.registry.get_mut(frame_id).anchors.remove(existing)
        return True

    def adjust_points_offset(self, frame_id: int, dx: float, dy: float) -> bool:
        """Shift every anchor's offset by (dx, dy)."""
        frame = self.registry.get_mut(frame_id)
        if frame is None:
            return False
        frame.anchors = [
            replace(a, x_offset=a.x_offset + dx, y_offset=a.y_offset + dy)
            for a in frame.anchors
        ]
        return True

    def get_num_points(self, frame_id: int) -> int:
        frame = self.registry.get(frame_id)
        return len(frame.anchors) if frame else 0

    def get_point(self, frame_id: int, index: int = 0) -> Optional[Tuple[str, Optional[int], str, float, float]]:
        """(point, relative_id, relative_point, x, y) for the index-th anchor."""
        frame = self.registry.get(frame_id)
        if frame is None or not 0 <= index < len(frame.anchors):
            return None
        a = frame.anchors[index]
        return a.point.value, a.relative_to_id, a.relative_point.value, a.x_offset, a.y_offset

    def _anchor_target_ok(self, frame: Frame, relative_to: Optional[int]) -> bool:
        target = relative_to if relative_to is not None else frame.parent_id
        if target is None:
            return True
        if self.registry.would_create_anchor_cycle(frame.id, target):
            DebugLogger.trace(
                f"Rejected anchor {self.ctx.describe(frame.id)} -> id={target}: cycle",
                category="layout"
            )
            return False
        return True

    # ===========================================================
    # Size
    # ===========================================================

    def set_size(self, frame_id: int, width: float, height: float) -> bool:
        """Set the explicit size; OnSizeChanged(width, height) fires on change."""
        frame = self.registry.get(frame_id)
        if frame is None:
            return False
        width, height = float(width), float(height)
        if frame.width == width and frame.height == height:
            return True
        self.registry.get_mut(frame_id).set_size(width, height)
        self.ctx.scripts.run(self.ctx, frame_id, ScriptHandler.ON_SIZE_CHANGED, width, height)
        return True

    def set_width(self, frame_id: int, width: float) -> bool:
        frame = self.registry.get(frame_id)
        if frame is None:
            return False
        return self.set_size(frame_id, width, frame.height)

    def set_height(self, frame_id: int, height: float) -> bool:
        frame = self.registry.get(frame_id)
        if frame is None:
            return False
        return self.set_size(frame_id, frame.width, height)

    def get_width(self, frame_id: int) -> float:
        """Effective width (anchors first, then the explicit width)."""
        return calculate_width(self.registry, frame_id)

    def get_height(self, frame_id: int) -> float:
        return calculate_height(self.registry, frame_id)

    def get_size(self, frame_id: int) -> Tuple[float, float]:
        return self.get_width(frame_id), self.get_height(frame_id)

    # ===========================================================
    # Visibility
    # ===========================================================

    def show(self, frame_id: int) -> bool:
        return self.set_shown(frame_id, True)

    def hide(self, frame_id: int) -> bool:
        return self.set_shown(frame_id, False)

    def set_shown(self, frame_id: int, shown: bool) -> bool:
        """
        Set a frame's own shown flag.

        OnShow/OnHide run for every frame in the subtree whose effective
        visibility flipped, parents before children.
        """
        frame = self.registry.get(frame_id)
        if frame is None:
            return False
        shown = bool(shown)
        if frame.visible == shown:
            return True

        def flip():
            self.registry.get_mut(frame_id).visible = shown

        self._with_visibility_events(frame_id, flip)
        return True

    def is_shown(self, frame_id: int) -> bool:
        frame = self.registry.get(frame_id)
        return frame is not None and frame.visible

    def is_visible(self, frame_id: int) -> bool:
        return self.registry.is_visible(frame_id)

    def _with_visibility_events(self, frame_id: int, mutate: Callable[[], None]):
        subtree = [frame_id] + list(self.registry.iter_descendants(frame_id))
        before = {fid: self.registry.is_visible(fid) for fid in subtree}
        mutate()
        for fid in subtree:
            now_visible = self.registry.is_visible(fid)
            if now_visible == before[fid]:
                continue
            handler = ScriptHandler.ON_SHOW if now_visible else ScriptHandler.ON_HIDE
            self.ctx.scripts.run(self.ctx, fid, handler)

    # ===========================================================
    # Strata & Level
    # ===========================================================

    def set_frame_strata(self, frame_id: int, strata: str) -> bool:
        """Fix a frame's strata and push it down to children that are not fixed."""
        frame = self.registry.get_mut(frame_id)
        value = str(strata).upper() if strata else ""
        if frame is None or value not in Strata.ORDER:
            DebugLogger.trace(f"set_frame_strata ignored: id={frame_id} strata={strata!r}", category="layout")
            return False
        frame.frame_strata = value
        frame.has_fixed_frame_strata = True
        self._propagate_down(frame_id)
        return True

    def set_frame_level(self, frame_id: int, level: int) -> bool:
        """Fix a frame's level; unfixed descendants follow at +1 per generation."""
        frame = self.registry.get_mut(frame_id)
        if frame is None:
            return False
        frame.frame_level = max(0, int(level))
        frame.has_fixed_frame_level = True
        self._propagate_down(frame_id)
        return True

    def get_frame_strata(self, frame_id: int) -> Optional[str]:
        frame = self.registry.get(frame_id)
        return frame.frame_strata if frame else None

    def get_frame_level(self, frame_id: int) -> int:
        frame = self.registry.get(frame_id)
        return frame.frame_level if frame else 0

    def _inherit_from_parent(self, frame_id: int):
        frame = self.registry.get(frame_id)
        parent = self.registry.get(frame.parent_id) if frame else None
        if parent is None:
            return
        if not frame.has_fixed_frame_strata:
            frame.frame_strata = parent.frame_strata
        if not frame.has_fixed_frame_level:
            frame.frame_level = parent.frame_level + 1
        self._propagate_down(frame_id)

    def _propagate_down(self, frame_id: int):
        # iter_descendants is breadth-first, so a parent is always updated first
        for child_id in self.registry.iter_descendants(frame_id):
            child = self.registry.get(child_id)
            parent = self.registry.get(child.parent_id)
            if parent is None:
                continue
            if not child.has_fixed_frame_strata:
                child.frame_strata = parent.frame_strata
            if not child.has_fixed_frame_level:
                child.frame_level = parent.frame_level + 1

    # ===========================================================
    # Attributes
    # ===========================================================

    def set_attribute(self, frame_id: int, name: str, value: Any) -> bool:
        """Store an attribute and run OnAttributeChanged(name, value)."""
        frame = self.registry.get_mut(frame_id)
        if frame is None:
            return False
        wrapped = AttributeValue.wrap(value)
        frame.attributes[name] = wrapped
        self.ctx.scripts.run(self.ctx, frame_id, ScriptHandler.ON_ATTRIBUTE_CHANGED, name, wrapped.unwrap())
        return True

    def get_attribute(self, frame_id: int, name: str) -> Any:
        frame = self.registry.get(frame_id)
        if frame is None:
            return None
        value = frame.attributes.get(name)
        return value.unwrap() if value is not None else None

    # ===========================================================
    # Flags
    # ===========================================================

    def enable_mouse(self, frame_id: int, enabled: bool = True) -> bool:
        return self._set_flag(frame_id, "mouse_enabled", enabled)

    def set_movable(self, frame_id: int, movable: bool = True) -> bool:
        return self._set_flag(frame_id, "movable", movable)

    def set_resizable(self, frame_id: int, resizable: bool = True) -> bool:
        return self._set_flag(frame_id, "resizable", resizable)

    def set_clamped_to_screen(self, frame_id: int, clamped: bool = True) -> bool:
        return self._set_flag(frame_id, "clamped_to_screen", clamped)

    def _set_flag(self, frame_id: int, flag: str, value: bool) -> bool:
        frame = self.registry.get_mut(frame_id)
        if frame is None:
            return False
        setattr(frame, flag, bool(value))
        return True
