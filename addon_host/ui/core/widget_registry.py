"""
widget_registry.py
------------------
Arena of every frame in the session, keyed by widget id.

Responsibilities
----------------
- Own all Frame instances; everything else refers to frames by id.
- Maintain the name -> id reverse index.
- Track which frames listen for which events, in registration order.
- Guard the anchor graph against cycles before anchors are written.
"""

from collections import deque
from typing import Dict, Iterator, List, Optional

from addon_host.core.debug.debug_logger import DebugLogger
from addon_host.ui.core.frame import Frame, next_widget_id


class WidgetRegistry:
    """Registry of all widgets in the UI."""

    def __init__(self):
        self._widgets: Dict[int, Frame] = {}
        self._names: Dict[str, int] = {}

        # event -> {frame_id: registration sequence}
        self._event_listeners: Dict[str, Dict[int, int]] = {}
        self._all_event_listeners: Dict[int, int] = {}
        self._listener_seq = 0

        self._render_dirty = False

    # ===========================================================
    # Registration & Lookup
    # ===========================================================

    def register(self, frame: Frame) -> int:
        """
        Insert a frame and index its name.

        A frame carrying an id that already belongs to a different frame is
        given a fresh id, so two frames never share one.

        Args:
            frame: Frame to insert

        Returns:
            The frame's id
        """
        existing = self._widgets.get(frame.id)
        if existing is not None and existing is not frame:
            old_id = frame.id
            frame.id = next_widget_id()
            DebugLogger.warn(
                f"Widget id {old_id} already taken, reassigned to {frame.id}",
                category="registry"
            )

        if frame.name:
            self._claim_name(frame.name, frame.id)

        self._widgets[frame.id] = frame
        for event in sorted(frame.registered_events):
            self._event_listeners.setdefault(event, {}).setdefault(frame.id, self._next_seq())
        if frame.register_all_events:
            self._all_event_listeners.setdefault(frame.id, self._next_seq())
        self.mark_render_dirty()
        DebugLogger.trace(
            f"Registered {frame.widget_type.value} id={frame.id} name={frame.name!r}",
            category="registry"
        )
        return frame.id

    def _claim_name(self, name: str, frame_id: int):
        """Point ``name`` at ``frame_id``; a previous holder loses the name."""
        previous_id = self._names.get(name)
        if previous_id is not None and previous_id != frame_id:
            previous = self._widgets.get(previous_id)
            if previous is not None:
                previous.name = None
            DebugLogger.warn(
                f"Name '{name}' moved from id={previous_id} to id={frame_id}",
                category="registry"
            )
        self._names[name] = frame_id

    def get(self, frame_id: Optional[int]) -> Optional[Frame]:
        """Get a frame by id (None when unknown)."""
        if frame_id is None:
            return None
        return self._widgets.get(frame_id)

    def get_mut(self, frame_id: Optional[int]) -> Optional[Frame]:
        """Get a frame for mutation. Marks the registry render-dirty."""
        frame = self.get(frame_id)
        if frame is not None:
            self.mark_render_dirty()
        return frame

    def get_by_name(self, name: str) -> Optional[Frame]:
        return self.get(self._names.get(name))

    def get_id_by_name(self, name: str) -> Optional[int]:
        """O(1) reverse lookup of a global frame name."""
        return self._names.get(name)

    def all_ids(self) -> List[int]:
        return list(self._widgets.keys())

    def __contains__(self, frame_id) -> bool:
        return frame_id in self._widgets

    def __len__(self) -> int:
        return len(self._widgets)

    def __iter__(self) -> Iterator[Frame]:
        return iter(list(self._widgets.values()))

    # ===========================================================
    # Hierarchy
    # ===========================================================

    def add_child(self, parent_id: int, child_id: int):
        """
        Append a child id to a parent's children list.

        Does not touch the child's parent_id; that is the caller's job.
        """
        parent = self.get_mut(parent_id)
        if parent is None:
            return
        if child_id not in parent.children:
            parent.children.append(child_id)

    def remove_child(self, parent_id: int, child_id: int):
        parent = self.get_mut(parent_id)
        if parent is None:
            return
        if child_id in parent.children:
            parent.children.remove(child_id)
        for key, cid in list(parent.children_keys.items()):
            if cid == child_id:
                del parent.children_keys[key]

    def is_ancestor(self, ancestor_id: int, frame_id: int) -> bool:
        """True if ``ancestor_id`` is on the parent chain of ``frame_id``."""
        seen = set()
        current = self.get(frame_id)
        while current is not None and current.parent_id is not None:
            if current.parent_id == ancestor_id:
                return True
            if current.parent_id in seen:
                return False
            seen.add(current.parent_id)
            current = self.get(current.parent_id)
        return False

    def get_parent_depth(self, frame_id: int) -> int:
        """Number of ancestors above a frame."""
        depth = 0
        seen = {frame_id}
        current = self.get(frame_id)
        while current is not None and current.parent_id is not None:
            if current.parent_id in seen:
                break
            seen.add(current.parent_id)
            depth += 1
            current = self.get(current.parent_id)
        return depth

    def is_visible(self, frame_id: int) -> bool:
        """Shown and every ancestor shown."""
        seen = set()
        current = self.get(frame_id)
        if current is None:
            return False
        while current is not None:
            if not current.visible:
                return False
            if current.parent_id is None or current.parent_id in seen:
                return True
            seen.add(current.parent_id)
            current = self.get(current.parent_id)
        return True

    def iter_descendants(self, frame_id: int) -> Iterator[int]:
        """Yield descendant ids breadth-first (parents before children)."""
        root = self.get(frame_id)
        if root is None:
            return
        seen = {frame_id}
        queue = deque(root.children)
        while queue:
            child_id = queue.popleft()
            if child_id in seen:
                continue
            seen.add(child_id)
            yield child_id
            child = self.get(child_id)
            if child is not None:
                queue.extend(child.children)

    # ===========================================================
    # Event Registration
    # ===========================================================

    def register_event(self, frame_id: int, event: str) -> bool:
        """Add an event to a frame's set. Re-registering keeps the original order."""
        frame = self.get(frame_id)
        if frame is None:
            return False
        if event not in frame.registered_events:
            frame.registered_events.add(event)
            self._event_listeners.setdefault(event, {})[frame_id] = self._next_seq()
        return True

    def unregister_event(self, frame_id: int, event: str) -> bool:
        frame = self.get(frame_id)
        if frame is None:
            return False
        frame.registered_events.discard(event)
        listeners = self._event_listeners.get(event)
        if listeners is not None:
            listeners.pop(frame_id, None)
            if not listeners:
                del self._event_listeners[event]
        return True

    def unregister_all_events(self, frame_id: int) -> bool:
        frame = self.get(frame_id)
        if frame is None:
            return False
        for event in list(frame.registered_events):
            self.unregister_event(frame_id, event)
        frame.register_all_events = False
        self._all_event_listeners.pop(frame_id, None)
        return True

    def register_all_events(self, frame_id: int) -> bool:
        frame = self.get(frame_id)
        if frame is None:
            return False
        if not frame.register_all_events:
            frame.register_all_events = True
            self._all_event_listeners[frame_id] = self._next_seq()
        return True

    def get_event_listeners(self, event: str) -> List[int]:
        """Frame ids listening for ``event``, ordered by when they registered."""
        ordered: Dict[int, int] = dict(self._all_event_listeners)
        for frame_id, seq in self._event_listeners.get(event, {}).items():
            ordered[frame_id] = min(seq, ordered.get(frame_id, seq))
        return [fid for fid, _ in sorted(ordered.items(), key=lambda item: item[1])]

    def _next_seq(self) -> int:
        self._listener_seq += 1
        return self._listener_seq

    # ===========================================================
    # Anchor Graph
    # ===========================================================

    def anchor_targets(self, frame_id: int) -> List[int]:
        """
        Ids a frame is positioned relative to.

        An anchor without an explicit relative frame resolves against the
        frame's parent, so the parent counts as its target.
        """
        frame = self.get(frame_id)
        if frame is None:
            return []
        targets = []
        for anchor in frame.anchors:
            target = anchor.relative_to_id if anchor.relative_to_id is not None else frame.parent_id
            if target is not None and target not in targets:
                targets.append(target)
        return targets

    def would_create_anchor_cycle(self, frame_id: int, candidate_relative_id: int) -> bool:
        """
        Check if anchoring ``frame_id`` to ``candidate_relative_id`` closes a loop.

        Breadth-first walk from the candidate along anchor edges; the visited
        set bounds the walk by the number of frames even on a malformed graph.
        """
        if frame_id == candidate_relative_id:
            return True

        queue = deque([candidate_relative_id])
        seen = {candidate_relative_id}

        while queue:
            check_id = queue.popleft()
            for target_id in self.anchor_targets(check_id):
                if target_id == frame_id:
                    return True
                if target_id not in seen:
                    seen.add(target_id)
                    queue.append(target_id)

        return False

    # ===========================================================
    # Render Dirty Flag
    # ===========================================================

    def mark_render_dirty(self):
        self._render_dirty = True

    def take_render_dirty(self) -> bool:
        """Check and clear the render-dirty flag."""
        dirty = self._render_dirty
        self._render_dirty = False
        return dirty
