"""
event_dispatcher.py
-------------------
Fans named game events out to every frame registered for them.

Responsibilities
----------------
- Register/unregister frames for events (idempotent).
- Fire an event to listeners in the order they registered.
- Queue events for deferred delivery by the host loop.
"""

from collections import deque
from typing import Deque, List, Tuple

from addon_host.core.debug.debug_logger import DebugLogger
from addon_host.systems.scripts.script_handler import ScriptHandler


# ===========================================================
# Common Events
# ===========================================================

class Events:
    """Event names the host itself raises."""
    ADDON_LOADED = "ADDON_LOADED"
    PLAYER_LOGIN = "PLAYER_LOGIN"
    PLAYER_LOGOUT = "PLAYER_LOGOUT"
    PLAYER_ENTERING_WORLD = "PLAYER_ENTERING_WORLD"
    VARIABLES_LOADED = "VARIABLES_LOADED"
    DISPLAY_SIZE_CHANGED = "DISPLAY_SIZE_CHANGED"
    UI_SCALE_CHANGED = "UI_SCALE_CHANGED"


# ===========================================================
# Event Dispatcher
# ===========================================================

class EventDispatcher:
    """Central event dispatcher for frame event registrations."""

    def __init__(self, registry):
        """
        Args:
            registry: WidgetRegistry that stores each frame's event set
        """
        self.registry = registry
        self._queue: Deque[Tuple[str, tuple]] = deque()
        DebugLogger.init_entry("EventDispatcher")

    # ===========================================================
    # Registration
    # ===========================================================

    def register_event(self, frame_id: int, event: str) -> bool:
        """
        Register a frame for an event.

        Returns:
            False if the frame id is unknown
        """
        registered = self.registry.register_event(frame_id, event)
        if registered:
            DebugLogger.trace(f"id={frame_id} registered for {event}", category="event")
        return registered

    def register_unit_event(self, frame_id: int, event: str, *units) -> bool:
        """Unit filters are accepted but not applied; behaves like register_event."""
        return self.register_event(frame_id, event)

    def unregister_event(self, frame_id: int, event: str) -> bool:
        return self.registry.unregister_event(frame_id, event)

    def unregister_all_events(self, frame_id: int) -> bool:
        return self.registry.unregister_all_events(frame_id)

    def register_all_events(self, frame_id: int) -> bool:
        return self.registry.register_all_events(frame_id)

    def is_event_registered(self, frame_id: int, event: str) -> bool:
        frame = self.registry.get(frame_id)
        return frame is not None and frame.is_registered_for_event(event)

    def get_listeners(self, event: str) -> List[int]:
        return self.registry.get_event_listeners(event)

    # ===========================================================
    # Dispatch
    # ===========================================================

    def fire(self, ctx, event: str, *args) -> int:
        """
        Send an event to every registered frame's OnEvent slot.

        Callbacks receive ``(frame_handle, event, *args)``. A listener that
        unregisters before its turn is skipped; a failing callback is logged
        and the remaining listeners still run.

        Args:
            ctx: DispatchContext
            event: Event name
            *args: Event payload

        Returns:
            Number of listeners whose OnEvent slot ran at least one callback
        """
        delivered = 0
        for frame_id in self.registry.get_event_listeners(event):
            frame = ctx.registry.get(frame_id)
            if frame is None or not frame.is_registered_for_event(event):
                continue
            if ctx.scripts.run(ctx, frame_id, ScriptHandler.ON_EVENT, event, *args):
                delivered += 1

        DebugLogger.trace(f"Fired {event} to {delivered} listener(s)", category="event")
        return delivered

    # ===========================================================
    # Deferred Events
    # ===========================================================

    def queue_event(self, event: str, *args):
        """Queue an event for the next flush."""
        self._queue.append((event, args))

    def flush_events(self, ctx) -> int:
        """
        Fire every queued event in order.

        Events queued by handlers during the flush wait for the next one.

        Returns:
            Number of events fired
        """
        batch = list(self._queue)
        self._queue.clear()
        for event, args in batch:
            self.fire(ctx, event, *args)
        return len(batch)

    @property
    def pending_events(self) -> int:
        return len(self._queue)

    def clear_queue(self):
        self._queue.clear()
