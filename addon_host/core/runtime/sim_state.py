"""
sim_state.py
------------
Single owner of the addon host's mutable state.

Responsibilities
----------------
- Build and wire the widget registry, script table, event dispatcher,
  timer scheduler, layout and template catalog.
- Hand out stable FrameHandles for frame ids.
- Drive one host step: queued events, due timers, OnUpdate, OnPostUpdate.
- Route simulated clicks to the frame under the cursor.
"""

from typing import Any, Callable, Dict, List, Optional, Set

from addon_host.core.debug.debug_logger import DebugLogger, LoggerConfig
from addon_host.core.runtime.clock import MonotonicClock
from addon_host.core.runtime.host_settings import DEFAULT_CONFIG, Paths, Strata, Timing
from addon_host.core.services.config_manager import load_config, merge_config
from addon_host.systems.scripts.dispatch_context import DispatchContext
from addon_host.systems.scripts.event_dispatcher import EventDispatcher
from addon_host.systems.scripts.script_handler import ScriptHandler
from addon_host.systems.scripts.script_registry import ScriptRegistry
from addon_host.systems.timers.timer_scheduler import TimerScheduler
from addon_host.ui.core.frame_handle import FrameHandle
from addon_host.ui.core.frame_manager import FrameManager
from addon_host.ui.core.layout import FrameLayout
from addon_host.ui.core.widget_registry import WidgetRegistry
from addon_host.ui.templates.template_catalog import TemplateCatalog


class SimState:
    """Owns every host subsystem and the dispatch context shared by them."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, clock=None,
                 templates: Optional[TemplateCatalog] = None):
        """
        Args:
            config: Host config; loaded from host.yaml when omitted
            clock: Time source with ``now()``; MonotonicClock by default
            templates: Pre-built TemplateCatalog (skips loading from config)
        """
        if config is None:
            config = load_config(Paths.HOST_CONFIG, DEFAULT_CONFIG)
        else:
            config = merge_config(DEFAULT_CONFIG, config)
        self.config = config
        LoggerConfig.apply(config.get("logging"))

        DebugLogger.section("Addon Host")
        self.clock = clock or MonotonicClock()
        self.registry = WidgetRegistry()
        self.scripts = ScriptRegistry()
        self._handles: Dict[int, FrameHandle] = {}
        self.ctx = DispatchContext(self.registry, self.scripts, self.handle)

        self.events = EventDispatcher(self.registry)
        self.timers = TimerScheduler(self.clock)

        display = config.get("display") or {}
        self.layout = FrameLayout(self.registry, int(display.get("width", 0)), int(display.get("height", 0)))

        self.templates = templates if templates is not None else self._load_templates(config.get("templates"))
        self.frames = FrameManager(self.registry, self.ctx, self.templates)

        # OnUpdate callbacks that raised, muted until the slot is set again
        self._muted_updates: Dict[int, Callable] = {}

        self.ui_parent_id: Optional[int] = None
        if config.get("create_ui_parent"):
            self.ui_parent_id = self.frames.create_frame("Frame", Strata.ROOT_FRAME_NAME)
            self.frames.set_size(self.ui_parent_id, self.layout.screen_width, self.layout.screen_height)
            DebugLogger.init_sub(f"{Strata.ROOT_FRAME_NAME} id={self.ui_parent_id}")

    @staticmethod
    def _load_templates(filename: Optional[str]) -> TemplateCatalog:
        catalog = TemplateCatalog()
        if filename:
            catalog.load(filename)
        return catalog

    # ===========================================================
    # Handles & Frames
    # ===========================================================

    def handle(self, frame_id: Optional[int]) -> Optional[FrameHandle]:
        """Stable handle for a frame id (the same object on every call)."""
        if frame_id is None or frame_id not in self.registry:
            return None
        handle = self._handles.get(frame_id)
        if handle is None:
            handle = FrameHandle(self, frame_id)
            self._handles[frame_id] = handle
        return handle

    def create_frame(self, widget_type, name: Optional[str] = None, parent=None,
                     template: Optional[str] = None,
                     scripts: Optional[Dict[str, Callable]] = None) -> Optional[FrameHandle]:
        """Create a frame and return its handle (None for an unknown type)."""
        parent_id = parent.id if isinstance(parent, FrameHandle) else parent
        frame_id = self.frames.create_frame(widget_type, name, parent_id, template, scripts)
        return self.handle(frame_id)

    def get_frame_by_name(self, name: str) -> Optional[FrameHandle]:
        return self.handle(self.registry.get_id_by_name(name))

    def get_template_info(self, name: str):
        return self.templates.get_template_info(name)

    def set_on_click_handler(self, frame_id: int, callback: Optional[Callable]) -> bool:
        return self.scripts.set_script(frame_id, ScriptHandler.ON_CLICK, callback)

    def set_error_handler(self, handler: Optional[Callable[[str], Any]]):
        """Install the host hook that receives every caught callback error."""
        self.ctx.error_handler = handler

    # ===========================================================
    # Events
    # ===========================================================

    def fire(self, event: str, *args) -> int:
        return self.events.fire(self.ctx, event, *args)

    def queue_event(self, event: str, *args):
        self.events.queue_event(event, *args)

    def flush_events(self) -> int:
        return self.events.flush_events(self.ctx)

    # ===========================================================
    # Timers
    # ===========================================================

    def after(self, delay: float, callback: Callable) -> None:
        return self.timers.after(delay, callback)

    def new_timer(self, delay: float, callback: Callable):
        return self.timers.new_timer(delay, callback)

    def new_ticker(self, interval: float, callback: Callable, iterations: Optional[int] = None):
        return self.timers.new_ticker(interval, callback, iterations)

    def process_timers(self, now: Optional[float] = None) -> int:
        return self.timers.tick(self.ctx, now)

    def has_pending_timers(self) -> bool:
        return self.timers.has_pending_timers()

    # ===========================================================
    # Update Loop
    # ===========================================================

    def fire_on_update(self, elapsed: float) -> int:
        """
        Run OnUpdate(elapsed) for every visible frame with a primary handler,
        then OnPostUpdate(elapsed) for the visible frames that have one.

        A frame whose own OnUpdate handler raised is skipped until that
        handler changes. Failing hooks, failures inside nested dispatches and
        OnPostUpdate errors are logged but never mute anything.

        Returns:
            Number of frames updated
        """
        update_ids = self._visible_with_handler(ScriptHandler.ON_UPDATE)
        post_update_ids = self._visible_with_handler(ScriptHandler.ON_POST_UPDATE)

        updated = 0
        for frame_id in update_ids:
            current = self.scripts.get_script(frame_id, ScriptHandler.ON_UPDATE)
            if current is None:
                continue
            muted = self._muted_updates.get(frame_id)
            if muted is not None:
                if muted is current:
                    continue
                del self._muted_updates[frame_id]

            ok = self.ctx.invoke(current, self.handle(frame_id), elapsed,
                                 source=f"OnUpdate on {self.ctx.describe(frame_id)}")
            if not ok:
                self._muted_updates[frame_id] = current
                DebugLogger.warn(f"OnUpdate muted for {self.ctx.describe(frame_id)}", category="script")
            self.scripts.run_hooks(self.ctx, frame_id, ScriptHandler.ON_UPDATE, elapsed)
            updated += 1

        for frame_id in post_update_ids:
            self.scripts.run(self.ctx, frame_id, ScriptHandler.ON_POST_UPDATE, elapsed)
        return updated

    def _visible_with_handler(self, handler: ScriptHandler) -> List[int]:
        return [fid for fid in self.scripts.frames_with_handler(handler) if self.registry.is_visible(fid)]

    def step(self, elapsed: float = Timing.FIXED_DT) -> Set[str]:
        """
        One host step: flush queued events, fire due timers, then OnUpdate
        and OnPostUpdate.

        A ManualClock is advanced by ``elapsed`` first; ``elapsed`` defaults to
        one fixed update interval.

        Returns:
            Names of the phases that did any work
        """
        if hasattr(self.clock, "advance"):
            self.clock.advance(elapsed)

        active = set()
        if self.flush_events():
            active.add("events")
        if self.process_timers():
            active.add("timers")
        if self.fire_on_update(elapsed):
            active.add("update")
        return active

    # ===========================================================
    # Input
    # ===========================================================

    def click(self, x: int, y: int, button: str = "LeftButton") -> Optional[int]:
        """
        Simulate a mouse click at a screen point.

        Runs PreClick, OnClick and PostClick (each with hooks) on the topmost
        mouse-enabled visible frame under the point.

        Returns:
            Id of the clicked frame, or None if nothing was hit
        """
        frame_id = self.layout.frame_at_point((x, y))
        if frame_id is None:
            DebugLogger.trace(f"Click at ({x}, {y}) hit nothing", category="script")
            return None

        for handler in (ScriptHandler.PRE_CLICK, ScriptHandler.ON_CLICK, ScriptHandler.POST_CLICK):
            self.scripts.run(self.ctx, frame_id, handler, button, False)
        return frame_id


# ===========================================================
# Singleton Access
# ===========================================================

_SIM_STATE: Optional[SimState] = None


def get_sim_state() -> SimState:
    """Get or create the shared host state."""
    global _SIM_STATE
    if _SIM_STATE is None:
        _SIM_STATE = SimState()
    return _SIM_STATE


def reset_sim_state() -> None:
    """Drop the shared host state. The next get_sim_state() builds a fresh one."""
    global _SIM_STATE
    _SIM_STATE = None
