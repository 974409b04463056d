"""
script_registry.py
------------------
Per-frame script handler slots and hook lists.

Responsibilities
----------------
- Hold at most one primary callback per (frame, handler); last set wins.
- Hold an append-only list of hooks per (frame, handler).
- Run a slot: primary first, then every hook in registration order, even
  when the primary is missing or raised.
"""

from typing import Callable, Dict, List, Optional, Tuple

from addon_host.core.debug.debug_logger import DebugLogger
from addon_host.systems.scripts.script_handler import ScriptHandler


SlotKey = Tuple[int, ScriptHandler]


class ScriptRegistry:
    """Storage for script handlers and hooks, keyed by (frame id, handler)."""

    def __init__(self):
        self._handlers: Dict[SlotKey, Callable] = {}
        self._hooks: Dict[SlotKey, List[Callable]] = {}

    # ===========================================================
    # Primary Handlers
    # ===========================================================

    def set_script(self, frame_id: int, handler, callback: Optional[Callable]) -> bool:
        """
        Replace the primary callback for a slot.

        Args:
            frame_id: Target frame
            handler: ScriptHandler or handler name
            callback: New callback; None (or anything not callable) clears the slot

        Returns:
            False if the handler name is unknown
        """
        kind = ScriptHandler.from_name(handler)
        if kind is None:
            DebugLogger.warn(f"Unknown script handler {handler!r}", category="script")
            return False

        key = (frame_id, kind)
        if callable(callback):
            self._handlers[key] = callback
        else:
            self._handlers.pop(key, None)
        return True

    def get_script(self, frame_id: int, handler) -> Optional[Callable]:
        kind = ScriptHandler.from_name(handler)
        if kind is None:
            return None
        return self._handlers.get((frame_id, kind))

    def has_handler(self, frame_id: int, handler) -> bool:
        return self.get_script(frame_id, handler) is not None

    def clear_scripts(self, frame_id: int):
        """Drop every primary handler on a frame. Hooks are permanent."""
        for key in [k for k in self._handlers if k[0] == frame_id]:
            del self._handlers[key]

    def frames_with_handler(self, handler) -> List[int]:
        """Frame ids with a primary callback in the given slot, ascending."""
        kind = ScriptHandler.from_name(handler)
        return sorted(fid for fid, h in self._handlers if h is kind)

    # ===========================================================
    # Hooks
    # ===========================================================

    def hook_script(self, frame_id: int, handler, callback: Callable) -> bool:
        """Append a hook to a slot. Hooks never replace the primary handler."""
        kind = ScriptHandler.from_name(handler)
        if kind is None or not callable(callback):
            DebugLogger.warn(f"Ignored hook for {handler!r} on id={frame_id}", category="script")
            return False
        self._hooks.setdefault((frame_id, kind), []).append(callback)
        return True

    def get_hooks(self, frame_id: int, handler) -> List[Callable]:
        kind = ScriptHandler.from_name(handler)
        return list(self._hooks.get((frame_id, kind), []))

    # ===========================================================
    # Dispatch
    # ===========================================================

    def run(self, ctx, frame_id: int, handler, *args) -> int:
        """
        Invoke a slot: primary handler, then hooks in order.

        Callbacks receive ``(frame_handle, *args)``. Failures are contained
        by the context and never stop the remaining hooks.

        Returns:
            Number of callbacks invoked
        """
        kind = ScriptHandler.from_name(handler)
        if kind is None:
            return 0

        primary = self._handlers.get((frame_id, kind))
        hooks = self.get_hooks(frame_id, kind)
        invoked = 0
        if primary is not None:
            ctx.invoke(primary, ctx.frame_ref(frame_id), *args,
                       source=f"{kind.value} on {ctx.describe(frame_id)}")
            invoked += 1

        return invoked + self._invoke_hooks(ctx, frame_id, kind, hooks, args)

    def run_hooks(self, ctx, frame_id: int, handler, *args) -> int:
        """Invoke only the hooks of a slot, in registration order."""
        kind = ScriptHandler.from_name(handler)
        if kind is None:
            return 0
        return self._invoke_hooks(ctx, frame_id, kind, self.get_hooks(frame_id, kind), args)

    @staticmethod
    def _invoke_hooks(ctx, frame_id: int, kind: ScriptHandler, hooks: List[Callable], args) -> int:
        if not hooks:
            return 0
        frame_ref = ctx.frame_ref(frame_id)
        label = f"{kind.value} on {ctx.describe(frame_id)} (hook)"
        for hook in hooks:
            ctx.invoke(hook, frame_ref, *args, source=label)
        return len(hooks)
