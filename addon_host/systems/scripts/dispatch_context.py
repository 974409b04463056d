"""
dispatch_context.py
-------------------
Explicit context handed to every dispatch (events, script handlers, timers).

Holds the widget registry, the script table, the id -> script handle
mapping and the host error handler, so nothing reaches for global tables.
"""

from typing import Any, Callable, Optional

from addon_host.core.debug.debug_logger import DebugLogger


class DispatchContext:
    """Everything a dispatch loop needs to call into scripted callbacks."""

    def __init__(self, registry, scripts, frame_ref: Callable[[int], Any],
                 error_handler: Optional[Callable[[str], Any]] = None):
        """
        Args:
            registry: WidgetRegistry
            scripts: ScriptRegistry
            frame_ref: Maps a frame id to the handle passed to callbacks
            error_handler: Optional host hook receiving callback error messages
        """
        self.registry = registry
        self.scripts = scripts
        self.frame_ref = frame_ref
        self.error_handler = error_handler
        self.error_count = 0

    def invoke(self, callback: Callable, *args, source: str = "callback", category: str = "script") -> bool:
        """
        Call a scripted callback, containing any failure.

        Args:
            callback: Opaque callable supplied by the host
            *args: Arguments for the call
            source: Label used in the error message
            category: Logger category

        Returns:
            True if the callback returned normally
        """
        try:
            callback(*args)
            return True
        except Exception as e:
            self.report_error(f"{source}: {e}", category)
            return False

    def report_error(self, message: str, category: str = "script"):
        """Log a callback error and forward it to the host error handler."""
        self.error_count += 1
        DebugLogger.fail(message, category=category)
        if self.error_handler is None:
            return
        try:
            self.error_handler(message)
        except Exception as e:
            DebugLogger.fail(f"Error in error handler: {e}", category=category)

    def describe(self, frame_id: int) -> str:
        """Readable frame label for log lines."""
        frame = self.registry.get(frame_id)
        name = frame.name if frame is not None and frame.name else "(anonymous)"
        return f"{name} (id={frame_id})"
