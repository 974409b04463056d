"""
Script system exports.

Provides handler slots, hook dispatch and event fan-out.
"""

from addon_host.systems.scripts.script_handler import ScriptHandler
from addon_host.systems.scripts.script_registry import ScriptRegistry
from addon_host.systems.scripts.dispatch_context import DispatchContext
from addon_host.systems.scripts.event_dispatcher import EventDispatcher, Events

__all__ = [
    'ScriptHandler',
    'ScriptRegistry',
    'DispatchContext',
    'EventDispatcher',
    'Events',
]
