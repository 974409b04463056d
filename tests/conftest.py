"""
conftest.py
-----------
Shared pytest configuration and fixtures for addon_host tests.

Contains:
- Common fixtures used across multiple test modules
- Pytest configuration and hooks
- Shared helpers for building frames and recording callbacks
"""

import os
import sys

import pytest

# Add project root to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from addon_host.core.debug.debug_logger import LoggerConfig
from addon_host.core.runtime.clock import ManualClock
from addon_host.core.runtime.sim_state import SimState
from addon_host.systems.scripts.dispatch_context import DispatchContext
from addon_host.systems.scripts.script_registry import ScriptRegistry
from addon_host.ui.core.frame import Anchor, AnchorPoint, Frame, WidgetType
from addon_host.ui.core.widget_registry import WidgetRegistry
from addon_host.ui.templates.template_catalog import TemplateCatalog


# ===========================================================
# Logger
# ===========================================================

@pytest.fixture(autouse=True)
def quiet_logger():
    """Silence console output and restore logger settings after each test."""
    saved = (LoggerConfig.ENABLE_LOGGING, LoggerConfig.LOG_LEVEL, dict(LoggerConfig.CATEGORIES))
    LoggerConfig.ENABLE_LOGGING = False
    yield
    LoggerConfig.ENABLE_LOGGING, LoggerConfig.LOG_LEVEL, categories = saved
    LoggerConfig.CATEGORIES.clear()
    LoggerConfig.CATEGORIES.update(categories)


# ===========================================================
# Core Fixtures
# ===========================================================

@pytest.fixture
def registry():
    return WidgetRegistry()


@pytest.fixture
def scripts():
    return ScriptRegistry()


@pytest.fixture
def ctx(registry, scripts):
    """Dispatch context whose frame handles are the raw ids."""
    return DispatchContext(registry, scripts, lambda frame_id: frame_id)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def sim(clock):
    """Host state with a UIParent, an empty template catalog and a manual clock."""
    return SimState(config={"create_ui_parent": True}, clock=clock, templates=TemplateCatalog())


@pytest.fixture
def recorder():
    """Callable that appends (tag, args) to its ``calls`` list."""
    class Recorder:
        def __init__(self):
            self.calls = []

        def make(self, tag):
            def callback(*args):
                self.calls.append((tag, args))
            return callback

        @property
        def tags(self):
            return [tag for tag, _ in self.calls]

    return Recorder()


# Test utilities
def add_frame(registry, name=None, parent=None, width=0.0, height=0.0,
              widget_type=WidgetType.FRAME):
    """Register a frame (and link it under ``parent``); returns its id."""
    frame = Frame(widget_type=widget_type, name=name, parent_id=parent, width=width, height=height)
    frame_id = registry.register(frame)
    if parent is not None:
        registry.add_child(parent, frame_id)
    return frame_id


def anchor(point, relative_to=None, relative_point=None, x=0.0, y=0.0):
    """Shorthand Anchor builder taking point names."""
    point = AnchorPoint.from_name(point)
    relative_point = AnchorPoint.from_name(relative_point) if relative_point else point
    return Anchor(point, relative_to, relative_point, x, y)


# Pytest configuration
def pytest_configure(config):
    """Custom pytest configuration."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


def pytest_collection_modifyitems(config, items):
    """Mark everything outside integration tests as a unit test."""
    for item in items:
        if "integration" not in item.nodeid:
            item.add_marker(pytest.mark.unit)
