"""
UI core system exports.

Provides the frame model, widget registry, anchor resolution and layout.
"""

from addon_host.ui.core.frame import Anchor, AnchorPoint, AttributeValue, Frame, WidgetType
from addon_host.ui.core.widget_registry import WidgetRegistry
from addon_host.ui.core.anchor_resolver import calculate_width, calculate_height, calculate_size
from addon_host.ui.core.layout import FrameLayout
from addon_host.ui.core.frame_manager import FrameManager
from addon_host.ui.core.frame_handle import FrameHandle

__all__ = [
    'Anchor',
    'AnchorPoint',
    'AttributeValue',
    'Frame',
    'WidgetType',
    'WidgetRegistry',
    'calculate_width',
    'calculate_height',
    'calculate_size',
    'FrameLayout',
    'FrameManager',
    'FrameHandle',
]
