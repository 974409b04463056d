"""
frame.py
--------
Frame data model: widget types, anchor points, strata, attribute values.

A Frame holds only ids for its cross references (parent, children,
anchor targets); the WidgetRegistry owns every frame.
"""

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from addon_host.core.runtime.host_settings import Strata


_WIDGET_IDS = itertools.count(1)


def next_widget_id() -> int:
    """Generate a unique widget id (process-wide, never reused)."""
    return next(_WIDGET_IDS)


# ===========================================================
# Widget Types
# ===========================================================

class WidgetType(Enum):
    """Closed set of widget types supported by the host."""
    FRAME = "Frame"
    BUTTON = "Button"
    FONT_STRING = "FontString"
    TEXTURE = "Texture"
    EDIT_BOX = "EditBox"
    SCROLL_FRAME = "ScrollFrame"
    SLIDER = "Slider"
    CHECK_BUTTON = "CheckButton"
    STATUS_BAR = "StatusBar"
    COOLDOWN = "Cooldown"
    MODEL = "Model"
    MODEL_SCENE = "ModelScene"
    PLAYER_MODEL = "PlayerModel"
    COLOR_SELECT = "ColorSelect"
    MESSAGE_FRAME = "MessageFrame"
    SIMPLE_HTML = "SimpleHTML"
    GAME_TOOLTIP = "GameTooltip"
    MINIMAP = "Minimap"

    @classmethod
    def from_name(cls, name: str) -> Optional["WidgetType"]:
        """Parse a type name case-insensitively ("Button" and "BUTTON" both work)."""
        if isinstance(name, WidgetType):
            return name
        if not name:
            return None
        return _WIDGET_TYPE_NAMES.get(str(name).lower())

    @property
    def is_region(self) -> bool:
        """Regions are the non-frame drawables (textures and font strings)."""
        return self in (WidgetType.TEXTURE, WidgetType.FONT_STRING)


_WIDGET_TYPE_NAMES = {wt.value.lower(): wt for wt in WidgetType}
_WIDGET_TYPE_NAMES.update({
    "dropdownbutton": WidgetType.BUTTON,
    "itembutton": WidgetType.BUTTON,
    "containedalertframe": WidgetType.BUTTON,
    "dressupmodel": WidgetType.MODEL,
    "cinematicmodel": WidgetType.PLAYER_MODEL,
    "tabardmodel": WidgetType.PLAYER_MODEL,
    "scrollingmessageframe": WidgetType.MESSAGE_FRAME,
})


# ===========================================================
# Anchors
# ===========================================================

class AnchorPoint(Enum):
    """Named points on a frame's rectangle."""
    CENTER = "CENTER"
    TOP = "TOP"
    BOTTOM = "BOTTOM"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    TOPLEFT = "TOPLEFT"
    TOPRIGHT = "TOPRIGHT"
    BOTTOMLEFT = "BOTTOMLEFT"
    BOTTOMRIGHT = "BOTTOMRIGHT"

    @classmethod
    def from_name(cls, name) -> Optional["AnchorPoint"]:
        if isinstance(name, AnchorPoint):
            return name
        if not isinstance(name, str):
            return None
        try:
            return cls(name.upper())
        except ValueError:
            return None


LEFT_POINTS = (AnchorPoint.TOPLEFT, AnchorPoint.BOTTOMLEFT, AnchorPoint.LEFT)
RIGHT_POINTS = (AnchorPoint.TOPRIGHT, AnchorPoint.BOTTOMRIGHT, AnchorPoint.RIGHT)
TOP_POINTS = (AnchorPoint.TOPLEFT, AnchorPoint.TOPRIGHT, AnchorPoint.TOP)
BOTTOM_POINTS = (AnchorPoint.BOTTOMLEFT, AnchorPoint.BOTTOMRIGHT, AnchorPoint.BOTTOM)


@dataclass(frozen=True)
class Anchor:
    """Ties one point of a frame to a point of another frame plus an offset."""
    point: AnchorPoint = AnchorPoint.CENTER
    relative_to_id: Optional[int] = None  # None = parent
    relative_point: AnchorPoint = AnchorPoint.CENTER
    x_offset: float = 0.0
    y_offset: float = 0.0


# ===========================================================
# Attribute Values
# ===========================================================

class ValueKind(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NIL = "nil"
    OPAQUE = "opaque"


@dataclass(frozen=True)
class AttributeValue:
    """
    Tagged attribute value.

    Anything that is not a plain string, number, boolean or None is kept as
    an opaque host object the core never inspects.
    """
    kind: ValueKind
    payload: Any = None

    @classmethod
    def wrap(cls, value: Any) -> "AttributeValue":
        if isinstance(value, AttributeValue):
            return value
        if value is None:
            return cls(ValueKind.NIL)
        # bool before number: bool is an int subclass
        if isinstance(value, bool):
            return cls(ValueKind.BOOLEAN, value)
        if isinstance(value, (int, float)):
            return cls(ValueKind.NUMBER, value)
        if isinstance(value, str):
            return cls(ValueKind.STRING, value)
        return cls(ValueKind.OPAQUE, value)

    def unwrap(self) -> Any:
        return None if self.kind is ValueKind.NIL else self.payload


# ===========================================================
# Frame
# ===========================================================

@dataclass(eq=False)
class Frame:
    """A node in the UI tree."""
    widget_type: WidgetType = WidgetType.FRAME
    name: Optional[str] = None
    parent_id: Optional[int] = None
    id: int = field(default_factory=next_widget_id)

    children: List[int] = field(default_factory=list)
    children_keys: Dict[str, int] = field(default_factory=dict)
    anchors: List[Anchor] = field(default_factory=list)

    width: float = 0.0
    height: float = 0.0

    frame_strata: str = Strata.DEFAULT
    frame_level: int = 0
    has_fixed_frame_strata: bool = False
    has_fixed_frame_level: bool = False

    visible: bool = True
    mouse_enabled: bool = False
    movable: bool = False
    resizable: bool = False
    clamped_to_screen: bool = False

    attributes: Dict[str, AttributeValue] = field(default_factory=dict)
    registered_events: Set[str] = field(default_factory=set)
    register_all_events: bool = False

    def set_size(self, width: float, height: float):
        self.width = width
        self.height = height

    def find_anchor(self, point: AnchorPoint) -> Optional[Anchor]:
        for anchor in self.anchors:
            if anchor.point is point:
                return anchor
        return None

    def first_anchor_in(self, points) -> Optional[Anchor]:
        """First anchor (in insertion order) whose point is one of ``points``."""
        for anchor in self.anchors:
            if anchor.point in points:
                return anchor
        return None

    def is_registered_for_event(self, event: str) -> bool:
        return self.register_all_events or event in self.registered_events
