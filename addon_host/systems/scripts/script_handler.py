"""
script_handler.py
-----------------
Named script handler slots a frame can carry (OnEvent, OnClick, ...).
"""

from enum import Enum
from typing import Optional


class ScriptHandler(Enum):
    ON_EVENT = "OnEvent"
    ON_UPDATE = "OnUpdate"
    ON_SHOW = "OnShow"
    ON_HIDE = "OnHide"
    ON_CLICK = "OnClick"
    PRE_CLICK = "PreClick"
    POST_CLICK = "PostClick"
    ON_ENTER = "OnEnter"
    ON_LEAVE = "OnLeave"
    ON_MOUSE_DOWN = "OnMouseDown"
    ON_MOUSE_UP = "OnMouseUp"
    ON_MOUSE_WHEEL = "OnMouseWheel"
    ON_DRAG_START = "OnDragStart"
    ON_DRAG_STOP = "OnDragStop"
    ON_RECEIVE_DRAG = "OnReceiveDrag"
    ON_SIZE_CHANGED = "OnSizeChanged"
    ON_LOAD = "OnLoad"
    ON_ATTRIBUTE_CHANGED = "OnAttributeChanged"
    ON_ENABLE = "OnEnable"
    ON_DISABLE = "OnDisable"
    ON_TOOLTIP_CLEARED = "OnTooltipCleared"
    ON_TOOLTIP_SET_ITEM = "OnTooltipSetItem"
    ON_TOOLTIP_SET_UNIT = "OnTooltipSetUnit"
    ON_TOOLTIP_SET_SPELL = "OnTooltipSetSpell"
    ON_POST_UPDATE = "OnPostUpdate"
    ON_POST_SHOW = "OnPostShow"
    ON_POST_HIDE = "OnPostHide"
    ON_POST_CLICK = "OnPostClick"
    ON_KEY_DOWN = "OnKeyDown"
    ON_KEY_UP = "OnKeyUp"
    ON_CHAR = "OnChar"
    ON_ENTER_PRESSED = "OnEnterPressed"
    ON_ESCAPE_PRESSED = "OnEscapePressed"
    ON_TAB_PRESSED = "OnTabPressed"
    ON_SPACE_PRESSED = "OnSpacePressed"
    ON_EDIT_FOCUS_GAINED = "OnEditFocusGained"
    ON_EDIT_FOCUS_LOST = "OnEditFocusLost"
    ON_TEXT_CHANGED = "OnTextChanged"
    ON_VALUE_CHANGED = "OnValueChanged"
    ON_MIN_MAX_CHANGED = "OnMinMaxChanged"

    @classmethod
    def from_name(cls, name) -> Optional["ScriptHandler"]:
        """Parse a handler name ("OnClick"); matching ignores case."""
        if isinstance(name, ScriptHandler):
            return name
        if not isinstance(name, str):
            return None
        return _HANDLER_NAMES.get(name.lower())


_HANDLER_NAMES = {handler.value.lower(): handler for handler in ScriptHandler}
