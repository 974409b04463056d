"""
debug_logger.py
---------------
Category-filtered console logger for the addon host.

Every host subsystem logs under one category (registry, layout, script,
event, timer, loading, system). Callback failures surface through ``fail``
so they stay visible even at the quietest useful level.
"""

import sys
from datetime import datetime
from typing import Any, Dict, Optional, TextIO


# ===========================================================
# Logger Configuration
# ===========================================================

class LoggerConfig:
    """Which categories log, at what verbosity, and where output goes."""

    ENABLE_LOGGING = True
    LOG_LEVEL = "INFO"  # NONE, ERROR, WARN, INFO, VERBOSE

    CATEGORIES = {
        # Host
        "system": True,
        "loading": False,

        # Widget graph
        "registry": True,
        "layout": False,

        # Dispatch
        "script": True,
        "event": True,
        "timer": True,
    }

    SHOW_TIMESTAMP = True
    SHOW_SOURCE = True
    USE_COLOR = True

    # None = sys.stdout at write time (keeps pytest capture working)
    OUTPUT: Optional[TextIO] = None

    @classmethod
    def apply(cls, config: Optional[Dict[str, Any]]):
        """
        Override settings from the ``logging`` section of the host config.

        Recognized keys: enabled, level, color, timestamps, categories.
        """
        if not config:
            return
        cls.ENABLE_LOGGING = bool(config.get("enabled", cls.ENABLE_LOGGING))
        cls.USE_COLOR = bool(config.get("color", cls.USE_COLOR))
        cls.SHOW_TIMESTAMP = bool(config.get("timestamps", cls.SHOW_TIMESTAMP))

        level = str(config.get("level", cls.LOG_LEVEL)).upper()
        if level in DebugLogger.LEVEL_VALUES:
            cls.LOG_LEVEL = level
        for category, enabled in (config.get("categories") or {}).items():
            cls.CATEGORIES[category] = bool(enabled)


# ===========================================================
# ANSI Colors
# ===========================================================

class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = "\033[0m"
    WHITE = "\033[97m"
    GREEN = "\033[92m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    BLUE = "\033[94m"
    YELLOW = "\033[93m"
    RED = "\033[91m"


# ===========================================================
# Debug Logger
# ===========================================================

class DebugLogger:
    """Static logger; call sites pass the category they belong to."""

    LINE_LENGTH = 59

    LEVEL_VALUES = {
        "NONE": 0,
        "ERROR": 1,
        "WARN": 2,
        "INFO": 3,
        "VERBOSE": 4,
    }

    # tag -> (minimum level, color)
    TAGS = {
        "INIT": ("INFO", Colors.WHITE),
        "SYSTEM": ("INFO", Colors.MAGENTA),
        "STATE": ("INFO", Colors.CYAN),
        "TRACE": ("VERBOSE", Colors.BLUE),
        "WARN": ("WARN", Colors.YELLOW),
        "FAIL": ("ERROR", Colors.RED),
    }

    # ===========================================================
    # Public Log Methods
    # ===========================================================

    @staticmethod
    def init(msg: str, category: str = "system"):
        """Startup milestone."""
        DebugLogger._emit("INIT", msg, category)

    @staticmethod
    def system(msg: str, category: str = "system"):
        """Resource or subsystem level event (config loaded, catalog built)."""
        DebugLogger._emit("SYSTEM", msg, category)

    @staticmethod
    def state(msg: str, category: str = "system"):
        """Graph or lifecycle change worth seeing at INFO."""
        DebugLogger._emit("STATE", msg, category)

    @staticmethod
    def trace(msg: str, category: str = "registry"):
        """Per-operation detail, including rejected mutations."""
        DebugLogger._emit("TRACE", msg, category)

    @staticmethod
    def warn(msg: str, category: str = "system"):
        DebugLogger._emit("WARN", msg, category)

    @staticmethod
    def fail(msg: str, category: str = "system"):
        """Caught callback error or failed operation."""
        DebugLogger._emit("FAIL", msg, category)

    # ===========================================================
    # Filtering & Output
    # ===========================================================

    @staticmethod
    def enabled_for(category: str, tag: str) -> bool:
        """True if a message with this tag and category would be printed."""
        if not LoggerConfig.ENABLE_LOGGING:
            return False
        if not LoggerConfig.CATEGORIES.get(category, False):
            return False
        needed, _ = DebugLogger.TAGS.get(tag, ("INFO", Colors.WHITE))
        allowed = DebugLogger.LEVEL_VALUES.get(LoggerConfig.LOG_LEVEL, 3)
        return DebugLogger.LEVEL_VALUES[needed] <= allowed

    @staticmethod
    def _emit(tag: str, message: str, category: str):
        if not DebugLogger.enabled_for(category, tag):
            return

        parts = []
        if LoggerConfig.SHOW_TIMESTAMP:
            parts.append(f"[{datetime.now().strftime('%H:%M:%S')}]")
        if LoggerConfig.SHOW_SOURCE:
            parts.append(f"[{DebugLogger._caller_name()}]")
        parts.append(f"[{category}:{tag}]")

        _, color = DebugLogger.TAGS[tag]
        DebugLogger._write(f"{' '.join(parts)} {message}", color)

    @staticmethod
    def _write(line: str, color: str = Colors.WHITE):
        stream = LoggerConfig.OUTPUT or sys.stdout
        if LoggerConfig.USE_COLOR:
            line = f"{color}{line}{Colors.RESET}"
        print(line, file=stream)

    @staticmethod
    def _caller_name() -> str:
        """Class (or module) that called the public log method."""
        try:
            frame = sys._getframe(3)
        except ValueError:
            return "Unknown"

        owner = frame.f_locals.get("self")
        if owner is not None:
            return type(owner).__name__
        owner = frame.f_locals.get("cls")
        if isinstance(owner, type):
            return owner.__name__

        module = frame.f_globals.get("__name__", "unknown").rsplit(".", 1)[-1]
        return "".join(part.capitalize() for part in module.split("_"))

    # ===========================================================
    # Startup Report
    # ===========================================================

    @staticmethod
    def section(title: str):
        """Boxed section header for the startup report."""
        if not LoggerConfig.ENABLE_LOGGING:
            return
        rule = "─" * DebugLogger.LINE_LENGTH
        DebugLogger._write(f"\n{rule}\n{f'[{title}]'.center(DebugLogger.LINE_LENGTH)}\n")

    @staticmethod
    def init_entry(module: str, status: str = "OK"):
        """Dotted ``> Module ....... [OK]`` line."""
        if not LoggerConfig.ENABLE_LOGGING:
            return
        label = f"> {module}"
        badge = f"[{status.upper()}]"
        dots = max(DebugLogger.LINE_LENGTH - len(label) - len(badge) - 2, 3)
        color = Colors.RED if status.upper() == "FAIL" else Colors.GREEN
        if LoggerConfig.USE_COLOR:
            badge = f"{color}{badge}{Colors.WHITE}"
        DebugLogger._write(f"{label} {'.' * dots} {badge}")

    @staticmethod
    def init_sub(detail: str, level: int = 1):
        """Indented detail under the previous init_entry."""
        if not LoggerConfig.ENABLE_LOGGING:
            return
        DebugLogger._write(f"{' ' * (level * 4)}• {detail}")
