"""
test_debug_logger.py
--------------------
Unit tests for logger configuration and category filtering.
"""

from addon_host.core.debug.debug_logger import DebugLogger, LoggerConfig


def test_apply_overrides_level_and_categories():
    LoggerConfig.apply({"enabled": True, "level": "warn", "categories": {"layout": True, "timer": False}})

    assert LoggerConfig.ENABLE_LOGGING is True
    assert LoggerConfig.LOG_LEVEL == "WARN"
    assert LoggerConfig.CATEGORIES["layout"] is True
    assert LoggerConfig.CATEGORIES["timer"] is False


def test_apply_ignores_unknown_level_and_empty_config():
    LoggerConfig.LOG_LEVEL = "INFO"
    LoggerConfig.apply({"level": "LOUD"})
    LoggerConfig.apply(None)

    assert LoggerConfig.LOG_LEVEL == "INFO"


def test_level_and_category_filtering(capsys):
    LoggerConfig.ENABLE_LOGGING = True
    LoggerConfig.LOG_LEVEL = "WARN"
    LoggerConfig.CATEGORIES["script"] = True
    LoggerConfig.CATEGORIES["layout"] = False

    DebugLogger.fail("callback exploded", category="script")
    DebugLogger.trace("too chatty", category="script")
    DebugLogger.warn("filtered category", category="layout")

    out = capsys.readouterr().out
    assert "callback exploded" in out
    assert "[script:FAIL]" in out
    assert "too chatty" not in out
    assert "filtered category" not in out


def test_disabled_logging_prints_nothing(capsys):
    LoggerConfig.ENABLE_LOGGING = False

    DebugLogger.fail("hidden", category="script")
    DebugLogger.init_entry("TimerScheduler")
    DebugLogger.section("Addon Host")

    assert capsys.readouterr().out == ""
