"""
test_script_registry.py
-----------------------
Unit tests for script slots, hooks and the dispatch context.
"""

from unittest.mock import MagicMock

from addon_host.systems.scripts.script_handler import ScriptHandler
from tests.conftest import add_frame


def _boom(*args):
    raise RuntimeError("boom")


# ===========================================================
# Handler Names
# ===========================================================

def test_handler_names_parse_case_insensitively():
    assert ScriptHandler.from_name("onclick") is ScriptHandler.ON_CLICK
    assert ScriptHandler.from_name("OnEvent") is ScriptHandler.ON_EVENT
    assert ScriptHandler.from_name(ScriptHandler.ON_HIDE) is ScriptHandler.ON_HIDE
    assert ScriptHandler.from_name("OnNothing") is None
    assert ScriptHandler.from_name(42) is None


# ===========================================================
# Primary Handlers
# ===========================================================

def test_set_script_last_wins(scripts, ctx, registry, recorder):
    frame_id = add_frame(registry)
    scripts.set_script(frame_id, "OnShow", recorder.make("first"))
    scripts.set_script(frame_id, "OnShow", recorder.make("second"))

    scripts.run(ctx, frame_id, "OnShow")

    assert recorder.tags == ["second"]


def test_set_script_none_clears(scripts, registry):
    frame_id = add_frame(registry)
    scripts.set_script(frame_id, "OnShow", lambda *a: None)
    scripts.set_script(frame_id, "OnShow", None)

    assert scripts.get_script(frame_id, "OnShow") is None
    assert not scripts.has_handler(frame_id, "OnShow")


def test_unknown_handler_rejected(scripts, registry):
    frame_id = add_frame(registry)
    assert scripts.set_script(frame_id, "OnFly", lambda *a: None) is False
    assert scripts.hook_script(frame_id, "OnFly", lambda *a: None) is False


def test_clear_scripts_keeps_hooks(scripts, ctx, registry, recorder):
    frame_id = add_frame(registry)
    scripts.set_script(frame_id, "OnClick", recorder.make("primary"))
    scripts.hook_script(frame_id, "OnClick", recorder.make("hook"))

    scripts.clear_scripts(frame_id)
    scripts.run(ctx, frame_id, "OnClick")

    assert recorder.tags == ["hook"]


def test_frames_with_handler_sorted(scripts, registry):
    b = add_frame(registry)
    a = add_frame(registry)
    scripts.set_script(a, "OnUpdate", lambda *x: None)
    scripts.set_script(b, "OnUpdate", lambda *x: None)

    assert scripts.frames_with_handler("OnUpdate") == sorted([a, b])


# ===========================================================
# Hooks
# ===========================================================

def test_primary_then_hooks_in_order(scripts, ctx, registry, recorder):
    frame_id = add_frame(registry)
    scripts.set_script(frame_id, "OnEvent", recorder.make("primary"))
    for tag in ("h1", "h2", "h3"):
        scripts.hook_script(frame_id, "OnEvent", recorder.make(tag))

    invoked = scripts.run(ctx, frame_id, "OnEvent", "PLAYER_LOGIN")

    assert invoked == 4
    assert recorder.tags == ["primary", "h1", "h2", "h3"]
    assert all(args == (frame_id, "PLAYER_LOGIN") for _, args in recorder.calls)


def test_hooks_run_without_primary(scripts, ctx, registry, recorder):
    frame_id = add_frame(registry)
    scripts.hook_script(frame_id, "OnShow", recorder.make("hook"))

    assert scripts.run(ctx, frame_id, "OnShow") == 1
    assert recorder.tags == ["hook"]


def test_hooks_run_after_primary_raises(scripts, ctx, registry, recorder):
    frame_id = add_frame(registry)
    scripts.set_script(frame_id, "OnShow", _boom)
    scripts.hook_script(frame_id, "OnShow", recorder.make("hook"))

    scripts.run(ctx, frame_id, "OnShow")

    assert recorder.tags == ["hook"]
    assert ctx.error_count == 1


def test_hooks_survive_set_script(scripts, ctx, registry, recorder):
    frame_id = add_frame(registry)
    scripts.hook_script(frame_id, "OnShow", recorder.make("hook"))
    scripts.set_script(frame_id, "OnShow", recorder.make("new"))

    scripts.run(ctx, frame_id, "OnShow")

    assert recorder.tags == ["new", "hook"]


def test_empty_slot_runs_nothing(scripts, ctx, registry):
    assert scripts.run(ctx, add_frame(registry), "OnShow") == 0


def test_run_hooks_skips_primary(scripts, ctx, registry, recorder):
    frame_id = add_frame(registry)
    scripts.set_script(frame_id, "OnUpdate", recorder.make("primary"))
    scripts.hook_script(frame_id, "OnUpdate", recorder.make("h1"))
    scripts.hook_script(frame_id, "OnUpdate", recorder.make("h2"))

    assert scripts.run_hooks(ctx, frame_id, "OnUpdate", 0.5) == 2
    assert recorder.calls == [("h1", (frame_id, 0.5)), ("h2", (frame_id, 0.5))]


def test_hook_added_during_dispatch_waits_for_next_run(scripts, ctx, registry, recorder):
    frame_id = add_frame(registry)

    def primary(frame):
        scripts.hook_script(frame, "OnShow", recorder.make("late"))

    scripts.set_script(frame_id, "OnShow", primary)

    assert scripts.run(ctx, frame_id, "OnShow") == 1
    assert recorder.tags == []
    assert len(scripts.get_hooks(frame_id, "OnShow")) == 1


# ===========================================================
# Dispatch Context
# ===========================================================

def test_error_handler_receives_message(ctx):
    handler = MagicMock()
    ctx.error_handler = handler

    assert ctx.invoke(_boom, source="Timer 1 callback") is False

    handler.assert_called_once()
    assert "Timer 1 callback" in handler.call_args[0][0]
    assert "boom" in handler.call_args[0][0]


def test_failing_error_handler_is_contained(ctx):
    ctx.error_handler = _boom
    assert ctx.invoke(_boom) is False
    assert ctx.error_count == 1


def test_describe_uses_name(ctx, registry):
    frame_id = add_frame(registry, name="BagFrame")
    assert ctx.describe(frame_id) == f"BagFrame (id={frame_id})"
    assert "(anonymous)" in ctx.describe(add_frame(registry))
