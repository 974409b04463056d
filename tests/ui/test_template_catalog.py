"""
test_template_catalog.py
------------------------
Unit tests for template definitions and inheritance.
"""

import pytest

from addon_host.ui.templates.template_catalog import TemplateCatalog, TemplateInfo


@pytest.fixture
def catalog():
    catalog = TemplateCatalog()
    catalog.register("BackdropTemplate", {"type": "Frame"})
    catalog.register("BasicFrameTemplate", {"inherits": "BackdropTemplate", "width": 300, "height": 200})
    catalog.register("WideFrameTemplate", {"inherits": "BasicFrameTemplate", "width": 600})
    catalog.register("ButtonBase", {"type": "Button", "width": 80, "height": 22})
    catalog.register("MixedTemplate", {"inherits": ["ButtonBase", "BasicFrameTemplate"]})
    return catalog


def test_plain_template(catalog):
    assert catalog.get_template_info("ButtonBase") == TemplateInfo("Button", 80, 22)


def test_derived_fields_win(catalog):
    assert catalog.get_template_info("WideFrameTemplate") == TemplateInfo("Frame", 600, 200)


def test_earlier_inherited_template_wins(catalog):
    assert catalog.get_template_info("MixedTemplate") == TemplateInfo("Button", 80, 22)


def test_unknown_template(catalog):
    assert catalog.get_template_info("NoSuchTemplate") is None
    assert not catalog.has_template("NoSuchTemplate")


def test_loop_resolves_without_hanging():
    catalog = TemplateCatalog()
    catalog.register("A", {"inherits": "B", "width": 10})
    catalog.register("B", {"inherits": "A", "height": 5})

    assert catalog.get_template_info("A") == TemplateInfo("Frame", 10, 5)


def test_register_replaces_and_invalidates_cache(catalog):
    catalog.get_template_info("ButtonBase")
    catalog.register("ButtonBase", {"type": "CheckButton", "width": 32, "height": 32})

    assert catalog.get_template_info("ButtonBase") == TemplateInfo("CheckButton", 32, 32)


def test_invalid_entries_rejected():
    catalog = TemplateCatalog()
    assert catalog.register("", {}) is False
    assert catalog.register("Bad", ["not", "a", "dict"]) is False
    assert catalog.names == []


def test_load_from_yaml(tmp_path):
    path = tmp_path / "templates.yaml"
    path.write_text(
        "templates:\n"
        "  UIPanelButtonTemplate:\n"
        "    type: Button\n"
        "    width: 80\n"
        "    height: 22\n"
        "  EmptyTemplate:\n",
        encoding="utf-8",
    )
    catalog = TemplateCatalog()

    assert catalog.load(str(path)) == 2
    assert catalog.names == ["EmptyTemplate", "UIPanelButtonTemplate"]
    assert catalog.get_template_info("EmptyTemplate") == TemplateInfo()
