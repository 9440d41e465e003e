"""Unit tests for the style rule engine."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import json

import pytest

from smart_format.schema import Element, StyledElement
from smart_format.styling.rules import DEFAULT_RULES, RuleEngine, load_overrides


class TestRuleEngine:

    def test_default_style_string(self):
        assert RuleEngine().style_string("h1") == (
            "font-family: 'Times New Roman', serif; font-size: 16pt; font-weight: 700; "
            "margin-bottom: 1rem; border-bottom: 2px solid #DEE2E6; padding-bottom: 0.5rem;"
        )

    def test_type_override(self):
        assert RuleEngine({"h1": {"font-size": "20pt"}}).rules_for("h1")["font-size"] == "20pt"

    def test_global_wins_over_type_override(self):
        engine = RuleEngine({"h1": {"font-size": "20pt"}, "global": {"font-size": "9pt"}})
        assert engine.rules_for("h1")["font-size"] == "9pt"
        assert "font-size: 9pt;" in engine.style_string("p")

    def test_declaration_order_is_stable(self):
        engine = RuleEngine({"p": {"font-size": "13pt", "color": "#333"}, "global": {"text-align": "justify"}})
        assert engine.style_string("p") == (
            "font-family: 'Times New Roman', serif; font-size: 13pt; line-height: 1.6; margin-bottom: 1rem; "
            "color: #333; text-align: justify;"
        )

    def test_unknown_type_gets_only_global(self):
        assert RuleEngine().style_string("mermaid") == ""
        assert RuleEngine({"global": {"text-align": "center"}}).style_string("mermaid") == "text-align: center;"

    def test_inherit_font_family_dropped(self):
        engine = RuleEngine({"p": {"font-family": "inherit", "font-size": "13pt"}})
        assert engine.rules_for("p")["font-family"] == "'Times New Roman', serif"
        assert engine.rules_for("p")["font-size"] == "13pt"

    def test_defaults_not_mutated(self):
        RuleEngine({"h1": {"font-size": "30pt"}})
        assert DEFAULT_RULES["h1"]["font-size"] == "16pt"

    def test_apply(self):
        styled = RuleEngine().apply([Element(type="ul", items=["a"]), Element(type="p", content="x")])
        assert all(isinstance(e, StyledElement) for e in styled)
        assert styled[0].items == ["a"]
        assert styled[1].style_string.startswith("font-family:")

    def test_apply_sets_item_style_for_lists(self):
        engine = RuleEngine({"li": {"color": "#333"}})
        styled_list, styled_p = engine.apply([Element(type="ol", items=["a"]), Element(type="p", content="x")])
        assert styled_list.item_style_string == engine.style_string("li")
        assert "color: #333;" in styled_list.item_style_string
        assert styled_list.item_style_string != styled_list.style_string
        assert styled_p.item_style_string == ""

    def test_apply_tolerates_malformed_elements(self):
        styled = RuleEngine().apply([Element.lenient({"type": "ol", "content": "1. a"})])
        assert styled[0].content == "1. a"


class TestLoadOverrides:

    def test_reads_json(self, tmp_path):
        path = tmp_path / "styles.json"
        path.write_text(json.dumps({"h1": {"font-size": "18pt"}, "global": {"text-align": "justify"}}), encoding="utf-8")
        assert load_overrides(path) == {"h1": {"font-size": "18pt"}, "global": {"text-align": "justify"}}

    def test_rejects_wrong_shape(self, tmp_path):
        path = tmp_path / "styles.json"
        path.write_text(json.dumps({"h1": "big"}), encoding="utf-8")
        with pytest.raises(ValueError):
            load_overrides(path)
