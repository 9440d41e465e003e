"""Unit tests for splicing extracted payloads back into the element sequence."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from smart_format.extraction.arena import ExtractionArena
from smart_format.reinject import reinject
from smart_format.schema import Element

DIAGRAM = "graph TD\n    A --> B"
TABLE = '<table style="width: 100%;"><tr><td>a &amp; b</td></tr></table>'


def arena_with(*blocks: tuple[str, str]) -> tuple[ExtractionArena, list[str]]:
    arena = ExtractionArena()
    tokens = [arena.add(kind, payload) for kind, payload in blocks]
    return arena, tokens


class TestReinject:

    def test_split_around_placeholder(self):
        arena, (token,) = arena_with(("mermaid-code", DIAGRAM))
        elements = [Element(type="p", content=f"Before text\n{token}\nafter text")]
        assert reinject(elements, arena) == [
            Element(type="p", content="Before text"),
            Element(type="mermaid", content=DIAGRAM),
            Element(type="p", content="after text"),
        ]

    def test_standalone_placeholder(self):
        arena, (token,) = arena_with(("mermaid-code", DIAGRAM))
        assert reinject([Element(type="p", content=token)], arena) == [Element(type="mermaid", content=DIAGRAM)]

    def test_table_payload_is_html_and_byte_for_byte(self):
        arena, (token,) = arena_with(("html-table", TABLE))
        result = reinject([Element(type="p", content=token)], arena)
        assert result == [Element(type="html", content=TABLE)]

    def test_text_keeps_original_type(self):
        arena, (token,) = arena_with(("mermaid-code", DIAGRAM))
        result = reinject([Element(type="h2", content=f"2. Architecture {token}")], arena)
        assert result[0] == Element(type="h2", content="2. Architecture")
        assert result[1].type == "mermaid"

    def test_several_placeholders_in_one_element(self):
        arena, (first, second) = arena_with(("mermaid-code", DIAGRAM), ("html-table", TABLE))
        result = reinject([Element(type="p", content=f"{first} middle {second} end")], arena)
        assert [e.type for e in result] == ["mermaid", "p", "html", "p"]
        assert [e.content for e in result if e.type == "p"] == ["middle", "end"]

    def test_elements_without_placeholders_pass_through(self):
        arena, _ = arena_with(("mermaid-code", DIAGRAM))
        elements = [Element(type="ul", items=["a"]), Element(type="p", content="plain")]
        result = reinject(elements + [Element(type="p", content="%%MERMAID_PLACEHOLDER_0%%")], arena)
        assert result[:2] == elements

    def test_empty_arena(self):
        elements = [Element(type="p", content="plain")]
        assert reinject(elements, ExtractionArena()) == elements

    def test_payload_appears_exactly_once(self):
        arena, (token,) = arena_with(("mermaid-code", DIAGRAM))
        elements = [Element(type="p", content=token), Element(type="p", content=f"again {token} here")]
        result = reinject(elements, arena)
        assert sum(1 for e in result if e.type == "mermaid") == 1

    def test_unknown_index_left_as_text(self):
        arena, _ = arena_with(("mermaid-code", DIAGRAM))
        element = Element(type="p", content="see %%MERMAID_PLACEHOLDER_7%%")
        result = reinject([element], arena)
        assert result[0] == element
        # The unreferenced payload is not lost
        assert result[1] == Element(type="mermaid", content=DIAGRAM)
