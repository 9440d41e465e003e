"""Unit tests for line-ending normalisation, block splitting and OCR merge repair."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from smart_format.cleaning.tokenizer import merge_blocks, normalize, should_merge, split_blocks, tokenize
from smart_format.extraction.arena import ExtractionArena


def texts(blocks) -> list[str]:
    return [block.text for block in blocks]


# ===========================================================================
# normalize / split_blocks
# ===========================================================================


class TestNormalize:

    def test_unifies_line_endings_and_trims(self):
        assert normalize("  a\r\nb\rc  \n") == "a\nb\nc"

    def test_none_and_empty(self):
        assert normalize(None) == ""
        assert normalize("   \n ") == ""

    def test_split_on_blank_line_runs(self):
        """Whitespace-only lines count as blank; empty chunks are dropped."""
        assert split_blocks("one\n\n  \n\ntwo\n \nthree") == ["one", "two", "three"]


# ===========================================================================
# Merge repair
# ===========================================================================


class TestMerge:

    def test_single_paragraph_round_trip(self):
        """Input with no blank lines yields exactly one block equal to the trimmed input."""
        raw = "  The grid operator balances supply\nand demand every second.  "
        blocks = tokenize(raw)
        assert texts(blocks) == ["The grid operator balances supply\nand demand every second."]
        assert blocks[0].index == 0

    def test_merges_sentence_broken_by_blank_line(self):
        assert texts(tokenize("The system uses\n\nadvanced sensors.")) == ["The system uses advanced sensors."]

    def test_hyphen_break_is_joined_without_space(self):
        assert texts(tokenize("The electri-\n\ncal system failed.")) == ["The electrical system failed."]

    def test_terminal_punctuation_stops_merge(self):
        for ending in (".", "?", "!", ":", ";", '"'):
            assert not should_merge(f"First part{ending}", "second part")

    def test_structural_openers_stop_merge(self):
        for following in ("- item", "* item", "2. Methods", "IV. Results", "B. Storage", "## Heading", "Abstract", "introduction here"):
            assert not should_merge("Some open text", following), following

    def test_chained_merges(self):
        assert merge_blocks(["one", "two", "three."]) == ["one two three."]

    def test_placeholders_never_merge(self):
        raw = "Some text\n\n%%MERMAID_PLACEHOLDER_0%%\n\nmore text"
        assert texts(tokenize(raw)) == ["Some text", "%%MERMAID_PLACEHOLDER_0%%", "more text"]

    def test_empty_input(self):
        assert tokenize("   ") == []


# ===========================================================================
# Fenced diagrams during tokenizing
# ===========================================================================


class TestTokenizeFenced:

    def test_fenced_diagram_becomes_its_own_block(self):
        arena = ExtractionArena()
        raw = "Intro.\n\n```mermaid\ngraph TD\nA-->B\n```\n\nAfter."
        assert texts(tokenize(raw, arena)) == ["Intro.", "%%MERMAID_PLACEHOLDER_0%%", "After."]
        assert arena.get(0).payload == "graph TD\nA-->B"
        assert arena.get(0).kind == "mermaid-code"

    def test_without_arena_fences_are_left_alone(self):
        raw = "```mermaid\ngraph TD\n```"
        assert "```mermaid" in tokenize(raw)[0].text
