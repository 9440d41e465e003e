"""Unit tests for the Formatter facade: memoisation, fallback status and failure retention."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from smart_format.classify.chain import ClassifierChain
from smart_format.classify.local import LocalClassifier
from smart_format.errors import GENERIC_STATUS, QUOTA_STATUS, QuotaExceededError
from smart_format.pipeline import FALLBACK_STATUS, SUCCESS_STATUS, WAITING_STATUS, Formatter
from smart_format.render.html import HtmlRenderer
from smart_format.schema import Element


class CountingClassifier:
    name = "counting"

    def __init__(self):
        self.calls = 0

    def classify(self, text: str) -> list[Element]:
        self.calls += 1
        return [Element(type="p", content=text.strip())]


class QuotaClassifier:
    name = "remote"

    def classify(self, text: str) -> list[Element]:
        raise QuotaExceededError("429 Too Many Requests")


class BrokenRenderer(HtmlRenderer):
    def render(self, elements, include_toc=False):
        raise RuntimeError("renderer exploded")


# ===========================================================================
# Basic formatting
# ===========================================================================


class TestFormat:

    def test_empty_input_waits(self):
        result = Formatter(local_only=True).format("   ")
        assert result.html == ""
        assert result.status == WAITING_STATUS
        assert result.elements == []

    def test_local_document(self):
        result = Formatter(local_only=True).format("Smart Grid Report\n\n1. Introduction\n\nThe grid is evolving quickly.")
        assert result.ok
        assert result.classifier == "local"
        assert result.status == SUCCESS_STATUS
        assert result.warning is None
        assert "<h1" in result.html and "<h2" in result.html

    def test_text_flow_becomes_diagram(self):
        result = Formatter(local_only=True).format("A\n│\n▼\nB\n│\n▼\nC")
        assert result.elements == [Element(type="mermaid", content="graph TD\n    A --> B --> C")]
        assert '<pre class="mermaid">graph TD\n    A --> B --> C</pre>' in result.html

    def test_markdown_table_becomes_html_element(self):
        result = Formatter(local_only=True).format("Scores below.\n\n| Name | Score |\n|---|---|\n| Ann | 9 |")
        assert [e.type for e in result.elements] == ["p", "html"]
        assert "<table" in result.html

    def test_caption_before_fenced_diagram_suppressed(self):
        text = "Intro paragraph ends here.\n\nFigure: Data Flow\n\n```mermaid\ngraph TD\nA-->B\n```"
        result = Formatter(local_only=True).format(text)
        assert [e.type for e in result.elements] == ["p", "p", "mermaid"]
        assert "Figure" not in result.html
        assert '<pre class="mermaid">graph TD\nA-->B</pre>' in result.html

    def test_toc_option(self):
        result = Formatter(local_only=True).format("Report\n\n1. Scope\n\n2. Method", include_toc=True)
        assert result.html.startswith('<div class="toc-container"')


# ===========================================================================
# Memoisation
# ===========================================================================


class TestMemoCache:

    def test_same_text_classified_once(self):
        counting = CountingClassifier()
        formatter = Formatter(chain=ClassifierChain([counting]))
        formatter.format("Some text here.")
        formatter.format("Some text here.")
        assert counting.calls == 1

    def test_overrides_restyle_without_reclassifying(self):
        counting = CountingClassifier()
        formatter = Formatter(chain=ClassifierChain([counting]))
        formatter.format("Some text here.")
        result = formatter.format("Some text here.", overrides={"p": {"font-size": "20pt"}})
        assert counting.calls == 1
        assert "font-size: 20pt;" in result.html

    def test_one_character_change_invalidates(self):
        counting = CountingClassifier()
        formatter = Formatter(chain=ClassifierChain([counting]))
        formatter.format("Some text here.")
        formatter.format("Some text here!")
        formatter.format("Some text here.")
        assert counting.calls == 3

    def test_clear_cache(self):
        counting = CountingClassifier()
        formatter = Formatter(chain=ClassifierChain([counting]))
        formatter.format("Some text here.")
        formatter.clear_cache()
        formatter.format("Some text here.")
        assert counting.calls == 2


# ===========================================================================
# Fallback and failure
# ===========================================================================


class TestFailures:

    def test_fallback_status_and_warning(self):
        formatter = Formatter(chain=ClassifierChain([QuotaClassifier(), LocalClassifier()]))
        result = formatter.format("- one\n- two")
        assert result.ok
        assert result.classifier == "local"
        assert result.status == FALLBACK_STATUS
        assert result.warning == QUOTA_STATUS

    def test_previous_output_retained_on_error(self):
        formatter = Formatter(local_only=True)
        first = formatter.format("- one\n- two")
        formatter.renderer = BrokenRenderer()
        failed = formatter.format("- three")
        assert not failed.ok
        assert failed.html == first.html
        assert failed.status == GENERIC_STATUS
