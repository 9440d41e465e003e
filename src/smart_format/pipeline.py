"""End-to-end formatting: raw text in, styled HTML out.

    extract diagrams/tables -> classify (remote, local, paragraph) -> reinject
    -> apply style rules -> render

Classification is memoised on the exact input text (a single-slot cache), so
re-rendering the same text with different style overrides or TOC settings
skips extraction and classification entirely.  Styling and rendering run on
every call.

Usage:
    formatter = Formatter()
    result = formatter.format(text, overrides={"global": {"text-align": "justify"}})
    result.html
"""

import logging

from pydantic import BaseModel

from smart_format.classify.chain import ClassifierChain, default_chain
from smart_format.errors import describe_failure
from smart_format.extraction.pipeline import extract_all
from smart_format.reinject import reinject
from smart_format.render.html import HtmlRenderer
from smart_format.schema import Element
from smart_format.styling.rules import RuleEngine, StyleOverrides

logger = logging.getLogger(__name__)

WAITING_STATUS = "Waiting for input"
SUCCESS_STATUS = "Formatted successfully"
FALLBACK_STATUS = "Formatted with local engine (AI unavailable)"


class FormatResult(BaseModel):
    """Outcome of one formatting call."""

    html: str
    elements: list[Element] = []
    classifier: str | None = None
    status: str
    warning: str | None = None
    ok: bool = True


class _Classified(BaseModel):
    """Memoised classification for one input text."""

    text: str
    elements: list[Element]
    classifier: str
    warning: str | None = None


class Formatter:
    """Stateful front end holding the memo cache and the last rendered output."""

    def __init__(
        self,
        chain: ClassifierChain | None = None,
        overrides: StyleOverrides | None = None,
        renderer: HtmlRenderer | None = None,
        local_only: bool = False,
    ):
        self.chain = chain or default_chain(local_only=local_only)
        self.overrides = overrides
        self.renderer = renderer or HtmlRenderer()
        self._cache: _Classified | None = None
        self._last_html = ""

    def clear_cache(self) -> None:
        self._cache = None

    def classify(self, text: str) -> _Classified:
        """Extract, classify and reinject *text*, reusing the cached result for identical input."""
        if self._cache is not None and self._cache.text == text:
            logger.debug("Input unchanged; reusing %d cached element(s)", len(self._cache.elements))
            return self._cache

        cleaned, arena = extract_all(text)
        elements, classifier, failures = self.chain.run(cleaned)
        elements = reinject(elements, arena)
        warning = describe_failure(failures[0]) if failures else None

        self._cache = _Classified(text=text, elements=elements, classifier=classifier, warning=warning)
        return self._cache

    def format(self, text: str | None, overrides: StyleOverrides | None = None, include_toc: bool = False) -> FormatResult:
        """Format *text* to HTML.

        Args:
            text: Raw input text.
            overrides: Style overrides for this call; defaults to the formatter's own.
            include_toc: Prepend a table of contents built from h2/h3 headings.

        Returns:
            FormatResult.  On an unexpected error ``ok`` is False and ``html``
            holds the previous successful output, never a partial render.
        """
        if not text or not text.strip():
            return FormatResult(html="", status=WAITING_STATUS)

        try:
            classified = self.classify(text)
            engine = RuleEngine(overrides if overrides is not None else self.overrides)
            html = self.renderer.render(engine.apply(classified.elements), include_toc=include_toc)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.exception("Formatting failed; keeping previous output")
            return FormatResult(html=self._last_html, status=describe_failure(exc), ok=False)

        self._last_html = html
        status = FALLBACK_STATUS if classified.warning else SUCCESS_STATUS
        logger.info("%s (classifier=%s, %d element(s))", status, classified.classifier, len(classified.elements))
        return FormatResult(
            html=html,
            elements=classified.elements,
            classifier=classified.classifier,
            status=status,
            warning=classified.warning,
        )
