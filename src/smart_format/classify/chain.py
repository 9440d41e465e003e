"""Ordered classifier strategies with fallback.

Every strategy exposes ``name`` and ``classify(text) -> list[Element]`` and
signals failure by raising.  ``ClassifierChain`` tries them in order and returns
the first success; ``ParagraphClassifier`` at the end of the default chain never
fails, so classification always yields the full text.
"""

import logging
from typing import Protocol

from smart_format.classify.local import LocalClassifier
from smart_format.classify.remote import RemoteClassifier
from smart_format.config import RemoteSettings
from smart_format.errors import ClassificationError
from smart_format.patterns import BLANK_LINES_RE
from smart_format.schema import Element

logger = logging.getLogger(__name__)


class Classifier(Protocol):
    """Interface shared by all classification strategies."""

    name: str

    def classify(self, text: str) -> list[Element]: ...


class ParagraphClassifier:
    """Last resort: every blank-line separated chunk becomes a paragraph."""

    name = "paragraph"

    def classify(self, text: str) -> list[Element]:
        normalized = (text or "").replace("\r\n", "\n").replace("\r", "\n")
        return [Element(type="p", content=chunk.strip()) for chunk in BLANK_LINES_RE.split(normalized) if chunk.strip()]


class ClassifierChain:
    """Try each strategy in turn until one succeeds."""

    def __init__(self, strategies: list[Classifier]):
        if not strategies:
            raise ValueError("ClassifierChain needs at least one strategy")
        self.strategies = list(strategies)

    @property
    def names(self) -> list[str]:
        return [strategy.name for strategy in self.strategies]

    def run(self, text: str) -> tuple[list[Element], str, list[ClassificationError]]:
        """Classify *text*.

        Returns:
            (elements, name of the strategy that produced them, failures of the
            strategies tried before it, in order)
        """
        failures: list[ClassificationError] = []
        for strategy in self.strategies:
            try:
                elements = strategy.classify(text)
            except ClassificationError as exc:
                logger.warning("Classifier '%s' failed, falling back: %s", strategy.name, exc)
                failures.append(exc)
                continue
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.exception("Classifier '%s' raised unexpectedly, falling back", strategy.name)
                failure = ClassificationError(f"{strategy.name} classifier raised {type(exc).__name__}: {exc}")
                failure.__cause__ = exc
                failures.append(failure)
                continue
            logger.info("Classified with '%s' strategy: %d element(s)", strategy.name, len(elements))
            return elements, strategy.name, failures

        # Only reachable when the chain was built without the paragraph fallback
        logger.error("All classifiers failed (%s); using paragraph split", ", ".join(self.names))
        fallback = ParagraphClassifier()
        return fallback.classify(text), fallback.name, failures


def default_chain(local_only: bool = False, settings: RemoteSettings | None = None) -> ClassifierChain:
    """Remote -> local -> paragraph, or local -> paragraph when *local_only* is set."""
    strategies: list[Classifier] = []
    if not local_only:
        strategies.append(RemoteClassifier(settings=settings))
    strategies.extend([LocalClassifier(), ParagraphClassifier()])
    return ClassifierChain(strategies)
