"""Run every extractor over raw text in its fixed order.

Order matters: fenced mermaid first (its code may contain arrows and pipes),
then flows, trees, bar charts and finally markdown tables.  Each pass sees the
placeholders left by the previous ones and leaves them alone.
"""

import logging

from smart_format.extraction.arena import ExtractionArena
from smart_format.extraction.diagrams import (
    extract_bar_charts,
    extract_fenced_diagrams,
    extract_flow_diagrams,
    extract_tree_diagrams,
)
from smart_format.extraction.tables import extract_markdown_tables

logger = logging.getLogger(__name__)

EXTRACTORS = (
    extract_fenced_diagrams,
    extract_flow_diagrams,
    extract_tree_diagrams,
    extract_bar_charts,
    extract_markdown_tables,
)


def extract_all(text: str, arena: ExtractionArena | None = None) -> tuple[str, ExtractionArena]:
    """Apply all extractors and return the placeholder-bearing text and the arena."""
    if arena is None:
        arena = ExtractionArena()
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    for extractor in EXTRACTORS:
        text = extractor(text, arena)
    logger.info("Extraction complete: %d block(s) moved to the side channel", len(arena))
    return text, arena
