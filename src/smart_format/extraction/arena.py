"""Side-channel store for extracted diagrams and tables.

Extractors replace a matched region of text with ``%%MERMAID_PLACEHOLDER_{n}%%``
and append the payload here; ``n`` is the payload's index.  Indices are dense
(0..n-1) and never reused, so a placeholder always resolves to exactly one entry.
"""

import logging

from smart_format.patterns import PLACEHOLDER_RE, PLACEHOLDER_TEMPLATE
from smart_format.schema import ExtractedBlock, ExtractedKind

logger = logging.getLogger(__name__)


def placeholder(index: int) -> str:
    """Return the placeholder token for a given arena index."""
    return PLACEHOLDER_TEMPLATE.format(index=index)


class ExtractionArena:
    """Append-only list of ExtractedBlock entries."""

    def __init__(self):
        self._blocks: list[ExtractedBlock] = []

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self):
        return iter(self._blocks)

    def add(self, kind: ExtractedKind, payload: str) -> str:
        """Store a payload and return the placeholder token that stands in for it."""
        index = len(self._blocks)
        self._blocks.append(ExtractedBlock(kind=kind, payload=payload))
        logger.debug("Extracted %s block #%d (%d chars)", kind, index, len(payload))
        return placeholder(index)

    def get(self, index: int) -> ExtractedBlock | None:
        """Return the block at *index*, or None when the index is unknown."""
        if 0 <= index < len(self._blocks):
            return self._blocks[index]
        return None

    def standalone(self, kind: ExtractedKind, payload: str) -> str:
        """Store a payload and return its placeholder padded with blank lines.

        The padding guarantees the tokenizer sees the placeholder as its own block.
        """
        return f"\n\n{self.add(kind, payload)}\n\n"


def placeholder_indices(text: str) -> list[int]:
    """Return every placeholder index referenced in *text*, in order."""
    return [int(m.group(1)) for m in PLACEHOLDER_RE.finditer(text)]
