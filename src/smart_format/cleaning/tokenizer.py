"""Split raw text into logical blocks, repairing spurious OCR paragraph breaks.

OCR and screen-capture text often injects blank lines in the middle of a
sentence.  After splitting on blank lines, adjacent blocks are merged when the
earlier one does not end in terminal punctuation and the later one does not
open with something structural (heading, list marker, section keyword).
A trailing hyphen on the earlier block is a broken word: it is dropped and
the blocks are joined without a space.

Placeholder blocks are never merged with their neighbours.
"""

import logging

from smart_format.extraction.arena import ExtractionArena
from smart_format.extraction.diagrams import extract_fenced_diagrams
from smart_format.patterns import BLANK_LINES_RE, PLACEHOLDER_BLOCK_RE, STRUCTURAL_START_RE, TERMINAL_PUNCTUATION_RE
from smart_format.schema import Block

logger = logging.getLogger(__name__)


def normalize(raw: str | None) -> str:
    """Unify line endings to ``\\n`` and trim leading/trailing whitespace."""
    if not raw:
        return ""
    return raw.replace("\r\n", "\n").replace("\r", "\n").strip()


def split_blocks(text: str) -> list[str]:
    """Split on runs of blank lines, trimming each chunk and dropping empty ones."""
    return [chunk.strip() for chunk in BLANK_LINES_RE.split(text) if chunk.strip()]


def should_merge(current: str, following: str) -> bool:
    """Return True if *following* continues the sentence left open by *current*."""
    if PLACEHOLDER_BLOCK_RE.match(current.strip()) or PLACEHOLDER_BLOCK_RE.match(following.strip()):
        return False
    if TERMINAL_PUNCTUATION_RE.search(current.strip()):
        return False
    return not STRUCTURAL_START_RE.match(following)


def merge_pair(current: str, following: str) -> str:
    """Join two blocks, repairing a word broken by an end-of-block hyphen."""
    if current.endswith("-"):
        return current[:-1] + following
    return current + " " + following


def merge_blocks(chunks: list[str]) -> list[str]:
    """Apply the sentence-continuation merge across a list of block strings."""
    if len(chunks) <= 1:
        return list(chunks)

    merged: list[str] = []
    current = chunks[0]
    for following in chunks[1:]:
        if should_merge(current, following):
            current = merge_pair(current, following)
        else:
            merged.append(current)
            current = following
    merged.append(current)
    return merged


def tokenize(raw: str | None, arena: ExtractionArena | None = None) -> list[Block]:
    """Normalise *raw* and split it into merged Blocks.

    When *arena* is given, any fenced mermaid code still in the text is moved
    into it first and replaced by a placeholder block.
    """
    text = normalize(raw)
    if not text:
        return []

    if arena is not None:
        text = extract_fenced_diagrams(text, arena)

    chunks = split_blocks(text)
    merged = merge_blocks(chunks)
    logger.debug("Tokenized %d raw chunk(s) into %d block(s)", len(chunks), len(merged))
    return [Block(index=i, text=chunk) for i, chunk in enumerate(merged)]
