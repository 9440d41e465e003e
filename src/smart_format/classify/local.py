"""Deterministic, rule-based block classifier.

Used whenever the remote classifier is unavailable.  Each Block is classified
by ``detect_type``; rules are tried in a fixed order and the first match wins:

   1. first block, single line, no trailing "." -> h1 (document title)
   2. "2.1 Results" / "### 3.2.1. Setup"          -> sub-subheading
   3. "1. Introduction"                          -> h2
   4. "IV. Methodology"                          -> h2
   5. "A. Architecture" (< 150 chars)            -> sub-subheading
   6. "Abstract", "References", ... on its own   -> h2
   7. "## Heading"                               -> h{hash count}, at most h3
   8. every line "- item"                        -> ul
   9. every line "1. item"                       -> ol
  10. anything else                              -> p

Heading rules only consider single-line candidates shorter than 250 chars.
Before that, multi-line blocks are scanned for glued headings: a heading line
inside a block (OCR dropped the blank line) is pulled out into its own element.
"""

import logging

from smart_format.cleaning.cleanup import enforce_structure_rules
from smart_format.cleaning.tokenizer import tokenize
from smart_format.errors import ClassificationError
from smart_format.patterns import (
    KEYWORD_HEADING_RE,
    LETTER_HEADING_RE,
    LINE_NUMBER_RE,
    MAIN_NUMBERED_RE,
    MARKDOWN_HEADING_RE,
    MAX_HEADING_CANDIDATE_LENGTH,
    MAX_LETTER_HEADING_LENGTH,
    NUMERIC_SUBHEADING_RE,
    OL_MARKER_RE,
    PLACEHOLDER_BLOCK_RE,
    ROMAN_HEADING_RE,
    UL_MARKER_RE,
)
from smart_format.schema import Block, Element

logger = logging.getLogger(__name__)

# "####" and deeper render as h3
MAX_HEADING_LEVEL = 3


def _is_list_continuation(lines: list[str], j: int, number: int) -> bool:
    """True if a neighbouring line carries number-1 or number+1, i.e. *lines[j]* is an ordered-list item."""
    for k, expected in ((j - 1, number - 1), (j + 1, number + 1)):
        if 0 <= k < len(lines):
            match = LINE_NUMBER_RE.match(lines[k].strip())
            if match and int(match.group(1)) == expected:
                return True
    return False


def _is_glued_heading(lines: list[str], j: int) -> bool:
    """Does line *j* of a multi-line block look like a heading that lost its blank line?"""
    line = lines[j].strip()
    if not line or len(line) >= MAX_HEADING_CANDIDATE_LENGTH:
        return False
    if MARKDOWN_HEADING_RE.match(line):
        return True
    # Other heading shapes on the first line are left to detect_type on the whole block
    if j == 0:
        return False
    if NUMERIC_SUBHEADING_RE.match(line) or ROMAN_HEADING_RE.match(line) or LETTER_HEADING_RE.match(line) or KEYWORD_HEADING_RE.match(line):
        return True
    match = MAIN_NUMBERED_RE.match(line)
    return bool(match) and not _is_list_continuation(lines, j, int(match.group(1)))


class LocalClassifier:
    """Classify text into Elements with the ordered heuristic rules above."""

    name = "local"

    def classify(self, text: str) -> list[Element]:
        """Tokenize *text* and classify its blocks; any unexpected error becomes a ClassificationError."""
        try:
            elements = self.classify_blocks(tokenize(text))
            return enforce_structure_rules(elements)
        except ClassificationError:
            raise
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.exception("Local classifier failed")
            raise ClassificationError(f"Local classifier failed: {exc}") from exc

    def classify_blocks(self, blocks: list[Block]) -> list[Element]:
        """Classify an ordered Block sequence, splitting out glued headings."""
        elements: list[Element] = []

        for block in blocks:
            if "\n" not in block.text:
                elements.append(self.detect_type(block.text, len(elements)))
                continue

            lines = block.text.split("\n")
            buffer: list[str] = []
            for j, raw_line in enumerate(lines):
                line = raw_line.strip()
                if not _is_glued_heading(lines, j):
                    buffer.append(line)
                    continue
                if buffer:
                    elements.append(self.detect_type("\n".join(buffer), len(elements)))
                    buffer = []
                elements.append(self.detect_type(line, len(elements)))
            if buffer:
                elements.append(self.detect_type("\n".join(buffer), len(elements)))

        logger.debug("Local classifier produced %d element(s) from %d block(s)", len(elements), len(blocks))
        return elements

    def detect_type(self, block: str, index: int) -> Element:
        """Classify one block of text; *index* is its position in the overall element sequence."""
        single = "\n" not in block
        candidate = single and len(block) < MAX_HEADING_CANDIDATE_LENGTH

        # Placeholders are opaque; the reinjector turns them into diagrams/tables
        if PLACEHOLDER_BLOCK_RE.match(block.strip()):
            return Element(type="p", content=block.strip())

        if index == 0 and candidate and not block.endswith(".") and not MARKDOWN_HEADING_RE.match(block):
            return Element(type="h1", content=block.strip())

        if candidate:
            match = NUMERIC_SUBHEADING_RE.match(block)
            if match:
                return Element(type="sub-subheading", content=f"{match.group(1)} {match.group(2)}".strip())

            match = MAIN_NUMBERED_RE.match(block)
            if match:
                return Element(type="h2", content=f"{match.group(1)}. {match.group(2)}".strip())

            match = ROMAN_HEADING_RE.match(block)
            if match:
                return Element(type="h2", content=f"{match.group(1).upper()}. {match.group(2)}".strip())

            match = LETTER_HEADING_RE.match(block)
            if match and len(block) < MAX_LETTER_HEADING_LENGTH:
                return Element(type="sub-subheading", content=f"{match.group(1)}. {match.group(2)}".strip())

            if KEYWORD_HEADING_RE.match(block):
                return Element(type="h2", content=block.strip())

            match = MARKDOWN_HEADING_RE.match(block)
            if match:
                level = min(len(match.group(1)), MAX_HEADING_LEVEL)
                return Element(type=f"h{level}", content=match.group(2).strip())

        lines = [line.strip() for line in block.split("\n") if line.strip()]
        if lines and all(UL_MARKER_RE.match(line) for line in lines):
            return Element(type="ul", items=[UL_MARKER_RE.sub("", line).strip() for line in lines])
        if lines and all(OL_MARKER_RE.match(line) for line in lines):
            return Element(type="ol", items=[OL_MARKER_RE.sub("", line).strip() for line in lines])

        return Element(type="p", content=block)
