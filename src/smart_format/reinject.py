"""Splice extracted diagrams and tables back into the classified element sequence.

An element whose content holds ``%%MERMAID_PLACEHOLDER_{n}%%`` is split into
[text before] [payload] [text after].  The text pieces keep the original
element type; the payload becomes a ``mermaid`` or ``html`` element whose
content is the extracted payload, byte for byte.
"""

import logging

from smart_format.extraction.arena import ExtractionArena
from smart_format.patterns import PLACEHOLDER_RE
from smart_format.schema import Element

logger = logging.getLogger(__name__)


def _split_element(element: Element, arena: ExtractionArena, used: set[int]) -> list[Element]:
    content = element.content or ""
    pieces: list[Element] = []
    cursor = 0
    pending = ""

    for match in PLACEHOLDER_RE.finditer(content):
        index = int(match.group(1))
        block = arena.get(index)
        if block is None:
            logger.warning("Placeholder #%d has no extracted payload; leaving it as text", index)
            continue
        if index in used:
            logger.warning("Placeholder #%d appears more than once; keeping only the first", index)
            pending += content[cursor : match.start()]
            cursor = match.end()
            continue

        before = (pending + content[cursor : match.start()]).strip()
        pending = ""
        if before:
            pieces.append(element.with_content(before))
        pieces.append(Element(type=block.element_type, content=block.payload))
        used.add(index)
        cursor = match.end()

    if not pieces:
        if pending:
            remainder = (pending + content[cursor:]).strip()
            return [element.with_content(remainder)] if remainder else []
        return [element]

    after = (pending + content[cursor:]).strip()
    if after:
        pieces.append(element.with_content(after))
    return pieces


def reinject(elements: list[Element], arena: ExtractionArena) -> list[Element]:
    """Replace placeholder tokens in *elements* with the arena's payload elements."""
    if not len(arena):
        return list(elements)

    output: list[Element] = []
    used: set[int] = set()
    for element in elements:
        if element.content is None or not PLACEHOLDER_RE.search(element.content):
            output.append(element)
            continue
        output.extend(_split_element(element, arena, used))

    # A classifier that dropped a placeholder must not lose the diagram with it
    missing = [i for i in range(len(arena)) if i not in used]
    if missing:
        logger.warning("%d extracted block(s) not referenced by any element, appending: %s", len(missing), missing)
        for index in missing:
            block = arena.get(index)
            output.append(Element(type=block.element_type, content=block.payload))
    return output
