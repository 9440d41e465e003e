"""Structural cleanup rules applied to classifier output.

These are the same rules the remote classifier is instructed to follow,
enforced locally so the local engine obeys them too and a remote response that
ignores them is still corrected:

  - headings never carry body text ("1. Introduction The rapid ..." is split)
  - trailing OCR-mangled citations become separate [n] groups, 1..5 only
  - bare trailing numerals and standalone page numbers are noise and removed
  - conversational AI filler ("Here is the diagram:") is removed

Placeholder-bearing and list/payload elements pass through untouched.
"""

import logging
import re

from smart_format.patterns import (
    AMOUNT_PREFIXES,
    CITATION_CLUSTER_RE,
    CITATION_MAX,
    CITATION_MIN,
    CONVERSATIONAL_FILLER_RES,
    FLOATING_NOISE_RE,
    KEYWORD_GLUED_RE,
    KEYWORD_HEADING_RE,
    LETTER_HEADING_RE,
    MAIN_NUMBERED_RE,
    MAX_FILLER_LENGTH,
    MAX_NOISE_DIGITS,
    MIN_WORDS_BEFORE_NOISE,
    NUMERIC_SUBHEADING_RE,
    PLACEHOLDER_RE,
    ROMAN_HEADING_RE,
)
from smart_format.schema import LIST_TYPES, PAYLOAD_TYPES, Element

logger = logging.getLogger(__name__)

# Small words allowed inside a title-case heading
TITLE_CONNECTORS = frozenset({"a", "an", "and", "as", "at", "by", "for", "from", "in", "into", "of", "on", "or", "the", "to", "vs", "via", "with"})

MIN_BODY_WORDS = 4
MAX_HEADING_WORDS = 10

SPLITTABLE_HEADINGS = frozenset({"h2", "sub-subheading"})
SENTENCE_ENDINGS = (".", "?", "!", "\u2026")


# ─── Heading / body separation ────────────────────────────────────────────────


def _heading_label(content: str) -> tuple[str, str] | None:
    """Split a numbered/roman/lettered heading into (label, remaining text)."""
    for pattern in (NUMERIC_SUBHEADING_RE, MAIN_NUMBERED_RE, ROMAN_HEADING_RE, LETTER_HEADING_RE):
        match = pattern.match(content)
        if match:
            label_end = match.start(2)
            return content[:label_end].strip(), match.group(2)
    return None


def _find_body_start(words: list[str]) -> int | None:
    """Index of the first word of sentence text glued after a title-case heading.

    The body starts at a capitalised word followed by a lowercase word that is
    not a title connector ("The rapid ...").  Every word before it must itself
    be title case or a connector.
    """
    for i in range(1, min(len(words) - 1, MAX_HEADING_WORDS + 1)):
        previous = words[i - 1]
        if not (previous[:1].isupper() or previous[:1].isdigit() or previous.lower() in TITLE_CONNECTORS):
            return None
        following = words[i + 1]
        if words[i][:1].isupper() and following[:1].islower() and following.lower() not in TITLE_CONNECTORS:
            return i
    return None


def split_heading_body(element: Element) -> list[Element]:
    """Split a single-line heading that has paragraph text glued onto it."""
    content = element.content or ""
    if element.type not in SPLITTABLE_HEADINGS or "\n" in content:
        return [element]

    parts = _heading_label(content)
    if parts is None:
        return [element]
    label, rest = parts

    words = rest.split()
    body_start = _find_body_start(words)
    if body_start is None or len(words) - body_start < MIN_BODY_WORDS:
        return [element]
    # Without sentence punctuation the tail is body text only if too long to be a heading
    if not words[-1].endswith(SENTENCE_ENDINGS) and len(words) - body_start <= MAX_HEADING_WORDS:
        return [element]

    heading = f"{label} {' '.join(words[:body_start])}".strip()
    body = " ".join(words[body_start:])
    logger.debug("Split glued heading %r from its body text", heading)
    return [element.with_content(heading), Element(type="p", content=body)]


def split_keyword_paragraph(element: Element) -> list[Element]:
    """Pull a section keyword ("Abstract", "Conclusions") off the front of a paragraph."""
    content = element.content or ""
    if element.type != "p":
        return [element]

    first_line, _, remainder = content.partition("\n")
    if remainder.strip() and KEYWORD_HEADING_RE.match(first_line.strip()):
        return [Element(type="h2", content=first_line.strip()), element.with_content(remainder.strip())]

    match = KEYWORD_GLUED_RE.match(first_line.strip())
    if match and len(match.group(2).split()) >= MIN_BODY_WORDS:
        body = match.group(2) + (("\n" + remainder) if remainder else "")
        return [Element(type="h2", content=match.group(1)), element.with_content(body.strip())]
    return [element]


# ─── Citations and noise ──────────────────────────────────────────────────────


def repair_citations(text: str) -> str:
    """Rewrite a trailing citation cluster as separate [n] groups.

    "energy [1], 12), [31, (4]."  ->  "energy [1] [4]."
    "improves energy 4."          ->  "improves energy."

    Only 1..5 are citations; other numbers in a bracketed cluster are dropped.
    A cluster of bare numbers with no brackets is floating OCR noise and is
    deleted entirely.  Text is returned unchanged when the cluster looks like
    real content (a year, a closing parenthetical, a short phrase).
    """
    match = CITATION_CLUSTER_RE.search(text)
    if match is None:
        return text

    cluster = match.group("cluster")
    before = text[: match.start()].rstrip()
    numbers = re.findall(r"\d+", cluster)
    if not before or before.endswith(AMOUNT_PREFIXES) or any(len(token) > 3 for token in numbers):
        return text

    has_brackets = any(ch in cluster for ch in "[]()")
    if has_brackets:
        opens = any(ch in cluster for ch in "[(")
        if not opens and len(numbers) == 1:
            return text
        kept: list[int] = []
        for token in numbers:
            value = int(token)
            if CITATION_MIN <= value <= CITATION_MAX and value not in kept:
                kept.append(value)
        citations = " ".join(f"[{value}]" for value in kept)
        repaired = f"{before} {citations}" if citations else before
        return repaired + match.group("end")

    # Bare trailing numerals: noise, but only short ones after real sentence text
    if any(len(token) > MAX_NOISE_DIGITS for token in numbers) or len(before.split()) < MIN_WORDS_BEFORE_NOISE:
        return text
    return before + match.group("end")


def is_floating_noise(text: str) -> bool:
    """True for a standalone page number such as "12" or "Page 4"."""
    return bool(FLOATING_NOISE_RE.match(text.strip()))


def is_conversational_filler(text: str) -> bool:
    """True for AI-chat filler such as "Sure, here is the diagram:" or "Let me know if ..."."""
    stripped = text.strip()
    if not stripped or len(stripped) > MAX_FILLER_LENGTH or "\n" in stripped:
        return False
    return any(pattern.match(stripped) for pattern in CONVERSATIONAL_FILLER_RES)


# ─── Entry point ──────────────────────────────────────────────────────────────


def enforce_structure_rules(elements: list[Element]) -> list[Element]:
    """Apply separation, citation, noise and filler rules to a classified element list."""
    output: list[Element] = []
    dropped = 0

    for element in elements:
        if element.type in LIST_TYPES or element.type in PAYLOAD_TYPES or element.content is None:
            output.append(element)
            continue
        if PLACEHOLDER_RE.search(element.content):
            output.append(element)
            continue

        if is_floating_noise(element.content) or (element.type == "p" and is_conversational_filler(element.content)):
            logger.debug("Dropping noise/filler element: %r", element.content[:60])
            dropped += 1
            continue

        for part in split_keyword_paragraph(element):
            for piece in split_heading_body(part):
                if piece.type == "p":
                    repaired = repair_citations(piece.content or "")
                    if not repaired.strip():
                        dropped += 1
                        continue
                    piece = piece.with_content(repaired)
                output.append(piece)

    if dropped:
        logger.info("Structure cleanup removed %d noise/filler element(s)", dropped)
    return output
