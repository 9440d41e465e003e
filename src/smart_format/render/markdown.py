"""HTML escaping and cleanup of markdown artifacts left in classified text.

``clean_markdown`` runs on already-escaped text, so any tags it produces
(<b>, <i>) are the only markup in the result.
"""

import html
import re

# Applied in order; bold must be converted before single-star italics
_MARKDOWN_SUBSTITUTIONS: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"\*\*(.+?)\*\*"), r"<b>\1</b>"),
    (re.compile(r"\*(.+?)\*"), r"<i>\1</i>"),
    # Leftover standalone markers
    (re.compile(r"\*{2,}"), ""),
    (re.compile(r"(?<!\w)\*(?!\w)"), ""),
    # Heading hashes that leaked into content
    (re.compile(r"^#{1,6}\s+", re.MULTILINE), ""),
    # Numeric reference markers: [1], [2]
    (re.compile(r"\s*\[\d+\]"), ""),
    # [text](url) -> text
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    # Conversational intros ("Here is the flowchart:", "Certainly!")
    (
        re.compile(r"^(Here is|Here(?:'|&#039;)s|Below is|Sure, here is)(.+?)(diagram|chart|flowchart|table|code|format)[.:]\s*", re.IGNORECASE),
        "",
    ),
    (re.compile(r"^(Certainly!|Sure!|Of course!)\s*", re.IGNORECASE), ""),
    (re.compile(r"\s{2,}"), " "),
)

_FORMAT_TAG_RE = re.compile(r"</?[bi]>")


def escape_html(text: str) -> str:
    """Escape & < > " and ' for safe insertion into HTML."""
    return html.escape(text, quote=True).replace("&#x27;", "&#039;")


def clean_markdown(text: str) -> str:
    """Convert bold/italic markers to tags and strip other markdown and AI artifacts."""
    for pattern, replacement in _MARKDOWN_SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    return text.strip()


def strip_format_tags(text: str) -> str:
    """Remove <b>/<i> tags (headings carry their own weight and style)."""
    return _FORMAT_TAG_RE.sub("", text)
