"""Convert pipe-delimited markdown tables into HTML table literals.

Expected format:

    | col1 | col2 |
    | --- | :---: |
    | val1 | val2 |

A header row, a separator row of dashes/colons, and at least one data row.
Cell text is HTML-escaped; the table is reinjected as a trusted ``html``
element so nothing downstream escapes it again.
"""

import html
import logging
import re

from smart_format.extraction.arena import ExtractionArena
from smart_format.extraction.diagrams import replace_line_regions
from smart_format.patterns import PLACEHOLDER_RE, TABLE_SEPARATOR_RE

logger = logging.getLogger(__name__)

TABLE_STYLE = "width: 100%; border-collapse: collapse; margin: 12pt 0; page-break-inside: avoid;"
HEADER_CELL_STYLE = "border: 1px solid #999; padding: 6px 10px; background-color: #f2f2f2; font-weight: 700;"
BODY_CELL_STYLE = "border: 1px solid #999; padding: 6px 10px;"

_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_ITALIC_RE = re.compile(r"\*(.+?)\*")


# ─── Row parsing ──────────────────────────────────────────────────────────────


def _is_pipe_row(line: str) -> bool:
    stripped = line.strip()
    return "|" in stripped and not TABLE_SEPARATOR_RE.match(stripped) and not PLACEHOLDER_RE.search(stripped)


def _is_separator(line: str) -> bool:
    return "|" in line and bool(TABLE_SEPARATOR_RE.match(line))


def parse_pipe_row(line: str) -> list[str]:
    """Split a pipe-delimited row into cell strings."""
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|"):
        stripped = stripped[:-1]
    return [cell.strip() for cell in stripped.split("|")]


def parse_alignments(separator: str) -> list[str | None]:
    """Read column alignment from the colons in a separator row."""
    alignments: list[str | None] = []
    for cell in parse_pipe_row(separator):
        left, right = cell.startswith(":"), cell.endswith(":")
        if left and right:
            alignments.append("center")
        elif right:
            alignments.append("right")
        elif left:
            alignments.append("left")
        else:
            alignments.append(None)
    return alignments


# ─── HTML rendering ───────────────────────────────────────────────────────────


def _format_cell(text: str) -> str:
    """Escape cell text and turn **bold** / *italic* markers into tags."""
    escaped = html.escape(text)
    escaped = _BOLD_RE.sub(r"<b>\1</b>", escaped)
    return _ITALIC_RE.sub(r"<i>\1</i>", escaped)


def _cell(tag: str, text: str, style: str, align: str | None) -> str:
    if align:
        style = f"{style} text-align: {align};"
    return f'<{tag} style="{style}">{_format_cell(text)}</{tag}>'


def render_table(header: list[str], rows: list[list[str]], alignments: list[str | None]) -> str:
    """Build the HTML literal for a parsed table.

    Short rows are padded with empty cells and long rows truncated so every row
    has exactly len(header) cells.
    """
    n_cols = len(header)
    aligns = (alignments + [None] * n_cols)[:n_cols]

    head = "".join(_cell("th", text, HEADER_CELL_STYLE, align) for text, align in zip(header, aligns))
    body_rows = []
    for row in rows:
        cells = (row + [""] * n_cols)[:n_cols]
        body_rows.append("<tr>" + "".join(_cell("td", text, BODY_CELL_STYLE, align) for text, align in zip(cells, aligns)) + "</tr>")

    return f'<table style="{TABLE_STYLE}">\n<thead><tr>{head}</tr></thead>\n<tbody>\n' + "\n".join(body_rows) + "\n</tbody>\n</table>"


# ─── Extraction ───────────────────────────────────────────────────────────────


def find_table(lines: list[str], start: int) -> tuple[int, str] | None:
    """Match header row, separator row and one or more data rows starting at *start*."""
    if start + 2 >= len(lines):
        return None
    if not _is_pipe_row(lines[start]) or not _is_separator(lines[start + 1]):
        return None

    header = parse_pipe_row(lines[start])
    alignments = parse_alignments(lines[start + 1])
    rows: list[list[str]] = []
    end = start + 2
    while end < len(lines) and _is_pipe_row(lines[end]):
        rows.append(parse_pipe_row(lines[end]))
        end += 1

    if not rows:
        return None
    return end, render_table(header, rows, alignments)


def extract_markdown_tables(text: str, arena: ExtractionArena) -> str:
    """Replace markdown tables with placeholders whose payload is an HTML table."""
    text, count = replace_line_regions(text, arena, find_table, kind="html-table")
    if count:
        logger.info("Converted %d markdown table(s)", count)
    return text
