"""Extract diagrams from the text stream and replace them with placeholders.

Four extractors, each ``(text, arena) -> text``:

  extract_fenced_diagrams  -- ```mermaid fences, payload kept verbatim
  extract_flow_diagrams    -- label / arrow-line / label chains -> ``graph TD``
  extract_tree_diagrams    -- ├── / └── branch art -> ``graph TD``
  extract_bar_charts       -- "Label ████ 45%" rows -> ``xychart-beta``

Placeholder lines are never treated as labels, so a region claimed by an
earlier extractor cannot be matched again by a later one.
"""

import html
import logging
import math
from collections.abc import Callable

from smart_format.extraction.arena import ExtractionArena
from smart_format.patterns import (
    BAR_LINE_RE,
    CONNECTOR_LINE_RE,
    FENCED_DIAGRAM_RE,
    MAIN_NUMBERED_RE,
    MARKDOWN_HEADING_RE,
    MAX_CHART_TITLE_LENGTH,
    MAX_FLOW_LABEL_LENGTH,
    MERMAID_RESERVED,
    MIN_BAR_LINES,
    MIN_FLOW_EDGES,
    MIN_TREE_EDGES,
    MIN_TREE_NODES,
    NUMERIC_SUBHEADING_RE,
    PLACEHOLDER_RE,
    SIMPLE_NODE_RE,
    TREE_BRANCH_RE,
    TREE_GLYPHS,
    TREE_INDENT_UNIT,
)

logger = logging.getLogger(__name__)

# A finder inspects lines[i:] and returns (end_exclusive, payload) for a region starting at i
RegionFinder = Callable[[list[str], int], tuple[int, str] | None]


# ─── Shared helpers ───────────────────────────────────────────────────────────


def replace_line_regions(text: str, arena: ExtractionArena, finder: RegionFinder, kind: str = "mermaid-code") -> tuple[str, int]:
    """Scan *text* line by line, replacing every region *finder* claims with a placeholder.

    Returns the rewritten text and the number of regions replaced.
    """
    lines = text.split("\n")
    output: list[str] = []
    replaced = 0
    i = 0
    while i < len(lines):
        found = finder(lines, i)
        if found is None:
            output.append(lines[i])
            i += 1
            continue
        end, payload = found
        output.append(arena.standalone(kind, payload))
        replaced += 1
        i = end
    return "\n".join(output), replaced


def _node_label(label: str) -> str:
    """Make a label safe inside a quoted mermaid node and an HTML <pre>."""
    return html.escape(label.strip(), quote=False).replace('"', "'")


def _node_tokens(labels: list[str]) -> list[str]:
    """Return how each label is written in a mermaid edge chain.

    Plain unique identifiers are written bare (``A --> B``); otherwise every
    node gets a generated id with a quoted label (``n0["Start here"]``).
    """
    bare = all(SIMPLE_NODE_RE.match(lbl) and lbl.lower() not in MERMAID_RESERVED for lbl in labels)
    if bare and len(set(labels)) == len(labels):
        return list(labels)
    return [f'n{i}["{_node_label(lbl)}"]' for i, lbl in enumerate(labels)]


def _is_placeholder(line: str) -> bool:
    return bool(PLACEHOLDER_RE.search(line))


# ─── Fenced mermaid ───────────────────────────────────────────────────────────


def extract_fenced_diagrams(text: str, arena: ExtractionArena) -> str:
    """Replace ```mermaid fenced blocks with placeholders, keeping the code verbatim."""
    return FENCED_DIAGRAM_RE.sub(lambda m: arena.standalone("mermaid-code", m.group(1).strip()), text)


# ─── Linear flows ─────────────────────────────────────────────────────────────


def _is_flow_label(line: str) -> bool:
    stripped = line.strip()
    if not stripped or len(stripped) > MAX_FLOW_LABEL_LENGTH:
        return False
    if CONNECTOR_LINE_RE.match(stripped) or _is_placeholder(stripped):
        return False
    return not any(glyph in stripped for glyph in TREE_GLYPHS)


def find_flow(lines: list[str], start: int) -> tuple[int, str] | None:
    """Match "label, connector line(s), label" repeated at least MIN_FLOW_EDGES times."""
    if not _is_flow_label(lines[start]):
        return None

    labels = [lines[start].strip()]
    end = start + 1
    while True:
        k = end
        while k < len(lines) and CONNECTOR_LINE_RE.match(lines[k]):
            k += 1
        # Need at least one connector line followed by another label
        if k == end or k >= len(lines) or not _is_flow_label(lines[k]):
            break
        labels.append(lines[k].strip())
        end = k + 1

    if len(labels) - 1 < MIN_FLOW_EDGES:
        return None
    return end, "graph TD\n    " + " --> ".join(_node_tokens(labels))


def extract_flow_diagrams(text: str, arena: ExtractionArena) -> str:
    """Convert vertical arrow-connected label chains into directed-graph diagrams."""
    text, count = replace_line_regions(text, arena, find_flow)
    if count:
        logger.info("Converted %d text flow diagram(s)", count)
    return text


# ─── Trees ────────────────────────────────────────────────────────────────────


def _is_spacer(line: str) -> bool:
    """A line holding nothing but vertical tree rails."""
    stripped = line.strip()
    return bool(stripped) and set(stripped) <= {"│", " ", "\t"}


def _branch_depth(indent: str) -> int:
    columns = len(indent.expandtabs(TREE_INDENT_UNIT))
    return columns // TREE_INDENT_UNIT + 1


def find_tree(lines: list[str], start: int) -> tuple[int, str] | None:
    """Match a root line followed by ├── / └── branch lines."""
    root = lines[start].strip()
    if not _is_flow_label(root):
        return None

    labels = [root]
    edges: list[tuple[int, int]] = []
    stack = [0]  # node index at each depth; stack[0] is the root
    end = start + 1
    while end < len(lines):
        line = lines[end]
        if _is_spacer(line):
            end += 1
            continue
        match = TREE_BRANCH_RE.match(line)
        if not match:
            break
        depth = min(_branch_depth(match.group("indent")), len(stack))
        node = len(labels)
        labels.append(match.group("label"))
        edges.append((stack[depth - 1], node))
        stack = stack[:depth] + [node]
        end += 1

    # Trailing spacer lines belong to the surrounding text, not the tree
    while end > start + 1 and _is_spacer(lines[end - 1]):
        end -= 1

    if len(labels) < MIN_TREE_NODES or len(edges) < MIN_TREE_EDGES:
        return None

    node_lines = [f'    n{i}["{_node_label(lbl)}"]' for i, lbl in enumerate(labels)]
    edge_lines = [f"    n{parent} --> n{child}" for parent, child in edges]
    return end, "\n".join(["graph TD", *node_lines, *edge_lines])


def extract_tree_diagrams(text: str, arena: ExtractionArena) -> str:
    """Convert branch-glyph tree art into directed-graph diagrams."""
    text, count = replace_line_regions(text, arena, find_tree)
    if count:
        logger.info("Converted %d text tree diagram(s)", count)
    return text


# ─── Bar charts ───────────────────────────────────────────────────────────────


def _is_chart_title(line: str) -> bool:
    stripped = line.strip()
    if not stripped or len(stripped) > MAX_CHART_TITLE_LENGTH:
        return False
    # Section headings stay in the document; the chart then starts at its first bar
    if MAIN_NUMBERED_RE.match(stripped) or NUMERIC_SUBHEADING_RE.match(stripped) or MARKDOWN_HEADING_RE.match(stripped):
        return False
    return not (BAR_LINE_RE.match(stripped) or _is_placeholder(stripped))


def _format_number(value: float) -> str:
    return str(int(value)) if value == int(value) else str(value)


def chart_axis_max(values: list[float]) -> int:
    """Round the largest value up to the next multiple of 10, then add 10."""
    return int(math.ceil(max(values) / 10.0) * 10) + 10


def find_bar_chart(lines: list[str], start: int) -> tuple[int, str] | None:
    """Match an optional title line followed by at least MIN_BAR_LINES bar rows."""
    title = None
    first_bar = start
    if not BAR_LINE_RE.match(lines[start]):
        if not _is_chart_title(lines[start]) or start + 1 >= len(lines) or not BAR_LINE_RE.match(lines[start + 1]):
            return None
        title = lines[start].strip().strip("*").strip().rstrip(":")
        first_bar = start + 1

    series: list[tuple[str, float]] = []
    end = first_bar
    while end < len(lines):
        match = BAR_LINE_RE.match(lines[end])
        if not match:
            break
        series.append((match.group("label").strip(), float(match.group("value"))))
        end += 1

    if len(series) < MIN_BAR_LINES:
        return None

    labels = ", ".join(f'"{_node_label(label)}"' for label, _ in series)
    values = ", ".join(_format_number(value) for _, value in series)
    chart = ["xychart-beta"]
    if title:
        chart.append(f'    title "{_node_label(title)}"')
    chart.append(f"    x-axis [{labels}]")
    chart.append(f'    y-axis "Value (%)" 0 --> {chart_axis_max([v for _, v in series])}')
    chart.append(f"    bar [{values}]")
    return end, "\n".join(chart)


def extract_bar_charts(text: str, arena: ExtractionArena) -> str:
    """Convert block-glyph bar-chart text art into chart diagrams."""
    text, count = replace_line_regions(text, arena, find_bar_chart)
    if count:
        logger.info("Converted %d text bar chart(s)", count)
    return text
