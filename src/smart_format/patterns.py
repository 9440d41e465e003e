"""Compiled regex patterns and constants shared by the tokenizer, extractors and classifiers.

Order-sensitive heuristics elsewhere in the package refer to these by name, so
the patterns are kept here and nowhere else.
"""

import re

# ─── Placeholders ─────────────────────────────────────────────────────────────

PLACEHOLDER_TEMPLATE = "%%MERMAID_PLACEHOLDER_{index}%%"

# Any placeholder token inside a larger string
PLACEHOLDER_RE = re.compile(r"%%MERMAID_PLACEHOLDER_(\d+)%%")

# A block that is nothing but a placeholder token
PLACEHOLDER_BLOCK_RE = re.compile(r"^%%MERMAID_PLACEHOLDER_\d+%%$")


# ─── Tokenizer ────────────────────────────────────────────────────────────────

# "```mermaid\n ... ```" fenced diagram source
FENCED_DIAGRAM_RE = re.compile(r"```mermaid\s*\n(.*?)```", re.DOTALL)

# One or more blank lines (whitespace-only lines count as blank)
BLANK_LINES_RE = re.compile(r"\n\s*\n")

# Block ends a sentence or clause
TERMINAL_PUNCTUATION_RE = re.compile(r'[.?!:;"]$')

# Block opens with something structural and must not be merged into its predecessor
STRUCTURAL_START_RE = re.compile(
    r"^(#{1,6}\s+|[-*+]\s+|\d+\.\s+|[IVX]+\.\s+|[A-Z]\.\s+|Abstract|Introduction|Conclusion)",
    re.IGNORECASE,
)


# ─── Heading / list detection ─────────────────────────────────────────────────

MAX_HEADING_CANDIDATE_LENGTH = 250
MAX_LETTER_HEADING_LENGTH = 150

# "2.1 Results", "3.2.1. Setup", "### 2.1 Results"
NUMERIC_SUBHEADING_RE = re.compile(r"^(?:#{1,6}\s+)?(\d+\.\d+(?:\.\d+)*)\.?\s+(.*)$")

# "1. Introduction"
MAIN_NUMBERED_RE = re.compile(r"^(\d+)\.\s+(.*)$")

# "I. Introduction", "IV. Methodology" (numeral must be non-empty)
ROMAN_HEADING_RE = re.compile(r"^(?=[IVX])(IX|IV|V?I{0,3})\.\s+(.*)$", re.IGNORECASE)

# "A. Architecture"
LETTER_HEADING_RE = re.compile(r"^([A-Z])\.\s+(.*)$")

# Standalone academic section keyword on its own line
KEYWORD_HEADING_RE = re.compile(
    r"^(Abstract|Introduction|Conclusions?|References?|Acknowledgments?|Methodology|Keywords|Overview)\s*$",
    re.IGNORECASE,
)

# Same keywords when glued to following sentence text: "Abstract The paper ..."
KEYWORD_GLUED_RE = re.compile(
    r"^(Abstract|Introduction|Conclusions?|References|Acknowledgments?|Methodology|Keywords|Overview)[:.]?\s+(?=[A-Z])(.+)$"
)

# "## Heading"
MARKDOWN_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")

# Ordered-list number at the start of a line, for sequence checks
LINE_NUMBER_RE = re.compile(r"^(\d+)\.\s+")

UL_MARKER_RE = re.compile(r"^[-*+]\s+")
OL_MARKER_RE = re.compile(r"^\d+\.\s+")


# ─── Diagram text art ─────────────────────────────────────────────────────────

# Glyphs that make up a vertical connector line between flow labels
CONNECTOR_GLYPHS = "│|┃║▼▽↓⇓⬇↧"
CONNECTOR_LINE_RE = re.compile(rf"^\s*[{CONNECTOR_GLYPHS}][\s{CONNECTOR_GLYPHS}]*$")

MAX_FLOW_LABEL_LENGTH = 80
MIN_FLOW_EDGES = 2

# Tree branch line: optional "│   " indentation, a branch glyph, then the label
TREE_BRANCH_RE = re.compile(r"^(?P<indent>[│ \t]*)(?:├|└)─+\s*(?P<label>.+?)\s*$")
TREE_GLYPHS = "├└│─"
TREE_INDENT_UNIT = 4
MIN_TREE_NODES = 3
MIN_TREE_EDGES = 2

# "Solar  ████████ 45%"
BAR_GLYPHS = "█▇▆▅▄▃▂▁▉▊▋▌▍▎▏■▓▒░"
BAR_LINE_RE = re.compile(
    rf"^\s*(?P<label>[^{BAR_GLYPHS}]+?)\s*[:|]?\s*[{BAR_GLYPHS}]+\s*(?P<value>\d+(?:\.\d+)?)\s*%\s*$"
)
MIN_BAR_LINES = 2
MAX_CHART_TITLE_LENGTH = 80

# Mermaid node labels that can be written without an id/label pair
SIMPLE_NODE_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

# Words mermaid reserves, which cannot be used as bare node ids
MERMAID_RESERVED = frozenset({"end", "graph", "subgraph", "style", "class", "click", "flowchart", "default"})


# ─── Markdown tables ──────────────────────────────────────────────────────────

# "| --- | :---: |" (pipes optional at the ends)
TABLE_SEPARATOR_RE = re.compile(r"^\s*\|?\s*:?-+:?\s*(?:\|\s*:?-+:?\s*)*\|?\s*$")


# ─── OCR / AI boilerplate ─────────────────────────────────────────────────────

# Trailing citation cluster such as "[1] [21.", "[1], 12), [31, (4]"
CITATION_CLUSTER_RE = re.compile(
    r"(?<![\w.$€£¥#%])(?P<cluster>[\[(]*\d+(?!\d)[\])]*(?:[\s,]*[\[(]*\d+(?!\d)[\])]*)*)[\s,]*(?P<end>[.?!]?)\s*$"
)
CITATION_MIN, CITATION_MAX = 1, 5
# A number after one of these is an amount or an ordinal, never a citation
AMOUNT_PREFIXES = ("$", "€", "£", "¥", "#", "%")
MAX_NOISE_DIGITS = 2
MIN_WORDS_BEFORE_NOISE = 2

# Standalone page number: "12", "Page 4", "- 7 -", "p. 3"
FLOATING_NOISE_RE = re.compile(r"^(?:page\s*|p\.\s*)?[-–—\s]*\d{1,4}[-–—\s]*$", re.IGNORECASE)

CONVERSATIONAL_FILLER_RES = (
    re.compile(r"^(here is|here's|below is|sure, here is|sure, here's)\b.*?(diagram|chart|flowchart|table|code|format|text|version|document|summary)\b.*?[.:!]?$", re.IGNORECASE),
    re.compile(r"^(certainly|sure|of course|absolutely|great question)[!.,]?$", re.IGNORECASE),
    re.compile(r"^(certainly|sure|of course|absolutely)[!,.]\s+(here|below|i)\b.*$", re.IGNORECASE),
    re.compile(r"^(hi|hello|hey)( there)?([!.,](\s+.{0,60})?)?$", re.IGNORECASE),
    re.compile(r"^(let me know|feel free|i hope this helps|hope this helps|would you like|do you want me|if you('d| would) like|is there anything else)\b.*$", re.IGNORECASE),
)
MAX_FILLER_LENGTH = 200


# ─── Rendering ────────────────────────────────────────────────────────────────

WIDOW_LABEL_MAX_LENGTH = 50
WIDOW_LABEL_MAX_WORDS = 8
WIDOW_LABEL_KEYWORD_RE = re.compile(r"^(diagram|chart|flowchart|table|figure)", re.IGNORECASE)
