"""Serialize styled elements into the final HTML fragment.

Rendering is a single pass over the whole element list with lookahead, because
two rules depend on neighbours:

  - widow labels: a short caption paragraph ("Figure: Data Flow") directly
    before a diagram is dropped; the diagram already carries its title
  - keep-together: a heading directly followed by a diagram (possibly across a
    dropped widow label) is wrapped with it in a two-row table, the only
    construct fixed-layout exporters reliably refuse to split across pages

User text is escaped everywhere except ``mermaid`` and ``html`` payloads, which
are inserted verbatim.  Malformed elements render as best they can instead of
raising.
"""

import logging

from smart_format.patterns import WIDOW_LABEL_KEYWORD_RE, WIDOW_LABEL_MAX_LENGTH, WIDOW_LABEL_MAX_WORDS
from smart_format.render.markdown import clean_markdown, escape_html, strip_format_tags
from smart_format.schema import HEADING_TYPES, LIST_TYPES, Element

logger = logging.getLogger(__name__)

MERMAID_CONTAINER_STYLE = (
    "page-break-inside: avoid; background-color: #fcfcfc; border: 1px solid #e0e0e0; border-radius: 8px; "
    "padding: 25px; margin: 18pt 0 12pt 0; box-shadow: 0 2px 5px rgba(0,0,0,0.03); text-align: center;"
)

KEEP_TOGETHER_OPEN = (
    '<table style="width: 100%; border-collapse: collapse; border: none; page-break-inside: avoid; margin: 0; padding: 0;"><tbody>\n'
    '<tr style="page-break-inside: avoid; page-break-after: avoid;"><td style="padding: 0; border: none;">\n'
)
KEEP_TOGETHER_MIDDLE = (
    "\n</td></tr>\n"
    '<tr style="page-break-inside: avoid; page-break-before: avoid;"><td style="padding: 0; border: none;">\n'
)
KEEP_TOGETHER_CLOSE = "\n</td></tr>\n</tbody></table>"

TOC_HEADING_TYPES = ("h2", "h3")

# Leading list tokens an item may still carry ("- ", "* ", "• ", "1. ")
_ITEM_MARKERS = ("-", "*", "•")


def _strip_item_marker(item: str) -> str:
    item = item.strip()
    head, _, rest = item.partition(" ")
    if rest and (head in _ITEM_MARKERS or (head.endswith(".") and head[:-1].isdigit())):
        return rest.strip()
    return item


def _style_attr(element: Element, field: str = "style_string") -> str:
    style = getattr(element, field, "") or ""
    return f' style="{style}"' if style else ""


def _paragraph_text(element: Element) -> str:
    """Escaped, markdown-cleaned paragraph text with OCR line breaks repaired."""
    content = clean_markdown(escape_html(element.content or ""))
    return content.replace("-\n", "").replace("\n", " ")


def is_widow_label(elements: list[Element], index: int) -> bool:
    """Is elements[index] a short caption paragraph sitting right before a diagram?"""
    element = elements[index]
    if element.type != "p" or index + 1 >= len(elements) or elements[index + 1].type != "mermaid":
        return False
    text = _paragraph_text(element)
    if len(text) >= WIDOW_LABEL_MAX_LENGTH:
        return False
    return bool(WIDOW_LABEL_KEYWORD_RE.match(text)) or len(text.split(" ")) <= WIDOW_LABEL_MAX_WORDS


def _keeps_with_next(elements: list[Element], index: int) -> bool:
    """Should the heading at *index* be wrapped together with an upcoming diagram?"""
    if elements[index].type not in HEADING_TYPES or index + 1 >= len(elements):
        return False
    if elements[index + 1].type == "mermaid":
        return True
    return index + 2 < len(elements) and elements[index + 2].type == "mermaid" and is_widow_label(elements, index + 1)


class HtmlRenderer:
    """Render a styled element sequence to an HTML fragment."""

    def render(self, elements: list[Element], include_toc: bool = False) -> str:
        """Return the HTML for *elements*; optionally prefixed with a table of contents."""
        if not elements:
            return ""

        fragments: list[str] = []
        toc_entries: list[tuple[str, str, str]] = []  # (anchor id, element type, heading html)
        keep_together_open = False

        for i, element in enumerate(elements):
            element_type = element.type

            if element_type in LIST_TYPES:
                fragments.append(self._render_list(element))
                continue

            if element_type == "mermaid":
                fragment = f'<div class="mermaid-container" style="{MERMAID_CONTAINER_STYLE}"><pre class="mermaid">{element.content or ""}</pre></div>'
                if keep_together_open:
                    fragment += KEEP_TOGETHER_CLOSE
                    keep_together_open = False
                fragments.append(fragment)
                continue

            if element_type == "html":
                fragments.append(element.content or "")
                continue

            if element_type == "code":
                fragments.append(f"<pre{_style_attr(element)}>{escape_html(element.content or '')}</pre>")
                continue

            if element_type == "p":
                if is_widow_label(elements, i):
                    logger.debug("Suppressing widow label before diagram: %r", (element.content or "")[:50])
                    continue
                fragments.append(f"<p{_style_attr(element)}>{_paragraph_text(element)}</p>")
                continue

            if element_type not in HEADING_TYPES:
                logger.warning("Rendering element of unknown type %r as a paragraph", element_type)
                fragments.append(f"<p{_style_attr(element)}>{_paragraph_text(element)}</p>")
                continue

            content = strip_format_tags(clean_markdown(escape_html(element.content or "")))
            anchor = ""
            if include_toc and element_type in TOC_HEADING_TYPES:
                heading_id = f"heading-{len(toc_entries)}"
                toc_entries.append((heading_id, element_type, content))
                anchor = f' id="{heading_id}"'

            if element_type == "sub-subheading":
                fragment = f"<div{_style_attr(element)}>{content}</div>"
            else:
                fragment = f"<{element_type}{anchor}{_style_attr(element)}>{content}</{element_type}>"

            if not keep_together_open and _keeps_with_next(elements, i):
                fragment = KEEP_TOGETHER_OPEN + fragment + KEEP_TOGETHER_MIDDLE
                keep_together_open = True
            fragments.append(fragment)

        body = "\n\n".join(fragment for fragment in fragments if fragment)
        if include_toc and toc_entries:
            return self._render_toc(toc_entries) + f'\n<div class="content-after-toc">{body}</div>'
        return body

    def _render_list(self, element: Element) -> str:
        if isinstance(element.items, list):
            items = element.items
        elif isinstance(element.content, str):
            items = element.content.split("\n")
        else:
            items = []

        item_attr = _style_attr(element, "item_style_string")
        rows = []
        for item in items:
            text = _strip_item_marker(clean_markdown(escape_html(_strip_item_marker(str(item)))))
            rows.append(f"<li{item_attr}>{text}</li>")
        return f"<{element.type}{_style_attr(element)}>\n" + "\n".join(rows) + f"\n</{element.type}>"

    def _render_toc(self, entries: list[tuple[str, str, str]]) -> str:
        rows = []
        page = 1
        for n, (heading_id, element_type, text) in enumerate(entries):
            font_style = "font-weight: 700;" if element_type == "h2" else "font-weight: 400; padding-left: 20px;"
            rows.append(
                f'<tr><td style="{font_style}"><a href="#{heading_id}" class="toc-link">{text}</a></td>'
                f'<td style="text-align: right; font-weight: 700;">{page}</td></tr>'
            )
            # Rough estimate: two headings per page
            if (n + 1) % 2 == 0:
                page += 1
        return (
            '<div class="toc-container" style="page-break-after: always;">\n'
            '<h3 class="toc-title">CONTENT</h3>\n'
            '<table class="toc-table">\n'
            '<thead><tr><th style="text-align: left;">Topic</th><th style="text-align: right; width: 80px;">Page No.</th></tr></thead>\n'
            "<tbody>\n" + "\n".join(rows) + "\n</tbody></table></div>"
        )
