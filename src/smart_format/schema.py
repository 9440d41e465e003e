"""Pydantic models for classified document elements.

``Element`` is the contract every classifier strategy must satisfy and doubles
as the structured-output response format for the remote classifier.  The
model_validator guarantees that list types carry ``items`` and every other
type carries ``content``, never both.
"""

from typing import Literal

from pydantic import BaseModel, model_validator

# Types the classifiers are allowed to emit
ElementType = Literal[
    "h1",
    "h2",
    "h3",
    "sub-subheading",
    "p",
    "ul",
    "ol",
    "code",
    "mermaid",
    "html",
]

LIST_TYPES = frozenset({"ul", "ol"})
HEADING_TYPES = frozenset({"h1", "h2", "h3", "sub-subheading"})
PAYLOAD_TYPES = frozenset({"mermaid", "html"})

ExtractedKind = Literal["mermaid-code", "html-table"]


class Element(BaseModel):
    """One classified semantic unit of the document."""

    type: ElementType
    content: str | None = None
    items: list[str] | None = None

    @model_validator(mode="after")
    def validate_payload(self) -> "Element":
        """Ensure exactly one of content/items is populated, according to type."""
        if self.type in LIST_TYPES:
            if self.items is None:
                raise ValueError(f"'{self.type}' element requires items")
            if self.content is not None:
                raise ValueError(f"'{self.type}' element must not carry content")
        else:
            if self.content is None:
                raise ValueError(f"'{self.type}' element requires content")
            if self.items is not None:
                raise ValueError(f"'{self.type}' element must not carry items")
        return self

    @classmethod
    def lenient(cls, data: dict) -> "Element":
        """Build an element without validation (for defensive rendering of bad input)."""
        return cls.model_construct(
            type=data.get("type", "p"),
            content=data.get("content"),
            items=data.get("items"),
        )

    def with_content(self, content: str) -> "Element":
        """Return a copy of this element with new content (same type)."""
        return self.model_copy(update={"content": content})


class ElementList(BaseModel):
    """Structured-output wrapper: the remote classifier returns ``{"elements": [...]}``."""

    elements: list[Element]


class StyledElement(Element):
    """An element plus its flattened inline CSS declarations."""

    style_string: str = ""
    item_style_string: str = ""  # for the <li> children of ul/ol


class ExtractedBlock(BaseModel):
    """A diagram or table pulled out of the text stream before classification."""

    kind: ExtractedKind
    payload: str

    @property
    def element_type(self) -> str:
        """Element type the payload is reinjected as."""
        return "html" if self.kind == "html-table" else "mermaid"


class Block(BaseModel):
    """A run of raw text between blank lines, after OCR merge repair."""

    index: int
    text: str
