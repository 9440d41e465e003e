"""Map element types to inline CSS declarations.

Merge order for every element: the default rules for its type, then the
type-specific override, then the ``global`` override (global wins ties).
Declarations keep insertion order so the serialized style string is stable:

    "font-family: 'Times New Roman', serif; font-size: 16pt; ..."
"""

import json
import logging
from pathlib import Path

from smart_format.schema import LIST_TYPES, Element, StyledElement

logger = logging.getLogger(__name__)

# type -> {css property: value}; the optional "global" key applies to every type
StyleOverrides = dict[str, dict[str, str]]

GLOBAL_KEY = "global"

_SERIF = "'Times New Roman', serif"

DEFAULT_RULES: StyleOverrides = {
    "h1": {
        "font-family": _SERIF,
        "font-size": "16pt",
        "font-weight": "700",
        "margin-bottom": "1rem",
        "border-bottom": "2px solid #DEE2E6",
        "padding-bottom": "0.5rem",
    },
    "h2": {
        "font-family": _SERIF,
        "font-size": "14pt",
        "font-weight": "600",
        "margin-bottom": "0.75rem",
        "margin-top": "1.5rem",
    },
    "h3": {
        "font-family": _SERIF,
        "font-size": "12pt",
        "font-weight": "600",
        "margin-bottom": "0.5rem",
        "margin-top": "1rem",
    },
    "p": {
        "font-family": _SERIF,
        "font-size": "12pt",
        "line-height": "1.6",
        "margin-bottom": "1rem",
    },
    "ul": {
        "font-family": _SERIF,
        "margin-bottom": "1rem",
        "padding-left": "2rem",
    },
    "ol": {
        "font-family": _SERIF,
        "margin-bottom": "1rem",
        "padding-left": "2rem",
    },
    "li": {
        "font-family": _SERIF,
        "font-size": "12pt",
        "line-height": "1.6",
        "margin-bottom": "0.5rem",
    },
    "sub-subheading": {
        "font-family": _SERIF,
        "font-size": "12pt",
        "font-weight": "700",
        "margin-bottom": "0.75rem",
        "margin-top": "1.25rem",
    },
}


def _drop_inherit(declarations: dict[str, str]) -> dict[str, str]:
    """A font-family of "inherit" means "use the default", not a literal override."""
    return {prop: value for prop, value in declarations.items() if not (prop == "font-family" and str(value).strip() == "inherit")}


def load_overrides(path: str | Path) -> StyleOverrides:
    """Read a JSON overrides file: ``{"h1": {"font-size": "18pt"}, "global": {"text-align": "justify"}}``."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        raise ValueError(f"Style overrides in {path} must map element types to property/value objects")
    return {str(element_type): {str(k): str(v) for k, v in decls.items()} for element_type, decls in data.items()}


class RuleEngine:
    """Compute the flattened style string for each element."""

    def __init__(self, overrides: StyleOverrides | None = None, defaults: StyleOverrides | None = None):
        base = DEFAULT_RULES if defaults is None else defaults
        self.rules: StyleOverrides = {element_type: dict(decls) for element_type, decls in base.items()}
        self.global_rules: dict[str, str] = {}

        for element_type, decls in (overrides or {}).items():
            decls = _drop_inherit(decls)
            if element_type == GLOBAL_KEY:
                self.global_rules = decls
            else:
                self.rules[element_type] = {**self.rules.get(element_type, {}), **decls}

        if overrides:
            logger.debug("RuleEngine overrides for: %s", ", ".join(sorted(overrides)))

    def rules_for(self, element_type: str) -> dict[str, str]:
        """Merged declarations for *element_type*; unknown types get only the global rules."""
        return {**self.rules.get(element_type, {}), **self.global_rules}

    def style_string(self, element_type: str) -> str:
        return " ".join(f"{prop}: {value};" for prop, value in self.rules_for(element_type).items())

    def apply(self, elements: list[Element]) -> list[StyledElement]:
        """Attach a style string to every element."""
        styled = []
        for element in elements:
            styled.append(
                StyledElement.model_construct(
                    type=element.type,
                    content=element.content,
                    items=element.items,
                    style_string=self.style_string(element.type),
                    item_style_string=self.style_string("li") if element.type in LIST_TYPES else "",
                )
            )
        return styled
