"""Display metadata for category labels.

The label set is open: the service may return categories that are not listed
here, and those still render with a neutral default style.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CategoryStyle:
    label: str
    color: str
    icon: str | None = None


KNOWN_CATEGORIES: dict[str, CategoryStyle] = {
    "Support": CategoryStyle(label="Support", color="blue", icon="🛟"),
    "Sales": CategoryStyle(label="Sales", color="green", icon="🏷"),
    "Feedback": CategoryStyle(label="Feedback", color="yellow", icon="💬"),
}

DEFAULT_COLOR = "default"


def category_style(category: str | None) -> CategoryStyle:
    """Look up the style for ``category``, falling back to the default variant."""
    known = KNOWN_CATEGORIES.get(category or "")
    if known is not None:
        return known
    return CategoryStyle(label=category or "Unknown", color=DEFAULT_COLOR)
