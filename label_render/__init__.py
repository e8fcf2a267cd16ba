"""Layout loader for QC label rendering."""

from __future__ import annotations

from typing import Iterable

from .base import LabelLayout
from .geometry import Bordered, Borderless

BORDERED = "bordered"
BORDERLESS = "borderless"

_LAYOUTS = {
    BORDERED: LabelLayout(BORDERED, Bordered()),
    BORDERLESS: LabelLayout(BORDERLESS, Borderless()),
}


def get_layout(name: str) -> LabelLayout:
    """Return the layout registered as ``name``."""

    key = name.strip().lower()
    layout = _LAYOUTS.get(key)
    if layout is None:
        available = ", ".join(sorted(_LAYOUTS))
        raise ValueError(f"Unknown layout '{name}'. Available layouts: {available}")
    return layout


def list_layouts() -> Iterable[str]:
    """Return the layout identifiers."""

    return sorted(_LAYOUTS)


__all__ = ["BORDERED", "BORDERLESS", "LabelLayout", "get_layout", "list_layouts"]
