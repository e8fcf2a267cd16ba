"""Character wrapping and letter-spaced drawing on a bare text surface.

The surface only knows how to measure a string and draw it at a point, so
line breaking and tracking are computed here.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, List, Protocol

from fonts import FontSpec
from .surface import TextAlign, TextStyle


class TextSurface(Protocol):
    def measure_text(self, text: str, font: FontSpec) -> float: ...

    def fill_text(self, text: str, x: float, y: float, style: TextStyle) -> None: ...


def wrap_lines(
    text: str,
    measure: Callable[[str], float],
    max_width: float,
) -> List[str]:
    """Break ``text`` into lines one character at a time.

    A character starts a new line when the current line plus that character
    measures wider than ``max_width``. The first character never breaks, so a
    single character wider than ``max_width`` occupies its own line. Words are
    not kept together. Empty input yields one empty line.
    """

    lines: List[str] = []
    line = ""
    for index, char in enumerate(text):
        candidate = line + char
        if index > 0 and measure(candidate) > max_width:
            lines.append(line)
            line = char
        else:
            line = candidate
    lines.append(line)
    return lines


def draw_wrapped_text(
    surface: TextSurface,
    text: str,
    x: float,
    y: float,
    max_width: float,
    line_height: float,
    style: TextStyle,
) -> float:
    """Draw wrapped ``text`` from ``y`` downwards; return the last line's y."""

    lines = wrap_lines(
        text,
        lambda candidate: surface.measure_text(candidate, style.font),
        max_width,
    )
    current_y = y
    for index, line in enumerate(lines):
        if index > 0:
            current_y += line_height
        surface.fill_text(line, x, current_y, style)
    return current_y


def letter_spaced_width(
    text: str,
    measure: Callable[[str], float],
    spacing: float,
) -> float:
    """Sum of character widths plus ``spacing`` between neighbours."""

    if not text:
        return 0.0
    return sum(measure(char) for char in text) + spacing * (len(text) - 1)


def draw_letter_spaced(
    surface: TextSurface,
    text: str,
    x: float,
    y: float,
    style: TextStyle,
    spacing: float = 0.0,
    centered: bool = False,
) -> float:
    """Draw ``text`` with uniform tracking; return the x of the first glyph.

    With ``centered`` the string's tracked width is centred on ``x``.
    """

    if spacing == 0:
        align = TextAlign.CENTER if centered else TextAlign.LEFT
        surface.fill_text(text, x, y, replace(style, align=align))
        if centered:
            return x - surface.measure_text(text, style.font) / 2.0
        return x

    def measure(char: str) -> float:
        return surface.measure_text(char, style.font)

    start_x = x
    if centered:
        start_x = x - letter_spaced_width(text, measure, spacing) / 2.0

    glyph_style = replace(style, align=TextAlign.LEFT)
    current_x = start_x
    for char in text:
        surface.fill_text(char, current_x, y, glyph_style)
        current_x += measure(char) + spacing
    return start_x
