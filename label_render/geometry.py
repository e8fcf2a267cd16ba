"""Label geometry presets and the rectangles derived from them.

All values are logical units in a top-left, y-down space.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Union

from label_errors import GeometryError
from .common import (
    BORDER_INSET,
    BORDERED_CANVAS,
    BOTTOM_BLOCK_HEIGHT,
    CANVAS_BACKGROUND,
    CORNER_MARK_SIZE,
    GUIDE_CORNER_GAP,
    GUIDE_DASH,
    GUIDE_OFFSET,
    GUIDE_THICKNESS,
    LABEL_BACKGROUND,
    OVERSAMPLING,
    STAMP_SIZE,
    STAMP_TOP_OFFSET,
)

Point = tuple[float, float]
Segment = tuple[Point, Point]


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def inset(self, amount: float) -> Rect:
        return Rect(
            self.x + amount,
            self.y + amount,
            max(self.width - 2 * amount, 0.0),
            max(self.height - 2 * amount, 0.0),
        )


@dataclass(frozen=True)
class CuttingGuides:
    mark_size: float = CORNER_MARK_SIZE
    strip_thickness: float = GUIDE_THICKNESS
    strip_offset: float = GUIDE_OFFSET
    corner_gap: float = GUIDE_CORNER_GAP
    dash_length: float = GUIDE_DASH


@dataclass(frozen=True)
class Bordered:
    """Fixed canvas with a framed label and cutting guides around it."""

    inset: float = BORDER_INSET
    canvas_size: tuple[float, float] = BORDERED_CANVAS
    guides: CuttingGuides = field(default_factory=CuttingGuides)


@dataclass(frozen=True)
class Borderless:
    """Full-bleed label: the canvas is the declared label size."""


Preset = Union[Bordered, Borderless]


@dataclass(frozen=True)
class LabelGeometry:
    preset: Preset
    canvas_width: float
    canvas_height: float
    frame: Rect
    content: Rect
    padding: float

    @property
    def canvas(self) -> Rect:
        return Rect(0.0, 0.0, self.canvas_width, self.canvas_height)

    @property
    def pixel_size(self) -> tuple[int, int]:
        return (
            int(round(self.canvas_width * OVERSAMPLING)),
            int(round(self.canvas_height * OVERSAMPLING)),
        )

    @property
    def bordered(self) -> bool:
        return isinstance(self.preset, Bordered)

    @property
    def background(self) -> str:
        return CANVAS_BACKGROUND if self.bordered else LABEL_BACKGROUND

    @property
    def product_block(self) -> Rect:
        stamp = self.stamp
        return Rect(
            self.content.x,
            self.content.y,
            max(stamp.x - self.content.x, 0.0),
            max(self.bottom_block.y - self.content.y, 0.0),
        )

    @property
    def stamp(self) -> Rect:
        width, height = STAMP_SIZE
        return Rect(
            self.content.right - width,
            self.content.y + STAMP_TOP_OFFSET,
            width,
            height,
        )

    @property
    def bottom_block(self) -> Rect:
        top = self.content.bottom - BOTTOM_BLOCK_HEIGHT
        return Rect(self.content.x, top, self.content.width, self.content.bottom - top)

    def corner_marks(self) -> list[Segment]:
        """Two segments per corner forming 15x15 L-shapes on the frame corners."""

        if not isinstance(self.preset, Bordered):
            return []
        size = self.preset.guides.mark_size
        f = self.frame
        return [
            ((f.x, f.y), (f.x + size, f.y)),
            ((f.x, f.y), (f.x, f.y + size)),
            ((f.right - size, f.y), (f.right, f.y)),
            ((f.right, f.y), (f.right, f.y + size)),
            ((f.x, f.bottom), (f.x + size, f.bottom)),
            ((f.x, f.bottom), (f.x, f.bottom - size)),
            ((f.right - size, f.bottom), (f.right, f.bottom)),
            ((f.right, f.bottom), (f.right, f.bottom - size)),
        ]

    def guide_strips(self) -> list[Rect]:
        """Top, bottom, left and right guide strips outside the frame."""

        if not isinstance(self.preset, Bordered):
            return []
        g = self.preset.guides
        f = self.frame
        span_w = max(f.width - 2 * g.corner_gap, 0.0)
        span_h = max(f.height - 2 * g.corner_gap, 0.0)
        return [
            Rect(f.x + g.corner_gap, f.y - g.strip_offset, span_w, g.strip_thickness),
            Rect(f.x + g.corner_gap, f.bottom + g.strip_offset - g.strip_thickness,
                 span_w, g.strip_thickness),
            Rect(f.x - g.strip_offset, f.y + g.corner_gap, g.strip_thickness, span_h),
            Rect(f.right + g.strip_offset - g.strip_thickness, f.y + g.corner_gap,
                 g.strip_thickness, span_h),
        ]

    def guide_dashes(self) -> list[Rect]:
        """Dash rectangles filling each strip, 5 on and 5 off.

        Horizontal strips run left to right; vertical strips run bottom to top.
        """

        if not isinstance(self.preset, Bordered):
            return []
        dash = self.preset.guides.dash_length
        period = dash * 2
        dashes: list[Rect] = []
        top, bottom, left, right = self.guide_strips()
        for strip in (top, bottom):
            offset = 0.0
            while offset < strip.width:
                dashes.append(
                    Rect(strip.x + offset, strip.y,
                         min(dash, strip.width - offset), strip.height)
                )
                offset += period
        for strip in (left, right):
            offset = 0.0
            while offset < strip.height:
                length = min(dash, strip.height - offset)
                dashes.append(
                    Rect(strip.x, strip.bottom - offset - length, strip.width, length)
                )
                offset += period
        return dashes


def build_geometry(
    preset: Preset,
    width: float,
    height: float,
    padding: float,
) -> LabelGeometry:
    """Lay out a ``width`` x ``height`` label with uniform ``padding``."""

    for name, value in (("width", width), ("height", height), ("padding", padding)):
        if not math.isfinite(value) or value < 0:
            raise GeometryError(f"Label {name} must be a non-negative number, got {value}")
    if width <= 0 or height <= 0:
        raise GeometryError(f"Label size must be positive, got {width}x{height}")
    if 2 * padding >= min(width, height):
        raise GeometryError(
            f"Padding {padding} leaves no content area in a {width}x{height} label"
        )

    if isinstance(preset, Bordered):
        canvas_w, canvas_h = preset.canvas_size
        frame = Rect(preset.inset, preset.inset, width, height)
        if frame.right > canvas_w or frame.bottom > canvas_h:
            raise GeometryError(
                f"A {width}x{height} label does not fit the "
                f"{canvas_w:.0f}x{canvas_h:.0f} bordered canvas"
            )
    else:
        canvas_w, canvas_h = width, height
        frame = Rect(0.0, 0.0, width, height)

    return LabelGeometry(
        preset=preset,
        canvas_width=float(canvas_w),
        canvas_height=float(canvas_h),
        frame=frame,
        content=frame.inset(padding),
        padding=float(padding),
    )
