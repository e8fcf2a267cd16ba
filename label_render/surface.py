"""Owned drawing surface: a ReportLab page rasterised with PyMuPDF."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import StrEnum
from io import BytesIO
from types import TracebackType

import fitz
from reportlab.lib.colors import HexColor
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from fonts import FontRegistry, FontSpec, font_ascent
from label_errors import SurfaceError
from .common import OVERSAMPLING, POINTS_PER_INCH
from .geometry import Point, Rect

logger = logging.getLogger(__name__)


class TextAlign(StrEnum):
    LEFT = "left"
    CENTER = "center"


@dataclass(frozen=True)
class TextStyle:
    """Everything a single text draw needs; nothing carries over between calls."""

    font: FontSpec
    color: str
    align: TextAlign = TextAlign.LEFT


@dataclass(frozen=True)
class LineStyle:
    color: str
    width: float = 1.0


class RenderSurface:
    """Write-only canvas in logical units with top-left origin.

    Text y coordinates name the top of the line box. The oversampling factor
    is applied once, when the page is rasterised by :meth:`encode_png`.
    """

    def __init__(
        self,
        width: float,
        height: float,
        registry: FontRegistry,
        oversampling: int = OVERSAMPLING,
    ) -> None:
        if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
            raise SurfaceError(f"Cannot create a {width}x{height} drawing surface")
        if oversampling < 1:
            raise SurfaceError(f"Oversampling factor must be >= 1, got {oversampling}")
        self.width = float(width)
        self.height = float(height)
        self.oversampling = oversampling
        self._registry = registry
        self._buffer = BytesIO()
        try:
            self._canvas: canvas.Canvas | None = canvas.Canvas(
                self._buffer,
                pagesize=(self.width, self.height),
                invariant=1,
            )
        except Exception as exc:
            raise SurfaceError(f"Drawing context unavailable: {exc}") from exc

    @property
    def dpi(self) -> int:
        return POINTS_PER_INCH * self.oversampling

    @property
    def pixel_size(self) -> tuple[int, int]:
        return (
            int(round(self.width * self.oversampling)),
            int(round(self.height * self.oversampling)),
        )

    def __enter__(self) -> RenderSurface:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._canvas = None
        self._buffer = BytesIO()

    def _require_canvas(self) -> canvas.Canvas:
        if self._canvas is None:
            raise SurfaceError("Drawing surface has already been encoded or discarded")
        return self._canvas

    def _pdf_y(self, y: float) -> float:
        return self.height - y

    def font_name(self, font: FontSpec) -> str:
        return self._registry.font_name(font)

    def measure_text(self, text: str, font: FontSpec) -> float:
        """Advance width of ``text`` in logical units."""

        if not text:
            return 0.0
        return stringWidth(text, self.font_name(font), font.size)

    def fill_rect(self, rect: Rect, color: str) -> None:
        c = self._require_canvas()
        c.saveState()
        c.setFillColor(HexColor(color))
        c.rect(rect.x, self._pdf_y(rect.bottom), rect.width, rect.height,
               stroke=0, fill=1)
        c.restoreState()

    def stroke_rect(self, rect: Rect, style: LineStyle) -> None:
        c = self._require_canvas()
        c.saveState()
        c.setStrokeColor(HexColor(style.color))
        c.setLineWidth(style.width)
        c.rect(rect.x, self._pdf_y(rect.bottom), rect.width, rect.height,
               stroke=1, fill=0)
        c.restoreState()

    def line(self, start: Point, end: Point, style: LineStyle) -> None:
        c = self._require_canvas()
        c.saveState()
        c.setStrokeColor(HexColor(style.color))
        c.setLineWidth(style.width)
        c.line(start[0], self._pdf_y(start[1]), end[0], self._pdf_y(end[1]))
        c.restoreState()

    def fill_text(self, text: str, x: float, y: float, style: TextStyle) -> None:
        """Draw ``text`` with its top at ``y``; ``x`` is the left edge or centre."""

        c = self._require_canvas()
        if not text:
            return
        font_name = self.font_name(style.font)
        baseline = self._pdf_y(y) - font_ascent(font_name, style.font.size)
        c.saveState()
        c.setFillColor(HexColor(style.color))
        c.setFont(font_name, style.font.size)
        if style.align is TextAlign.CENTER:
            c.drawCentredString(x, baseline, text)
        else:
            c.drawString(x, baseline, text)
        c.restoreState()

    def encode_png(self) -> bytes:
        """Finish the page and return PNG bytes at ``pixel_size``."""

        c = self._require_canvas()
        c.showPage()
        c.save()
        pdf_bytes = self._buffer.getvalue()
        self.close()

        zoom = fitz.Matrix(self.oversampling, self.oversampling)
        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
                page = doc.load_page(0)
                pix = page.get_pixmap(matrix=zoom, alpha=False)
                pix.set_dpi(self.dpi, self.dpi)
                png_bytes = pix.tobytes("png")
                rendered = (pix.width, pix.height)
        except RuntimeError as exc:
            raise SurfaceError(f"Rasterising the label failed: {exc}") from exc

        if rendered != self.pixel_size:
            raise SurfaceError(
                f"Rasterised {rendered[0]}x{rendered[1]}, expected "
                f"{self.pixel_size[0]}x{self.pixel_size[1]}"
            )
        logger.debug("Encoded %dx%d PNG (%d bytes)", *rendered, len(png_bytes))
        return png_bytes
