"""Export pipeline: render a label record to PNG or a one-page PDF."""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from io import BytesIO
from pathlib import Path
from typing import Awaitable, Callable, Protocol

from reportlab.lib.pagesizes import landscape, portrait
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from fonts import FontRegistry, get_registry, wait_until_ready
from label_config import ExportSettings
from label_errors import (
    DeliveryError,
    DocumentGenerationError,
    FontReadinessError,
    GeometryError,
    LabelExportError,
    SurfaceError,
)
from label_render import BORDERED, BORDERLESS, LabelLayout, get_layout
from label_render.common import SCENE_FONTS
from label_render.scene import render_scene
from label_types import ArtifactKind, ExportArtifact, LayoutOptions

logger = logging.getLogger(__name__)

FontReady = Callable[[], Awaitable[object]]


class ExportState(StrEnum):
    IDLE = "idle"
    RENDERING = "rendering"
    ENCODING = "encoding"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS = {
    ExportState.IDLE: {ExportState.RENDERING, ExportState.FAILED},
    ExportState.RENDERING: {ExportState.ENCODING, ExportState.FAILED},
    ExportState.ENCODING: {ExportState.DONE, ExportState.FAILED},
    ExportState.DONE: set(),
    ExportState.FAILED: set(),
}


class ExportJob:
    """State of one export call. Never reused."""

    def __init__(self, kind: ArtifactKind, layout: str) -> None:
        self.kind = kind
        self.layout = layout
        self.state = ExportState.IDLE
        self.history: list[ExportState] = [ExportState.IDLE]

    def advance(self, state: ExportState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal export transition {self.state} -> {state}")
        logger.debug("%s export (%s): %s -> %s", self.kind, self.layout, self.state, state)
        self.state = state
        self.history.append(state)

    def fail(self) -> None:
        if self.state not in (ExportState.DONE, ExportState.FAILED):
            self.advance(ExportState.FAILED)


class DocumentWriter(Protocol):
    """Single-page document generator fed with one raster image."""

    def create_page(self, width: float, height: float, orientation: str) -> tuple[float, float]: ...

    def place_image(self, png: bytes, x: float, y: float, width: float, height: float) -> None: ...

    def finalize(self) -> bytes: ...


class ReportLabDocumentWriter:
    """Write the page with ReportLab; one pixel unit is one point."""

    def __init__(self) -> None:
        self._buffer = BytesIO()
        self._canvas: canvas.Canvas | None = None
        self.page_size: tuple[float, float] | None = None

    def create_page(self, width: float, height: float, orientation: str) -> tuple[float, float]:
        if width <= 0 or height <= 0:
            raise ValueError(f"Page size must be positive, got {width}x{height}")
        if orientation == "landscape":
            page_size = landscape((width, height))
        else:
            page_size = portrait((width, height))
        self._canvas = canvas.Canvas(self._buffer, pagesize=page_size, invariant=1)
        self.page_size = (float(page_size[0]), float(page_size[1]))
        return self.page_size

    def place_image(self, png: bytes, x: float, y: float, width: float, height: float) -> None:
        if self._canvas is None or self.page_size is None:
            raise RuntimeError("create_page must be called before place_image")
        # y is measured from the top of the page
        self._canvas.drawImage(
            ImageReader(BytesIO(png)),
            x,
            self.page_size[1] - y - height,
            width=width,
            height=height,
        )

    def finalize(self) -> bytes:
        if self._canvas is None:
            raise RuntimeError("create_page must be called before finalize")
        self._canvas.showPage()
        self._canvas.save()
        self._canvas = None
        return self._buffer.getvalue()


def _layout_name(layout: str | LabelLayout) -> str:
    return layout.name if isinstance(layout, LabelLayout) else str(layout)


def _resolve_layout(layout: str | LabelLayout) -> LabelLayout:
    if isinstance(layout, LabelLayout):
        return layout
    try:
        return get_layout(layout)
    except ValueError as exc:
        raise GeometryError(str(exc)) from exc


def _resolve_registry(settings: ExportSettings) -> FontRegistry:
    try:
        return get_registry(settings.sans_font, settings.mono_font)
    except LabelExportError as exc:
        raise FontReadinessError(f"Fonts not ready: {exc}") from exc


async def _await_fonts(font_ready: FontReady | None, registry: FontRegistry) -> None:
    if font_ready is None:
        await wait_until_ready(registry, SCENE_FONTS)
        return
    try:
        await font_ready()
    except LabelExportError:
        raise
    except Exception as exc:
        raise FontReadinessError(f"Font readiness signal failed: {exc}") from exc


async def export_image(
    options: LayoutOptions,
    *,
    layout: str | LabelLayout = BORDERED,
    font_ready: FontReady | None = None,
    settings: ExportSettings | None = None,
) -> ExportArtifact:
    """Render ``options`` to a PNG at three times the canvas size.

    ``options`` is copied before the first suspension point, so later changes
    by the caller never reach this export. ``font_ready`` replaces the default
    readiness signal; there is no timeout.
    """

    snapshot = options.snapshot()
    settings = settings or ExportSettings.from_env()
    layout_name = _layout_name(layout)
    job = ExportJob(ArtifactKind.PNG, layout_name)
    job.advance(ExportState.RENDERING)
    try:
        chosen = _resolve_layout(layout)
        geometry = chosen.geometry(snapshot)
        registry = _resolve_registry(settings)
        with chosen.create_surface(geometry, registry) as surface:
            surface.fill_rect(geometry.canvas, geometry.background)
            await _await_fonts(font_ready, registry)
            await asyncio.sleep(settings.font_settle_seconds)
            try:
                render_scene(surface, snapshot.record, geometry)
            except LabelExportError:
                raise
            except Exception as exc:
                raise SurfaceError(f"Drawing the label failed: {exc}") from exc
            job.advance(ExportState.ENCODING)
            png_bytes = surface.encode_png()
            pixel_size = surface.pixel_size
    except BaseException:
        job.fail()
        logger.exception("Image export (%s) failed", layout_name)
        raise

    job.advance(ExportState.DONE)
    logger.info(
        "Exported %s label image %dx%d (%d bytes)",
        chosen.name,
        pixel_size[0],
        pixel_size[1],
        len(png_bytes),
    )
    return ExportArtifact(ArtifactKind.PNG, png_bytes, pixel_size)


async def export_borderless_image(
    options: LayoutOptions,
    **kwargs: object,
) -> ExportArtifact:
    """Full-bleed variant of :func:`export_image`."""

    return await export_image(options, layout=BORDERLESS, **kwargs)  # type: ignore[arg-type]


async def export_document(
    options: LayoutOptions,
    *,
    writer: DocumentWriter | None = None,
    layout: str | LabelLayout = BORDERED,
    font_ready: FontReady | None = None,
    settings: ExportSettings | None = None,
) -> ExportArtifact:
    """Render the label image and wrap it in a single landscape page.

    The page is ``options.width`` x ``options.height`` pixel units and the
    image fills it exactly.
    """

    snapshot = options.snapshot()
    image = await export_image(
        snapshot,
        layout=layout,
        font_ready=font_ready,
        settings=settings,
    )

    writer = writer or ReportLabDocumentWriter()
    job = ExportJob(ArtifactKind.PDF, _layout_name(layout))
    job.advance(ExportState.RENDERING)
    try:
        page_w, page_h = writer.create_page(snapshot.width, snapshot.height, "landscape")
        writer.place_image(image.payload, 0, 0, page_w, page_h)
        job.advance(ExportState.ENCODING)
        pdf_bytes = await asyncio.to_thread(writer.finalize)
    except BaseException as exc:
        job.fail()
        logger.exception("Document export failed")
        if isinstance(exc, Exception) and not isinstance(exc, LabelExportError):
            raise DocumentGenerationError(f"Document generation failed: {exc}") from exc
        raise

    job.advance(ExportState.DONE)
    logger.info("Exported label document %.0fx%.0f (%d bytes)", page_w, page_h, len(pdf_bytes))
    return ExportArtifact(
        ArtifactKind.PDF,
        pdf_bytes,
        image.pixel_size,
        page_size=(page_w, page_h),
    )


async def _deliver(artifact: ExportArtifact, filename: str | Path) -> Path:
    path = Path(filename)
    try:
        await asyncio.to_thread(path.write_bytes, artifact.payload)
    except OSError as exc:
        raise DeliveryError(f"Could not save {path}: {exc}") from exc
    logger.info("Wrote %s", path)
    return path


async def download_image(
    options: LayoutOptions,
    filename: str | Path,
    **kwargs: object,
) -> Path:
    """Export the PNG and save it as ``filename``."""

    artifact = await export_image(options, **kwargs)  # type: ignore[arg-type]
    return await _deliver(artifact, filename)


async def export_pdf(
    options: LayoutOptions,
    filename: str | Path,
    **kwargs: object,
) -> Path:
    """Export the one-page PDF and save it as ``filename``."""

    artifact = await export_document(options, **kwargs)  # type: ignore[arg-type]
    return await _deliver(artifact, filename)


__all__ = [
    "DocumentWriter",
    "ExportJob",
    "ExportState",
    "ReportLabDocumentWriter",
    "download_image",
    "export_borderless_image",
    "export_document",
    "export_image",
    "export_pdf",
]
