"""Exceptions raised while rendering and exporting labels."""

from __future__ import annotations


class LabelExportError(Exception):
    """Base class for every failure surfaced by an export call."""


class GeometryError(LabelExportError, ValueError):
    """The declared label size cannot be laid out on the chosen preset."""


class SurfaceError(LabelExportError):
    """A drawing surface could not be created or encoded."""


class FontLoadError(LabelExportError):
    """A configured font file is missing or unusable."""


class FontReadinessError(LabelExportError):
    """Fonts did not become ready before drawing."""


class DocumentGenerationError(LabelExportError):
    """The document writer failed after the image was rendered."""


class DeliveryError(LabelExportError):
    """The encoded artifact could not be saved to its destination."""
