"""Layout definition binding a geometry preset to the scene renderer."""

from __future__ import annotations

from dataclasses import dataclass

from fonts import FontRegistry
from label_types import LayoutOptions
from .common import OVERSAMPLING
from .geometry import LabelGeometry, Preset, build_geometry
from .surface import RenderSurface


@dataclass(frozen=True)
class LabelLayout:
    """A named preset; every layout shares one scene renderer."""

    name: str
    preset: Preset

    def geometry(self, options: LayoutOptions) -> LabelGeometry:
        return build_geometry(self.preset, options.width, options.height, options.padding)

    def create_surface(self, geometry: LabelGeometry, registry: FontRegistry) -> RenderSurface:
        return RenderSurface(
            geometry.canvas_width,
            geometry.canvas_height,
            registry,
            oversampling=OVERSAMPLING,
        )
