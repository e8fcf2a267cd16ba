# pyright: reportUnknownVariableType=false, reportUnknownMemberType=false
# pyright: reportUnknownArgumentType=false, reportAttributeAccessIssue=false
# pyright: reportMissingImports=false
# pyright: reportMissingTypeStubs=false

"""Font resolution and the font-readiness signal for label rendering."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from enum import StrEnum
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import Iterable, Union

from fontTools.ttLib import TTFont as VariableTTFont
from fontTools.ttLib import TTLibError
from fontTools.varLib import instancer
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.ttfonts import TTFont as ReportLabTTFont

from label_errors import FontLoadError, FontReadinessError

logger = logging.getLogger(__name__)

# Built-in Adobe-GB1 font; covers CJK and Latin without shipping font files.
BUILTIN_SANS_FONT = "STSong-Light"
BUILTIN_MONO_FONTS = {400: "Courier", 700: "Courier-Bold"}

WEIGHT_NAMES = {
    "normal": 400,
    "regular": 400,
    "medium": 500,
    "semibold": 600,
    "bold": 700,
    "black": 900,
}

DEFAULT_ASCENT = 880.0


class FontFamily(StrEnum):
    SANS = "sans"
    MONO = "mono"


def parse_weight(weight: int | float | str) -> int:
    """Normalise CSS style weights (``"bold"``, ``"900"``, ``500``) to integers."""

    if isinstance(weight, str):
        key = weight.strip().lower()
        if key in WEIGHT_NAMES:
            return WEIGHT_NAMES[key]
        if not key.isdigit():
            raise ValueError(f"Unknown font weight '{weight}'")
        weight = int(key)
    value = int(round(weight))
    if not 1 <= value <= 1000:
        raise ValueError(f"Font weight {value} outside 1-1000")
    return value


@dataclass(frozen=True)
class FontSpec:
    """Family, weight and size requested by a single draw call."""

    family: FontFamily
    weight: int
    size: float

    @classmethod
    def of(cls, family: FontFamily | str, weight: int | str, size: float) -> FontSpec:
        return cls(FontFamily(family), parse_weight(weight), float(size))


@dataclass(frozen=True)
class LocalVariableFont:
    family_name: str
    path: Path


@dataclass(frozen=True)
class LocalStaticFont:
    family_name: str
    files: dict[int, Path] = field(default_factory=dict)


FontSource = Union[LocalVariableFont, LocalStaticFont]


class VariableFontManager:
    """Instantiate static font variants from a variable font file."""

    def __init__(self, family: str, font_path: Path) -> None:
        self.family = family
        self.font_path = font_path
        self._font_bytes = font_path.read_bytes()
        self._weight_min, self._weight_max = self._discover_weight_axis()
        self._registered: dict[int, str] = {}

    def _discover_weight_axis(self) -> tuple[float, float]:
        font = VariableTTFont(BytesIO(self._font_bytes))
        try:
            axis = next(ax for ax in font["fvar"].axes if ax.axisTag == "wght")
        except (KeyError, StopIteration) as exc:
            raise FontLoadError(
                f"Variable font '{self.font_path}' does not expose a wght axis."
            ) from exc
        return float(axis.minValue), float(axis.maxValue)

    def font_name_for_weight(self, weight: int) -> str:
        if not self._weight_min <= weight <= self._weight_max:
            raise FontLoadError(
                f"Font weight {weight} outside supported range "
                f"{self._weight_min:.0f}-{self._weight_max:.0f} of '{self.font_path}'"
            )
        cached = self._registered.get(weight)
        if cached:
            return cached

        font_name = f"{self._safe_ps_name(self.family)}-w{weight}"
        buffer = self._instantiate(weight)
        pdfmetrics.registerFont(ReportLabTTFont(font_name, buffer))
        logger.debug("Registered %s from %s", font_name, self.font_path)
        self._registered[weight] = font_name
        return font_name

    def _instantiate(self, weight: int) -> BytesIO:
        font = VariableTTFont(BytesIO(self._font_bytes))
        instancer.instantiateVariableFont(font, {"wght": weight}, inplace=True)
        self._ensure_unique_ps_name(font, weight)
        buffer = BytesIO()
        font.save(buffer)
        buffer.seek(0)
        return buffer

    def _ensure_unique_ps_name(self, font: VariableTTFont, weight: int) -> None:
        """Force a distinct PostScript name per instanced weight."""
        nm = font["name"]
        current_ps = nm.getName(6, 3, 1, 0x409) or nm.getName(6, 1, 0, 0)
        target_ps = self._safe_ps_name(f"{self.family}-W{weight}")
        if not current_ps or current_ps.toUnicode() == target_ps:
            return

        for plat, enc, lang in ((3, 1, 0x409), (1, 0, 0)):
            nm.setName(target_ps, 6, plat, enc, lang)
            nm.setName(f"{self.family} {weight}", 4, plat, enc, lang)
            nm.setName(str(weight), 2, plat, enc, lang)

    @staticmethod
    def _safe_ps_name(s: str) -> str:
        return re.sub(r"[^A-Za-z0-9-]", "", s)[:63]


class FontRegistry:
    """Map ``FontSpec`` requests to names registered with ReportLab."""

    def __init__(self, sources: dict[FontFamily, FontSource] | None = None) -> None:
        self._sources = dict(sources or {})
        self._variable_managers: dict[Path, VariableFontManager] = {}
        self._static_registry: dict[tuple[Path, int], str] = {}

    def font_name(self, spec: FontSpec) -> str:
        source = self._sources.get(spec.family)
        if source is None:
            return self._builtin_font_name(spec)
        if isinstance(source, LocalVariableFont):
            return self._get_variable_font_name(source, spec.weight)
        return self._get_static_font_name(source, spec.weight)

    def resolve_all(self, specs: Iterable[FontSpec]) -> dict[FontSpec, str]:
        return {spec: self.font_name(spec) for spec in specs}

    def _builtin_font_name(self, spec: FontSpec) -> str:
        if spec.family is FontFamily.MONO:
            return BUILTIN_MONO_FONTS[700 if spec.weight >= 600 else 400]
        if BUILTIN_SANS_FONT not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(UnicodeCIDFont(BUILTIN_SANS_FONT))
        return BUILTIN_SANS_FONT

    def _get_variable_font_name(self, info: LocalVariableFont, weight: int) -> str:
        manager = self._variable_managers.get(info.path)
        if manager is None:
            if not info.path.exists():
                raise FontLoadError(
                    f"Font file '{info.path}' for family '{info.family_name}' is missing."
                )
            manager = VariableFontManager(info.family_name, info.path)
            self._variable_managers[info.path] = manager
        return manager.font_name_for_weight(weight)

    def _get_static_font_name(self, info: LocalStaticFont, weight: int) -> str:
        if not info.files:
            raise FontLoadError(f"No font files configured for '{info.family_name}'.")
        weight_int = weight
        destination = info.files.get(weight_int)
        if destination is None:
            # pick the closest available weight
            closest = min(sorted(info.files), key=lambda w: abs(w - weight_int))
            destination = info.files[closest]
            weight_int = closest

        key = (destination, weight_int)
        cached = self._static_registry.get(key)
        if cached:
            return cached

        if not destination.exists():
            raise FontLoadError(
                f"Font file '{destination}' for family '{info.family_name}' is missing."
            )

        font_name = f"{info.family_name.replace(' ', '')}-w{weight_int}"
        pdfmetrics.registerFont(ReportLabTTFont(font_name, str(destination)))
        self._static_registry[key] = font_name
        return font_name


def describe_font_file(family: FontFamily, path: Path) -> FontSource:
    """Classify ``path`` as a variable (``wght`` axis) or static font source."""

    if not path.exists():
        raise FontLoadError(f"Font file '{path}' for family '{family}' is missing.")
    try:
        font = VariableTTFont(str(path), lazy=True)
        is_variable = "fvar" in font
        font.close()
    except (TTLibError, OSError) as exc:
        raise FontLoadError(f"Unable to read font file '{path}': {exc}") from exc
    if is_variable:
        return LocalVariableFont(family_name=f"Label{family.value.title()}", path=path)
    return LocalStaticFont(family_name=f"Label{family.value.title()}", files={400: path})


@lru_cache(maxsize=None)
def get_registry(sans_font: Path | None = None, mono_font: Path | None = None) -> FontRegistry:
    """Return a shared registry for the given optional font files."""

    sources: dict[FontFamily, FontSource] = {}
    if sans_font is not None:
        sources[FontFamily.SANS] = describe_font_file(FontFamily.SANS, sans_font)
    if mono_font is not None:
        sources[FontFamily.MONO] = describe_font_file(FontFamily.MONO, mono_font)
    return FontRegistry(sources)


def font_ascent(font_name: str, size: float) -> float:
    """Ascent above the baseline, in the units of ``size``."""

    face = pdfmetrics.getFont(font_name).face
    ascent = getattr(face, "ascent", None) or DEFAULT_ASCENT
    return float(ascent) * size / 1000.0


async def wait_until_ready(registry: FontRegistry, specs: Iterable[FontSpec]) -> None:
    """Resolve every font in ``specs`` off the event loop before drawing starts."""

    wanted = list(dict.fromkeys(specs))
    try:
        resolved = await asyncio.to_thread(registry.resolve_all, wanted)
    except Exception as exc:
        raise FontReadinessError(f"Fonts not ready: {exc}") from exc
    logger.debug("Fonts ready: %s", sorted(set(resolved.values())))


__all__ = [
    "FontFamily",
    "FontRegistry",
    "FontSpec",
    "font_ascent",
    "get_registry",
    "parse_weight",
    "wait_until_ready",
]
