"""Environment-driven settings for label export."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

DEFAULT_WIDTH = 600.0
DEFAULT_HEIGHT = 400.0
DEFAULT_PADDING = 48.0

# Post-readiness pause tolerating late font swaps; empirical, not a guarantee.
DEFAULT_FONT_SETTLE_MS = 200


@dataclass(frozen=True)
class ExportSettings:
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    padding: float = DEFAULT_PADDING
    font_settle_ms: int = DEFAULT_FONT_SETTLE_MS
    sans_font: Path | None = None
    mono_font: Path | None = None

    @property
    def font_settle_seconds(self) -> float:
        return max(self.font_settle_ms, 0) / 1000.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ExportSettings:
        """Read ``LABEL_*`` variables; call ``load_dotenv`` beforehand for ``.env``."""

        env = os.environ if environ is None else environ
        return cls(
            width=_float(env, "LABEL_WIDTH", DEFAULT_WIDTH),
            height=_float(env, "LABEL_HEIGHT", DEFAULT_HEIGHT),
            padding=_float(env, "LABEL_PADDING", DEFAULT_PADDING),
            font_settle_ms=int(
                _float(env, "LABEL_FONT_SETTLE_MS", DEFAULT_FONT_SETTLE_MS)
            ),
            sans_font=_path(env, "LABEL_FONT_SANS"),
            mono_font=_path(env, "LABEL_FONT_MONO"),
        )


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got '{raw}'") from exc


def _path(env: Mapping[str, str], name: str) -> Path | None:
    raw = (env.get(name) or "").strip()
    return Path(raw).expanduser() if raw else None
