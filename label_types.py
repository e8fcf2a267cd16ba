from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import StrEnum
from typing import Any, Mapping

from label_config import DEFAULT_HEIGHT, DEFAULT_PADDING, DEFAULT_WIDTH


@dataclass(frozen=True)
class LabelRecord:
    """Textual payload printed on a product QC label."""

    product_name: str
    product_model: str
    production_year: str
    qc_status: str
    qc_date: str
    company_name: str
    website: str
    address: str
    email: str

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LabelRecord:
        """Build a record from ``data``, copying every value.

        Missing keys fall back to the empty string. Values must be strings.
        """

        values: dict[str, str] = {}
        for name in cls.field_names():
            value = data.get(name, "")
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise TypeError(
                    f"Label field '{name}' must be a string, got {type(value).__name__}"
                )
            values[name] = str(value)
        return cls(**values)

    def to_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in self.field_names()}


DEFAULT_LABEL_RECORD = LabelRecord(
    product_name="AR内容工作站",
    product_model="EZAE1",
    production_year="2025",
    qc_status="已检验",
    qc_date="2025.05",
    company_name="杭州易现先进科技有限公司",
    website="https://www.ezxr.com/",
    address="浙江省杭州市萧山区天人大厦3101室",
    email="pm@service.ezxr.com",
)


@dataclass(frozen=True)
class LayoutOptions:
    """Declared label size plus the record snapshot for one export."""

    width: float
    height: float
    padding: float
    record: LabelRecord

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        width: float = DEFAULT_WIDTH,
        height: float = DEFAULT_HEIGHT,
        padding: float = DEFAULT_PADDING,
    ) -> LayoutOptions:
        return cls(
            width=width,
            height=height,
            padding=padding,
            record=LabelRecord.from_mapping(data),
        )

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.padding

    def snapshot(self) -> LayoutOptions:
        """Return a copy that shares nothing mutable with the caller."""

        return replace(
            self,
            width=float(self.width),
            height=float(self.height),
            padding=float(self.padding),
            record=LabelRecord.from_mapping(self.record.to_dict()),
        )


class ArtifactKind(StrEnum):
    PNG = "png"
    PDF = "pdf"


@dataclass(frozen=True)
class ExportArtifact:
    """Encoded output of a single export call."""

    kind: ArtifactKind
    payload: bytes
    pixel_size: tuple[int, int]
    page_size: tuple[float, float] | None = None

    @property
    def mimetype(self) -> str:
        if self.kind is ArtifactKind.PDF:
            return "application/pdf"
        return "image/png"


def suggested_filename(record: LabelRecord, kind: ArtifactKind | str) -> str:
    """Name downloads after the product model, or ``label`` when it is blank."""

    stem = record.product_model.strip() or "label"
    return f"{stem}.{ArtifactKind(kind).value}"
