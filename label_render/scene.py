"""Paint the QC label onto a render surface."""

from __future__ import annotations

from typing import Protocol

from fonts import FontSpec
from label_types import LabelRecord
from .common import (
    ADDRESS_CAPTION,
    ADDRESS_FONT,
    ADDRESS_LINE_HEIGHT,
    BODY,
    BORDER_WIDTH,
    CAPTION,
    CAPTION_FONT,
    CAPTION_SPACING,
    CAPTION_TO_VALUE,
    COMPANY_FONT,
    COMPANY_LINE_HEIGHT,
    COMPANY_TO_WEBSITE,
    COMPANY_WIDTH_RATIO,
    CORNER_MARK_WIDTH,
    DATE_CAPTION,
    DIVIDER,
    DIVIDER_TO_COMPANY,
    DIVIDER_WIDTH,
    EMAIL_CAPTION,
    EMAIL_FONT,
    FRAME_COLOR,
    GRID_LABEL_FONT,
    GRID_LABEL_SPACING,
    GRID_LABEL_WIDTH,
    GRID_ROW_GAP,
    GUIDE_COLOR,
    INK,
    LABEL_BACKGROUND,
    MODEL_CAPTION,
    MODEL_DATE_GAP,
    MODEL_VALUE_FONT,
    MUTED,
    PRODUCT_CAPTION,
    PRODUCT_NAME_FONT,
    PRODUCT_NAME_LINE_HEIGHT,
    PRODUCT_NAME_WIDTH_RATIO,
    PRODUCT_TO_MODEL_ROW,
    PRODUCT_TOP_OFFSET,
    STAMP_CAPTION,
    STAMP_CAPTION_FONT,
    STAMP_CAPTION_SPACING,
    STAMP_CAPTION_Y,
    STAMP_DATE_FONT,
    STAMP_DATE_Y,
    STAMP_INNER_INSET,
    STAMP_INNER_WIDTH,
    STAMP_OUTER_WIDTH,
    STAMP_RULE_MARGIN_RATIO,
    STAMP_RULE_WIDTH,
    STAMP_RULE_Y,
    STAMP_STATUS_FONT,
    STAMP_STATUS_Y,
    WEBSITE_FONT,
    WEBSITE_TO_GRID,
)
from .geometry import LabelGeometry, Point, Rect
from .surface import LineStyle, TextAlign, TextStyle
from .text_layout import draw_letter_spaced, draw_wrapped_text


class SceneSurface(Protocol):
    def measure_text(self, text: str, font: FontSpec) -> float: ...

    def fill_text(self, text: str, x: float, y: float, style: TextStyle) -> None: ...

    def fill_rect(self, rect: Rect, color: str) -> None: ...

    def stroke_rect(self, rect: Rect, style: LineStyle) -> None: ...

    def line(self, start: Point, end: Point, style: LineStyle) -> None: ...


def render_scene(
    surface: SceneSurface,
    record: LabelRecord,
    geometry: LabelGeometry,
) -> None:
    """Paint every element of the label in back-to-front order."""

    surface.fill_rect(geometry.canvas, geometry.background)
    if geometry.bordered:
        _draw_frame_and_guides(surface, geometry)
    model_row_y = _draw_product_block(surface, record, geometry)
    _draw_model_row(surface, record, geometry, model_row_y)
    draw_qc_stamp(surface, geometry.stamp, record.qc_status, record.qc_date)
    _draw_bottom_block(surface, record, geometry)


def _draw_frame_and_guides(surface: SceneSurface, geometry: LabelGeometry) -> None:
    frame = geometry.frame
    surface.fill_rect(frame, LABEL_BACKGROUND)
    surface.stroke_rect(frame, LineStyle(FRAME_COLOR, BORDER_WIDTH))

    mark_style = LineStyle(GUIDE_COLOR, CORNER_MARK_WIDTH)
    for start, end in geometry.corner_marks():
        surface.line(start, end, mark_style)

    for dash in geometry.guide_dashes():
        surface.fill_rect(dash, GUIDE_COLOR)


def _draw_product_block(
    surface: SceneSurface,
    record: LabelRecord,
    geometry: LabelGeometry,
) -> float:
    """Draw the product caption and name; return the y of the model row."""

    content = geometry.content
    y = content.y + PRODUCT_TOP_OFFSET
    draw_letter_spaced(
        surface,
        PRODUCT_CAPTION,
        content.x,
        y,
        TextStyle(CAPTION_FONT, CAPTION),
        spacing=CAPTION_SPACING,
    )

    y += CAPTION_TO_VALUE
    draw_wrapped_text(
        surface,
        record.product_name,
        content.x,
        y,
        content.width * PRODUCT_NAME_WIDTH_RATIO,
        PRODUCT_NAME_LINE_HEIGHT,
        TextStyle(PRODUCT_NAME_FONT, INK),
    )
    return y + PRODUCT_TO_MODEL_ROW


def _draw_model_row(
    surface: SceneSurface,
    record: LabelRecord,
    geometry: LabelGeometry,
    y: float,
) -> None:
    model_x = geometry.content.x
    date_x = model_x + MODEL_DATE_GAP
    caption_style = TextStyle(CAPTION_FONT, CAPTION)
    draw_letter_spaced(surface, MODEL_CAPTION, model_x, y, caption_style,
                       spacing=CAPTION_SPACING)
    draw_letter_spaced(surface, DATE_CAPTION, date_x, y, caption_style,
                       spacing=CAPTION_SPACING)

    value_y = y + CAPTION_TO_VALUE
    value_style = TextStyle(MODEL_VALUE_FONT, INK)
    surface.fill_text(record.product_model, model_x, value_y, value_style)
    surface.fill_text(record.production_year, date_x, value_y, value_style)


def draw_qc_stamp(
    surface: SceneSurface,
    stamp: Rect,
    qc_status: str,
    qc_date: str,
) -> None:
    """Draw the inspection seal inside ``stamp``.

    Every position is an offset from the stamp's top-left corner, so the seal
    can be placed anywhere.
    """

    x, y = stamp.x, stamp.y
    center_x = x + stamp.width / 2.0

    surface.stroke_rect(stamp, LineStyle(INK, STAMP_OUTER_WIDTH))
    surface.stroke_rect(stamp.inset(STAMP_INNER_INSET), LineStyle(MUTED, STAMP_INNER_WIDTH))

    surface.fill_text(
        qc_status,
        center_x,
        y + STAMP_STATUS_Y,
        TextStyle(STAMP_STATUS_FONT, INK, TextAlign.CENTER),
    )

    rule_margin = stamp.width * STAMP_RULE_MARGIN_RATIO
    surface.line(
        (x + rule_margin, y + STAMP_RULE_Y),
        (x + stamp.width - rule_margin, y + STAMP_RULE_Y),
        LineStyle(INK, STAMP_RULE_WIDTH),
    )

    draw_letter_spaced(
        surface,
        STAMP_CAPTION,
        center_x,
        y + STAMP_CAPTION_Y,
        TextStyle(STAMP_CAPTION_FONT, BODY),
        spacing=STAMP_CAPTION_SPACING,
        centered=True,
    )

    surface.fill_text(
        qc_date,
        center_x,
        y + STAMP_DATE_Y,
        TextStyle(STAMP_DATE_FONT, INK, TextAlign.CENTER),
    )


def _draw_bottom_block(
    surface: SceneSurface,
    record: LabelRecord,
    geometry: LabelGeometry,
) -> None:
    content = geometry.content
    top = geometry.bottom_block.y

    surface.line(
        (content.x, top),
        (content.right, top),
        LineStyle(DIVIDER, DIVIDER_WIDTH),
    )

    y = top + DIVIDER_TO_COMPANY
    company_width = content.width * COMPANY_WIDTH_RATIO
    draw_wrapped_text(
        surface,
        record.company_name.upper(),
        content.x,
        y,
        company_width,
        COMPANY_LINE_HEIGHT,
        TextStyle(COMPANY_FONT, INK),
    )

    y += COMPANY_TO_WEBSITE
    surface.fill_text(record.website, content.x, y, TextStyle(WEBSITE_FONT, CAPTION))

    y += WEBSITE_TO_GRID
    label_style = TextStyle(GRID_LABEL_FONT, MUTED)
    value_x = content.x + GRID_LABEL_WIDTH
    draw_letter_spaced(surface, ADDRESS_CAPTION, content.x, y, label_style,
                       spacing=GRID_LABEL_SPACING)
    draw_wrapped_text(
        surface,
        record.address,
        value_x,
        y,
        company_width - GRID_LABEL_WIDTH,
        ADDRESS_LINE_HEIGHT,
        TextStyle(ADDRESS_FONT, BODY),
    )

    y += GRID_ROW_GAP
    draw_letter_spaced(surface, EMAIL_CAPTION, content.x, y, label_style,
                       spacing=GRID_LABEL_SPACING)
    surface.fill_text(record.email, value_x, y, TextStyle(EMAIL_FONT, BODY))
