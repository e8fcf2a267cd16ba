"""Shared layout constants for the QC label.

These values mirror the live preview's box model; both renderings read them
from here.
"""

from __future__ import annotations

from fonts import FontFamily, FontSpec

OVERSAMPLING = 3
POINTS_PER_INCH = 72

# Bordered canvas and frame
BORDERED_CANVAS = (700.0, 500.0)
BORDER_INSET = 20.0
BORDER_WIDTH = 2.0
CORNER_MARK_SIZE = 15.0
CORNER_MARK_WIDTH = 2.0
GUIDE_THICKNESS = 10.0
GUIDE_OFFSET = 10.0
GUIDE_CORNER_GAP = 15.0
GUIDE_DASH = 5.0

# Colours
CANVAS_BACKGROUND = "#f8f9fa"
LABEL_BACKGROUND = "#ffffff"
FRAME_COLOR = "#6b7280"
GUIDE_COLOR = "#374151"
INK = "#0f172a"
CAPTION = "#64748b"
MUTED = "#94a3b8"
BODY = "#475569"
DIVIDER = "#e2e8f0"

# Product block
PRODUCT_TOP_OFFSET = 4.0
CAPTION_TO_VALUE = 16.0
PRODUCT_NAME_LINE_HEIGHT = 38.0
PRODUCT_NAME_WIDTH_RATIO = 0.6
PRODUCT_TO_MODEL_ROW = 70.0
MODEL_DATE_GAP = 200.0
CAPTION_SPACING = 2.0

PRODUCT_CAPTION = "产品名称 / PRODUCT NAME:"
MODEL_CAPTION = "型号 / MODEL:"
DATE_CAPTION = "日期 / DATE:"

# QC stamp, offsets relative to the stamp's top-left corner
STAMP_SIZE = (120.0, 100.0)
STAMP_TOP_OFFSET = 8.0
STAMP_OUTER_WIDTH = 4.0
STAMP_INNER_INSET = 4.0
STAMP_INNER_WIDTH = 1.0
STAMP_STATUS_Y = 25.0
STAMP_RULE_Y = 55.0
STAMP_RULE_MARGIN_RATIO = 0.075
STAMP_RULE_WIDTH = 2.0
STAMP_CAPTION_Y = 68.0
STAMP_CAPTION_SPACING = 1.5
STAMP_DATE_Y = 80.0
STAMP_CAPTION = "INSPECTED"

# Bottom block
BOTTOM_BLOCK_HEIGHT = 120.0
DIVIDER_WIDTH = 1.0
DIVIDER_TO_COMPANY = 16.0
COMPANY_LINE_HEIGHT = 16.0
COMPANY_WIDTH_RATIO = 0.7
COMPANY_TO_WEBSITE = 18.0
WEBSITE_TO_GRID = 24.0
GRID_LABEL_WIDTH = 35.0
GRID_ROW_GAP = 16.0
ADDRESS_LINE_HEIGHT = 10.0
GRID_LABEL_SPACING = 1.0
ADDRESS_CAPTION = "ADD:"
EMAIL_CAPTION = "MAIL:"

# Typography
CAPTION_FONT = FontSpec(FontFamily.SANS, 700, 10)
PRODUCT_NAME_FONT = FontSpec(FontFamily.SANS, 900, 30)
MODEL_VALUE_FONT = FontSpec(FontFamily.MONO, 700, 24)
STAMP_STATUS_FONT = FontSpec(FontFamily.SANS, 900, 30)
STAMP_CAPTION_FONT = FontSpec(FontFamily.SANS, 700, 8)
STAMP_DATE_FONT = FontSpec(FontFamily.MONO, 700, 9)
COMPANY_FONT = FontSpec(FontFamily.SANS, 900, 16)
WEBSITE_FONT = FontSpec(FontFamily.MONO, 700, 10)
GRID_LABEL_FONT = FontSpec(FontFamily.SANS, 700, 10)
ADDRESS_FONT = FontSpec(FontFamily.SANS, 500, 10)
EMAIL_FONT = FontSpec(FontFamily.MONO, 400, 10)

SCENE_FONTS = (
    CAPTION_FONT,
    PRODUCT_NAME_FONT,
    MODEL_VALUE_FONT,
    STAMP_STATUS_FONT,
    STAMP_CAPTION_FONT,
    STAMP_DATE_FONT,
    COMPANY_FONT,
    WEBSITE_FONT,
    GRID_LABEL_FONT,
    ADDRESS_FONT,
    EMAIL_FONT,
)
