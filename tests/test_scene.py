import unittest
from dataclasses import replace
from typing import Any

from fonts import FontSpec
from label_render.common import (
    CANVAS_BACKGROUND,
    FRAME_COLOR,
    GUIDE_COLOR,
    INK,
    LABEL_BACKGROUND,
    MODEL_VALUE_FONT,
    MUTED,
    PRODUCT_NAME_FONT,
    STAMP_DATE_FONT,
    STAMP_STATUS_FONT,
)
from label_render.geometry import Bordered, Borderless, Rect, build_geometry
from label_render.scene import draw_qc_stamp, render_scene
from label_render.surface import LineStyle, TextAlign, TextStyle
from label_types import DEFAULT_LABEL_RECORD, LabelRecord

CHAR_WIDTH = 6.0


class RecordingSurface:
    """Collects draw calls; every character measures CHAR_WIDTH."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def measure_text(self, text: str, font: FontSpec) -> float:
        return CHAR_WIDTH * len(text)

    def fill_text(self, text: str, x: float, y: float, style: TextStyle) -> None:
        self.calls.append(("text", (text, x, y, style)))

    def fill_rect(self, rect: Rect, color: str) -> None:
        self.calls.append(("fill", (rect, color)))

    def stroke_rect(self, rect: Rect, style: LineStyle) -> None:
        self.calls.append(("stroke", (rect, style)))

    def line(self, start: Any, end: Any, style: LineStyle) -> None:
        self.calls.append(("line", (start, end, style)))

    def of(self, kind: str) -> list[Any]:
        return [args for name, args in self.calls if name == kind]

    def text_at(self, text: str) -> tuple[float, float, TextStyle]:
        for drawn, x, y, style in self.of("text"):
            if drawn == text:
                return x, y, style
        raise AssertionError(f"{text!r} was not drawn")


def _render(record: LabelRecord = DEFAULT_LABEL_RECORD, bordered: bool = True) -> RecordingSurface:
    preset = Bordered() if bordered else Borderless()
    surface = RecordingSurface()
    render_scene(surface, record, build_geometry(preset, 600, 400, 48))
    return surface


class RenderSceneTests(unittest.TestCase):
    def test_background_is_painted_first(self) -> None:
        surface = _render()
        self.assertEqual(surface.calls[0], ("fill", (Rect(0, 0, 700, 500), CANVAS_BACKGROUND)))
        self.assertEqual(surface.calls[1], ("fill", (Rect(20, 20, 600, 400), LABEL_BACKGROUND)))

    def test_bordered_frame_marks_and_dashes(self) -> None:
        surface = _render()
        self.assertIn((Rect(20, 20, 600, 400), LineStyle(FRAME_COLOR, 2)), surface.of("stroke"))
        marks = [c for c in surface.of("line") if c[2] == LineStyle(GUIDE_COLOR, 2)]
        self.assertEqual(len(marks), 8)
        dashes = [rect for rect, color in surface.of("fill") if color == GUIDE_COLOR]
        self.assertEqual(len(dashes), 57 * 2 + 37 * 2)

    def test_borderless_has_no_frame(self) -> None:
        surface = _render(bordered=False)
        self.assertEqual(surface.calls[0], ("fill", (Rect(0, 0, 600, 400), LABEL_BACKGROUND)))
        colors = {style.color for _, style in surface.of("stroke")}
        self.assertNotIn(FRAME_COLOR, colors)
        self.assertFalse([c for c in surface.of("fill") if c[1] == GUIDE_COLOR])

    def test_product_block_positions(self) -> None:
        surface = _render()
        x, y, style = surface.text_at("AR内容工作站")
        self.assertEqual((x, y), (68, 88))
        self.assertEqual(style.font, PRODUCT_NAME_FONT)
        self.assertEqual(style.color, INK)

    def test_long_product_name_wraps_at_sixty_percent(self) -> None:
        # 504 * 0.6 = 302.4 fits 50 characters of width 6
        record = replace(DEFAULT_LABEL_RECORD, product_name="X" * 60)
        surface = _render(record)
        self.assertEqual(surface.text_at("X" * 50)[:2], (68, 88))
        self.assertEqual(surface.text_at("X" * 10)[:2], (68, 126))

    def test_model_row_does_not_move_with_wrapping(self) -> None:
        record = replace(DEFAULT_LABEL_RECORD, product_name="X" * 60)
        surface = _render(record)
        x, y, style = surface.text_at("EZAE1")
        self.assertEqual((x, y), (68, 174))
        self.assertEqual(style.font, MODEL_VALUE_FONT)
        self.assertEqual(surface.text_at("2025")[:2], (268, 174))

    def test_company_name_is_upper_cased(self) -> None:
        record = replace(DEFAULT_LABEL_RECORD, company_name="acme labs")
        surface = _render(record)
        self.assertEqual(surface.text_at("ACME LABS")[:2], (68, 268))

    def test_bottom_grid_rows(self) -> None:
        surface = _render()
        self.assertEqual(surface.text_at("https://www.ezxr.com/")[:2], (68, 286))
        self.assertEqual(surface.text_at("浙江省杭州市萧山区天人大厦3101室")[:2], (103, 310))
        self.assertEqual(surface.text_at("pm@service.ezxr.com")[:2], (103, 326))
        self.assertIn(((68, 252), (572, 252), LineStyle("#e2e8f0", 1)), surface.of("line"))

    def test_empty_record_keeps_structure(self) -> None:
        empty = LabelRecord.from_mapping({})
        surface = _render(empty)
        # frame plus both stamp borders
        self.assertEqual(len(surface.of("stroke")), 3)
        self.assertEqual(len([c for c in surface.of("line") if c[2].color == GUIDE_COLOR]), 8)
        drawn = "".join(text for text, *_ in surface.of("text"))
        self.assertIn("INSPECTED", drawn)
        self.assertIn("PRODUCT NAME", drawn)


class QcStampTests(unittest.TestCase):
    def test_positions_are_relative_to_stamp(self) -> None:
        surface = RecordingSurface()
        draw_qc_stamp(surface, Rect(0, 0, 120, 100), "OK", "2025.05")

        self.assertEqual(
            surface.of("stroke"),
            [
                (Rect(0, 0, 120, 100), LineStyle(INK, 4)),
                (Rect(4, 4, 112, 92), LineStyle(MUTED, 1)),
            ],
        )
        x, y, style = surface.text_at("OK")
        self.assertEqual((x, y), (60, 25))
        self.assertEqual(style, TextStyle(STAMP_STATUS_FONT, INK, TextAlign.CENTER))
        x, y, style = surface.text_at("2025.05")
        self.assertEqual((x, y), (60, 80))
        self.assertEqual(style.font, STAMP_DATE_FONT)
        [(start, end, rule_style)] = surface.of("line")
        self.assertAlmostEqual(start[0], 9)
        self.assertAlmostEqual(end[0], 111)
        self.assertEqual((start[1], end[1]), (55, 55))
        self.assertEqual(rule_style, LineStyle(INK, 2))

    def test_inspected_caption_is_centred_with_tracking(self) -> None:
        surface = RecordingSurface()
        draw_qc_stamp(surface, Rect(452, 76, 120, 100), "已检验", "2025.05")
        glyphs = [(text, x) for text, x, y, _ in surface.of("text") if y == 144]
        self.assertEqual("".join(text for text, _ in glyphs), "INSPECTED")
        # 9 glyphs of 6 plus 8 gaps of 1.5 = 66, centred on 512
        self.assertEqual(glyphs[0][1], 479)
        self.assertAlmostEqual(glyphs[1][1], 486.5)

    def test_moving_the_stamp_moves_every_element(self) -> None:
        here = RecordingSurface()
        there = RecordingSurface()
        draw_qc_stamp(here, Rect(0, 0, 120, 100), "OK", "2025.05")
        draw_qc_stamp(there, Rect(100, 50, 120, 100), "OK", "2025.05")
        here_text = here.of("text")
        there_text = there.of("text")
        self.assertEqual(len(here_text), len(there_text))
        self.assertTrue(here_text)
        for a, b in zip(here_text, there_text):
            self.assertEqual(a[0], b[0])
            self.assertAlmostEqual(b[1] - a[1], 100)
            self.assertAlmostEqual(b[2] - a[2], 50)


if __name__ == "__main__":
    unittest.main()
