import unittest
from io import BytesIO

from PIL import Image

from fonts import FontFamily, FontRegistry, FontSpec
from label_errors import SurfaceError
from label_render.geometry import Rect
from label_render.surface import LineStyle, RenderSurface, TextAlign, TextStyle

MONO = FontSpec(FontFamily.MONO, 400, 10)


class RenderSurfaceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = FontRegistry()

    def _decode(self, surface: RenderSurface) -> Image.Image:
        return Image.open(BytesIO(surface.encode_png())).convert("RGB")

    def test_pixel_size_is_oversampled(self) -> None:
        surface = RenderSurface(700, 500, self.registry)
        self.assertEqual(surface.pixel_size, (2100, 1500))
        self.assertEqual(surface.dpi, 216)
        image = self._decode(surface)
        self.assertEqual(image.size, (2100, 1500))

    def test_fill_rect_uses_top_left_origin(self) -> None:
        surface = RenderSurface(100, 50, self.registry)
        surface.fill_rect(Rect(10, 10, 20, 20), "#ff0000")
        image = self._decode(surface)
        self.assertEqual(image.getpixel((60, 60)), (255, 0, 0))
        self.assertEqual(image.getpixel((60, 130)), (255, 255, 255))

    def test_strokes_and_text_leave_ink(self) -> None:
        surface = RenderSurface(100, 50, self.registry)
        surface.line((0, 25), (100, 25), LineStyle("#000000", 2))
        surface.stroke_rect(Rect(5, 5, 90, 40), LineStyle("#000000", 2))
        surface.fill_text("MMMM", 20, 8, TextStyle(MONO, "#000000"))
        image = self._decode(surface)
        self.assertLess(sum(image.getpixel((150, 75))), 200)
        self.assertLess(sum(image.getpixel((15, 60))), 200)
        text_box = image.crop((60, 24, 180, 60))
        self.assertLess(min(sum(px) for px in text_box.getdata()), 600)

    def test_alignment_does_not_leak_between_calls(self) -> None:
        surface = RenderSurface(100, 50, self.registry)
        surface.fill_text("MM", 50, 2, TextStyle(MONO, "#000000", TextAlign.CENTER))
        surface.fill_text("MMMM", 0, 30, TextStyle(MONO, "#000000"))
        image = self._decode(surface)
        # left-aligned at x=0 the run reaches 24 units; centred it would stop at 12
        tail = image.crop((45, 90, 70, 125))
        self.assertLess(min(sum(px) for px in tail.getdata()), 600)

    def test_measure_text(self) -> None:
        surface = RenderSurface(100, 50, self.registry)
        # Courier advances 600/1000 em per glyph
        self.assertAlmostEqual(surface.measure_text("abc", MONO), 18.0)
        self.assertEqual(surface.measure_text("", MONO), 0.0)
        sans = FontSpec(FontFamily.SANS, 700, 10)
        self.assertGreater(surface.measure_text("已检验", sans), 0)

    def test_invalid_size(self) -> None:
        for width, height in ((0, 10), (10, -1), (float("nan"), 10)):
            with self.subTest(width=width, height=height):
                with self.assertRaises(SurfaceError):
                    RenderSurface(width, height, self.registry)

    def test_surface_is_single_use(self) -> None:
        surface = RenderSurface(100, 50, self.registry)
        surface.encode_png()
        with self.assertRaises(SurfaceError):
            surface.fill_rect(Rect(0, 0, 1, 1), "#000000")
        with self.assertRaises(SurfaceError):
            surface.encode_png()

    def test_encoding_is_deterministic(self) -> None:
        outputs = []
        for _ in range(2):
            surface = RenderSurface(100, 50, self.registry)
            surface.fill_rect(Rect(0, 0, 50, 50), "#0f172a")
            surface.fill_text("QC 2025", 5, 5, TextStyle(MONO, "#ffffff"))
            outputs.append(surface.encode_png())
        self.assertEqual(outputs[0], outputs[1])


if __name__ == "__main__":
    unittest.main()
