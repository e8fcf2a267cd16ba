import unittest
from io import BytesIO
from unittest.mock import Mock, patch

import fitz
from flask import Flask
from flask.testing import FlaskClient
from PIL import Image
from werkzeug.wrappers import Response

from label_config import ExportSettings
from label_errors import SurfaceError
from label_types import DEFAULT_LABEL_RECORD
from qc_labels_web import create_app


class WebApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.app: Flask = create_app(ExportSettings(font_settle_ms=0))
        self.app.config["TESTING"] = True
        self.client: FlaskClient = self.app.test_client()

    def test_default_label(self) -> None:
        response: Response = self.client.get("/api/label/default")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), DEFAULT_LABEL_RECORD.to_dict())

    def test_layouts(self) -> None:
        response: Response = self.client.get("/api/layouts")
        self.assertEqual(response.get_json(), ["bordered", "borderless"])

    def test_export_image_downloads_png(self) -> None:
        response: Response = self.client.post(
            "/api/export/image", json=DEFAULT_LABEL_RECORD.to_dict()
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.mimetype, "image/png")
        self.assertIn("EZAE1.png", response.headers.get("Content-Disposition", ""))
        image = Image.open(BytesIO(response.get_data()))
        self.assertEqual(image.size, (2100, 1500))

    def test_export_image_borderless_from_form(self) -> None:
        data = dict(DEFAULT_LABEL_RECORD.to_dict(), layout="borderless")
        response: Response = self.client.post("/api/export/image", data=data)
        self.assertEqual(response.status_code, 200)
        image = Image.open(BytesIO(response.get_data()))
        self.assertEqual(image.size, (1800, 1200))

    def test_export_pdf_falls_back_to_label_filename(self) -> None:
        record = dict(DEFAULT_LABEL_RECORD.to_dict(), product_model="")
        response: Response = self.client.post("/api/export/pdf", json=record)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.mimetype, "application/pdf")
        self.assertIn("label.pdf", response.headers.get("Content-Disposition", ""))
        with fitz.open(stream=response.get_data(), filetype="pdf") as doc:
            self.assertEqual(doc.page_count, 1)

    def test_unknown_layout_is_rejected(self) -> None:
        response: Response = self.client.post(
            "/api/export/image", json={"layout": "a4-sheet"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("a4-sheet", response.get_data(as_text=True))

    def test_non_string_field_is_rejected(self) -> None:
        response: Response = self.client.post(
            "/api/export/pdf", json={"product_name": 42}
        )
        self.assertEqual(response.status_code, 400)

    @patch("qc_labels_web.export_image")
    def test_export_failure_reports_generic_message(self, mock_export: Mock) -> None:
        mock_export.side_effect = SurfaceError("no drawing context")
        with self.assertLogs("qc_labels_web", level="ERROR"):
            response: Response = self.client.post("/api/export/image", json={})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_data(as_text=True), "Failed to export image.")

    @patch("qc_labels_web.export_document")
    def test_pdf_failure_reports_generic_message(self, mock_export: Mock) -> None:
        mock_export.side_effect = SurfaceError("no drawing context")
        with self.assertLogs("qc_labels_web", level="ERROR"):
            response: Response = self.client.post("/api/export/pdf", json={})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_data(as_text=True), "Failed to export PDF.")


if __name__ == "__main__":
    unittest.main()
