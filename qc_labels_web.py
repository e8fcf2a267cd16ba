"""HTTP export API for the label editor front end."""

from __future__ import annotations

import asyncio
import logging
from io import BytesIO
from typing import Any, Mapping

from dotenv import load_dotenv
from flask import Flask, Response, jsonify, request, send_file

from label_config import ExportSettings
from label_errors import LabelExportError
from label_export import export_document, export_image
from label_render import BORDERED, get_layout, list_layouts
from label_types import (
    DEFAULT_LABEL_RECORD,
    ArtifactKind,
    ExportArtifact,
    LayoutOptions,
    suggested_filename,
)

logger = logging.getLogger(__name__)

__all__ = ["create_app", "create_app_from_env", "run_web_app"]

_FAILURE_MESSAGES = {
    ArtifactKind.PNG: "Failed to export image.",
    ArtifactKind.PDF: "Failed to export PDF.",
}


def create_app(settings: ExportSettings | None = None) -> Flask:
    """Create the Flask app exporting labels with ``settings``."""

    app = Flask(__name__)
    export_settings = settings or ExportSettings()

    def _payload() -> Mapping[str, Any]:
        data = request.get_json(silent=True)
        if isinstance(data, dict):
            return data
        return request.form.to_dict()

    def _export(kind: ArtifactKind) -> Response:
        payload = dict(_payload())
        layout_name = str(payload.pop("layout", "") or BORDERED)
        try:
            layout = get_layout(layout_name)
            options = LayoutOptions.from_mapping(
                payload,
                width=export_settings.width,
                height=export_settings.height,
                padding=export_settings.padding,
            )
        except (TypeError, ValueError) as exc:
            return Response(str(exc), status=400)

        try:
            artifact: ExportArtifact
            if kind is ArtifactKind.PDF:
                artifact = asyncio.run(
                    export_document(options, layout=layout, settings=export_settings)
                )
            else:
                artifact = asyncio.run(
                    export_image(options, layout=layout, settings=export_settings)
                )
        except LabelExportError:
            logger.exception("%s export failed", kind.value.upper())
            return Response(_FAILURE_MESSAGES[kind], status=500)

        return send_file(
            BytesIO(artifact.payload),
            mimetype=artifact.mimetype,
            as_attachment=True,
            download_name=suggested_filename(options.record, kind),
        )

    @app.route("/api/label/default", methods=["GET"])
    # pyright: ignore[reportUnusedFunction]
    def default_label() -> Response:
        return jsonify(DEFAULT_LABEL_RECORD.to_dict())

    @app.route("/api/layouts", methods=["GET"])
    # pyright: ignore[reportUnusedFunction]
    def layouts() -> Response:
        return jsonify(list(list_layouts()))

    @app.route("/api/export/image", methods=["POST"])
    # pyright: ignore[reportUnusedFunction]
    def export_image_route() -> Response:
        return _export(ArtifactKind.PNG)

    @app.route("/api/export/pdf", methods=["POST"])
    # pyright: ignore[reportUnusedFunction]
    def export_pdf_route() -> Response:
        return _export(ArtifactKind.PDF)

    return app


def create_app_from_env() -> Flask:
    """App factory for `flask --app qc_labels_web:create_app_from_env run`."""

    load_dotenv()
    return create_app(ExportSettings.from_env())


def run_web_app(settings: ExportSettings, host: str, port: int) -> None:
    """Serve the export API until interrupted."""

    app = create_app(settings)
    app.run(host=host, port=port, debug=False, use_reloader=False)
