# upload_base64/__init__.py
import json
import logging

import azure.functions as func

from shared.config import Settings, get_settings
from shared.encoding import decode_base64_bytes
from shared.storage import DEFAULT_CONTENT_TYPE, get_uploader


def _json_response(payload: dict, status_code: int) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(payload),
        status_code=status_code,
        mimetype="application/json",
    )


def _read_body(req: func.HttpRequest) -> dict:
    try:
        body = req.get_json()
    except ValueError:
        logging.warning("[Upload] Body is not valid JSON")
        return {}
    return body if isinstance(body, dict) else {}


def handle(req: func.HttpRequest, settings: Settings, uploader=None) -> func.HttpResponse:
    """
    Route: POST /upload-base64
    Body: {"filename": str, "mimeType": str (optional), "data": base64 str}
    Relays the decoded file to the configured host and returns its public URL.
    """
    body = _read_body(req)
    filename = body.get("filename")
    mime_type = body.get("mimeType")
    data = body.get("data")

    logging.info(
        "[Upload] request filename=%s mimeType=%s dataLength=%s",
        filename, mime_type, len(data) if isinstance(data, str) else None,
    )

    if not filename or not data or not isinstance(filename, str) or not isinstance(data, str):
        logging.warning("[Upload] Missing filename or data")
        return _json_response({"error": "Missing filename or data"}, 400)

    try:
        file_bytes = decode_base64_bytes(data)
        logging.info("[Upload] buffer size=%d bytes", len(file_bytes))

        if uploader is None:
            uploader = get_uploader(settings)
        url = uploader.store(file_bytes, filename, mime_type or DEFAULT_CONTENT_TYPE)

    except Exception as ex:
        logging.exception("[Upload] Upload failed for %s", filename)
        return _json_response({"error": "Upload failed", "details": str(ex)}, 500)

    logging.info("[Upload] success url=%s", url)
    return _json_response({"success": True, "url": url, "filename": filename}, 200)


def main(req: func.HttpRequest) -> func.HttpResponse:
    return handle(req, get_settings())
