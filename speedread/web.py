"""
Local web app exposing the text pipeline over JSON.

Endpoints:
- POST /api/extract   upload .txt/.pdf/.epub, get tokens + paragraph starts + chapters
- GET  /api/sample    the same payload for the built-in demo passage
- POST /api/pace      display duration for one token during playback
"""

from __future__ import annotations

import argparse
import logging
import os
import tempfile
from pathlib import Path

from flask import Flask, jsonify, render_template_string, request

from .config import DEFAULT_WPM, MAX_CONTENT_LENGTH, WebSettings
from .document import ProcessedText, process_text
from .extract import ExtractionError, allowed_file, extract_text_from_file
from .lexicon import SAMPLE_TEXT
from .pacing import playback_delay

logger = logging.getLogger(__name__)


def build_payload(processed: ProcessedText, filename: str) -> dict:
    payload = {"ok": True, "filename": filename}
    payload.update(processed.to_dict())
    payload["token_count"] = len(processed.tokens)
    payload["chapter_count"] = len(processed.chapters)
    return payload


app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = MAX_CONTENT_LENGTH


HTML_PAGE = r"""
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <title>Speed Reader Text Pipeline</title>
</head>
<body>
  <h1>Speed Reader Text Pipeline</h1>
  <form action="/api/extract" method="post" enctype="multipart/form-data">
    <input type="file" name="file" accept=".txt,.pdf,.epub" />
    <button type="submit">Extract</button>
  </form>
  <p><a href="/api/sample">Sample passage</a></p>
</body>
</html>
"""


@app.route("/", methods=["GET"])
def index():
    return render_template_string(HTML_PAGE)


@app.route("/api/extract", methods=["POST"])
def api_extract():
    if "file" not in request.files:
        return jsonify({"ok": False, "error": "No file uploaded"}), 400

    f = request.files["file"]
    if not f or not f.filename:
        return jsonify({"ok": False, "error": "Missing file"}), 400

    filename = f.filename
    if not allowed_file(filename):
        return jsonify({"ok": False, "error": "Unsupported file type (use .txt, .pdf or .epub)"}), 400

    suffix = Path(filename).suffix.lower()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        temp_path = tmp.name
        f.save(tmp)

    try:
        extracted = extract_text_from_file(temp_path, filename)
    except ExtractionError as e:
        logger.warning("Extraction failed for %s: %s", filename, e)
        return jsonify({"ok": False, "error": str(e)}), 500
    finally:
        try:
            os.unlink(temp_path)
        except OSError:
            logger.warning("Could not remove temporary file %s", temp_path)

    if not extracted.text.strip():
        return jsonify({"ok": False, "error": "No extractable text found. (Scanned PDF likely needs OCR.)"}), 400

    return jsonify(build_payload(process_text(extracted.text, extracted.outline), filename))


@app.route("/api/sample", methods=["GET"])
def api_sample():
    return jsonify(build_payload(process_text(SAMPLE_TEXT), "sample"))


@app.route("/api/pace", methods=["POST"])
def api_pace():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"ok": False, "error": "Expected a JSON object"}), 400

    tokens = data.get("tokens")
    if not isinstance(tokens, list) or not all(isinstance(t, str) for t in tokens):
        return jsonify({"ok": False, "error": "tokens must be a list of strings"}), 400

    try:
        index = int(data.get("index", 0))
        wpm = int(data.get("wpm", DEFAULT_WPM))
        chunk_size = int(data.get("chunk_size", 1))
        speed_multiplier = float(data.get("speed_multiplier", 1.0))
        paragraph_starts = {int(i) for i in data.get("paragraph_starts", [])}
    except (TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"Invalid parameter: {e}"}), 400

    flags = {name: data.get(name, False) for name in ("context_mode", "spotlight")}
    for name, value in flags.items():
        if not isinstance(value, bool):
            return jsonify({"ok": False, "error": f"{name} must be true or false"}), 400

    delay = playback_delay(
        tokens,
        paragraph_starts,
        index,
        wpm,
        context_mode=flags["context_mode"],
        speed_multiplier=speed_multiplier,
        chunk_size=chunk_size,
        spotlight=flags["spotlight"],
    )
    return jsonify({"ok": True, "index": index, "delay_ms": delay})


def main() -> None:
    settings = WebSettings.from_env()
    parser = argparse.ArgumentParser(description="Speed reader text pipeline server")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--debug", action="store_true", default=settings.debug)
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Starting speed reader pipeline on http://%s:%d", args.host, args.port)
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
