#!/usr/bin/env python3
"""
Vision Board Server
-------------------
JSON CRUD API over a single board file (data/board.json by default).

Usage:
    python board_server.py
    python board_server.py --port 5000 --data ~/visionboard/board.json

API (every response is the full board document):
    GET    /api/board
    POST   /api/<stickers|cards|notes>        body: one item, id pre-assigned
    PUT    /api/<stickers|cards|notes>/<id>   body: fields to merge
    DELETE /api/<stickers|cards|notes>/<id>
    GET    /health

Errors: HTTP 500 with { "error": "<message>" }.
"""

import logging
import os
import sys

from flask import Flask, jsonify, request
from flask_cors import CORS

from visionboard.board import add_item, remove_item, update_item
from visionboard.config import Config
from visionboard.store import open_file_store

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = 50 * 1024 * 1024  # embedded images
CORS(app)

COLLECTION_RULE = "<any(stickers, cards, notes):collection>"

_config = None


# ── Config ───────────────────────────────────────────────────────────────────

def get_config() -> Config:
    global _config
    if _config is None:
        _config = Config.load(os.environ.get("VISIONBOARD_CONFIG"))
    return _config


def get_data_path() -> str:
    return get_config().data_file


def get_store():
    return open_file_store(get_data_path())


def _body() -> dict:
    return request.get_json(force=True, silent=True) or {}


# ── Routes ───────────────────────────────────────────────────────────────────

@app.route("/api/board", methods=["GET"])
def api_board():
    try:
        return jsonify(get_store().read())
    except Exception as e:
        app.logger.error(f"GET board failed: {e}")
        return jsonify({"error": str(e)}), 500


@app.route(f"/api/{COLLECTION_RULE}", methods=["POST"])
def api_create_item(collection):
    item = _body()
    try:
        doc = get_store().update(lambda d: add_item(d, collection, item))
        app.logger.info(f"Created {collection} item {item.get('id') if isinstance(item, dict) else None}")
        return jsonify(doc)
    except Exception as e:
        app.logger.error(f"POST {collection} failed: {e}")
        return jsonify({"error": str(e)}), 500


@app.route(f"/api/{COLLECTION_RULE}/<item_id>", methods=["PUT"])
def api_update_item(collection, item_id):
    updates = _body()
    try:
        if not isinstance(updates, dict):
            raise ValueError("update body must be a JSON object")
        doc = get_store().update(lambda d: update_item(d, collection, item_id, updates))
        return jsonify(doc)
    except Exception as e:
        app.logger.error(f"PUT {collection}/{item_id} failed: {e}")
        return jsonify({"error": str(e)}), 500


@app.route(f"/api/{COLLECTION_RULE}/<item_id>", methods=["DELETE"])
def api_delete_item(collection, item_id):
    try:
        doc = get_store().update(lambda d: remove_item(d, collection, item_id))
        return jsonify(doc)
    except Exception as e:
        app.logger.error(f"DELETE {collection}/{item_id} failed: {e}")
        return jsonify({"error": str(e)}), 500


@app.route("/health")
def health():
    return jsonify({"status": "ok", "data": get_data_path()})


# ── Main ─────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Vision Board Server")
    parser.add_argument("--host", help="Bind address (use 0.0.0.0 to expose on network)")
    parser.add_argument("--port", type=int)
    parser.add_argument("--data", help="Path to board.json (overrides VISIONBOARD_DATA env var)")
    parser.add_argument("--config", help="Path to visionboard.yaml")
    args = parser.parse_args()

    if args.config:
        os.environ["VISIONBOARD_CONFIG"] = args.config
    if args.data:
        os.environ["VISIONBOARD_DATA"] = args.data

    cfg = get_config()
    host = args.host or cfg.host
    port = args.port or cfg.port

    logging.basicConfig(
        level=getattr(logging, str(cfg.log_level).upper(), logging.INFO),
        format="%(asctime)s [visionboard] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    data_path = get_data_path()
    get_store()  # creates the data directory and an empty board if needed

    print(f"""
╔═══════════════════════════════════════╗
║  Vision Board Server                  ║
╠═══════════════════════════════════════╣
║  URL:  http://{host}:{port:<20}║
║  Data: {data_path:<31}║
╚═══════════════════════════════════════╝
""")

    app.run(host=host, port=port, debug=False, threaded=True)
