"""Main Flask API for PhishShield.

Run: python -m phishshield.api
"""

import os
import logging
from flask import Flask, request, jsonify, abort
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import redis as redis_lib

from .app.scanner import scan_url, EmptyURLError, EXAMPLE_URLS
from .db import CounterStore

# Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("api")

VERSION = "1.0"

# Flask app
app = Flask(__name__)

# Rate limiter: prefer Redis storage in production when REDIS_URL is set
REDIS_URL = os.getenv("REDIS_URL")
if REDIS_URL:
    try:
        redis_lib.from_url(REDIS_URL).ping()
        limiter = Limiter(get_remote_address, app=app,
                          default_limits=["60 per minute"], storage_uri=REDIS_URL)
        logger.info("Using Redis at %s for rate limiting", REDIS_URL)
    except (redis_lib.RedisError, ValueError):
        logger.exception("Failed to connect to Redis, falling back to in-memory limiter")
        limiter = Limiter(get_remote_address, app=app, default_limits=["60 per minute"])
else:
    limiter = Limiter(get_remote_address, app=app, default_limits=["60 per minute"])

# API key
API_KEY = os.getenv("PHISHSHIELD_API_KEY", None)
if API_KEY:
    logger.info("API key enabled")

# Counters are loaded from here on every scan and saved right after
store = CounterStore()


def require_api_key() -> None:
    if not API_KEY:
        return
    key = request.headers.get("X-API-Key") or request.args.get("api_key")
    if not key or key != API_KEY:
        abort(401, description="Invalid or missing API key")


@app.route("/health", methods=["GET"])
@limiter.exempt
def health():
    return jsonify({"status": "ok", "version": VERSION})


@app.route("/scan", methods=["POST"])
@limiter.limit("30 per minute")
def scan():
    require_api_key()
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or "url" not in data:
        return jsonify({"error": "missing 'url' in JSON body"}), 400

    url = data["url"]
    if not isinstance(url, str):
        return jsonify({"error": "'url' must be a string"}), 400

    try:
        result = scan_url(url, store)
    except EmptyURLError:
        return jsonify({"error": "empty url"}), 400
    except Exception as e:
        logger.exception("Scan failed: %s", e)
        return jsonify({"error": "scan_failed"}), 500

    return jsonify(result), 200


@app.route("/stats", methods=["GET"])
def stats():
    require_api_key()
    try:
        counters = store.load()
    except Exception as e:
        logger.exception("Loading counters failed: %s", e)
        return jsonify({"error": "stats_unavailable"}), 500
    return jsonify(counters.to_dict()), 200


@app.route("/examples", methods=["GET"])
def examples():
    require_api_key()
    return jsonify({"examples": EXAMPLE_URLS}), 200


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 5050)), debug=False)
