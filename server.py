# server.py — CPU Catalog read-only JSON API
from flask import Flask, request, jsonify
from flask_cors import CORS
from waitress import serve
import os
import logging
import math
from datetime import datetime
from flask_compress import Compress
from dotenv import load_dotenv

from cpu_data import get_all_cpus
from cpu_catalog import (
    CatalogQueryError,
    cpu_to_dict,
    filter_cpus,
    get_cpu_details,
    search_cpus,
    sort_cpus,
)

# ----------------------------
# Load .env and configuration
# ----------------------------
load_dotenv()

HOST = os.getenv("CPU_CATALOG_HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", os.getenv("CPU_CATALOG_PORT", "5000")))
DEBUG_MODE = os.getenv("DEBUG", "False").lower() in ("1", "true", "yes")

# ----------------------------
# Logging
# ----------------------------
logging.basicConfig(level=logging.INFO,
                    format="%(asctime)s %(levelname)s: %(message)s")
logger = logging.getLogger("CPU-Catalog-API")

# ----------------------------
# Flask app
# ----------------------------
app = Flask(__name__)
CORS(app, resources={r"/api/*": {"origins": "*"}})
Compress(app)


def _number_arg(name, integer=False):
    """Read an optional finite numeric query parameter; ValueError on junk."""
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        if integer:
            raise ValueError(f"'{name}' must be a whole number") from None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"'{name}' must be a number") from None
    if not math.isfinite(value):
        raise ValueError(f"'{name}' must be a finite number")
    return value


# ----------------------------
# API Routes
# ----------------------------


@app.route("/", methods=["GET"])
def api_root():
    """API Welcome Page"""
    return jsonify({
        "service": "CPU Catalog API",
        "version": "1.0",
        "endpoints": {
            "GET /": "This welcome page",
            "GET /api/cpus": "List CPUs (?sort=price&order=asc&min_speed=900&max_price=2000&year=2022)",
            "GET /api/cpus/search": "Search CPUs by name (?q=ryzen)",
            "GET /api/cpus/<slug>": "Single CPU by slug",
            "GET /api/lookup": "CPU lookup (?id=Ryzen 5 5600)",
            "GET /api/health": "Health check"
        }
    })


@app.route("/api/health", methods=["GET"])
def health():
    """Health check endpoint"""
    return jsonify({
        "status": "healthy",
        "service": "CPU Catalog API",
        "cpu_count": len(get_all_cpus()),
        "timestamp": datetime.now().isoformat()
    })


@app.route("/api/cpus", methods=["GET"])
def list_cpus_api():
    """
    List catalog records, optionally filtered and sorted.
    Query params: sort, order (asc|desc), min_speed, max_price, year
    """
    try:
        sort_key = (request.args.get("sort") or "").strip()
        order = (request.args.get("order") or "asc").strip().lower()
        if order not in ("asc", "desc"):
            return jsonify({"error": "'order' must be 'asc' or 'desc'"}), 400

        min_speed = _number_arg("min_speed")
        max_price = _number_arg("max_price")
        year = _number_arg("year", integer=True)

        cpus = filter_cpus(min_speed=min_speed,
                           max_price=max_price, year=year)
        if sort_key:
            cpus = sort_cpus(sort_key, descending=(order == "desc"), cpus=cpus)

        logger.info("CPU list: sort=%s order=%s min_speed=%s max_price=%s year=%s -> %d",
                    sort_key or "-", order, min_speed, max_price, year, len(cpus))
        return jsonify({
            "cpus": [cpu_to_dict(c) for c in cpus],
            "count": len(cpus)
        })

    except (CatalogQueryError, ValueError) as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.exception("Error in /api/cpus")
        return jsonify({
            "error": "server error in /api/cpus",
            "detail": str(e)
        }), 500


@app.route("/api/cpus/search", methods=["GET"])
def search_cpus_api():
    """Search CPUs by name"""
    try:
        query = (request.args.get("q") or "").strip()
        results = search_cpus(query)

        logger.info("CPU search: %s -> %d", query, len(results))
        return jsonify({
            "search": {
                "query": query,
                "results_count": len(results)
            },
            "cpus": [cpu_to_dict(c) for c in results]
        })

    except CatalogQueryError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.exception("Error in /api/cpus/search")
        return jsonify({
            "error": "server error in /api/cpus/search",
            "detail": str(e)
        }), 500


def _details_response(raw: str):
    details = get_cpu_details(raw)
    if not details.get("found"):
        return jsonify(details), 404
    return jsonify(details)


@app.route("/api/cpus/<slug>", methods=["GET"])
def cpu_detail_api(slug):
    """Single CPU by slug or name"""
    try:
        logger.info("CPU detail: %s", slug)
        return _details_response(slug)
    except Exception as e:
        logger.exception("Error in /api/cpus/<slug>")
        return jsonify({"error": "server error in /api/cpus/<slug>", "detail": str(e)}), 500


@app.route("/api/lookup", methods=["GET"])
def lookup_api():
    """
    CPU lookup endpoint
    """
    try:
        cpu_id = (request.args.get("id") or request.args.get("name") or "").strip()
        if not cpu_id:
            return jsonify({"found": False, "error": "id required"}), 400

        logger.info("CPU lookup: %s", cpu_id)
        return _details_response(cpu_id)

    except Exception as e:
        logger.exception("Error in /api/lookup")
        return jsonify({"error": "server error in /api/lookup", "detail": str(e)}), 500

# ----------------------------
# Error handlers
# ----------------------------


@app.errorhandler(404)
def not_found(error):
    return jsonify({"error": "Endpoint not found"}), 404


@app.errorhandler(405)
def method_not_allowed(error):
    return jsonify({"error": "Method not allowed"}), 405


@app.errorhandler(500)
def internal_server_error(error):
    return jsonify({"error": "Internal server error"}), 500


# ----------------------------
# Start server
# ----------------------------
if __name__ == "__main__":
    logger.info(
        "Starting CPU Catalog API on http://%s:%s", HOST, PORT)
    logger.info("Debug mode: %s", DEBUG_MODE)

    if DEBUG_MODE:
        app.run(host=HOST, port=PORT, debug=True)
    else:
        serve(app, host=HOST, port=PORT)
