# api/server.py
from flask import Flask, request, jsonify
import asyncio # Required to run asynchronous scanner methods
import logging
from typing import Dict, Any

from portsweep.scanner import Scanner, DEFAULT_WORKERS
from portsweep.output_formatter import format_report
from portsweep.tcp_connect import DEFAULT_TIMEOUT
from portsweep.utils import resolve_target, parse_port_range

app = Flask(__name__)
# Configure logging for the Flask app.
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

def run_async_in_sync(coro):
    """Runs an asynchronous coroutine in a synchronous context."""
    return asyncio.run(coro)

@app.route("/api/scan", methods=["POST"])
def scan():
    """
    Handles POST requests to /api/scan.
    Expects a JSON body with 'target' and optional 'full', 'ports', 'timeout' and 'workers'.
    """
    try:
        data: Dict[str, Any] = request.get_json(silent=True)
        if not data:
            return jsonify({"error": "Request must be JSON and not empty."}), 400

        target_input = data.get("target")
        if not target_input:
            return jsonify({"error": "The 'target' parameter is required in the request body."}), 400

        # --- Target Resolution ---
        try:
            address = resolve_target(str(target_input))
        except ValueError as e:
            logger.warning(f"Invalid or unresolvable target received: '{target_input}' - {e}")
            return jsonify({"error": f"Invalid or unresolvable target: {e}"}), 400

        # --- Port Range ---
        full = data.get("full", False)
        if not isinstance(full, bool):
            return jsonify({"error": "The 'full' parameter must be a JSON boolean."}), 400

        ports_input = data.get("ports")
        try:
            port_range = parse_port_range(str(ports_input) if ports_input is not None else None, full)
        except ValueError as e:
            logger.warning(f"Invalid port specification received: '{ports_input}' - {e}")
            return jsonify({"error": f"Invalid port specification: {e}"}), 400

        # --- Scanner ---
        try:
            scanner = Scanner(
                target=address,
                port_range=port_range,
                timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
                workers=int(data.get("workers", DEFAULT_WORKERS))
            )
        except (TypeError, ValueError) as e:
            return jsonify({"error": f"Invalid scan parameters: {e}"}), 400

        logger.info(f"API Scan Request: Target '{target_input}' resolved to {address}, ports {port_range}.")
        results = run_async_in_sync(scanner.scan())

        return jsonify({
            "status": "success",
            "target": target_input,
            "address": address,
            "range": {"start": port_range.start, "end": port_range.end},
            "open_ports": [{"port": r.port, "service": r.label} for r in results],
            "report": format_report(results)
        }), 200

    except Exception as e:
        # Catch any unexpected errors during the entire process.
        logger.critical(f"Unhandled API Scan endpoint error: {e}", exc_info=True)
        return jsonify({"error": f"An unhandled internal server error occurred: {str(e)}"}), 500

def start_api_server(host: str = "127.0.0.1", port: int = 8000, debug: bool = False):
    """Starts the Flask API server."""
    logger.info(f"Starting Flask API server on http://{host}:{port} (Debug mode: {debug})...")
    app.run(host=host, port=port, debug=debug)
