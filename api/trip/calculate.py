"""
Vercel Python Function for trip calculation.

This endpoint handles POST requests to /api/trip/calculate and returns the
trip breakdown (segments, rests, final arrival) for the submitted form.

Security:
- Body size limited to 64KB to prevent memory exhaustion
"""

from http.server import BaseHTTPRequestHandler
import json
import logging
import sys
from pathlib import Path

# Add the _python directory to the Python path for importing drivetime
sys.path.insert(0, str(Path(__file__).parent.parent / "_python"))

from trip_form import calculate_trip, validate_trip_form

LOGGER = logging.getLogger(__name__)

MAX_BODY_SIZE = 64 * 1024  # 64KB max request body

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class BadRequest(Exception):
    """Request rejected before calculation; carries the HTTP status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class handler(BaseHTTPRequestHandler):
    """HTTP handler for Vercel Python Functions."""

    def do_POST(self):
        """Handle POST requests for trip calculation."""
        try:
            data = self._read_form()
            self._send_json_response(200, {"trip": calculate_trip(data)})
        except BadRequest as e:
            self._send_json_response(e.status_code, {"error": str(e)})
        except Exception as e:
            LOGGER.exception("Trip calculation failed")
            self._send_json_response(500, {"error": f"Trip calculation failed: {str(e)}"})

    def do_OPTIONS(self):
        """Handle CORS preflight requests."""
        self.send_response(204)
        for name, value in CORS_HEADERS.items():
            self.send_header(name, value)
        self.end_headers()

    def _read_form(self) -> dict:
        """Read and validate the JSON form, raising BadRequest on rejection."""
        content_length = int(self.headers.get("Content-Length", 0))
        if content_length > MAX_BODY_SIZE:
            raise BadRequest(413, "Request body too large")

        try:
            data = json.loads(self.rfile.read(content_length))
        except json.JSONDecodeError:
            raise BadRequest(400, "Invalid JSON in request body")

        if not isinstance(data, dict):
            raise BadRequest(400, "Request body must be a JSON object")

        validation_error = validate_trip_form(data)
        if validation_error:
            raise BadRequest(400, validation_error)
        return data

    def _send_json_response(self, status_code: int, data: dict):
        body = json.dumps(data).encode()
        self.send_response(status_code)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Access-Control-Allow-Origin", CORS_HEADERS["Access-Control-Allow-Origin"])
        self.end_headers()
        self.wfile.write(body)
