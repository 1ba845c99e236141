#!/usr/bin/env python3
"""
Calculate a trip from a JSON request file.

Usage: python3 calculate_trip.py <request_file.json>

Reads the calculator form as JSON and writes the trip breakdown as JSON
to stdout. Errors are reported as {"error": ...} with exit status 1.
"""

import json
import sys
from pathlib import Path

from trip_form import calculate_trip

USAGE = "Usage: calculate_trip.py <request_file.json>"


def _fail(message: str) -> None:
    print(json.dumps({"error": message}))
    sys.exit(1)


def load_request(path: Path) -> dict:
    """Read the form JSON, raising ValueError for anything but an object."""
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        raise ValueError(f"Request file not found: {path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in request file: {e}")

    if not isinstance(data, dict):
        raise ValueError("Request must be a JSON object")
    return data


def main() -> None:
    if len(sys.argv) != 2:
        _fail(USAGE)

    try:
        output = calculate_trip(load_request(Path(sys.argv[1])))
    except ValueError as e:
        _fail(str(e))
    except Exception as e:
        _fail(f"Trip calculation failed: {e}")
    else:
        print(json.dumps(output))


if __name__ == "__main__":
    main()
