#!/usr/bin/env python3
"""Identify a component from a saved vision service response.

Usage:
    python scripts/identify_from_json.py response.json
    python scripts/identify_from_json.py response.json --json

The file holds {"Labels": [...], "TextDetections": [...]} as returned by the
label and text detection endpoints. Prints the summary, or the full result
with --json.
"""

import argparse
import json
import sys
from pathlib import Path

from partsight_mcp.identify import generate_identification_summary, interpret_detections


def main():
    parser = argparse.ArgumentParser(description="Identify a component from saved vision output")
    parser.add_argument("path", type=Path, help="JSON file with Labels and TextDetections")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    args = parser.parse_args()

    if not args.path.exists():
        print(f"Error: {args.path} not found")
        return 1

    try:
        data = json.loads(args.path.read_text())
        result = interpret_detections(data.get("Labels", []), data.get("TextDetections", []))
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
        print(f"Error: could not read {args.path.name}: {type(e).__name__}: {e}")
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(generate_identification_summary(result))

    return 0


if __name__ == "__main__":
    sys.exit(main())
