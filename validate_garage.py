#!/usr/bin/env python3
"""Validate a persisted garage document against the schema."""
import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import yaml
from jsonschema import validate, ValidationError

from fleet import FileStore, settings


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def validate_document(text: Optional[str], schema: dict) -> list[str]:
    """Validate a garage JSON document. Returns list of errors."""
    errors = []
    if text is None:
        return ["Error: no garage document found"]
    try:
        data = json.loads(text)
        validate(instance=data, schema=schema)
    except json.JSONDecodeError as e:
        errors.append(f"JSON parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    return errors


def validate_garage_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a garage document stored in a file. Returns list of errors."""
    try:
        text = Path(filepath).read_text(encoding="utf-8")
    except OSError as e:
        return [f"Error: {e}"]
    return validate_document(text, schema)


def main():
    """Validate the garage document of the configured store (or a given file)."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "document",
        type=Path,
        nargs="?",
        help="Garage JSON file (default: the configured store's document)",
    )
    args = parser.parse_args()

    schema = load_schema()
    if args.document:
        target = args.document
    else:
        target = FileStore(settings.DATA_DIR).path_for(settings.STORAGE_KEY)

    errors = validate_garage_file(target, schema)
    if errors:
        print(f"FAIL: {target}")
        for error in errors:
            print(f"  {error}")
        return 1

    print(f"OK: {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
