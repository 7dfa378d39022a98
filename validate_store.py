#!/usr/bin/env python3
"""Check stored garage files against garage/schema.yaml."""
import json
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from jsonschema import Draft7Validator

from garage import load_settings

SCHEMA_PATH = Path(__file__).parent / "garage" / "schema.yaml"


def load_schema() -> dict:
    """Read the stored-garage JSON schema (kept in YAML)."""
    with open(SCHEMA_PATH, encoding="utf-8") as fp:
        return yaml.safe_load(fp)


def _error_lines(error) -> List[str]:
    lines = [f"Schema validation error: {error.message}"]
    if error.path:
        lines.append(f"  at path: {'.'.join(str(p) for p in error.path)}")
    return lines


def validate_text(text: str, schema: dict) -> List[str]:
    """
    Validate one stored garage blob.

    Every schema violation is reported, in document order. An empty list
    means the blob is valid.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return [f"JSON parse error: {e}"]
    validator = Draft7Validator(schema)
    problems = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    lines: List[str] = []
    for error in problems:
        lines.extend(_error_lines(error))
    return lines


def validate_store_file(filepath: Path, schema: dict) -> List[str]:
    try:
        text = filepath.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return [f"Error: {e}"]
    return validate_text(text, schema)


def main(argv: Optional[List[str]] = None) -> int:
    """Validate every ``*.json`` in the storage directory (argument or settings)."""
    args = sys.argv[1:] if argv is None else argv
    storage_dir = Path(args[0]) if args else load_settings().storage_dir
    storage_dir = storage_dir.expanduser()
    if not storage_dir.is_dir():
        print(f"Error: storage directory not found: {storage_dir}")
        return 1

    stored_files = sorted(storage_dir.glob("*.json"))
    if not stored_files:
        print(f"Warning: No stored garage files found in {storage_dir}")
        return 0

    schema = load_schema()
    failures = 0
    for path in stored_files:
        errors = validate_store_file(path, schema)
        if not errors:
            print(f"OK: {path.name}")
            continue
        failures += 1
        print(f"FAIL: {path.name} ({len(errors)} problem line(s))")
        for line in errors:
            print(f"  {line}")

    print(f"{len(stored_files) - failures}/{len(stored_files)} file(s) valid")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
