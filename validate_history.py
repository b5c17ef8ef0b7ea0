#!/usr/bin/env python3
"""Validate a sample log store file against the schema."""
import json
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError

from samples import HISTORY_KEY
from samples import config


def load_schema() -> dict:
    """Load the JSON schemas from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def validate_entries(entries: list, schema: dict) -> list[str]:
    """Check each logged sample. Returns list of errors."""
    errors = []
    for index, entry in enumerate(entries):
        try:
            validate(instance=entry, schema=schema["entry"])
        except ValidationError as e:
            errors.append(f"Entry {index}: {e.message}")
    return errors


def validate_store_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single store file. Returns list of errors."""
    errors = []
    try:
        with open(filepath, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        validate(instance=data, schema=schema["store"])
        raw = data.get(HISTORY_KEY)
        if raw is not None:
            entries = json.loads(raw)
            if not isinstance(entries, list):
                errors.append("History error: sample_history is not a JSON list")
            else:
                errors.extend(validate_entries(entries, schema))
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except json.JSONDecodeError as e:
        errors.append(f"History JSON parse error: {e}")
    except Exception as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv=None):
    """Validate the store file given on the command line (or the default)."""
    argv = sys.argv[1:] if argv is None else argv
    schema = load_schema()
    filepath = Path(argv[0]) if argv else config.store_path()

    if not filepath.exists():
        print(f"Error: store file not found: {filepath}")
        return 1

    errors = validate_store_file(filepath, schema)
    if errors:
        print(f"FAIL: {filepath.name}")
        for error in errors:
            print(f"  {error}")
        return 1

    print(f"OK: {filepath.name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
