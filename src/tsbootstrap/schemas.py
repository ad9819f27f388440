"""JSON schema loading and validation."""

from __future__ import annotations

import json
from functools import cache
from pathlib import Path
from typing import Any

import jsonschema

from .exceptions import BootstrapError

SCHEMA_DIR = Path(__file__).parent / "schemas"


@cache
def load_schema(schema_name: str) -> dict[str, Any]:
    """Load and cache a bundled JSON schema by name."""
    schema_path = SCHEMA_DIR / f"{schema_name}.schema.json"
    try:
        with schema_path.open(encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        msg = f"Failed to load schema {schema_name}: {e}"
        raise BootstrapError(msg) from e


def validate_against_schema(
    data: Any,
    schema_name: str,
    error_cls: type[BootstrapError],
    source: Path | str,
) -> None:
    """Validate ``data`` against a bundled schema.

    Args:
        data: Parsed document
        schema_name: Schema file stem, e.g. ``manifest``
        error_cls: Exception raised on failure
        source: File the data came from, used in the message

    Raises:
        BootstrapError: Instance of ``error_cls`` when validation fails
    """
    try:
        jsonschema.validate(data, load_schema(schema_name))
    except jsonschema.ValidationError as e:
        location = "/".join(str(part) for part in e.absolute_path) or "<root>"
        msg = f"Invalid {source} at {location}: {e.message}"
        raise error_cls(
            msg,
            details={"path": list(e.absolute_path), "schema": schema_name},
        ) from e
