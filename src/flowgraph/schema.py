"""JSON Schema for compiled workflow artifacts.

The compiled form of a workflow (Workflow.to_dict()) is checked against
COMPILED_WORKFLOW_SCHEMA before it is written anywhere. Callers that
publish artifacts to a stricter contract can load their own schema file
with load_schema() and check against that instead.

Usage:
    schema = load_schema("schemas/workflow.json")
    validate_compiled(workflow.to_dict(), schema)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator, SchemaError
from jsonschema import ValidationError as JsonSchemaViolation

from flowgraph.errors import DefinitionError, SchemaValidationError

logger = logging.getLogger(__name__)

COMPILED_WORKFLOW_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Compiled workflow",
    "type": "object",
    "required": ["name", "meta", "tasks"],
    "additionalProperties": False,
    "properties": {
        "name": {"type": "string"},
        "meta": {"type": "object"},
        "tasks": {
            "type": "array",
            "items": {
                "type": "object",
                "required": [
                    "name",
                    "index",
                    "parent_index",
                    "upstream_indexes",
                    "kind",
                    "is_group",
                    "config",
                ],
                "additionalProperties": False,
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "index": {"type": "integer", "minimum": 0},
                    "parent_index": {"type": ["integer", "null"], "minimum": 0},
                    "upstream_indexes": {
                        "type": "array",
                        "items": {"type": "integer", "minimum": 0},
                        "uniqueItems": True,
                    },
                    "kind": {"enum": ["task", "group"]},
                    "is_group": {"type": "boolean"},
                    "config": {"type": "object"},
                },
            },
        },
    },
}


def load_schema(path: str | Path) -> dict[str, Any]:
    """Read a draft 2020-12 JSON schema from a UTF-8 file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        DefinitionError: If the file is not JSON, not an object, or not a
            valid schema.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    try:
        schema = json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DefinitionError(f"Schema is not valid JSON: {e}", path=str(path)) from e

    if not isinstance(schema, dict):
        raise DefinitionError(
            f"Schema must be a JSON object, got {type(schema).__name__}", path=str(path)
        )
    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as e:
        raise DefinitionError(f"Invalid JSON schema: {e.message}", path=str(path)) from e

    logger.debug(f"Loaded schema '{schema.get('title', path.stem)}' from {path}")
    return schema


def validate(instance: Any, schema: dict[str, Any]) -> None:
    """Check instance against schema, collecting every violation.

    Raises:
        SchemaValidationError: With one entry per violation, sorted by the
            JSON path of the offending value.
    """
    violations = sorted(
        Draft202012Validator(schema).iter_errors(instance),
        key=lambda v: v.json_path,
    )
    if not violations:
        return
    raise SchemaValidationError(
        f"{len(violations)} schema violation(s)",
        [_describe(v) for v in violations],
        schema=schema.get("title"),
    )


def validate_compiled(data: dict[str, Any], schema: dict[str, Any] | None = None) -> None:
    """Check a serialized compiled workflow, by default against COMPILED_WORKFLOW_SCHEMA."""
    validate(data, COMPILED_WORKFLOW_SCHEMA if schema is None else schema)


def _describe(violation: JsonSchemaViolation) -> str:
    return f"{violation.json_path}: {violation.message}"
