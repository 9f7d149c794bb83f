"""Serialization of compiled workflows to JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from flowgraph.schema import validate_compiled
from flowgraph.workflow.models import Workflow


def render_workflow(
    workflow: Workflow,
    *,
    check: bool = True,
    schema: dict[str, Any] | None = None,
) -> str:
    """Render a compiled workflow as indented JSON.

    Args:
        workflow: Compiled workflow.
        check: Validate the serialized form before rendering it.
        schema: Schema to validate against (default: COMPILED_WORKFLOW_SCHEMA).

    Raises:
        SchemaValidationError: If check is set and the artifact is malformed.
    """
    data = workflow.to_dict()
    if check:
        validate_compiled(data, schema)
    return json.dumps(data, indent=2, default=str)


def write_workflow(
    dest: str | Path,
    workflow: Workflow,
    *,
    check: bool = True,
    schema: dict[str, Any] | None = None,
) -> Path:
    """Write a compiled workflow to a JSON file.

    Returns:
        The path written.
    """
    text = render_workflow(workflow, check=check, schema=schema)
    dest_path = Path(dest)
    dest_path.parent.mkdir(parents=True, exist_ok=True)

    with open(dest_path, "w", encoding="utf-8") as f:
        f.write(text)
        f.write("\n")  # Trailing newline for POSIX compliance
    return dest_path
