"""Workflow definition loading.

Definitions are YAML documents (JSON is accepted as a YAML subset).
PyYAML keeps mapping order, which is the subtask order of the workflow.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from flowgraph.config import Config
from flowgraph.errors import DefinitionError
from flowgraph.workflow.compiler import WorkflowCompiler
from flowgraph.workflow.models import Workflow

logger = logging.getLogger(__name__)


def parse_definition(text: str, source: str = "<string>") -> Config:
    """Parse a workflow definition from YAML text.

    Args:
        text: YAML document.
        source: Where the text came from, used in error messages.

    Returns:
        Root Config of the definition. An empty document yields an empty Config.

    Raises:
        DefinitionError: If the YAML is invalid or not a mapping.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DefinitionError(f"Invalid YAML: {e}", path=source) from e

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise DefinitionError(
            f"Workflow definition must be a YAML object, got {type(data).__name__}",
            path=source,
        )
    return Config(data)


def load_definition(path: str | Path) -> Config:
    """Load a workflow definition from a UTF-8 encoded YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        DefinitionError: If the file is not UTF-8, the YAML is invalid or
            not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Workflow file not found: {path}")

    logger.debug(f"Loading workflow definition from {path}")
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise DefinitionError(f"Definition is not valid UTF-8: {e}", path=str(path)) from e
    return parse_definition(text, source=str(path))


def workflow_name_for(path: str | Path) -> str:
    """Default workflow name for a definition file: its file stem."""
    return Path(path).stem


def compile_file(path: str | Path, name: str | None = None) -> Workflow:
    """Load and compile a workflow definition file.

    Args:
        path: Path to the YAML file.
        name: Workflow name (default: file stem).

    Returns:
        Compiled Workflow.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        DefinitionError: If the file cannot be parsed.
        ConfigError: If the definition is structurally invalid.
    """
    config = load_definition(path)
    return WorkflowCompiler().compile(name or workflow_name_for(path), config)
