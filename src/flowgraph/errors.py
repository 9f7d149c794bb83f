"""Typed exceptions for flowgraph.

All flowgraph errors inherit from FlowgraphError.
Structural problems in a workflow definition are always reported as
ConfigError, whichever stage of compilation detected them.
"""

from __future__ import annotations

from typing import Any


class FlowgraphError(Exception):
    """Base exception for all flowgraph errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class ConfigError(FlowgraphError):
    """Workflow definition is structurally invalid.

    Attributes:
        config: The offending configuration subtree, if known.
    """

    def __init__(self, message: str, *, config: Any = None):
        super().__init__(message)
        self.config = config


class DefinitionError(FlowgraphError):
    """Workflow definition file could not be parsed."""

    def __init__(self, message: str, *, path: str | None = None):
        context: dict[str, Any] = {}
        if path:
            context["path"] = path
        super().__init__(message, context=context)
        self.path = path


class SchemaValidationError(FlowgraphError):
    """A serialized artifact does not match its JSON schema.

    Attributes:
        errors: One line per violation, ordered by location in the artifact.
    """

    def __init__(self, message: str, errors: list[str], *, schema: str | None = None):
        super().__init__(message, context={"schema": schema} if schema else None)
        self.errors = errors
