"""flowgraph: compile nested workflow definitions into indexed task graphs."""

__version__ = "0.1.0"

from flowgraph.config import Config
from flowgraph.errors import ConfigError, DefinitionError, FlowgraphError, SchemaValidationError
from flowgraph.workflow import (
    NodeKind,
    TaskReport,
    Workflow,
    WorkflowCompiler,
    WorkflowTask,
    WorkflowTaskList,
    compile_file,
    load_definition,
    parse_definition,
)

__all__ = [
    # Core
    "Config",
    "WorkflowCompiler",
    # Artifacts
    "NodeKind",
    "TaskReport",
    "Workflow",
    "WorkflowTask",
    "WorkflowTaskList",
    # Loading
    "compile_file",
    "load_definition",
    "parse_definition",
    # Errors
    "ConfigError",
    "DefinitionError",
    "FlowgraphError",
    "SchemaValidationError",
]
