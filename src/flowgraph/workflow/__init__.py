"""Workflow compilation for flowgraph.

This module provides:
- WorkflowCompiler: Lower a nested definition into an indexed task graph
- Workflow/WorkflowTask/WorkflowTaskList: The compiled, immutable artifacts
- load_definition/compile_file: Read YAML definitions from disk
- TaskReport: Result record a task hands back after running

Example workflow YAML:
    meta:
      owner: data-team
    default:
      retry: 2
    +extract:
      sh>: ./extract.sh
    +load:
      parallel: true
      +users:
        sh>: ./load.sh users
      +orders:
        sh>: ./load.sh orders
        after: [+users]
"""

from flowgraph.workflow.compiler import WorkflowCompiler
from flowgraph.workflow.definition import (
    compile_file,
    load_definition,
    parse_definition,
    workflow_name_for,
)
from flowgraph.workflow.models import (
    NodeKind,
    Workflow,
    WorkflowTask,
    WorkflowTaskList,
)
from flowgraph.workflow.report import TaskReport

__all__ = [
    # Compiler
    "WorkflowCompiler",
    # Definitions
    "compile_file",
    "load_definition",
    "parse_definition",
    "workflow_name_for",
    # Models
    "NodeKind",
    "Workflow",
    "WorkflowTask",
    "WorkflowTaskList",
    # Reports
    "TaskReport",
]
