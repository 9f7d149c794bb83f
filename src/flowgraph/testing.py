"""Testing utilities for workflow definitions.

Provides helpers to write compact compiler tests:
- compile_yaml(): Compile an inline YAML definition
- task_names(): Names of all tasks in index order
- upstream_names(): Names of a task's upstreams
- edges(): All dependency edges as (task, upstream) name pairs

Usage:
    from flowgraph.testing import compile_yaml, upstream_names

    def test_sequential_chain():
        workflow = compile_yaml('''
        +a:
          sh>: echo a
        +b:
          sh>: echo b
        ''')
        assert upstream_names(workflow, "+b") == ["+a"]
"""

from __future__ import annotations

import textwrap

from flowgraph.workflow.compiler import WorkflowCompiler
from flowgraph.workflow.definition import parse_definition
from flowgraph.workflow.models import Workflow


def compile_yaml(text: str, name: str = "test") -> Workflow:
    """Compile an inline YAML definition (dedented first)."""
    config = parse_definition(textwrap.dedent(text))
    return WorkflowCompiler().compile(name, config)


def task_names(workflow: Workflow) -> list[str]:
    return [task.name for task in workflow.tasks]


def upstream_names(workflow: Workflow, name: str) -> list[str]:
    """Names of the upstreams of the first task declared under name.

    Raises:
        KeyError: If no task has that name.
    """
    task = workflow.tasks.find(name)
    if task is None:
        raise KeyError(name)
    return [workflow.tasks[i].name for i in task.upstream_indexes]


def edges(workflow: Workflow) -> list[tuple[str, str]]:
    """All dependency edges as (downstream, upstream) names, in index order."""
    return [
        (task.name, workflow.tasks[i].name)
        for task in workflow.tasks
        for i in task.upstream_indexes
    ]
