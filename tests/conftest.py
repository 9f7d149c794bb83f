"""Pytest fixtures for flowgraph tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from flowgraph.workflow.compiler import WorkflowCompiler

SAMPLE_WORKFLOW_YAML = """\
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
+report:
  type: notify
  message: done
"""


@pytest.fixture
def compiler() -> WorkflowCompiler:
    """Create a fresh compiler."""
    return WorkflowCompiler()


@pytest.fixture
def sample_definition() -> dict[str, Any]:
    """Nested definition with sequential and parallel groups."""
    return {
        "meta": {"owner": "data-team"},
        "default": {"retry": 2},
        "+extract": {"sh>": "./extract.sh"},
        "+load": {
            "parallel": True,
            "+users": {"sh>": "./load.sh users"},
            "+orders": {"sh>": "./load.sh orders", "after": ["+users"]},
        },
        "+report": {"type": "notify", "message": "done"},
    }


@pytest.fixture
def sample_workflow_file(tmp_path: Path) -> Path:
    """Write the sample definition as a YAML file."""
    path = tmp_path / "daily.yaml"
    path.write_text(SAMPLE_WORKFLOW_YAML)
    return path


@pytest.fixture
def invalid_workflow_file(tmp_path: Path) -> Path:
    """YAML file whose task declares a subtask."""
    path = tmp_path / "broken.yaml"
    path.write_text("+a:\n  sh>: echo a\n  +nested:\n    sh>: echo nested\n")
    return path
