"""Workflow compiler: lowers a nested definition into an indexed task graph.

A definition is a Config tree. Keys starting with '+' declare ordered
subtasks. A node that has a `type` key or an operator key (`sh>`,
`call>`, `py>=`, ...) is a task; any other node groups its subtasks.

    +prepare:
      sh>: ./prepare.sh
    +load:
      parallel: true
      +users:
        sh>: ./load.sh users
      +orders:
        sh>: ./load.sh orders
        after: [+users]

Every node is appended to one flat list in pre-order, so a node's index
is fixed when it is discovered. Parents and upstreams are always
discovered first, which keeps the compiled graph acyclic.

Usage:
    workflow = WorkflowCompiler().compile("daily", config)
    for task in workflow.tasks:
        print(task.index, task.name, task.upstream_indexes)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from flowgraph.config import Config
from flowgraph.errors import ConfigError
from flowgraph.workflow.models import NodeKind, Workflow, WorkflowTask, WorkflowTaskList

logger = logging.getLogger(__name__)

SUBTASK_PREFIX = "+"
OPERATOR_SUFFIXES = (">", ">=")
TYPE_KEYS = ("type", "type=")


class WorkflowCompiler:
    """Compile workflow definitions into Workflow artifacts.

    The compiler holds no state between calls; every compilation gets its
    own context.
    """

    def compile(self, name: str, config: Config | Mapping[str, Any]) -> Workflow:
        """Compile a workflow definition.

        Args:
            name: Workflow name, also used as the root task name.
            config: Root definition.

        Returns:
            Compiled Workflow with the definition's `meta` subtree.

        Raises:
            ConfigError: If the definition is structurally invalid.
        """
        config = _as_config(config)
        tasks = self.compile_tasks(name, config)
        workflow = Workflow(
            name=name,
            meta=config.get_nested_or_empty("meta"),
            tasks=tasks,
        )
        logger.info(f"Compiled workflow '{name}' into {len(tasks)} tasks")
        return workflow

    def compile_tasks(
        self, name: str, config: Config | Mapping[str, Any]
    ) -> WorkflowTaskList:
        """Compile a definition into its task list only."""
        return _CompileContext().compile(name, _as_config(config))


class _TaskBuilder:
    """Mutable node used while the tree is being walked."""

    def __init__(
        self,
        index: int,
        parent: _TaskBuilder | None,
        name: str,
        kind: NodeKind,
        config: Config,
    ) -> None:
        self.index = index
        self.parent = parent
        self.name = name
        self.kind = kind
        self.config = config
        self.children: list[_TaskBuilder] = []
        self.upstreams: list[_TaskBuilder] = []
        if parent is not None:
            parent.children.append(self)

    def add_upstream(self, upstream: _TaskBuilder) -> None:
        if upstream not in self.upstreams:
            self.upstreams.append(upstream)

    def build(self) -> WorkflowTask:
        return WorkflowTask(
            name=self.name,
            index=self.index,
            parent_index=self.parent.index if self.parent is not None else None,
            upstream_indexes=tuple(up.index for up in self.upstreams),
            kind=self.kind,
            config=self.config,
        )


class _CompileContext:
    """Owns the builder list for one compilation."""

    def __init__(self) -> None:
        self.tasks: list[_TaskBuilder] = []

    def compile(self, name: str, config: Config) -> WorkflowTaskList:
        self.collect(None, Config(), name, config)
        try:
            return WorkflowTaskList.of([tb.build() for tb in self.tasks])
        except ValidationError as e:
            raise ConfigError(f"Invalid task graph: {e}") from e

    def collect(
        self,
        parent: _TaskBuilder | None,
        parent_default_config: Config,
        name: str,
        original_config: Config,
    ) -> _TaskBuilder:
        this_default_config = original_config.get_nested_or_empty("default")
        default_config = parent_default_config.deep_copy().set_all(this_default_config)
        config = original_config.deep_copy().set_all_missing(default_config)

        # +key: {...}
        subtask_configs = [
            (key, config.get_nested_or_empty(key))
            for key in config.keys()
            if key.startswith(SUBTASK_PREFIX)
        ]
        for key, _ in subtask_configs:
            config.remove(key)

        if _is_task(config):
            if subtask_configs:
                raise ConfigError(
                    f"A task can't have subtasks: {original_config.to_dict()}",
                    config=original_config,
                )
            return self._add_task(parent, name, NodeKind.TASK, config)

        tb = self._add_task(parent, name, NodeKind.GROUP, config)
        subtasks = [
            self.collect(tb, default_config, key, subtask_config)
            for key, subtask_config in subtask_configs
        ]

        if config.get_bool("parallel", False):
            # after: is valid only when parallel: is true
            names: dict[str, _TaskBuilder] = {}
            for subtask in subtasks:
                for up_name in subtask.config.get_list_or_empty("after"):
                    up = names.get(up_name)
                    if up is None:
                        raise ConfigError(
                            f"Dependency task '{up_name}' does not exist",
                            config=subtask.config,
                        )
                    subtask.add_upstream(up)
                names[subtask.name] = subtask
        else:
            if config.has("after"):
                raise ConfigError(
                    "Option 'after' is valid only if 'parallel' is true",
                    config=config,
                )
            for before, subtask in zip(subtasks, subtasks[1:]):
                subtask.add_upstream(before)

        return tb

    def _add_task(
        self,
        parent: _TaskBuilder | None,
        name: str,
        kind: NodeKind,
        config: Config,
    ) -> _TaskBuilder:
        tb = _TaskBuilder(len(self.tasks), parent, name, kind, config)
        self.tasks.append(tb)
        logger.debug(
            f"Added {kind.value} '{name}' at index {tb.index}"
            + (f" under '{parent.name}'" if parent is not None else "")
        )
        return tb


def _is_task(config: Config) -> bool:
    if any(config.has(key) for key in TYPE_KEYS):
        return True
    return any(key.endswith(OPERATOR_SUFFIXES) for key in config.keys())


def _as_config(config: Config | Mapping[str, Any]) -> Config:
    if isinstance(config, Config):
        return config
    return Config(config)
