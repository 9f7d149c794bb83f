"""Compiled workflow models.

This module defines the artifacts produced by the compiler:
- NodeKind: Executable task or grouping container
- WorkflowTask: One node of the compiled graph, addressed by index
- WorkflowTaskList: Tasks in index order
- Workflow: Compiled workflow handed to the scheduler

All models are frozen: sequences are tuples and configs are read-only
copies. Relatives are referenced by integer index only.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from flowgraph.config import Config


class NodeKind(str, Enum):
    """Classification of a compiled node.

    - TASK: Executes an operator (has `type` or an `operator>` key).
    - GROUP: Only groups and orders its subtasks.
    """

    TASK = "task"
    GROUP = "group"


class WorkflowTask(BaseModel):
    """Single node of a compiled workflow.

    Attributes:
        name: Key the node was declared under (the workflow name for the root).
        index: Position in discovery order; the node's only handle.
        parent_index: Index of the containing group, None for the root.
        upstream_indexes: Indexes of nodes that must complete first.
        kind: Task or group.
        config: Resolved configuration with defaults applied.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, validate_default=True)

    name: str
    index: int
    parent_index: int | None = None
    upstream_indexes: tuple[int, ...] = ()
    kind: NodeKind = NodeKind.TASK
    config: Config = Field(default_factory=Config)

    @field_validator("config")
    @classmethod
    def freeze_config(cls, config: Config) -> Config:
        return config.freeze()

    @model_validator(mode="after")
    def check(self) -> WorkflowTask:
        if not self.name:
            raise ValueError("Task name must not be empty")
        if self.index < 0:
            raise ValueError(f"Task index must not be negative: {self.index}")
        if self.parent_index is not None and self.parent_index >= self.index:
            raise ValueError(
                f"Parent index {self.parent_index} of task '{self.name}' "
                f"must be smaller than its index {self.index}"
            )
        for upstream in self.upstream_indexes:
            if upstream < 0 or upstream >= self.index:
                raise ValueError(
                    f"Upstream index {upstream} of task '{self.name}' "
                    f"must be in range 0..{self.index - 1}"
                )
        if len(set(self.upstream_indexes)) != len(self.upstream_indexes):
            raise ValueError(f"Duplicate upstream indexes on task '{self.name}'")
        return self

    @property
    def is_group(self) -> bool:
        return self.kind == NodeKind.GROUP

    @field_serializer("config")
    def serialize_config(self, config: Config) -> dict[str, Any]:
        return config.to_dict()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = self.model_dump(mode="json")
        data["is_group"] = self.is_group
        return data


class WorkflowTaskList(BaseModel):
    """Compiled tasks ordered by index."""

    model_config = ConfigDict(frozen=True)

    tasks: tuple[WorkflowTask, ...] = ()

    @model_validator(mode="after")
    def check(self) -> WorkflowTaskList:
        for position, task in enumerate(self.tasks):
            if task.index != position:
                raise ValueError(
                    f"Task '{task.name}' has index {task.index} at position {position}"
                )
        return self

    @classmethod
    def of(cls, tasks: Iterable[WorkflowTask]) -> WorkflowTaskList:
        return cls(tasks=tuple(tasks))

    def get(self, index: int) -> WorkflowTask:
        return self.tasks[index]

    def find(self, name: str) -> WorkflowTask | None:
        """Get the first task declared under a name.

        Args:
            name: Task name to find (subtask names keep their leading '+').

        Returns:
            The task if found, None otherwise.
        """
        for task in self.tasks:
            if task.name == name:
                return task
        return None

    def children_of(self, index: int) -> list[WorkflowTask]:
        """Get direct children of a task, in index order."""
        return [task for task in self.tasks if task.parent_index == index]

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[WorkflowTask]:  # type: ignore[override]
        return iter(self.tasks)

    def __getitem__(self, index: int) -> WorkflowTask:
        return self.tasks[index]


class Workflow(BaseModel):
    """Compiled workflow.

    Attributes:
        name: Workflow identifier.
        meta: The definition's `meta` subtree, carried through unmodified.
        tasks: Compiled tasks; tasks[0] is the root.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, validate_default=True)

    name: str
    meta: Config = Field(default_factory=Config)
    tasks: WorkflowTaskList = Field(default_factory=WorkflowTaskList)

    @field_validator("meta")
    @classmethod
    def freeze_meta(cls, meta: Config) -> Config:
        return meta.freeze()

    @property
    def root(self) -> WorkflowTask | None:
        return self.tasks[0] if len(self.tasks) else None

    @field_serializer("meta")
    def serialize_meta(self, meta: Config) -> dict[str, Any]:
        return meta.to_dict()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "meta": self.meta.to_dict(),
            "tasks": [task.to_dict() for task in self.tasks],
        }
