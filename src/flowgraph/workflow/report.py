"""Task report: what a task hands back to the engine after it runs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from flowgraph.config import Config


class TaskReport(BaseModel):
    """Immutable result record of one task execution.

    Attributes:
        inputs: Resources the task consumed.
        outputs: Resources the task produced.
        carry_params: Parameters passed on to downstream tasks.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, validate_default=True)

    inputs: tuple[Config, ...] = ()
    outputs: tuple[Config, ...] = ()
    carry_params: Config = Field(default_factory=Config)

    @field_validator("inputs", "outputs")
    @classmethod
    def freeze_resources(cls, resources: tuple[Config, ...]) -> tuple[Config, ...]:
        return tuple(resource.freeze() for resource in resources)

    @field_validator("carry_params")
    @classmethod
    def freeze_carry_params(cls, carry_params: Config) -> Config:
        return carry_params.freeze()

    @classmethod
    def empty(cls) -> TaskReport:
        """Report of a task that consumed, produced and carried nothing."""
        return cls()

    @field_serializer("inputs", "outputs")
    def serialize_resources(self, resources: tuple[Config, ...]) -> list[dict[str, Any]]:
        return [resource.to_dict() for resource in resources]

    @field_serializer("carry_params")
    def serialize_carry_params(self, carry_params: Config) -> dict[str, Any]:
        return carry_params.to_dict()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return self.model_dump(mode="json")
