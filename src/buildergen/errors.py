"""Exceptions raised while generating or driving a builder."""

from __future__ import annotations

from typing import Any, Optional


class BuilderGenError(Exception):
    """Base class for every buildergen error."""


class GenerationError(BuilderGenError):
    """Generation for a class was aborted; nothing was produced."""


class StructuralError(GenerationError):
    """The class descriptor is internally inconsistent."""


class InvalidConstraintError(GenerationError):
    """A constraint does not fit its field's type or contradicts itself."""

    def __init__(self, field_name: str, constraint: Any, reason: str) -> None:
        self.field_name = field_name
        self.constraint = constraint
        self.reason = reason
        super().__init__(f"Invalid {constraint.kind} constraint on field '{field_name}': {reason}")


class NameCollisionError(GenerationError):
    """A synthesized name clashes with a name that already exists."""

    def __init__(self, synthesized: str, existing: str) -> None:
        self.synthesized = synthesized
        self.existing = existing
        super().__init__(f"Generated name '{synthesized}' collides with existing member '{existing}'")


class ConstraintViolation(BuilderGenError, ValueError):
    """A value handed to a builder broke one of its field's rules."""

    def __init__(self, field_name: str, kind: str, message: str, value: Optional[Any] = None) -> None:
        self.field_name = field_name
        self.kind = kind
        self.value = value
        super().__init__(message)


class BuilderConsumedError(BuilderGenError, RuntimeError):
    """The builder already produced its instance and no longer accepts calls."""
