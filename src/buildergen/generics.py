"""Propagation of the source class's type parameters onto its builder."""

from __future__ import annotations

from typing import Sequence

from .descriptors import ClassDescriptor
from .naming import BUILDER_TYPE_NAME

DIAMOND = "<>"


def propagate(cls: ClassDescriptor) -> tuple[str, ...]:
    """The builder declares exactly the source class's type parameters."""
    return tuple(cls.type_parameters)


def has_type_parameters(cls: ClassDescriptor) -> bool:
    return bool(cls.type_parameters)


def parameterize(name: str, parameters: Sequence[str]) -> str:
    """``Point`` with ``(T, U)`` gives ``Point<T, U>``; no parameters leaves the bare name."""
    if not parameters:
        return name
    return f"{name}<{', '.join(parameters)}>"


def diamond(cls: ClassDescriptor) -> str:
    """Argument-inference marker for instantiations, empty for non-generic classes."""
    return DIAMOND if has_type_parameters(cls) else ""


def source_reference(cls: ClassDescriptor) -> str:
    """Return type of ``build``."""
    return parameterize(cls.name, propagate(cls))


def builder_reference(cls: ClassDescriptor) -> str:
    """Return type of ``create`` and of every setter."""
    return parameterize(BUILDER_TYPE_NAME, propagate(cls))
