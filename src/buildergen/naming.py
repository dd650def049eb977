"""Names synthesized for the builder and its setters."""

from __future__ import annotations

from typing import Iterable

from .descriptors import ClassDescriptor, FieldDescriptor
from .errors import NameCollisionError

BUILDER_TYPE_NAME = "Builder"
SETTER_PREFIX = "with"


def capitalize(name: str) -> str:
    """Upper-case the first character only: ``userId`` -> ``UserId``."""
    return name[:1].upper() + name[1:]


def setter_name(field_name: str) -> str:
    return SETTER_PREFIX + capitalize(field_name)


def builder_type_name(cls: ClassDescriptor) -> str:
    """Name of the builder scoped to its enclosing class, e.g. ``Point.Builder``."""
    return f"{cls.name}.{BUILDER_TYPE_NAME}"


def check_collisions(cls: ClassDescriptor, fields: Iterable[FieldDescriptor]) -> None:
    """Raise ``NameCollisionError`` before anything is generated for ``cls``."""
    if BUILDER_TYPE_NAME in cls.member_names:
        raise NameCollisionError(BUILDER_TYPE_NAME, f"{cls.name}.{BUILDER_TYPE_NAME}")
    if BUILDER_TYPE_NAME == cls.name:
        raise NameCollisionError(builder_type_name(cls), cls.name)

    setters: dict[str, str] = {}
    for field in fields:
        name = setter_name(field.name)
        if name in setters:
            raise NameCollisionError(f"{name} (from field '{field.name}')", f"{name} (from field '{setters[name]}')")
        setters[name] = field.name
