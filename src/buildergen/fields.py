"""Selection of the fields that take part in a builder."""

from __future__ import annotations

import logging

from .descriptors import ClassDescriptor, FieldDescriptor, TypeKind
from .errors import StructuralError

logger = logging.getLogger(__name__)


def select_qualifying_fields(cls: ClassDescriptor) -> tuple[FieldDescriptor, ...]:
    """Return the instance fields of ``cls`` that the builder mirrors, in declaration order.

    Static, transient, synthetic and explicitly excluded fields are skipped.
    Raises ``StructuralError`` when the descriptor is malformed.
    """
    _check_structure(cls)
    selected = tuple(field for field in cls.fields if _qualifies(field))
    logger.debug(
        "Selected %d of %d fields of %s", len(selected), len(cls.fields), cls.name
    )
    return selected


def _qualifies(field: FieldDescriptor) -> bool:
    return not (field.static or field.transient or field.synthetic or field.excluded)


def _check_structure(cls: ClassDescriptor) -> None:
    if not _is_identifier(cls.name):
        raise StructuralError(f"Class name {cls.name!r} is not a valid identifier.")

    seen_parameters: set[str] = set()
    for parameter in cls.type_parameters:
        if not _is_identifier(parameter):
            raise StructuralError(f"Type parameter {parameter!r} of {cls.name} is not a valid identifier.")
        if parameter in seen_parameters:
            raise StructuralError(f"Type parameter '{parameter}' is declared twice on {cls.name}.")
        seen_parameters.add(parameter)

    seen_fields: set[str] = set()
    for field in cls.fields:
        if not _is_identifier(field.name):
            raise StructuralError(f"Field name {field.name!r} of {cls.name} is not a valid identifier.")
        if field.name in seen_fields:
            raise StructuralError(f"Field '{field.name}' is declared twice on {cls.name}.")
        if field.type is None or not field.type.name:
            raise StructuralError(f"Field '{field.name}' of {cls.name} has no declared type.")
        if field.type.kind is TypeKind.ARRAY and field.type.element is None:
            raise StructuralError(f"Array field '{field.name}' of {cls.name} has no element type.")
        seen_fields.add(field.name)


def _is_identifier(name: str) -> bool:
    return bool(name) and name.replace("$", "_").isidentifier()
