"""Resolution of field constraints into executable validation rules.

Every constraint annotation on a field becomes one ``ValidationRule``: a
neutral predicate expression for code emitters, a failure message, and a
Python predicate so the same rule can be enforced by ``buildergen.runtime``.
Constraints that do not fit the field's declared type abort generation with
``InvalidConstraintError``.
"""

from __future__ import annotations

import json
import logging
import math
import numbers
import re
from collections.abc import Sized
from decimal import Decimal
from dataclasses import dataclass, field
from typing import Any, Callable

from .descriptors import (
    ClassDescriptor,
    Constraint,
    FieldDescriptor,
    NonEmpty,
    NonNull,
    Pattern,
    Range,
    SizeBound,
    TypeKind,
)
from .errors import ConstraintViolation, InvalidConstraintError, StructuralError

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]


@dataclass(frozen=True, slots=True)
class ValidationRule:
    """A constraint bound to one field."""

    field_name: str
    constraint: Constraint
    expression: str
    message: str
    predicate: Predicate = field(repr=False, compare=False)

    @property
    def kind(self) -> str:
        return self.constraint.kind

    def holds(self, value: Any) -> bool:
        return self.predicate(value)

    def check(self, value: Any) -> None:
        """Raise ``ConstraintViolation`` unless ``value`` satisfies the rule."""
        if not self.predicate(value):
            raise ConstraintViolation(
                self.field_name,
                self.kind,
                f"{self.message} (got {value!r})",
                value,
            )


def resolve_constraints(cls: ClassDescriptor, field_descriptor: FieldDescriptor) -> tuple[ValidationRule, ...]:
    """Resolve each constraint of ``field_descriptor`` in annotation order."""
    rules = []
    for constraint in field_descriptor.constraints:
        resolver = _RESOLVERS.get(type(constraint))
        if resolver is None:
            raise StructuralError(
                f"Field '{field_descriptor.name}' of {cls.name} carries an unsupported constraint {constraint!r}."
            )
        rules.append(resolver(field_descriptor, constraint))
    logger.debug("Resolved %d rule(s) for %s.%s", len(rules), cls.name, field_descriptor.name)
    return tuple(rules)


def _resolve_non_null(fd: FieldDescriptor, constraint: NonNull) -> ValidationRule:
    if not fd.type.nullable:
        raise InvalidConstraintError(
            fd.name, constraint, f"type '{fd.type.render()}' can never be null"
        )
    return ValidationRule(
        field_name=fd.name,
        constraint=constraint,
        expression=f"{fd.name} != null",
        message=f"{fd.name} must not be null",
        predicate=lambda value: value is not None,
    )


def _resolve_range(fd: FieldDescriptor, constraint: Range) -> ValidationRule:
    if not fd.type.numeric:
        raise InvalidConstraintError(
            fd.name, constraint, f"range bounds need a numeric type, not '{fd.type.render()}'"
        )
    low, high = constraint.min, constraint.max
    if low is None and high is None:
        raise InvalidConstraintError(fd.name, constraint, "neither a minimum nor a maximum is given")
    for bound in (low, high):
        if bound is not None and (not _is_number(bound) or _is_nan(bound)):
            raise InvalidConstraintError(fd.name, constraint, f"bound {bound!r} is not a number")
    if low is not None and high is not None:
        if low > high:
            raise InvalidConstraintError(fd.name, constraint, f"minimum {low} is greater than maximum {high}")
        if low == high and (constraint.min_exclusive or constraint.max_exclusive):
            raise InvalidConstraintError(fd.name, constraint, f"exclusive bounds leave no value between {low} and {high}")

    checks = []
    if low is not None:
        checks.append(f"{fd.name} {'>' if constraint.min_exclusive else '>='} {low}")
    if high is not None:
        checks.append(f"{fd.name} {'<' if constraint.max_exclusive else '<='} {high}")

    if low is not None and high is not None:
        opening = "(" if constraint.min_exclusive else "["
        closing = ")" if constraint.max_exclusive else "]"
        message = f"{fd.name} must be within {opening}{low}, {high}{closing}"
    elif low is not None:
        message = f"{fd.name} must be {'>' if constraint.min_exclusive else '>='} {low}"
    else:
        message = f"{fd.name} must be {'<' if constraint.max_exclusive else '<='} {high}"

    def predicate(value: Any) -> bool:
        if value is None:
            return True
        if not _is_number(value) or _is_nan(value):
            return False
        if low is not None and (value <= low if constraint.min_exclusive else value < low):
            return False
        if high is not None and (value >= high if constraint.max_exclusive else value > high):
            return False
        return True

    return ValidationRule(
        field_name=fd.name,
        constraint=constraint,
        expression=" && ".join(checks),
        message=message,
        predicate=predicate,
    )


def _resolve_non_empty(fd: FieldDescriptor, constraint: NonEmpty) -> ValidationRule:
    if not fd.type.sized:
        raise InvalidConstraintError(
            fd.name, constraint, f"only text, arrays and sequences can be empty, not '{fd.type.render()}'"
        )
    return ValidationRule(
        field_name=fd.name,
        constraint=constraint,
        expression=f"{fd.name} != null && size({fd.name}) > 0",
        message=f"{fd.name} must not be empty",
        predicate=lambda value: isinstance(value, Sized) and len(value) > 0,
    )


def _resolve_size(fd: FieldDescriptor, constraint: SizeBound) -> ValidationRule:
    if not fd.type.sized:
        raise InvalidConstraintError(
            fd.name, constraint, f"size bounds need text, an array or a sequence, not '{fd.type.render()}'"
        )
    low = constraint.min if constraint.min is not None else 0
    high = constraint.max
    for bound in (low, high):
        if bound is None:
            continue
        if not isinstance(bound, int) or isinstance(bound, bool):
            raise InvalidConstraintError(fd.name, constraint, f"size bound {bound!r} is not an integer")
        if bound < 0:
            raise InvalidConstraintError(fd.name, constraint, f"size bound {bound} is negative")
    if high is not None and low > high:
        raise InvalidConstraintError(fd.name, constraint, f"minimum size {low} is greater than maximum size {high}")

    checks = [f"size({fd.name}) >= {low}"]
    if high is not None:
        checks.append(f"size({fd.name}) <= {high}")
        message = f"size of {fd.name} must be between {low} and {high}"
    else:
        message = f"size of {fd.name} must be at least {low}"

    def predicate(value: Any) -> bool:
        if value is None:
            return True
        if not isinstance(value, Sized):
            return False
        size = len(value)
        return size >= low and (high is None or size <= high)

    return ValidationRule(
        field_name=fd.name,
        constraint=constraint,
        expression=" && ".join(checks),
        message=message,
        predicate=predicate,
    )


def _resolve_pattern(fd: FieldDescriptor, constraint: Pattern) -> ValidationRule:
    if fd.type.kind is not TypeKind.TEXT:
        raise InvalidConstraintError(
            fd.name, constraint, f"patterns apply to text only, not '{fd.type.render()}'"
        )
    try:
        compiled = re.compile(constraint.regex)
    except re.error as exc:
        raise InvalidConstraintError(fd.name, constraint, f"pattern {constraint.regex!r} does not parse: {exc}") from exc

    def predicate(value: Any) -> bool:
        if value is None:
            return True
        return isinstance(value, str) and compiled.fullmatch(value) is not None

    return ValidationRule(
        field_name=fd.name,
        constraint=constraint,
        expression=f"matches({fd.name}, {json.dumps(constraint.regex)})",
        message=f"{fd.name} must match pattern {constraint.regex}",
        predicate=predicate,
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (numbers.Real, Decimal)) and not isinstance(value, bool)


def _is_nan(value: Any) -> bool:
    if isinstance(value, Decimal):
        return value.is_nan()
    return math.isnan(value)


_RESOLVERS: dict[type, Callable[[FieldDescriptor, Any], ValidationRule]] = {
    NonNull: _resolve_non_null,
    Range: _resolve_range,
    NonEmpty: _resolve_non_empty,
    SizeBound: _resolve_size,
    Pattern: _resolve_pattern,
}

