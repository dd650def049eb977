"""Executable Python builders derived from a ``BuilderSpec``.

``materialize`` turns the structural description into a real class so the
rules a spec carries can be exercised without a code emitter::

    PointBuilder = materialize(assemble(point_descriptor), Point)
    point = PointBuilder.create().withX(1).withY(2).build()

Builders are single-use: once ``build`` has returned, further setter calls
and builds raise ``BuilderConsumedError``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, ClassVar, Optional

from .assembler import BuilderSpec, MethodSpec
from .constraints import ValidationRule
from .errors import BuilderConsumedError, NameCollisionError

logger = logging.getLogger(__name__)

_CREATE_TOKEN = object()

# Attributes of RuntimeBuilder that a field read through __getattr__ would never reach.
RESERVED_FIELD_NAMES = frozenset({"built", "spec", "values", "validate", "build", "create"})


class RuntimeBuilder:
    """Base class of every materialized builder."""

    __slots__ = ("_values", "_built")

    spec: ClassVar[BuilderSpec]
    _handoff: ClassVar[Callable[["RuntimeBuilder"], Any]]

    def __init__(self, _token: object = None) -> None:
        if _token is not _CREATE_TOKEN:
            raise TypeError(f"{type(self).__name__} instances are obtained through create().")
        self._values: dict[str, Any] = {field.name: None for field in self.spec.fields}
        self._built = False

    @classmethod
    def create(cls) -> "RuntimeBuilder":
        return cls(_CREATE_TOKEN)

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("_") and name in self._values:
            return self._values[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    @property
    def built(self) -> bool:
        return self._built

    def values(self) -> dict[str, Any]:
        """Accumulated field values in declaration order."""
        return dict(self._values)

    def validate(self) -> None:
        """Re-check every rule against the current values, in field order."""
        for rule in self.spec.validate.rules:
            rule.check(self._values[rule.field_name])

    def build(self) -> Any:
        self._ensure_open()
        self.validate()
        instance = self._handoff(self)
        self._built = True
        logger.debug("Built %s from %s", self.spec.source_name, self.spec.qualified_name)
        return instance

    def _assign(self, field_name: str, value: Any, rules: tuple[ValidationRule, ...]) -> "RuntimeBuilder":
        self._ensure_open()
        for rule in rules:
            rule.check(value)
        self._values[field_name] = value
        return self

    def _ensure_open(self) -> None:
        if self._built:
            raise BuilderConsumedError(f"{self.spec.qualified_name} has already built its instance.")


def materialize(
    spec: BuilderSpec,
    target: Callable[..., Any],
    handoff: Optional[Callable[[RuntimeBuilder], Any]] = None,
) -> type[RuntimeBuilder]:
    """Create a builder class for ``spec`` that produces ``target`` instances.

    By default ``build`` calls ``target(**builder.values())``. Pass ``handoff``
    when the target adopts the builder itself, e.g. ``handoff=Point``.

    Raises ``NameCollisionError`` for fields named after a builder attribute
    or starting with an underscore, since those could not be read back.
    """
    for field in spec.fields:
        if field.name in RESERVED_FIELD_NAMES or field.name.startswith("_"):
            raise NameCollisionError(field.name, f"{spec.qualified_name}.{field.name}")

    if handoff is None:
        def by_keywords(builder: RuntimeBuilder) -> Any:
            return target(**builder.values())

        handoff = by_keywords

    namespace: dict[str, Any] = {
        "__slots__": (),
        "__qualname__": spec.qualified_name,
        "spec": spec,
        "_handoff": staticmethod(handoff),
    }
    for setter in spec.setters:
        namespace[setter.name] = _make_setter(spec, setter)
    return type(spec.name, (RuntimeBuilder,), namespace)


def _make_setter(spec: BuilderSpec, method: MethodSpec) -> Callable[..., RuntimeBuilder]:
    field_name = method.assigns
    rules = method.rules

    if method.parameters[0].variadic:
        def setter(self: RuntimeBuilder, *values: Any) -> RuntimeBuilder:
            return self._assign(field_name, list(values), rules)
    else:
        def setter(self: RuntimeBuilder, value: Any) -> RuntimeBuilder:
            return self._assign(field_name, value, rules)

    setter.__name__ = method.name
    setter.__qualname__ = f"{spec.qualified_name}.{method.name}"
    return setter
