"""Assembly of the structural description of a builder type.

``assemble`` is the single entry point: it turns a ``ClassDescriptor`` into a
``BuilderSpec`` that a renderer can materialize in its own host syntax.
Generation is all-or-nothing; every error surfaces before a spec is returned.

The generated ``build`` passes the builder to the source class's constructor,
which is expected to adopt the builder's field values. That constructor is
the caller's responsibility and is not produced here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from .constraints import ValidationRule, resolve_constraints
from .descriptors import ClassDescriptor, FieldDescriptor, TypeKind, TypeRef
from .fields import select_qualifying_fields
from .generics import builder_reference, diamond, propagate, source_reference
from .naming import BUILDER_TYPE_NAME, builder_type_name, check_collisions, setter_name

logger = logging.getLogger(__name__)

CREATE_METHOD = "create"
BUILD_METHOD = "build"
VALIDATE_METHOD = "validate"


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class MethodKind(str, Enum):
    CONSTRUCTOR = "constructor"
    FACTORY = "factory"
    SETTER = "setter"
    BUILD = "build"
    VALIDATE = "validate"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    name: str
    type: TypeRef


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    name: str
    type: TypeRef
    variadic: bool = False

    def render(self) -> str:
        suffix = "..." if self.variadic else ""
        return f"{self.type.render()}{suffix} {self.name}"


@dataclass(frozen=True, slots=True)
class MethodSpec:
    """One member of the builder.

    ``rules`` run first, then ``assigns`` receives the parameter, then the
    method returns ``return_type``; ``instantiates`` names the type created by
    factories and ``invokes`` lists builder methods called before returning.
    """

    name: str
    kind: MethodKind
    visibility: Visibility
    return_type: Optional[str] = None
    parameters: tuple[ParameterSpec, ...] = ()
    static: bool = False
    rules: tuple[ValidationRule, ...] = ()
    assigns: Optional[str] = None
    instantiates: Optional[str] = None
    invokes: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "visibility": self.visibility.value,
            "static": self.static,
        }
        if self.return_type is not None:
            data["returns"] = self.return_type
        if self.parameters:
            data["parameters"] = [
                {"name": p.name, "type": p.type.render(), "variadic": p.variadic} for p in self.parameters
            ]
        if self.rules:
            data["rules"] = [
                {"field": r.field_name, "kind": r.kind, "expression": r.expression, "message": r.message}
                for r in self.rules
            ]
        if self.assigns is not None:
            data["assigns"] = self.assigns
        if self.instantiates is not None:
            data["instantiates"] = self.instantiates
        if self.invokes:
            data["invokes"] = list(self.invokes)
        return data


@dataclass(frozen=True, slots=True)
class BuilderSpec:
    """Complete structural description of a generated builder."""

    name: str
    qualified_name: str
    source_name: str
    type_parameters: tuple[str, ...]
    fields: tuple[FieldSpec, ...]
    constructor: MethodSpec
    create: MethodSpec
    setters: tuple[MethodSpec, ...]
    build: MethodSpec
    validate: MethodSpec

    @property
    def methods(self) -> tuple[MethodSpec, ...]:
        return (self.constructor, self.create, *self.setters, self.build, self.validate)

    def setter_for(self, field_name: str) -> MethodSpec:
        for setter in self.setters:
            if setter.assigns == field_name:
                return setter
        raise KeyError(f"{self.qualified_name} has no setter for '{field_name}'.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "qualified_name": self.qualified_name,
            "source": self.source_name,
            "type_parameters": list(self.type_parameters),
            "fields": [{"name": f.name, "type": f.type.render()} for f in self.fields],
            "methods": [method.to_dict() for method in self.methods],
        }


def assemble(cls: ClassDescriptor) -> BuilderSpec:
    """Derive the builder for ``cls``.

    Raises ``StructuralError``, ``InvalidConstraintError`` or
    ``NameCollisionError``; nothing is returned on failure.
    """
    fields = select_qualifying_fields(cls)
    check_collisions(cls, fields)
    rules = {field.name: resolve_constraints(cls, field) for field in fields}

    builder_type = builder_reference(cls)
    spec = BuilderSpec(
        name=BUILDER_TYPE_NAME,
        qualified_name=builder_type_name(cls),
        source_name=cls.name,
        type_parameters=propagate(cls),
        fields=tuple(FieldSpec(name=field.name, type=field.type) for field in fields),
        constructor=MethodSpec(
            name=BUILDER_TYPE_NAME,
            kind=MethodKind.CONSTRUCTOR,
            visibility=Visibility.PRIVATE,
        ),
        create=MethodSpec(
            name=CREATE_METHOD,
            kind=MethodKind.FACTORY,
            visibility=Visibility.PUBLIC,
            return_type=builder_type,
            static=True,
            instantiates=BUILDER_TYPE_NAME + diamond(cls),
        ),
        setters=tuple(_setter(field, rules[field.name], builder_type) for field in fields),
        build=MethodSpec(
            name=BUILD_METHOD,
            kind=MethodKind.BUILD,
            visibility=Visibility.PUBLIC,
            return_type=source_reference(cls),
            instantiates=cls.name + diamond(cls),
            invokes=(VALIDATE_METHOD,),
        ),
        validate=MethodSpec(
            name=VALIDATE_METHOD,
            kind=MethodKind.VALIDATE,
            visibility=Visibility.PRIVATE,
            rules=tuple(rule for field in fields for rule in rules[field.name]),
        ),
    )
    logger.debug("Assembled %s with %d setter(s)", spec.qualified_name, len(spec.setters))
    return spec


def assemble_all(classes: Iterable[ClassDescriptor]) -> list[BuilderSpec]:
    """Assemble each class independently; the first failure aborts the batch."""
    return [assemble(cls) for cls in classes]


def _setter(field: FieldDescriptor, rules: tuple[ValidationRule, ...], builder_type: str) -> MethodSpec:
    if field.type.kind is TypeKind.ARRAY:
        parameter = ParameterSpec(name=field.name, type=field.type.element, variadic=True)
    else:
        parameter = ParameterSpec(name=field.name, type=field.type)
    return MethodSpec(
        name=setter_name(field.name),
        kind=MethodKind.SETTER,
        visibility=Visibility.PUBLIC,
        return_type=builder_type,
        parameters=(parameter,),
        rules=rules,
        assigns=field.name,
    )
