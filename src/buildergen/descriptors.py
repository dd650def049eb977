"""Structural description of a source class, as read from the host.

Everything here is immutable; the generator only ever reads these values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union


NUMERIC_TYPE_NAMES = frozenset(
    {
        "byte",
        "short",
        "int",
        "long",
        "float",
        "double",
        "Byte",
        "Short",
        "Integer",
        "Long",
        "Float",
        "Double",
        "BigInteger",
        "BigDecimal",
        "Number",
        "decimal",
    }
)


class TypeKind(str, Enum):
    SCALAR = "scalar"
    TEXT = "text"
    ARRAY = "array"
    SEQUENCE = "sequence"
    REFERENCE = "reference"


@dataclass(frozen=True, slots=True)
class TypeRef:
    """A declared field type."""

    name: str
    kind: TypeKind = TypeKind.REFERENCE
    element: Optional["TypeRef"] = None
    arguments: tuple["TypeRef", ...] = ()

    @classmethod
    def array_of(cls, element: "TypeRef") -> "TypeRef":
        return cls(name=f"{element.render()}[]", kind=TypeKind.ARRAY, element=element)

    @property
    def nullable(self) -> bool:
        return self.kind is not TypeKind.SCALAR

    @property
    def numeric(self) -> bool:
        return self.kind in (TypeKind.SCALAR, TypeKind.REFERENCE) and self.name in NUMERIC_TYPE_NAMES

    @property
    def sized(self) -> bool:
        """True for types with a length: text, arrays and sequences."""
        return self.kind in (TypeKind.TEXT, TypeKind.ARRAY, TypeKind.SEQUENCE)

    def render(self) -> str:
        if self.kind is TypeKind.ARRAY and self.element is not None:
            return f"{self.element.render()}[]"
        if self.arguments:
            return f"{self.name}<{', '.join(arg.render() for arg in self.arguments)}>"
        return self.name


# Constraint annotations form a closed set; resolution dispatches on ``kind``.


@dataclass(frozen=True, slots=True)
class NonNull:
    kind: ClassVar[str] = "non_null"


@dataclass(frozen=True, slots=True)
class Range:
    kind: ClassVar[str] = "range"

    min: Optional[float] = None
    max: Optional[float] = None
    min_exclusive: bool = False
    max_exclusive: bool = False


@dataclass(frozen=True, slots=True)
class NonEmpty:
    kind: ClassVar[str] = "non_empty"


@dataclass(frozen=True, slots=True)
class SizeBound:
    kind: ClassVar[str] = "size"

    min: int = 0
    max: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Pattern:
    kind: ClassVar[str] = "pattern"

    regex: str = ""


Constraint = Union[NonNull, Range, NonEmpty, SizeBound, Pattern]


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One declared field of the source class."""

    name: str
    type: TypeRef
    constraints: tuple[Constraint, ...] = ()
    static: bool = False
    transient: bool = False
    synthetic: bool = False
    excluded: bool = False


@dataclass(frozen=True, slots=True)
class ClassDescriptor:
    """The source class: its name, type parameters and fields in declaration order.

    ``member_names`` lists any other members the class already declares
    (nested types, methods) so synthesized names can be checked against them.
    """

    name: str
    fields: tuple[FieldDescriptor, ...] = ()
    type_parameters: tuple[str, ...] = ()
    member_names: frozenset[str] = frozenset()

    def field(self, name: str) -> FieldDescriptor:
        for candidate in self.fields:
            if candidate.name == name:
                return candidate
        raise KeyError(f"Class '{self.name}' declares no field '{name}'.")
