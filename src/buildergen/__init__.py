"""Derive builder types from structural class descriptions."""

from importlib import metadata

from .assembler import BuilderSpec, FieldSpec, MethodKind, MethodSpec, ParameterSpec, Visibility, assemble, assemble_all
from .constraints import ValidationRule, resolve_constraints
from .descriptors import (
    ClassDescriptor,
    FieldDescriptor,
    NonEmpty,
    NonNull,
    Pattern,
    Range,
    SizeBound,
    TypeKind,
    TypeRef,
)
from .errors import (
    BuilderConsumedError,
    BuilderGenError,
    ConstraintViolation,
    GenerationError,
    InvalidConstraintError,
    NameCollisionError,
    StructuralError,
)
from .fields import select_qualifying_fields
from .naming import setter_name
from .runtime import materialize


try:
    __version__ = metadata.version("buildergen")
except metadata.PackageNotFoundError:  # pragma: no cover - not installed
    __version__ = "0.1.0"

__all__ = [
    "__version__",
    "BuilderConsumedError",
    "BuilderGenError",
    "BuilderSpec",
    "ClassDescriptor",
    "ConstraintViolation",
    "FieldDescriptor",
    "FieldSpec",
    "GenerationError",
    "InvalidConstraintError",
    "MethodKind",
    "MethodSpec",
    "NameCollisionError",
    "NonEmpty",
    "NonNull",
    "ParameterSpec",
    "Pattern",
    "Range",
    "SizeBound",
    "StructuralError",
    "TypeKind",
    "TypeRef",
    "ValidationRule",
    "Visibility",
    "assemble",
    "assemble_all",
    "materialize",
    "resolve_constraints",
    "select_qualifying_fields",
    "setter_name",
]
