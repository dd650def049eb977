"""Read class descriptors from YAML or JSON documents.

A document describes one class, or several under a ``classes`` key::

    name: Point
    type_parameters: [T]
    fields:
      - name: x
        type: int
      - name: y
        type: int
        constraints:
          - range: {min: 0, max: 100}
      - name: tags
        type: String[]
        constraints: [non_empty]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

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
    TypeRef,
)
from .errors import StructuralError

SCALAR_TYPE_NAMES = frozenset({"boolean", "bool", "byte", "short", "int", "long", "float", "double", "char"})
TEXT_TYPE_NAMES = frozenset({"String", "string", "str", "CharSequence", "text"})
SEQUENCE_TYPE_NAMES = frozenset({"List", "Set", "Collection", "Iterable", "Map", "list", "set", "tuple", "dict"})

_FIELD_FLAGS = ("static", "transient", "synthetic", "excluded")


def parse_type(text: str) -> TypeRef:
    """Parse a declared type such as ``int``, ``String[]`` or ``Map<K, List<V>>``."""
    text = (text or "").strip()
    if not text:
        raise StructuralError("Empty type declaration.")
    if text.endswith("[]"):
        return TypeRef.array_of(parse_type(text[:-2]))
    if "<" in text:
        if not text.endswith(">"):
            raise StructuralError(f"Malformed generic type {text!r}.")
        base, _, inner = text[:-1].partition("<")
        arguments = tuple(parse_type(arg) for arg in _split_arguments(inner, text))
        base = base.strip()
        if base in SEQUENCE_TYPE_NAMES:
            return TypeRef(name=base, kind=TypeKind.SEQUENCE, element=arguments[-1], arguments=arguments)
        return TypeRef(name=base, kind=TypeKind.REFERENCE, arguments=arguments)
    if text in SCALAR_TYPE_NAMES:
        return TypeRef(name=text, kind=TypeKind.SCALAR)
    if text in TEXT_TYPE_NAMES:
        return TypeRef(name=text, kind=TypeKind.TEXT)
    if text in SEQUENCE_TYPE_NAMES:
        return TypeRef(name=text, kind=TypeKind.SEQUENCE)
    return TypeRef(name=text, kind=TypeKind.REFERENCE)


def _split_arguments(inner: str, original: str) -> list[str]:
    arguments, depth, current = [], 0, []
    for char in inner:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
            if depth < 0:
                raise StructuralError(f"Unbalanced brackets in type {original!r}.")
        if char == "," and depth == 0:
            arguments.append("".join(current))
            current = []
            continue
        current.append(char)
    if depth != 0:
        raise StructuralError(f"Unbalanced brackets in type {original!r}.")
    arguments.append("".join(current))
    if any(not argument.strip() for argument in arguments):
        raise StructuralError(f"Empty type argument in {original!r}.")
    return arguments


def parse_constraint(entry: Any) -> Constraint:
    """Parse a bare tag (``non_null``) or a one-key mapping (``range: {...}``)."""
    if isinstance(entry, str):
        tag, options = entry, None
    elif isinstance(entry, Mapping) and len(entry) == 1:
        tag, options = next(iter(entry.items()))
    else:
        raise StructuralError(f"Cannot read constraint {entry!r}.")

    key = str(tag).replace("_", "").replace("-", "").lower()
    if key in ("nonnull", "notnull"):
        return NonNull()
    if key in ("nonempty", "notempty"):
        return NonEmpty()
    if key == "range":
        options = _options(tag, options)
        return Range(
            min=options.get("min"),
            max=options.get("max"),
            min_exclusive=_flag(tag, options, "min_exclusive"),
            max_exclusive=_flag(tag, options, "max_exclusive"),
        )
    if key in ("size", "sizebound"):
        options = _options(tag, options)
        return SizeBound(min=options.get("min", 0), max=options.get("max"))
    if key == "pattern":
        if isinstance(options, Mapping):
            options = options.get("regex")
        if not isinstance(options, str):
            raise StructuralError(f"Pattern constraint needs a regex string, got {options!r}.")
        return Pattern(regex=options)
    raise StructuralError(f"Unknown constraint kind {tag!r}.")


def _options(tag: Any, options: Any) -> Mapping[str, Any]:
    if not isinstance(options, Mapping):
        raise StructuralError(f"Constraint {tag!r} needs a mapping of options, got {options!r}.")
    return options


def _flag(tag: Any, options: Mapping[str, Any], key: str) -> bool:
    value = options.get(key, False)
    if not isinstance(value, bool):
        raise StructuralError(f"Constraint {tag!r} option '{key}' must be true or false, got {value!r}.")
    return value


def read_field(data: Mapping[str, Any]) -> FieldDescriptor:
    if not isinstance(data, Mapping):
        raise StructuralError(f"Field entries must be mappings, got {data!r}.")
    name = data.get("name")
    if not isinstance(name, str):
        raise StructuralError(f"Field entry {dict(data)!r} has no name.")
    if not isinstance(data.get("type"), str):
        raise StructuralError(f"Field '{name}' has no type.")
    constraints = data.get("constraints") or []
    if not isinstance(constraints, list):
        raise StructuralError(f"Constraints of field '{name}' must be a list.")
    return FieldDescriptor(
        name=name,
        type=parse_type(data["type"]),
        constraints=tuple(parse_constraint(entry) for entry in constraints),
        **{flag: bool(data.get(flag, False)) for flag in _FIELD_FLAGS},
    )


def read_class(data: Mapping[str, Any]) -> ClassDescriptor:
    if not isinstance(data, Mapping):
        raise StructuralError(f"A class must be described by a mapping, got {data!r}.")
    name = data.get("name")
    if not isinstance(name, str):
        raise StructuralError("Class description has no name.")
    fields = data.get("fields") or []
    parameters = data.get("type_parameters") or []
    members = data.get("members") or []
    for key, value in (("fields", fields), ("type_parameters", parameters), ("members", members)):
        if not isinstance(value, list):
            raise StructuralError(f"'{key}' of class {name} must be a list.")
    return ClassDescriptor(
        name=name,
        fields=tuple(read_field(entry) for entry in fields),
        type_parameters=tuple(str(parameter) for parameter in parameters),
        member_names=frozenset(str(member) for member in members),
    )


def read_classes(document: Any) -> list[ClassDescriptor]:
    """Accept a single class mapping, a ``classes`` mapping, or a list of classes."""
    if isinstance(document, Mapping) and "classes" in document:
        document = document["classes"]
    if isinstance(document, Mapping):
        return [read_class(document)]
    if isinstance(document, list):
        return [read_class(entry) for entry in document]
    raise StructuralError("Document describes no classes.")


def load_classes(path: str | Path) -> list[ClassDescriptor]:
    """Load class descriptors from a YAML (or JSON) file."""
    try:
        document = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise StructuralError(f"Cannot read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise StructuralError(f"{path} is not valid YAML: {exc}") from exc
    return read_classes(document)
