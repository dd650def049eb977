"""Shared class descriptors for builder tests."""

from __future__ import annotations

import pytest

from buildergen.descriptors import ClassDescriptor, FieldDescriptor, Range, TypeKind, TypeRef

INT = TypeRef("int", TypeKind.SCALAR)
STRING = TypeRef("String", TypeKind.TEXT)


@pytest.fixture
def point_class() -> ClassDescriptor:
    return ClassDescriptor(
        name="Point",
        fields=(
            FieldDescriptor("x", INT),
            FieldDescriptor("y", INT, constraints=(Range(min=0, max=100),)),
        ),
    )


@pytest.fixture
def tagged_class() -> ClassDescriptor:
    return ClassDescriptor(
        name="Post",
        fields=(FieldDescriptor("tags", TypeRef.array_of(TypeRef("string", TypeKind.TEXT))),),
    )
