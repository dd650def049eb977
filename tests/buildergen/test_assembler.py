"""Tests for assembling builder specs from class descriptors."""

import pytest

from buildergen.assembler import MethodKind, Visibility, assemble, assemble_all
from buildergen.descriptors import (
    ClassDescriptor,
    FieldDescriptor,
    NonEmpty,
    NonNull,
    Range,
    TypeKind,
    TypeRef,
)
from buildergen.errors import InvalidConstraintError, NameCollisionError, StructuralError

INT = TypeRef("int", TypeKind.SCALAR)
STRING = TypeRef("String", TypeKind.TEXT)


def test_point_builder_shape(point_class):
    spec = assemble(point_class)

    assert spec.name == "Builder"
    assert spec.qualified_name == "Point.Builder"
    assert spec.source_name == "Point"
    assert [(f.name, f.type) for f in spec.fields] == [("x", INT), ("y", INT)]
    assert [m.name for m in spec.methods] == ["Builder", "create", "withX", "withY", "build", "validate"]


def test_fields_mirror_selected_fields_only():
    cls = ClassDescriptor(
        name="Account",
        fields=(
            FieldDescriptor("id", INT),
            FieldDescriptor("INSTANCES", INT, static=True),
            FieldDescriptor("owner", STRING),
        ),
    )

    spec = assemble(cls)

    assert [(f.name, f.type) for f in spec.fields] == [("id", INT), ("owner", STRING)]
    assert [s.name for s in spec.setters] == ["withId", "withOwner"]


def test_constructor_is_private_and_takes_no_arguments(point_class):
    constructor = assemble(point_class).constructor

    assert constructor.kind is MethodKind.CONSTRUCTOR
    assert constructor.visibility is Visibility.PRIVATE
    assert constructor.parameters == ()
    assert constructor.return_type is None


def test_create_is_public_static_factory(point_class):
    create = assemble(point_class).create

    assert create.static
    assert create.visibility is Visibility.PUBLIC
    assert create.return_type == "Builder"
    assert create.instantiates == "Builder"


def test_setters_validate_assign_and_return_builder(point_class):
    spec = assemble(point_class)
    with_y = spec.setter_for("y")

    assert with_y.name == "withY"
    assert with_y.visibility is Visibility.PUBLIC
    assert with_y.return_type == "Builder"
    assert with_y.assigns == "y"
    assert [p.render() for p in with_y.parameters] == ["int y"]
    assert [r.expression for r in with_y.rules] == ["y >= 0 && y <= 100"]
    assert spec.setter_for("x").rules == ()


def test_array_fields_get_variadic_setters(tagged_class):
    spec = assemble(tagged_class)
    (parameter,) = spec.setter_for("tags").parameters

    assert parameter.variadic
    assert parameter.type.render() == "string"
    assert parameter.render() == "string... tags"
    assert spec.fields[0].type.kind is TypeKind.ARRAY
    assert spec.fields[0].type.render() == "string[]"


def test_build_returns_source_type_and_validates_first(point_class):
    build = assemble(point_class).build

    assert build.return_type == "Point"
    assert build.instantiates == "Point"
    assert build.invokes == ("validate",)


def test_validate_concatenates_rules_in_field_order():
    cls = ClassDescriptor(
        name="Person",
        fields=(
            FieldDescriptor("name", STRING, constraints=(NonNull(), NonEmpty())),
            FieldDescriptor("age", INT, constraints=(Range(min=0, max=150),)),
            FieldDescriptor("nickname", STRING, constraints=(NonEmpty(),)),
        ),
    )

    validate = assemble(cls).validate

    assert validate.visibility is Visibility.PRIVATE
    assert [(r.field_name, r.kind) for r in validate.rules] == [
        ("name", "non_null"),
        ("name", "non_empty"),
        ("age", "range"),
        ("nickname", "non_empty"),
    ]


def test_generic_class_propagates_parameters():
    cls = ClassDescriptor(
        name="Pair",
        type_parameters=("T", "U"),
        fields=(FieldDescriptor("left", TypeRef("T")), FieldDescriptor("right", TypeRef("U"))),
    )

    spec = assemble(cls)

    assert spec.type_parameters == ("T", "U")
    assert spec.create.return_type == "Builder<T, U>"
    assert spec.create.instantiates == "Builder<>"
    assert spec.build.return_type == "Pair<T, U>"
    assert spec.build.instantiates == "Pair<>"
    assert all(s.return_type == "Builder<T, U>" for s in spec.setters)


def test_non_null_on_primitive_aborts_assembly():
    cls = ClassDescriptor(name="Counter", fields=(FieldDescriptor("count", INT, constraints=(NonNull(),)),))

    with pytest.raises(InvalidConstraintError):
        assemble(cls)


def test_builder_member_collision_aborts_assembly(point_class):
    cls = ClassDescriptor(name="Point", fields=point_class.fields, member_names=frozenset({"Builder"}))

    with pytest.raises(NameCollisionError):
        assemble(cls)


def test_assembly_is_deterministic(point_class):
    assert assemble(point_class) == assemble(point_class)
    assert assemble(point_class).to_dict() == assemble(point_class).to_dict()


def test_to_dict_is_plain_data(point_class):
    data = assemble(point_class).to_dict()

    assert data["fields"] == [{"name": "x", "type": "int"}, {"name": "y", "type": "int"}]
    with_y = next(m for m in data["methods"] if m["name"] == "withY")
    assert with_y["parameters"] == [{"name": "y", "type": "int", "variadic": False}]
    assert with_y["rules"][0]["message"] == "y must be within [0, 100]"
    constructor = data["methods"][0]
    assert constructor == {"name": "Builder", "kind": "constructor", "visibility": "private", "static": False}


def test_assemble_all_stops_at_first_broken_class(point_class):
    broken = ClassDescriptor(name="Broken", fields=(FieldDescriptor("a", INT), FieldDescriptor("a", INT)))

    assert [s.qualified_name for s in assemble_all([point_class])] == ["Point.Builder"]
    with pytest.raises(StructuralError):
        assemble_all([point_class, broken])
