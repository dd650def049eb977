"""Tests for turning field constraints into validation rules."""

from decimal import Decimal

import pytest

from buildergen.constraints import resolve_constraints
from buildergen.descriptors import (
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
from buildergen.errors import ConstraintViolation, InvalidConstraintError

INT = TypeRef("int", TypeKind.SCALAR)
BOXED_INT = TypeRef("Integer", TypeKind.REFERENCE)
STRING = TypeRef("String", TypeKind.TEXT)
STRINGS = TypeRef("List", TypeKind.SEQUENCE, element=STRING, arguments=(STRING,))
ADDRESS = TypeRef("Address", TypeKind.REFERENCE)


def _resolve(type_ref, *constraints, name="value"):
    field = FieldDescriptor(name, type_ref, constraints=constraints)
    return resolve_constraints(ClassDescriptor(name="Owner", fields=(field,)), field)


def test_field_without_constraints_has_no_rules():
    assert _resolve(INT) == ()


def test_non_null_on_reference_type():
    (rule,) = _resolve(ADDRESS, NonNull(), name="address")

    assert rule.kind == "non_null"
    assert rule.expression == "address != null"
    assert rule.holds(object())
    with pytest.raises(ConstraintViolation, match="address must not be null"):
        rule.check(None)


def test_non_null_on_scalar_is_invalid():
    with pytest.raises(InvalidConstraintError) as excinfo:
        _resolve(INT, NonNull(), name="count")

    assert excinfo.value.field_name == "count"
    assert excinfo.value.constraint == NonNull()
    assert "count" in str(excinfo.value)


def test_inclusive_range_accepts_bounds():
    (rule,) = _resolve(INT, Range(min=0, max=100), name="y")

    assert rule.expression == "y >= 0 && y <= 100"
    assert rule.message == "y must be within [0, 100]"
    assert rule.holds(0)
    assert rule.holds(100)
    assert not rule.holds(101)
    assert not rule.holds(-1)


def test_exclusive_range_rejects_bounds():
    (rule,) = _resolve(INT, Range(min=0, max=10, min_exclusive=True, max_exclusive=True), name="n")

    assert rule.message == "n must be within (0, 10)"
    assert not rule.holds(0)
    assert not rule.holds(10)
    assert rule.holds(5)


def test_one_sided_range_message_names_the_bound():
    (rule,) = _resolve(BOXED_INT, Range(min=1), name="age")

    assert rule.message == "age must be >= 1"
    assert rule.holds(None)
    with pytest.raises(ConstraintViolation) as excinfo:
        rule.check(0)
    assert excinfo.value.field_name == "age"
    assert excinfo.value.kind == "range"
    assert excinfo.value.value == 0


@pytest.mark.parametrize(
    "constraint",
    [
        Range(min=5, max=1),
        Range(),
        Range(min=3, max=3, max_exclusive=True),
        Range(min="zero"),
    ],
)
def test_contradictory_ranges_are_invalid(constraint):
    with pytest.raises(InvalidConstraintError):
        _resolve(INT, constraint)


def test_range_on_text_is_invalid():
    with pytest.raises(InvalidConstraintError, match="numeric"):
        _resolve(STRING, Range(min=0))


def test_non_empty_on_text_and_sequences():
    (text_rule,) = _resolve(STRING, NonEmpty(), name="title")
    (list_rule,) = _resolve(STRINGS, NonEmpty(), name="tags")

    assert text_rule.holds("x")
    assert not text_rule.holds("")
    assert not text_rule.holds(None)
    assert list_rule.holds(["a"])
    assert not list_rule.holds([])


def test_non_empty_on_scalar_is_invalid():
    with pytest.raises(InvalidConstraintError):
        _resolve(INT, NonEmpty())


def test_size_bound_checks_length():
    (rule,) = _resolve(STRING, SizeBound(min=2, max=4), name="code")

    assert rule.expression == "size(code) >= 2 && size(code) <= 4"
    assert rule.message == "size of code must be between 2 and 4"
    assert rule.holds("abc")
    assert not rule.holds("a")
    assert not rule.holds("abcde")


@pytest.mark.parametrize("constraint", [SizeBound(min=-1), SizeBound(min=3, max=2), SizeBound(min=0, max=-2)])
def test_invalid_size_bounds(constraint):
    with pytest.raises(InvalidConstraintError):
        _resolve(STRING, constraint)


def test_pattern_matches_whole_text():
    (rule,) = _resolve(STRING, Pattern(regex="[a-z]+"), name="slug")

    assert rule.expression == 'matches(slug, "[a-z]+")'
    assert rule.holds("abc")
    assert not rule.holds("abc1")
    assert not rule.holds(42)


def test_unparsable_pattern_is_invalid():
    with pytest.raises(InvalidConstraintError, match="does not parse"):
        _resolve(STRING, Pattern(regex="([a-z"))


def test_pattern_on_sequence_is_invalid():
    with pytest.raises(InvalidConstraintError):
        _resolve(STRINGS, Pattern(regex=".*"))


def test_rules_keep_annotation_order_and_distinct_messages():
    rules = _resolve(STRING, NonNull(), SizeBound(min=1, max=8), Pattern(regex="[A-Z]+"), name="code")

    assert [r.kind for r in rules] == ["non_null", "size", "pattern"]
    assert len({r.message for r in rules}) == 3
    assert all("code" in r.message for r in rules)


def test_range_accepts_decimal_values():
    (rule,) = _resolve(TypeRef("BigDecimal"), Range(min=0, max=100), name="price")

    assert rule.holds(Decimal("5"))
    assert rule.holds(Decimal("100"))
    assert not rule.holds(Decimal("101"))


def test_range_rejects_nan():
    (rule,) = _resolve(TypeRef("double", TypeKind.SCALAR), Range(min=0, max=100), name="ratio")

    assert not rule.holds(float("nan"))
    assert not rule.holds(Decimal("NaN"))
    with pytest.raises(ConstraintViolation, match="ratio must be within"):
        rule.check(float("nan"))


def test_nan_bound_is_invalid():
    with pytest.raises(InvalidConstraintError):
        _resolve(TypeRef("double", TypeKind.SCALAR), Range(min=float("nan")))


def test_size_and_non_empty_reject_unsized_values():
    (size_rule,) = _resolve(STRING, SizeBound(min=0, max=3), name="code")
    (non_empty_rule,) = _resolve(STRING, NonEmpty(), name="code")

    assert not size_rule.holds(12345)
    assert not non_empty_rule.holds(5)
    with pytest.raises(ConstraintViolation):
        size_rule.check(12345)
