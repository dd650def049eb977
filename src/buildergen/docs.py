"""Documentation comments for generated setters."""

from __future__ import annotations

from typing import Sequence

from .constraints import ValidationRule
from .descriptors import FieldDescriptor, TypeKind


def document_setter(field: FieldDescriptor, rules: Sequence[ValidationRule]) -> str:
    """Return the comment body for the setter of ``field``.

    The text is host neutral; renderers wrap it in their own comment syntax.
    """
    lines = [f"Sets the value of {field.name}."]
    if field.type.kind is TypeKind.ARRAY:
        lines.append(f"Accepts any number of {field.type.element.render()} values, stored as {field.type.render()}.")
    if rules:
        lines.append("")
        lines.append("Constraints:")
        lines.extend(f"- {rule.message}" for rule in rules)
    lines.append("")
    lines.append(f"@param {field.name} the new value ({field.type.render()})")
    lines.append("@return this builder")
    if rules:
        lines.append("@throws ConstraintViolation if the value breaks a constraint")
    return "\n".join(lines)
