"""Validation rule compilation.

Turns a field's optional rule (``email``, ``minlength=3``, ``enum=a|b`` ...)
into a Zod validator expression and, independently, into a sample value that
satisfies the rule.  Matching is case-sensitive and the first matching
prefix wins; unknown rule text keeps the bare type validator.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from .type_mapper import map_type

if TYPE_CHECKING:
    from .models import FieldDescriptor

SAMPLE_EMAIL = "test@example.com"

# Order matters: ``minlength=`` must be tried before ``min=``.
_BOUND_RULES: tuple[tuple[str, str], ...] = (
    ("minlength=", "min"),
    ("maxlength=", "max"),
    ("min=", "min"),
    ("max=", "max"),
)


@dataclass(frozen=True)
class CompiledRule:
    """Result of compiling one field's rule."""

    schema_fragment: str
    sample_override: Optional[str] = None
    recognized: bool = True


def compile_rule(field_type: str, rule: Optional[str]) -> CompiledRule:
    """Compile *rule* for a field of *field_type*.

    Returns the full Zod expression for the field (``z.string().email()``),
    an optional sample override and whether the rule was understood.  An
    absent rule is reported as recognized.
    """
    base = map_type(field_type).zod_type
    if not rule:
        return CompiledRule(base)

    if rule == "email":
        override = SAMPLE_EMAIL if field_type == "string" else None
        return CompiledRule(f"{base}.email()", override)

    for prefix, method in _BOUND_RULES:
        if rule.startswith(prefix):
            return CompiledRule(f"{base}.{method}({rule[len(prefix):]})")

    if rule.startswith("enum="):
        values = enum_values(rule)
        literals = ", ".join(f'"{v}"' for v in values)
        override = values[0] if field_type == "string" else None
        return CompiledRule(f"z.enum([{literals}])", override)

    return CompiledRule(base, recognized=False)


def enum_values(rule: str) -> list[str]:
    """Split ``enum=a|b|c`` into ``['a', 'b', 'c']``."""
    return rule.split("=", 1)[1].split("|")


def sample_value(field: "FieldDescriptor") -> Any:
    """Return a sample JSON value for *field* that respects its rule."""
    override = compile_rule(field.type, field.rule).sample_override
    if override is not None:
        return override
    return map_type(field.type).sample_for(field.name)


def build_sample_payload(fields: Iterable["FieldDescriptor"]) -> dict[str, Any]:
    """Build the ordered sample request body for a feature."""
    return {f.name: sample_value(f) for f in fields}


def build_zod_schema(fields: Iterable["FieldDescriptor"]) -> str:
    """Assemble the ``z.object({...})`` expression for the validation middleware."""
    lines = ["z.object({"]
    for f in fields:
        lines.append(f"    {f.name}: {compile_rule(f.type, f.rule).schema_fragment},")
    lines.append("})")
    return "\n".join(lines)
