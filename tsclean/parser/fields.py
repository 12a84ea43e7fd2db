"""Field grammar parser.

Parses the compact ``name:type[:rule]`` syntax accepted by ``--fields``::

    title:string:minlength=3,price:number:min=0,active:boolean

Entries are split on ``,`` and then on ``:``.  Whitespace is significant and
never trimmed.  A single malformed entry fails the whole parse.
"""

from __future__ import annotations

import re
from typing import Optional

from tsclean.errors import FieldSpecError, InvalidNameError

from .models import FEATURE_NAME_PATTERN, FeatureSpec, FieldDescriptor

_FIELD_PATTERN = re.compile(r"^[^:]+:[^:]+(:[^:]+)?$")

# Every entity already carries a generated string ``id``.
GENERATED_FIELD_NAMES = frozenset({"id"})

# Feature names become local variables and, capitalised, class names in the
# generated TypeScript, next to these imports and locals.
RESERVED_FEATURE_NAMES = frozenset({
    # template locals and parameters
    "app", "container", "controller", "dotenv", "dto", "error", "express",
    "id", "mongoose", "port", "request", "response", "result", "router",
    # capitalised collisions with imported types (Result, Ok, Err, Schema ...)
    "document", "err", "ok", "schema",
    # ECMAScript reserved and strict-mode words
    "arguments", "await", "break", "case", "catch", "class", "const",
    "continue", "debugger", "default", "delete", "do", "else", "enum", "eval",
    "export", "extends", "false", "finally", "for", "function", "if",
    "implements", "import", "in", "instanceof", "interface", "let", "new",
    "null", "package", "private", "protected", "public", "return", "static",
    "super", "switch", "this", "throw", "true", "try", "typeof", "undefined",
    "var", "void", "while", "with", "yield",
})


def parse_fields(spec: Optional[str]) -> list[FieldDescriptor]:
    """Parse a comma-separated field spec into ordered descriptors.

    Args:
        spec: Raw text such as ``"title:string,price:number:min=0"``.
            ``None`` or an empty string yields an empty list.

    Returns:
        Field descriptors in the order they were written.

    Raises:
        FieldSpecError: If any entry does not match ``name:type[:rule]``, a
            field name is repeated or a field is named ``id``.
    """
    if not spec:
        return []

    fields: list[FieldDescriptor] = []
    seen: set[str] = set()
    for entry in spec.split(","):
        if not _FIELD_PATTERN.match(entry):
            raise FieldSpecError(entry, "expected format name:type[:rule]")
        parts = entry.split(":")
        name, type_token = parts[0], parts[1]
        rule = parts[2] if len(parts) == 3 else None
        if name in GENERATED_FIELD_NAMES:
            raise FieldSpecError(entry, f"'{name}' is generated automatically")
        if name in seen:
            raise FieldSpecError(entry, f"duplicate field name '{name}'")
        seen.add(name)
        fields.append(FieldDescriptor(name=name, type=type_token, rule=rule))
    return fields


def resolve_fields(spec: Optional[str], default: str) -> list[FieldDescriptor]:
    """Parse *spec*, substituting *default* when it is empty."""
    return parse_fields(spec or default)


def validate_feature_name(name: str) -> str:
    """Return *name* if it is a usable feature name.

    Feature names double as directory names and, capitalised, as class-name
    stems, so they must be lower-case identifiers.

    Raises:
        InvalidNameError: If the name is not of the form ``[a-z][a-z0-9_]*``
            or is a reserved identifier.
    """
    if not FEATURE_NAME_PATTERN.match(name):
        raise InvalidNameError(
            f"Invalid feature name '{name}': use a lower-case identifier "
            "(letters, digits and underscores, starting with a letter)."
        )
    if name in RESERVED_FEATURE_NAMES:
        raise InvalidNameError(
            f"Invalid feature name '{name}': it clashes with an identifier in the "
            "generated TypeScript."
        )
    return name


def build_feature(name: str, spec: Optional[str], default: str) -> FeatureSpec:
    """Validate *name*, parse its fields and return a ``FeatureSpec``."""
    validate_feature_name(name)
    return FeatureSpec(name=name, fields=tuple(resolve_fields(spec, default)))
