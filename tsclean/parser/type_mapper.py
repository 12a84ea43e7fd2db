"""Field type token -> TypeScript / Mongoose / Zod / sample value lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TypeMapping:
    """Everything the templates need to know about one field type.

    ``sample`` is a JSON-serialisable value.  For strings it is a format
    pattern that receives the field name (``sample_{name}``).
    """

    ts_type: str
    mongoose_type: str
    zod_type: str
    sample: Any

    def sample_for(self, field_name: str) -> Any:
        """Return the sample value for a field called *field_name*."""
        if isinstance(self.sample, str):
            return self.sample.format(name=field_name)
        return self.sample


_TYPE_MAP: dict[str, TypeMapping] = {
    "string": TypeMapping("string", "String", "z.string()", "sample_{name}"),
    "number": TypeMapping("number", "Number", "z.number()", 123),
    "boolean": TypeMapping("boolean", "Boolean", "z.boolean()", True),
}

# Unrecognised tokens degrade to a permissive type instead of failing.
_FALLBACK = TypeMapping("any", "Schema.Types.Mixed", "z.any()", None)


def map_type(token: str) -> TypeMapping:
    """Map a field type token to its target types.

    Total over all strings: unknown tokens return the permissive ``any``
    mapping.
    """
    return _TYPE_MAP.get(token, _FALLBACK)


def known_types() -> list[str]:
    """Return the recognised type tokens in declaration order."""
    return list(_TYPE_MAP)
