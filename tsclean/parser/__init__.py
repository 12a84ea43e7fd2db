"""tsclean field grammar and type mapping.

Parses ``name:type[:rule]`` field specifications and maps them onto the
TypeScript, Mongoose and Zod types used by the generated project.

Usage::

    from tsclean.parser import parse_fields, build_zod_schema

    fields = parse_fields("title:string:minlength=3,price:number:min=0")
    print(build_zod_schema(fields))
"""

from tsclean.parser.fields import (
    build_feature,
    parse_fields,
    resolve_fields,
    validate_feature_name,
)
from tsclean.parser.models import (
    FeatureSpec,
    FieldDescriptor,
    FieldType,
    GeneratedFile,
    ProjectManifest,
    ProjectSpec,
)
from tsclean.parser.rules import (
    CompiledRule,
    build_sample_payload,
    build_zod_schema,
    compile_rule,
)
from tsclean.parser.type_mapper import TypeMapping, map_type

__all__ = [
    "CompiledRule",
    "FeatureSpec",
    "FieldDescriptor",
    "FieldType",
    "GeneratedFile",
    "ProjectManifest",
    "ProjectSpec",
    "TypeMapping",
    "build_feature",
    "build_sample_payload",
    "build_zod_schema",
    "compile_rule",
    "map_type",
    "parse_fields",
    "resolve_fields",
    "validate_feature_name",
]
