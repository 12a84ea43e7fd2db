"""Data model for field descriptors, features, projects and generated files.

The value objects used during a single generation run are frozen
dataclasses.  ``ProjectManifest`` is the only persisted artifact and is a
Pydantic v2 model so it round-trips through JSON with validation.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from .rules import build_sample_payload
from .type_mapper import TypeMapping, map_type

FEATURE_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class FieldType(str, Enum):
    """Closed set of field type categories."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OTHER = "other"


# ---------------------------------------------------------------------------
# Field / feature / project
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldDescriptor:
    """One ``name:type[:rule]`` entry of a feature's field list."""

    name: str
    type: str
    rule: Optional[str] = None

    @property
    def field_type(self) -> FieldType:
        try:
            return FieldType(self.type)
        except ValueError:
            return FieldType.OTHER

    @property
    def mapping(self) -> TypeMapping:
        return map_type(self.type)

    @property
    def ts_type(self) -> str:
        return self.mapping.ts_type

    @property
    def mongoose_type(self) -> str:
        return self.mapping.mongoose_type

    def to_spec(self) -> str:
        """Serialise back to ``name:type[:rule]``."""
        if self.rule is None:
            return f"{self.name}:{self.type}"
        return f"{self.name}:{self.type}:{self.rule}"


@dataclass(frozen=True)
class FeatureSpec:
    """A named CRUD slice and its ordered fields.

    Derived names are shared by every template so that imports, class
    names and DI tokens agree across the generated files.
    """

    name: str
    fields: tuple[FieldDescriptor, ...] = ()

    @property
    def class_name(self) -> str:
        return self.name[:1].upper() + self.name[1:]

    @property
    def use_case_name(self) -> str:
        return f"Create{self.class_name}UseCase"

    @property
    def dto_name(self) -> str:
        return f"Create{self.class_name}Dto"

    @property
    def route_path(self) -> str:
        return f"/api/{self.name}"

    @property
    def fields_spec(self) -> str:
        return ",".join(f.to_spec() for f in self.fields)

    @property
    def sample_payload(self) -> dict[str, Any]:
        return build_sample_payload(self.fields)

    @property
    def sample_json(self) -> str:
        return json.dumps(self.sample_payload)


@dataclass(frozen=True)
class ProjectSpec:
    """The project being generated and its ordered feature roster."""

    name: str
    root_path: Path
    features: tuple[FeatureSpec, ...] = field(default_factory=tuple)

    @property
    def feature_names(self) -> list[str]:
        return [f.name for f in self.features]


@dataclass(frozen=True)
class GeneratedFile:
    """One output file, relative to the project root."""

    relative_path: str
    content: str


# ---------------------------------------------------------------------------
# Sidecar manifest
# ---------------------------------------------------------------------------

class ManifestFeature(BaseModel):
    """A roster entry as persisted in the sidecar manifest."""
    name: str = Field(..., description="Feature name")
    field_spec: str = Field(default="", description="Field spec, e.g. 'title:string,price:number'")


class ProjectManifest(BaseModel):
    """Persisted project name and roster, written next to the generated files."""
    project_name: str = Field(..., description="Project name used in package.json")
    generator_version: str = Field(default="", description="tsclean version that wrote the file")
    features: list[ManifestFeature] = Field(default_factory=list)
