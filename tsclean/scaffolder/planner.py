"""Topology planner.

Computes the directory layout and the complete list of files to write for
"create project" and "add feature".  Planning is pure; ``ProjectGenerator``
performs the writes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from tsclean.errors import InvalidNameError, PreconditionError
from tsclean.parser.models import FeatureSpec, GeneratedFile, ProjectSpec

from .catalog import TemplateCatalog

PROJECT_DIRECTORIES: tuple[str, ...] = (
    "Core/config",
    "Core/error",
    "Core/result",
    "Server",
    "__tests__",
)

FEATURE_SUBDIRECTORIES: tuple[str, ...] = (
    "domain/entity",
    "domain/usecases",
    "domain/repositories",
    "data/repositories",
    "data/datasources",
    "data/models",
    "delivery/routes",
    "delivery/controllers",
    "delivery/middlewares",
)


@dataclass
class Plan:
    """Directories to create (in order) followed by files to write."""

    directories: list[str] = field(default_factory=list)
    files: list[GeneratedFile] = field(default_factory=list)

    @property
    def paths(self) -> list[str]:
        return [f.relative_path for f in self.files]


def feature_directories(name: str) -> list[str]:
    """The nine layer directories of a feature plus its test directory."""
    dirs = [f"Features/{name}/{sub}" for sub in FEATURE_SUBDIRECTORIES]
    dirs.append(f"__tests__/Features/{name}")
    return dirs


def project_directories(features: Sequence[FeatureSpec]) -> list[str]:
    """Project-wide directories followed by every feature subtree."""
    dirs = list(PROJECT_DIRECTORIES)
    for feature in features:
        dirs.extend(feature_directories(feature.name))
    return dirs


def _ensure_unique(features: tuple[FeatureSpec, ...]) -> None:
    seen: set[str] = set()
    for feature in features:
        if feature.name in seen:
            raise InvalidNameError(f"Feature '{feature.name}' is listed more than once.")
        seen.add(feature.name)


def plan_create(project: ProjectSpec, catalog: TemplateCatalog) -> Plan:
    """Plan a brand-new project for ``project.features``.

    Raises:
        InvalidNameError: If a feature name appears twice in the roster.
    """
    _ensure_unique(project.features)
    plan = Plan(directories=project_directories(project.features))
    plan.files.extend(catalog.static_files(project.name))
    for feature in project.features:
        plan.files.extend(catalog.feature_files(feature))
    plan.files.append(catalog.bootstrap(project.features))
    plan.files.append(catalog.readme(project.name, project.features))
    plan.files.append(catalog.manifest(project.name, project.features))
    return plan


def plan_add_feature(
    project: ProjectSpec, feature: FeatureSpec, catalog: TemplateCatalog
) -> Plan:
    """Plan adding *feature* to an existing project.

    ``project.features`` is the roster recovered from disk.  Only the new
    feature's subtree is emitted; bootstrap, README and manifest are
    rewritten in full for the old roster followed by the new feature.

    Raises:
        PreconditionError: If the feature is already part of the roster.
    """
    if feature.name in project.feature_names:
        raise PreconditionError(
            f"Feature '{feature.name}' already exists in project '{project.name}'."
        )
    roster = project.features + (feature,)
    plan = Plan(directories=feature_directories(feature.name))
    plan.files.extend(catalog.feature_files(feature))
    plan.files.append(catalog.bootstrap(roster))
    plan.files.append(catalog.readme(project.name, roster))
    plan.files.append(catalog.manifest(project.name, roster))
    return plan
