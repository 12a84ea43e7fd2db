"""Recover the project name and feature roster of a generated project.

``tsclean feature`` rewrites ``Server/index.ts`` and ``README.md`` in full,
so it needs the existing roster.  The sidecar manifest is the source of
truth when present.  Projects without one are read back from the README:
the first ``# heading`` is the project name and every ``Create a <feature>``
line in the testing section is one feature.  Features recovered that way
get the default field set, so their regenerated README sample no longer
matches their original fields.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from tsclean.errors import ProjectNotRecognizedError
from tsclean.parser.fields import resolve_fields
from tsclean.parser.models import FeatureSpec, ProjectManifest, ProjectSpec

from .catalog import BOOTSTRAP_PATH, README_PATH

_HEADING_PATTERN = re.compile(r"^# (.+)$", re.MULTILINE)
_FEATURE_PATTERN = re.compile(r"Create a (\w+)")
_CONTROLLER_IMPORT_PATTERN = re.compile(r"import \{ (\w+)Controller \}")

FALLBACK_PROJECT_NAME = "Project"


@dataclass(frozen=True)
class RecoveredProject:
    """Roster read back from disk and where it came from."""

    project_name: str
    features: tuple[FeatureSpec, ...]
    source: str  # "manifest" | "readme" | "bootstrap"

    def to_project(self, root: Path) -> ProjectSpec:
        return ProjectSpec(name=self.project_name, root_path=root, features=self.features)


def is_project_root(root: Path) -> bool:
    """Return ``True`` if *root* contains the generated bootstrap file."""
    return (root / BOOTSTRAP_PATH).is_file()


def recover_roster(
    root: str | Path,
    default_fields: str,
    manifest_name: str = ".tsclean.json",
) -> RecoveredProject:
    """Recover the project name and ordered roster under *root*.

    Args:
        root: Project root directory.
        default_fields: Field spec given to features whose fields cannot be
            recovered.
        manifest_name: Sidecar manifest file name.

    Raises:
        ProjectNotRecognizedError: If ``Server/index.ts`` is missing.
    """
    root_path = Path(root)
    if not is_project_root(root_path):
        raise ProjectNotRecognizedError(str(root_path))

    manifest = _load_manifest(root_path / manifest_name)
    if manifest is not None:
        features = tuple(
            FeatureSpec(name=f.name, fields=tuple(resolve_fields(f.field_spec, default_fields)))
            for f in manifest.features
        )
        return RecoveredProject(manifest.project_name, features, "manifest")

    readme_path = root_path / README_PATH
    readme = _read_lenient(readme_path) if readme_path.is_file() else ""
    project_name = recover_project_name(readme)
    names = recover_feature_names(readme)
    source = "readme"
    if not names:
        bootstrap = _read_lenient(root_path / BOOTSTRAP_PATH)
        names = recover_bootstrap_names(bootstrap)
        source = "bootstrap"

    defaults = tuple(resolve_fields(None, default_fields))
    features = tuple(FeatureSpec(name=name, fields=defaults) for name in names)
    return RecoveredProject(project_name, features, source)


def recover_project_name(readme: str) -> str:
    """Return the first top-level Markdown heading, or ``"Project"``."""
    match = _HEADING_PATTERN.search(readme)
    if not match:
        return FALLBACK_PROJECT_NAME
    return match.group(1).strip()


def recover_feature_names(readme: str) -> list[str]:
    """Return feature names from ``Create a <feature>`` phrases, in order."""
    return _unique(_FEATURE_PATTERN.findall(readme))


def recover_bootstrap_names(bootstrap: str) -> list[str]:
    """Return feature names from the controller imports in ``Server/index.ts``."""
    return _unique(
        name[:1].lower() + name[1:] for name in _CONTROLLER_IMPORT_PATTERN.findall(bootstrap)
    )


def _unique(names) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            result.append(name)
    return result


def _load_manifest(path: Path) -> ProjectManifest | None:
    """Load the sidecar manifest; a missing or invalid file yields ``None``."""
    if not path.is_file():
        return None
    try:
        return ProjectManifest.model_validate_json(path.read_text(encoding="utf-8"))
    except (ValidationError, UnicodeDecodeError):
        return None


def _read_lenient(path: Path) -> str:
    """Read a hand-editable file; undecodable bytes become U+FFFD."""
    return path.read_text(encoding="utf-8", errors="replace")
