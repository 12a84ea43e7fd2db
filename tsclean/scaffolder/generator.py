"""Main scaffolding orchestrator.

Validates inputs, plans the file tree with the topology planner and writes
it to disk.  All validation happens before the first file-system mutation;
an I/O error part-way through the write phase aborts the run and leaves
already-written files in place.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from pathlib import Path

from tsclean.config import GeneratorConfig
from tsclean.errors import InvalidNameError, PreconditionError
from tsclean.parser.fields import build_feature
from tsclean.parser.models import FeatureSpec, ProjectSpec
from tsclean.utils import write_text

from .catalog import TemplateCatalog
from .introspect import recover_roster
from .planner import Plan, plan_add_feature, plan_create

_PROJECT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass
class GenerationResult:
    """What a run produced, for the CLI summary."""

    project_name: str
    root: Path
    features: list[str] = field(default_factory=list)
    added_feature: str | None = None
    directories: int = 0
    files: list[str] = field(default_factory=list)
    roster_source: str = "arguments"


def validate_project_name(name: str) -> str:
    """Return *name* if it can be used as a directory and npm package name.

    Raises:
        InvalidNameError: For empty names, path separators or ``.``/``..``.
    """
    if not _PROJECT_NAME_PATTERN.match(name) or name in (".", ".."):
        raise InvalidNameError(
            f"Invalid project name '{name}': use letters, digits, '.', '_' or '-'."
        )
    return name


class ProjectGenerator:
    """Drives "create project" and "add feature".

    Given a ``GeneratorConfig``, builds the plan for the requested
    operation and writes:
    - ``package.json``, ``tsconfig.json``, ``jest.config.ts``, ``.env``, ``.gitignore``
    - ``Core/`` result, error and database helpers
    - one ``Features/<name>/`` subtree and test directory per feature
    - ``Server/index.ts``, ``README.md`` and the sidecar manifest
    """

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self.config = config or GeneratorConfig()
        self.catalog = TemplateCatalog(self.config)

    # -- Public API --------------------------------------------------------

    async def create(
        self,
        project_name: str,
        output_dir: str | Path,
        features: list[FeatureSpec],
    ) -> GenerationResult:
        """Generate a new project at ``<output_dir>/<project_name>``.

        Raises:
            InvalidNameError: If the project name is unusable or a feature is
                listed twice.
            PreconditionError: If the target directory already exists.
        """
        validate_project_name(project_name)
        root = Path(output_dir) / project_name
        if root.exists():
            raise PreconditionError(
                f"Directory {root} already exists. Please remove it or choose a different name."
            )

        project = ProjectSpec(name=project_name, root_path=root, features=tuple(features))
        plan = plan_create(project, self.catalog)

        await asyncio.to_thread(root.mkdir, parents=True)
        await self._write_plan(root, plan)
        return GenerationResult(
            project_name=project_name,
            root=root,
            features=project.feature_names,
            directories=len(plan.directories),
            files=plan.paths,
        )

    async def add_feature(
        self,
        root: str | Path,
        feature_name: str,
        fields: str | None = None,
    ) -> GenerationResult:
        """Add one feature to the project rooted at *root*.

        Raises:
            ProjectNotRecognizedError: If *root* has no ``Server/index.ts``.
            InvalidNameError: If the feature name is unusable.
            FieldSpecError: If *fields* is malformed.
            PreconditionError: If the feature already exists.
        """
        root_path = Path(root)
        recovered = recover_roster(
            root_path, self.config.default_fields, self.config.manifest_name
        )
        feature = build_feature(feature_name, fields, self.config.default_fields)
        if (root_path / "Features" / feature.name).exists():
            raise PreconditionError(
                f"Feature '{feature.name}' already exists in {root_path / 'Features'}."
            )

        project = recovered.to_project(root_path)
        plan = plan_add_feature(project, feature, self.catalog)

        await self._write_plan(root_path, plan)
        return GenerationResult(
            project_name=recovered.project_name,
            root=root_path,
            features=project.feature_names + [feature.name],
            added_feature=feature.name,
            directories=len(plan.directories),
            files=plan.paths,
            roster_source=recovered.source,
        )

    def build_features(self, pairs: list[tuple[str, str | None]]) -> list[FeatureSpec]:
        """Turn ``(name, fields)`` pairs into validated ``FeatureSpec`` objects."""
        return [build_feature(name, spec, self.config.default_fields) for name, spec in pairs]

    # -- Writing -----------------------------------------------------------

    async def _write_plan(self, root: Path, plan: Plan) -> None:
        """Create every directory, then write every file concurrently."""

        def _mkdir(d: str) -> None:
            (root / d).mkdir(parents=True, exist_ok=True)

        for d in plan.directories:
            await asyncio.to_thread(_mkdir, d)

        await asyncio.gather(
            *[
                asyncio.to_thread(write_text, root / f.relative_path, f.content)
                for f in plan.files
            ]
        )
