"""Template catalog: one emitter per generated file kind.

Every emitter is a pure function of the project name, the feature being
rendered and the roster, returning a ``GeneratedFile``.  The path patterns
below are the single source of truth for where each kind lives, so the
relative imports baked into the templates stay valid.
"""

from __future__ import annotations

from collections.abc import Sequence

from tsclean import __version__
from tsclean.config import GeneratorConfig
from tsclean.parser.models import (
    FeatureSpec,
    GeneratedFile,
    ManifestFeature,
    ProjectManifest,
)
from tsclean.parser.rules import build_zod_schema

from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# npm packages pinned into the generated package.json
# ---------------------------------------------------------------------------

NPM_DEPENDENCIES: tuple[tuple[str, str], ...] = (
    ("dotenv", "^16.4.5"),
    ("express", "^4.21.1"),
    ("mongoose", "^8.7.2"),
    ("reflect-metadata", "^0.2.2"),
    ("tsyringe", "^4.8.0"),
    ("zod", "^3.23.8"),
)

NPM_DEV_DEPENDENCIES: tuple[tuple[str, str], ...] = (
    ("@types/express", "^5.0.0"),
    ("@types/jest", "^29.5.13"),
    ("@types/node", "^22.7.5"),
    ("@types/supertest", "^6.0.2"),
    ("jest", "^29.7.0"),
    ("nodemon", "^3.1.7"),
    ("supertest", "^7.0.0"),
    ("ts-jest", "^29.2.5"),
    ("ts-node", "^10.9.2"),
    ("typescript", "^5.6.3"),
)


# ---------------------------------------------------------------------------
# File kinds
# ---------------------------------------------------------------------------

BOOTSTRAP_PATH = "Server/index.ts"
README_PATH = "README.md"

# (template, output path)
STATIC_FILES: tuple[tuple[str, str], ...] = (
    ("core/package.json.j2", "package.json"),
    ("core/tsconfig.json.j2", "tsconfig.json"),
    ("core/jest.config.ts.j2", "jest.config.ts"),
    ("core/env.j2", ".env"),
    ("core/gitignore.j2", ".gitignore"),
    ("core/result.ts.j2", "Core/result/result.ts"),
    ("core/custom-error.ts.j2", "Core/error/custom-error.ts"),
    ("core/database.ts.j2", "Core/config/database.ts"),
)

# kind -> (template, output path pattern); ``{name}`` is the feature name.
FEATURE_FILES: dict[str, tuple[str, str]] = {
    "container": ("feature/container.ts.j2", "Features/{name}/container.ts"),
    "entity": ("feature/entity.ts.j2", "Features/{name}/domain/entity/{name}.entity.ts"),
    "repository_interface": (
        "feature/repository.interface.ts.j2",
        "Features/{name}/domain/repositories/{name}.repository.interface.ts",
    ),
    "use_case": ("feature/usecase.ts.j2", "Features/{name}/domain/usecases/create-{name}.usecase.ts"),
    "model": ("feature/model.ts.j2", "Features/{name}/data/models/{name}.model.ts"),
    "data_source": (
        "feature/datasource.ts.j2",
        "Features/{name}/data/datasources/{name}.datasource.ts",
    ),
    "repository_impl": (
        "feature/repository.ts.j2",
        "Features/{name}/data/repositories/{name}.repository.ts",
    ),
    "middleware": (
        "feature/middleware.ts.j2",
        "Features/{name}/delivery/middlewares/validate-{name}.middleware.ts",
    ),
    "controller": (
        "feature/controller.ts.j2",
        "Features/{name}/delivery/controllers/{name}.controller.ts",
    ),
    "use_case_test": ("tests/usecase.test.ts.j2", "__tests__/Features/{name}/{name}.usecase.test.ts"),
    "controller_test": (
        "tests/controller.test.ts.j2",
        "__tests__/Features/{name}/{name}.controller.test.ts",
    ),
}


class TemplateCatalog:
    """Renders every file kind the generator knows about."""

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self.renderer = renderer or TemplateRenderer()

    # -- Project-wide files -------------------------------------------------

    def static_files(self, project_name: str) -> list[GeneratedFile]:
        """Manifest/config files and the shared ``Core/`` sources."""
        context = {
            "project_name": project_name,
            "port": self.config.port,
            "mongodb_uri": self.config.mongodb_uri(project_name),
            "dependencies": NPM_DEPENDENCIES,
            "dev_dependencies": NPM_DEV_DEPENDENCIES,
        }
        return [
            GeneratedFile(path, self.renderer.render(template, context))
            for template, path in STATIC_FILES
        ]

    def bootstrap(self, features: Sequence[FeatureSpec]) -> GeneratedFile:
        """``Server/index.ts`` mounting every controller in roster order."""
        content = self.renderer.render(
            "core/server-index.ts.j2",
            {"features": list(features), "port": self.config.port},
        )
        return GeneratedFile(BOOTSTRAP_PATH, content)

    def readme(self, project_name: str, features: Sequence[FeatureSpec]) -> GeneratedFile:
        """README with setup steps and one example request per feature."""
        content = self.renderer.render(
            "core/README.md.j2",
            {
                "project_name": project_name,
                "features": list(features),
                "port": self.config.port,
                "manifest_name": self.config.manifest_name,
            },
        )
        return GeneratedFile(README_PATH, content)

    def manifest(self, project_name: str, features: Sequence[FeatureSpec]) -> GeneratedFile:
        """Sidecar JSON recording the roster and each feature's field spec."""
        manifest = ProjectManifest(
            project_name=project_name,
            generator_version=__version__,
            features=[ManifestFeature(name=f.name, field_spec=f.fields_spec) for f in features],
        )
        return GeneratedFile(self.config.manifest_name, manifest.model_dump_json(indent=2) + "\n")

    # -- Per-feature files --------------------------------------------------

    def feature_file(self, kind: str, feature: FeatureSpec) -> GeneratedFile:
        """Render one per-feature file kind (see ``FEATURE_FILES``)."""
        template, pattern = FEATURE_FILES[kind]
        context = {
            "feature": feature,
            "zod_schema": build_zod_schema(feature.fields),
            "sample_json": feature.sample_json,
        }
        return GeneratedFile(
            pattern.format(name=feature.name),
            self.renderer.render(template, context),
        )

    def feature_files(self, feature: FeatureSpec) -> list[GeneratedFile]:
        """All per-feature files, in ``FEATURE_FILES`` order."""
        return [self.feature_file(kind, feature) for kind in FEATURE_FILES]
