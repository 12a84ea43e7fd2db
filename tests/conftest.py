"""Shared pytest fixtures for the tsclean test suite.

Provides reusable fixtures for:
- Generator configuration with the Node.js preflight disabled
- Parsed feature specs
- Template catalog / generator instances
- A freshly generated project on disk
"""

from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio

from tsclean.config import GeneratorConfig
from tsclean.parser.fields import build_feature
from tsclean.parser.models import FeatureSpec
from tsclean.scaffolder import ProjectGenerator, TemplateCatalog


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> GeneratorConfig:
    """Default configuration without the ``node --version`` check."""
    return GeneratorConfig(check_node=False)


@pytest.fixture
def catalog(config: GeneratorConfig) -> TemplateCatalog:
    return TemplateCatalog(config)


@pytest.fixture
def generator(config: GeneratorConfig) -> ProjectGenerator:
    return ProjectGenerator(config)


# ---------------------------------------------------------------------------
# Features
# ---------------------------------------------------------------------------

@pytest.fixture
def product_feature(config: GeneratorConfig) -> FeatureSpec:
    """``product`` with a string and a number field."""
    return build_feature("product", "title:string,price:number", config.default_fields)


@pytest.fixture
def ticket_feature(config: GeneratorConfig) -> FeatureSpec:
    """``ticket`` exercising every rule kind."""
    return build_feature(
        "ticket",
        "email:string:email,status:string:enum=open|closed,age:number:min=18,"
        "title:string:minlength=3,urgent:boolean,meta:json",
        config.default_fields,
    )


@pytest.fixture
def default_feature(config: GeneratorConfig) -> FeatureSpec:
    """A feature created without ``--fields``."""
    return build_feature("user", None, config.default_fields)


# ---------------------------------------------------------------------------
# Generated project structure fixture
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def created_project(generator: ProjectGenerator, tmp_path: Path) -> Path:
    """A project ``shop`` with features ``a`` and ``b`` generated under *tmp_path*."""
    features = generator.build_features([("a", "title:string"), ("b", None)])
    result = await generator.create("shop", tmp_path, features)
    return result.root
