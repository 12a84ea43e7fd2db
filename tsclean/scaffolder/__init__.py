"""tsclean scaffolder -- generates clean-architecture Express projects.

This module takes a project name and a roster of ``FeatureSpec`` objects and
renders a TypeScript project with Express + Mongoose + Zod + tsyringe and
Jest tests.  It can also add a feature to a project it generated earlier.

Quick usage::

    from tsclean.scaffolder import ProjectGenerator

    generator = ProjectGenerator()
    features = generator.build_features([("products", "name:string,price:number:min=0")])
    result = await generator.create("food-store", "/tmp/output", features)
"""

from tsclean.scaffolder.catalog import TemplateCatalog
from tsclean.scaffolder.generator import GenerationResult, ProjectGenerator
from tsclean.scaffolder.introspect import RecoveredProject, recover_roster
from tsclean.scaffolder.planner import Plan, plan_add_feature, plan_create
from tsclean.scaffolder.templates import TemplateRenderer

__all__ = [
    "GenerationResult",
    "Plan",
    "ProjectGenerator",
    "RecoveredProject",
    "TemplateCatalog",
    "TemplateRenderer",
    "plan_add_feature",
    "plan_create",
    "recover_roster",
]
