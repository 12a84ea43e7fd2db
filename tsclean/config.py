"""tsclean configuration.

Typed settings for the generator. All values use a Pydantic v2 model so they
are validated at construction time and can be overridden from environment
variables without boiler-plate.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_FIELDS = "name:string:minlength=3,email:string:email"


class GeneratorConfig(BaseModel):
    """Global generator configuration.

    Created once by the CLI entry point and passed to ``ProjectGenerator``.
    The values end up in the generated ``.env`` and README, and control the
    Node.js preflight check.
    """

    default_fields: str = Field(
        default=DEFAULT_FIELDS,
        description="Field spec substituted when a feature is given no --fields",
    )
    port: int = Field(default=3000, ge=1, le=65535, description="PORT written to .env")
    mongodb_host: str = Field(
        default="mongodb://localhost:27017",
        description="Connection string prefix; the project name is appended",
    )
    min_node_version: int = Field(default=18, ge=1)
    check_node: bool = Field(default=True, description="Warn when Node.js is missing or too old")
    manifest_name: str = Field(default=".tsclean.json")

    def mongodb_uri(self, project_name: str) -> str:
        """Return the connection string for *project_name*."""
        return f"{self.mongodb_host.rstrip('/')}/{project_name}"

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            TSCLEAN_DEFAULT_FIELDS, TSCLEAN_PORT, TSCLEAN_MONGODB_HOST,
            TSCLEAN_MIN_NODE_VERSION, TSCLEAN_CHECK_NODE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("TSCLEAN_DEFAULT_FIELDS"):
            kwargs["default_fields"] = os.environ["TSCLEAN_DEFAULT_FIELDS"]
        if os.environ.get("TSCLEAN_PORT"):
            kwargs["port"] = int(os.environ["TSCLEAN_PORT"])
        if os.environ.get("TSCLEAN_MONGODB_HOST"):
            kwargs["mongodb_host"] = os.environ["TSCLEAN_MONGODB_HOST"]
        if os.environ.get("TSCLEAN_MIN_NODE_VERSION"):
            kwargs["min_node_version"] = int(os.environ["TSCLEAN_MIN_NODE_VERSION"])
        if os.environ.get("TSCLEAN_CHECK_NODE"):
            kwargs["check_node"] = os.environ["TSCLEAN_CHECK_NODE"].strip().lower() not in (
                "0",
                "false",
                "no",
                "off",
            )
        return cls(**kwargs)
