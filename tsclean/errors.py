"""Exception hierarchy for the tsclean generator.

Every abort path in the CLI maps to one of these classes.  Validation errors
are raised before any file-system mutation; I/O failures surface as plain
``OSError`` and are not wrapped.
"""

from __future__ import annotations


class TscleanError(Exception):
    """Base class for all generator errors."""


class FieldSpecError(TscleanError):
    """Raised when a ``name:type[:rule]`` field specification is malformed."""

    def __init__(self, entry: str, message: str) -> None:
        self.entry = entry
        super().__init__(f"Invalid field '{entry}': {message}")


class InvalidNameError(TscleanError):
    """Raised for project or feature names that are unusable or duplicated."""


class FeatureFlagError(TscleanError):
    """Raised when ``--feature`` / ``--fields`` flags are out of order."""


class PreconditionError(TscleanError):
    """Raised when the target directory is not in the expected state."""


class ProjectNotRecognizedError(PreconditionError):
    """Raised when ``feature`` is run outside a generated project root."""

    def __init__(self, root: str) -> None:
        self.root = root
        super().__init__(
            f"{root} is not a tsclean project (Server/index.ts not found). "
            "Run this command from the project root."
        )
