"""tsclean command-line interface.

Usage::

    tsclean create FoodStore ./ --feature products --fields name:string:minlength=3,price:number:min=0
    tsclean feature payment --fields amount:number:min=0,method:string:enum=credit|debit

``python -m tsclean`` is equivalent to ``tsclean``.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from tsclean import __version__
from tsclean.config import GeneratorConfig
from tsclean.errors import FeatureFlagError, TscleanError
from tsclean.parser.models import FeatureSpec, FieldType
from tsclean.parser.rules import compile_rule
from tsclean.parser.type_mapper import known_types
from tsclean.scaffolder import GenerationResult, ProjectGenerator
from tsclean.utils import (
    console,
    parse_major_version,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)

FEATURE_FLAG = "--feature"
FIELDS_FLAG = "--fields"


# ---------------------------------------------------------------------------
# --feature / --fields folding
# ---------------------------------------------------------------------------


class FlagState(str, Enum):
    """Parser states while folding repeated ``--feature``/``--fields`` flags."""
    AWAITING_FEATURE = "awaiting_feature"
    AWAITING_FIELDS_OR_FEATURE = "awaiting_fields_or_feature"


class _OrderedFlagAction(argparse.Action):
    """Record ``(option, value)`` pairs in command-line order."""

    def __call__(self, parser, namespace, values, option_string=None):
        flags = list(getattr(namespace, self.dest, None) or [])
        flags.append((option_string, values))
        setattr(namespace, self.dest, flags)


def fold_feature_flags(
    flags: Sequence[tuple[str, str]],
) -> tuple[tuple[str, str | None], ...]:
    """Pair each ``--feature`` with the ``--fields`` that follows it.

    A feature without ``--fields`` gets ``None`` (defaults apply later).

    Raises:
        FeatureFlagError: If ``--fields`` appears without a preceding
            ``--feature`` or twice for the same feature.
    """
    pairs: list[tuple[str, str | None]] = []
    state = FlagState.AWAITING_FEATURE
    pending: str | None = None

    for option, value in flags:
        if option == FEATURE_FLAG:
            if state is FlagState.AWAITING_FIELDS_OR_FEATURE:
                pairs.append((pending, None))
            pending = value
            state = FlagState.AWAITING_FIELDS_OR_FEATURE
        elif state is FlagState.AWAITING_FEATURE:
            raise FeatureFlagError(f"{FIELDS_FLAG} '{value}' must follow a {FEATURE_FLAG} flag.")
        else:
            pairs.append((pending, value))
            pending = None
            state = FlagState.AWAITING_FEATURE

    if state is FlagState.AWAITING_FIELDS_OR_FEATURE:
        pairs.append((pending, None))
    return tuple(pairs)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the ``tsclean`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="tsclean",
        description="Generate a TypeScript Express API with MongoDB, Zod, tsyringe and Jest",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  tsclean create FoodStore ./ --feature products "
            "--fields name:string:minlength=3,price:number:min=0\n"
            "  tsclean feature payment --fields amount:number:min=0,method:string:enum=credit|debit\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create a new project")
    create.add_argument("project_name", help="Project name (directory and package name)")
    create.add_argument("path", nargs="?", default=".", help="Parent directory (default: .)")
    create.add_argument(
        FEATURE_FLAG,
        dest="feature_flags",
        action=_OrderedFlagAction,
        default=[],
        metavar="NAME",
        help="Add a feature (repeatable)",
    )
    create.add_argument(
        FIELDS_FLAG,
        dest="feature_flags",
        action=_OrderedFlagAction,
        metavar="SPEC",
        help="Fields for the preceding --feature, e.g. title:string:minlength=3,price:number",
    )

    feature = sub.add_parser("feature", help="Add a feature to an existing project")
    feature.add_argument("feature_name", help="Feature name (lower-case identifier)")
    feature.add_argument(FIELDS_FLAG, dest="fields", default=None, metavar="SPEC")
    feature.add_argument(
        "--root",
        default=".",
        help="Project root (default: current directory)",
    )
    return parser


# ---------------------------------------------------------------------------
# Reporting helpers
# ---------------------------------------------------------------------------


def warn_lenient_fields(features: Sequence[FeatureSpec]) -> list[str]:
    """Print a warning for every unknown type or rule; return the messages."""
    messages: list[str] = []
    for feature in features:
        for f in feature.fields:
            if f.field_type is FieldType.OTHER:
                messages.append(
                    f"Feature '{feature.name}': unknown type '{f.type}' for field "
                    f"'{f.name}' (expected one of {', '.join(known_types())}), "
                    "generating it as 'any'."
                )
            if f.rule and not compile_rule(f.type, f.rule).recognized:
                messages.append(
                    f"Feature '{feature.name}': unknown rule '{f.rule}' for field "
                    f"'{f.name}' ignored."
                )
    for message in messages:
        print_warning(message)
    return messages


async def check_node(config: GeneratorConfig) -> bool:
    """Warn when Node.js is missing or older than ``config.min_node_version``."""
    code, stdout, _ = await run_command(["node", "--version"])
    if code != 0:
        print_warning(
            f"Node.js not found. Node.js {config.min_node_version} or higher is "
            "required to run the generated project."
        )
        return False
    major = parse_major_version(stdout)
    if major is None or major < config.min_node_version:
        print_warning(
            f"Node.js version {config.min_node_version} or higher is required. Found: {stdout}"
        )
        return False
    return True


def _print_result(result: GenerationResult) -> None:
    print_summary_table(
        {
            "Project": result.project_name,
            "Location": str(result.root),
            "Features": ", ".join(result.features) or "(none)",
            "Directories": str(result.directories),
            "Files written": str(len(result.files)),
        },
        title="tsclean",
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _create(args: argparse.Namespace, config: GeneratorConfig) -> GenerationResult:
    generator = ProjectGenerator(config)
    features = generator.build_features(list(fold_feature_flags(args.feature_flags or [])))
    warn_lenient_fields(features)
    if config.check_node:
        await check_node(config)
    return await generator.create(args.project_name, args.path, features)


async def _add_feature(args: argparse.Namespace, config: GeneratorConfig) -> GenerationResult:
    generator = ProjectGenerator(config)
    result = await generator.add_feature(Path(args.root), args.feature_name, args.fields)
    if result.roster_source != "manifest":
        print_warning(
            f"Roster recovered from {result.roster_source}: existing features are "
            "documented with the default field set."
        )
    return result


def run(argv: Sequence[str] | None = None, config: GeneratorConfig | None = None) -> int:
    """Parse *argv*, run the command and return the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = config or GeneratorConfig.from_env()
    except ValueError as exc:
        print_error(f"Invalid TSCLEAN_* configuration: {exc}")
        return 1

    try:
        if args.command == "create":
            result = asyncio.run(_create(args, config))
        else:
            result = asyncio.run(_add_feature(args, config))
    except TscleanError as exc:
        print_error(str(exc))
        return 1
    except OSError as exc:
        print_error(f"Failed to write project: {exc}")
        return 1

    _print_result(result)
    if result.added_feature:
        print_success(f"Feature '{result.added_feature}' added to {result.project_name}")
    else:
        print_success("Project setup complete!")
        console.print("To start the development server, run:")
        console.print(f"  cd {result.root}")
        console.print("  npm install")
        console.print("  npm run dev")
        console.print("To run tests, run:")
        console.print("  npm test")
    console.print(
        "Ensure MongoDB is running and update .env with the correct MONGODB_URI if needed."
    )
    return 0


def main() -> None:
    """CLI entry point for ``tsclean`` and ``python -m tsclean``."""
    sys.exit(run())


if __name__ == "__main__":
    main()
