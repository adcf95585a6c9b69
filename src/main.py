# src/main.py — v1
"""CLI entry point — check, fix, config, version commands.

Usage:
    cljfmt [options] check [paths...]
    cljfmt [options] fix [paths...]
    cljfmt [options] config [path]
    cljfmt version

Exit codes: 0 success, 1 usage error, 2 formatting violations found,
3 files failed to process, 4 unhandled error.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from cljfmt.batch.operations import BatchCommand, bind_operation
from cljfmt.batch.roots import RootResolutionError, resolve_roots
from cljfmt.batch.runner import BatchRunner
from cljfmt.commands.report import ExitCode, interpret_report
from cljfmt.config.loader import load_config
from cljfmt.config.settings import ConfigurationError, RunSettings, load_settings
from cljfmt.logging.context import set_command_context
from cljfmt.logging.logger import get_logger, setup_from_settings
from cljfmt.version import version_string

logger = get_logger("main")


class UsageError(Exception):
    """Raised for malformed command lines."""


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports errors as UsageError instead of exiting 2."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(f"{self.prog}: {message}")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        print(exc, file=sys.stderr)
        return ExitCode.USAGE
    except SystemExit as exc:
        # --help
        return int(exc.code or 0)

    if not hasattr(args, "func"):
        parser.print_help()
        return ExitCode.USAGE

    try:
        settings = _settings_from_args(args)
    except ConfigurationError as exc:
        print(exc, file=sys.stderr)
        return ExitCode.USAGE

    try:
        setup_from_settings(settings)
        set_command_context(args.command)
        return asyncio.run(args.func(args, settings))
    except (UsageError, ConfigurationError, RootResolutionError) as exc:
        logger.error("%s", exc)
        return ExitCode.USAGE
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Unhandled error: %s", exc, exc_info=True)
        return ExitCode.UNHANDLED


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    # Flags are accepted before or after the command name. Subcommands use
    # SUPPRESS defaults so they do not overwrite a flag given earlier.
    def add_common(p: argparse.ArgumentParser, suppress: bool) -> None:
        flag_default = argparse.SUPPRESS if suppress else False
        jobs_default = argparse.SUPPRESS if suppress else None
        p.add_argument(
            "--no-color", action="store_true", default=flag_default,
            help="Don't output ANSI color codes",
        )
        p.add_argument(
            "-v", "--verbose", action="store_true", default=flag_default,
            help="Print detailed debugging output",
        )
        p.add_argument(
            "-j", "--jobs", type=int, default=jobs_default,
            help="Number of files to process concurrently",
        )

    common = _ArgumentParser(add_help=False)
    add_common(common, suppress=True)

    parser = _ArgumentParser(
        prog="cljfmt",
        description="Check and fix formatting of Clojure source files.",
    )
    add_common(parser, suppress=False)

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    # --- check ---
    p_check = subparsers.add_parser(
        "check", parents=[common],
        help="Find files with formatting errors and print a diff",
        description=(
            "Check source files for formatting errors. Prints a diff of all "
            "malformed lines found and exits with an error if any files have "
            "format errors."
        ),
    )
    p_check.add_argument("paths", nargs="*", help="Files or directories (default: .)")
    p_check.set_defaults(func=_cmd_check)

    # --- fix ---
    p_fix = subparsers.add_parser(
        "fix", parents=[common],
        help="Edit source files to fix formatting errors",
        description="Edit source files in place to correct formatting errors.",
    )
    p_fix.add_argument("paths", nargs="*", help="Files or directories (default: .)")
    p_fix.set_defaults(func=_cmd_fix)

    # --- config ---
    p_config = subparsers.add_parser(
        "config", parents=[common],
        help="Show config used for a given path",
        description=(
            "Show the merged configuration which would be used to format the "
            "file or directory at the given path. Uses the current directory "
            "if one is not given."
        ),
    )
    p_config.add_argument("paths", nargs="*", metavar="path")
    p_config.set_defaults(func=_cmd_config)

    # --- version ---
    p_version = subparsers.add_parser(
        "version", help="Print program version information",
    )
    p_version.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    p_version.set_defaults(func=_cmd_version)

    return parser


def _settings_from_args(args: argparse.Namespace) -> RunSettings:
    """Build run settings; flags given on the command line win over env."""
    overrides: dict[str, object] = {}
    if args.verbose:
        overrides["verbose"] = True
    if args.no_color:
        overrides["no_color"] = True
    if getattr(args, "jobs", None) is not None:
        overrides["max_workers"] = args.jobs
    return load_settings(**overrides)


async def _run_batch_command(
    command: BatchCommand, args: argparse.Namespace, settings: RunSettings,
) -> int:
    roots = resolve_roots(args.paths)
    operation = bind_operation(command, settings)
    report = await BatchRunner(settings).run(roots, operation)

    logger.debug("Checked %d files in %.2f ms", report.total, report.elapsed_ms)
    logger.debug("%s", dict(report.counts))

    for message in report.messages:
        if message.kind == "incorrect":
            print(message.info, end="")
        else:
            logger.info(message.info)
    for error in report.errors:
        logger.error("Failed to process %s", error.describe())

    verdict = interpret_report(command, report)
    logger.log(verdict.level, verdict.message)
    return verdict.exit_code


async def _cmd_check(args: argparse.Namespace, settings: RunSettings) -> int:
    """Execute the check command."""
    return await _run_batch_command("check", args, settings)


async def _cmd_fix(args: argparse.Namespace, settings: RunSettings) -> int:
    """Execute the fix command."""
    return await _run_batch_command("fix", args, settings)


async def _cmd_config(args: argparse.Namespace, settings: RunSettings) -> int:
    """Print the merged configuration for a path."""
    if len(args.paths) > 1:
        raise UsageError("cljfmt config command takes at most one argument")
    root = resolve_roots(args.paths)[0]
    config = await asyncio.to_thread(
        load_config, root, settings.config_search_depth,
    )
    print(json.dumps(config.model_dump(), indent=2, sort_keys=True))
    return ExitCode.OK


async def _cmd_version(args: argparse.Namespace, settings: RunSettings) -> int:
    """Print version information."""
    if args.extra:
        raise UsageError("cljfmt version command takes no arguments")
    print(version_string())
    return ExitCode.OK


if __name__ == "__main__":
    sys.exit(main())
