#!/usr/bin/env python3
"""
cafce command line

    cafce init CONFIG [--force]
    cafce key CONFIG [--root DIR] [--max-files N] [--jobs N]
    cafce store CONFIG [...]
    cafce restore CONFIG [...]

`key` prints only the key on stdout so it can be captured by CI scripts.
`store` and `restore` validate the artifact store credentials and report the
resolved cache plan; the transfer itself belongs to the artifact store.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from typeguard import typechecked

from cafce import __version__
from cafce.env import Env
from cafce.errors import CafceError
from cafce.key.config import DEFAULT_MAX_FILES
from cafce.setting import Setting, init_setting_file
from cafce.util.color_output import print_field, print_green, print_red, print_yellow


logger = logging.getLogger(__name__)


@typechecked
@dataclass
class CliArgs:
    """Type-safe command line arguments"""

    command: str
    config: Path
    root: Path
    max_files: int
    jobs: int
    force: bool
    verbose: bool


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {number}")
    return number


def parse_args(args: Optional[list[str]] = None) -> CliArgs:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="cafce", description="Deterministic cache keys from file patterns"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Write a settings template")
    init_parser.add_argument("config", type=Path, help="Settings file to create")
    init_parser.add_argument(
        "--force", action="store_true", help="Overwrite an existing settings file"
    )

    for name, help_text in (
        ("key", "Print the cache key"),
        ("store", "Resolve the cache plan for storing an artifact"),
        ("restore", "Resolve the cache plan for restoring an artifact"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("config", type=Path, help="Settings file")
        sub.add_argument(
            "--root",
            type=Path,
            default=Path("."),
            help="Directory file patterns are resolved against (default: current directory)",
        )
        sub.add_argument(
            "--max-files",
            type=_positive_int,
            default=DEFAULT_MAX_FILES,
            help=f"Maximum number of files a key may cover (default: {DEFAULT_MAX_FILES})",
        )
        sub.add_argument(
            "--jobs",
            "-j",
            type=_positive_int,
            default=1,
            help="Number of files hashed in parallel (default: 1)",
        )

    parsed = parser.parse_args(args)
    return CliArgs(
        command=parsed.command,
        config=parsed.config,
        root=getattr(parsed, "root", Path(".")),
        max_files=getattr(parsed, "max_files", DEFAULT_MAX_FILES),
        jobs=getattr(parsed, "jobs", 1),
        force=getattr(parsed, "force", False),
        verbose=parsed.verbose,
    )


def _report_plan(action: str, setting: Setting, key: str, env: Env) -> None:
    print_field("action", action)
    print_field("server", env.aws_server_address)
    print_field("insecure", str(env.aws_insecure).lower())
    print_field("key", key)
    print_field("fallback keys", ", ".join(setting.fallback_keys) or "(none)")
    print_field("paths", ", ".join(setting.paths) or "(none)")


def run(args: CliArgs) -> int:
    """
    Execute a parsed command.

    Returns:
        Process exit code

    Raises:
        CafceError: On any settings, environment or key failure
    """
    if args.command == "init":
        path = init_setting_file(args.config, force=args.force)
        print_green(f"Created {path}")
        return 0

    setting = Setting.from_file(args.config)
    if not args.root.is_dir():
        print_yellow(f"Root directory does not exist: {args.root}; no files will match")

    if args.command == "key":
        print(setting.resolve_key(args.root, args.max_files, args.jobs))
        return 0

    env = Env.from_environ()
    logger.debug(f"Artifact store: {env}")
    key = setting.resolve_key(args.root, args.max_files, args.jobs)
    _report_plan(args.command, setting, key, env)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )
    try:
        return run(args)
    except CafceError as e:
        print_red(f"Error: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
