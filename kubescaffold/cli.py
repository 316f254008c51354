"""Command line entry point.

Usage::

    kubescaffold init --repo github.com/example/memcached-operator
    kubescaffold init --repo example.com/guestbook --project-version 1 -o ./guestbook
    python -m kubescaffold init --repo example.com/app --owner "Example Inc."
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape

from kubescaffold.bootstrap import InitScaffolder
from kubescaffold.config import PROJECT_FILE, ConfigStore, ProjectConfig, ScaffoldSettings
from kubescaffold.errors import ScaffoldError
from kubescaffold.utils import console, print_error, print_rendered_files, print_success

NEXT_STEPS = """Next: build the manager with:
$ make manager
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kubescaffold",
        description="kubescaffold -- generate the boilerplate of a Kubernetes controller project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  kubescaffold init --repo github.com/example/memcached-operator\n"
            "  kubescaffold init --repo example.com/guestbook --project-version 1\n"
            "  kubescaffold init --repo example.com/app --license none -o ./app\n"
        ),
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    init = subcommands.add_parser(
        "init",
        help="Initialise a new project",
        description="Write the PROJECT file and scaffold a new project tree.",
    )
    init.add_argument(
        "--repo",
        required=True,
        help="Go import path of the project (e.g. github.com/example/memcached-operator)",
    )
    init.add_argument(
        "--domain",
        default="my.domain",
        help="Domain for API groups (default: my.domain)",
    )
    init.add_argument(
        "--project-version",
        default="2",
        help="Project layout version, 1 or 2 (default: 2)",
    )
    init.add_argument(
        "--license",
        default=None,
        help="License header for the boilerplate: apache2 or none (default: apache2)",
    )
    init.add_argument(
        "--owner",
        default=None,
        help="Owner named in the copyright line",
    )
    init.add_argument(
        "--image",
        default=None,
        help="Controller image referenced by the Makefile and manager manifest",
    )
    init.add_argument(
        "--controller-runtime-version",
        default=None,
        help="controller-runtime version pinned in go.mod (v2 only)",
    )
    init.add_argument(
        "--controller-tools-version",
        default=None,
        help="controller-gen version installed by the Makefile (v2 only)",
    )
    init.add_argument(
        "--output", "-o",
        default=".",
        help="Directory to generate the project into (default: current directory)",
    )
    return parser


def run_init(args: argparse.Namespace) -> int:
    """Scaffold a project from parsed ``init`` arguments and return an exit code."""
    root = Path(args.output)
    try:
        config = ProjectConfig(
            version=args.project_version,
            domain=args.domain,
            repo=args.repo,
        )
        settings = ScaffoldSettings.from_env(
            license=args.license,
            owner=args.owner,
            image=args.image,
            controller_runtime_version=args.controller_runtime_version,
            controller_tools_version=args.controller_tools_version,
        )
    except ValidationError as exc:
        print_error(f"Error: invalid configuration\n{escape(str(exc))}")
        return 1

    scaffolder = InitScaffolder(ConfigStore(config, root / PROJECT_FILE), settings, root)
    try:
        rendered = scaffolder.scaffold()
    except ScaffoldError as exc:
        print_error(f"Error: {escape(str(exc))}")
        console.print(f"[dim]Stopped after state: {scaffolder.state.value}[/dim]")
        return 1

    print_rendered_files(rendered, root)
    print_success("Project scaffolded.")
    console.print(NEXT_STEPS)
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``kubescaffold`` and ``python -m kubescaffold``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "init":
        sys.exit(run_init(args))

    parser.error(f"unknown command {args.command!r}")


if __name__ == "__main__":
    main()
