from __future__ import annotations

import argparse
import json
from collections.abc import Iterable
from pathlib import Path

from refiner import __version__
from refiner.cleanup import INSTALL_TIMEOUT, SubprocessRunner, clean_project
from refiner.errors import ManifestError
from refiner.logging import configure_logging
from refiner.models import AnalysisResult
from refiner.report import render_analysis, render_cleanup, render_removal_preview


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="refiner",
        description="Clean unused files and dependencies from JavaScript projects",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--path", default=".", help="Project directory (default: current)")
    common.add_argument(
        "--include",
        action="append",
        default=[],
        help="Glob of source files to include (repeatable, relative to --path)",
    )
    common.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Glob to exclude (repeatable, relative to --path)",
    )
    common.add_argument("--verbose", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)
    analyze_cmd = commands.add_parser(
        "analyze", parents=[common], help="Display unused dependencies and files"
    )
    analyze_cmd.add_argument("--json", action="store_true", help="Print the result as JSON")

    clean_cmd = commands.add_parser(
        "clean", parents=[common], help="Remove unused dependencies and files"
    )
    clean_cmd.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        help="Show what would be deleted without deleting",
    )
    clean_cmd.add_argument("-y", "--yes", action="store_true", help="Skip confirmation prompts")
    clean_cmd.add_argument(
        "--timeout",
        type=float,
        default=INSTALL_TIMEOUT,
        help="Seconds to wait for the package manager reinstall",
    )

    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(verbose=args.verbose)
    root = Path(args.path).resolve()
    if not root.exists() or not root.is_dir():
        raise SystemExit(f"Path does not exist or is not a directory: {root}")

    result = _run_analysis(root, args.include, args.exclude)
    if args.command == "analyze":
        if args.json:
            from refiner.analyzer import result_to_dict

            print(json.dumps(result_to_dict(result), indent=2))
        else:
            print(render_analysis(result))
        return 0
    return _clean(root, result, args)


def _run_analysis(root: Path, include: list[str], exclude: list[str]) -> AnalysisResult:
    from refiner.analyzer import analyze

    print("Analyzing project...")
    try:
        result = analyze(root, include=include, exclude=exclude)
    except ManifestError as exc:
        raise SystemExit(f"Analysis failed: {exc}") from exc
    print("Analysis complete")
    return result


def _clean(root: Path, result: AnalysisResult, args: argparse.Namespace) -> int:
    if result.is_clean:
        print("\nYour project is already clean!")
        return 0

    print(render_removal_preview(result))
    if not args.yes and not args.dry_run:
        try:
            answer = input("\nDo you want to proceed with cleanup? (y/N) ")
        except EOFError:
            answer = ""
        if answer.strip().lower() != "y":
            print("\nCleanup cancelled")
            return 0

    if args.dry_run:
        print("\nDry run complete - no changes made")
        return 0

    print("Cleaning project...")
    cleanup = clean_project(root, result, runner=SubprocessRunner(), timeout=args.timeout)
    print("Cleanup complete")
    print(render_cleanup(cleanup))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
