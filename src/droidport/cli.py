"""droidport CLI: analyze, convert and normalize Claude Code plugin artifacts."""

import argparse
import json
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path
from typing import Optional

from droidport.codes import ArtifactKind

# Exit status when analysis finds an incompatible artifact
EXIT_INCOMPATIBLE = 2

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _configure_logging(args) -> None:
    level = "ERROR" if getattr(args, "quiet", False) else getattr(args, "log_level", "WARNING")
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _kind(value: Optional[str]) -> Optional[ArtifactKind]:
    return ArtifactKind(value) if value else None


def _print_analysis(name: str, result, quiet: bool) -> None:
    if quiet:
        return
    status = "OK" if result.compatible else "INCOMPATIBLE"
    print(f"[{status}] {name} (score {result.score})")
    if result.mapped_tools:
        print(f"  Tools: {', '.join(result.mapped_tools)}")
    if result.required_mcps:
        print(f"  MCP servers: {', '.join(result.required_mcps)}")
    for issue in result.issues:
        print(f"  Issue: {issue}")
    for warning in result.warnings:
        print(f"  Warning: {warning}")
    for suggestion in result.suggestions:
        print(f"  Suggestion: {suggestion}")


def main():
    """Main CLI entry point for droidport commands."""
    # Get version for --version argument (handle PackageNotFoundError)
    try:
        droidport_version = get_version("droidport")
    except PackageNotFoundError:
        droidport_version = "dev"

    parser = argparse.ArgumentParser(
        prog="droidport",
        description="droidport: Convert Claude Code plugins into Factory droids, commands and skills"
    )
    parser.add_argument("--version", action="version", version=f"droidport {droidport_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging level (default: WARNING)"
    )
    parent_parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Path to a tool catalog JSON (defaults to the built-in Factory catalog)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # analyze command
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Score compatibility of an agent file, command file or skill directory",
        parents=[parent_parser]
    )
    analyze_parser.add_argument(
        "path",
        type=Path,
        help="Path to agent/command markdown or skill directory"
    )
    analyze_parser.add_argument(
        "--kind",
        choices=[k.value for k in ArtifactKind],
        default=None,
        help="Artifact kind (inferred from the path when omitted)"
    )
    analyze_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the analysis result as JSON"
    )

    # convert command
    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert an artifact to its Factory form",
        parents=[parent_parser]
    )
    convert_parser.add_argument(
        "path",
        type=Path,
        help="Path to agent/command markdown or skill directory"
    )
    convert_parser.add_argument(
        "--kind",
        choices=[k.value for k in ArtifactKind],
        default=None,
        help="Artifact kind (inferred from the path when omitted)"
    )
    convert_parser.add_argument(
        "--normalize",
        dest="normalize",
        action="store_true",
        default=None,
        help="Rewrite legacy body patterns (default: on for commands only)"
    )
    convert_parser.add_argument(
        "--no-normalize",
        dest="normalize",
        action="store_false",
        help="Leave the body untouched"
    )
    convert_parser.add_argument(
        "--droid",
        dest="droids",
        action="append",
        default=None,
        help="Name of an available droid (repeatable)"
    )
    convert_parser.add_argument(
        "--skill",
        dest="skills",
        action="append",
        default=None,
        help="Name of an available skill (repeatable)"
    )
    convert_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write converted text here instead of stdout"
    )

    # normalize command
    normalize_parser = subparsers.add_parser(
        "normalize",
        help="Rewrite legacy patterns in a single file",
        parents=[parent_parser]
    )
    normalize_parser.add_argument(
        "path",
        type=Path,
        help="Path to markdown file"
    )
    normalize_parser.add_argument(
        "--kind",
        choices=["command", "droid", "skill", "generic"],
        default="generic",
        help="Label used in the marker comment"
    )
    normalize_parser.add_argument(
        "--no-marker",
        action="store_true",
        help="Do not prepend the normalizer marker comment"
    )
    normalize_parser.add_argument(
        "--in-place",
        action="store_true",
        help="Rewrite the file instead of printing"
    )

    # report command
    report_parser = subparsers.add_parser(
        "report",
        help="Compatibility report over local plugin directories",
        parents=[parent_parser]
    )
    report_parser.add_argument(
        "plugin_dirs",
        type=Path,
        nargs="+",
        help="Plugin directories (each with agents/, commands/, skills/)"
    )
    report_parser.add_argument(
        "--json",
        action="store_true",
        help="Print plugin analyses as JSON"
    )
    report_parser.add_argument(
        "--all",
        dest="include_all",
        action="store_true",
        help="Select incompatible artifacts too"
    )

    # normalize-installed command
    installed_parser = subparsers.add_parser(
        "normalize-installed",
        help="Re-normalize installed commands, droids and skills under a Factory directory",
        parents=[parent_parser]
    )
    installed_parser.add_argument(
        "base_dir",
        type=Path,
        help="Factory base directory (e.g. ~/.factory)"
    )
    installed_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report files that would change without writing them"
    )

    args = parser.parse_args()
    _configure_logging(args)

    if args.command == "analyze":
        try:
            from .api import analyze_path

            result = analyze_path(args.path, kind=_kind(args.kind), catalog=args.catalog)
            if args.json:
                print(json.dumps(result.model_dump(), indent=2))
            else:
                _print_analysis(args.path.name, result, args.quiet)
            if not result.compatible:
                sys.exit(EXIT_INCOMPATIBLE)
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    elif args.command == "convert":
        try:
            from .api import convert_path

            result = convert_path(
                args.path,
                kind=_kind(args.kind),
                catalog=args.catalog,
                normalize=args.normalize,
                available_droids=set(args.droids) if args.droids is not None else None,
                available_skills=set(args.skills) if args.skills is not None else None,
            )
            if args.output:
                args.output.parent.mkdir(parents=True, exist_ok=True)
                args.output.write_text(result.text, encoding="utf-8")
                if not args.quiet:
                    print("[OK] Conversion complete")
                    print(f"  Output: {args.output}")
            else:
                sys.stdout.write(result.text)
            if result.fallback:
                print("Warning: metadata could not be parsed; output is a best-effort fallback", file=sys.stderr)
            if result.normalized is not None and result.normalized.unresolved_droids and not args.quiet:
                print(f"Warning: unresolved droids: {', '.join(result.normalized.unresolved_droids)}", file=sys.stderr)
        except (FileNotFoundError, ValueError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    elif args.command == "normalize":
        try:
            from .api import normalize

            text = args.path.read_text(encoding="utf-8")
            result = normalize(text, kind=args.kind, add_marker=not args.no_marker)
            if args.in_place:
                if result.changed:
                    args.path.write_text(result.text, encoding="utf-8")
                if not args.quiet:
                    print(f"[{'FIXED' if result.changed else 'OK'}] {args.path}")
                    for note in result.notes:
                        print(f"  {note}")
            else:
                sys.stdout.write(result.text)
        except (FileNotFoundError, UnicodeDecodeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    elif args.command == "report":
        try:
            from .api import analyze_plugins, load_plugin_dir, report, select

            plugins = [load_plugin_dir(p) for p in args.plugin_dirs]
            analyses = analyze_plugins(plugins, catalog=args.catalog)
            if args.json:
                print(json.dumps([a.model_dump() for a in analyses], indent=2))
            elif not args.quiet:
                print(report(analyses))
                plan = select(plugins, analyses, include_all=args.include_all)
                print(f"  Selected: {plan.total_selected}, skipped: {plan.total_skipped}")
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    elif args.command == "normalize-installed":
        try:
            from ._internal.installed import normalize_installed

            if not args.base_dir.is_dir():
                raise FileNotFoundError(f"Base directory not found: {args.base_dir}")
            result = normalize_installed(args.base_dir, dry_run=args.dry_run)
            if not args.quiet:
                label = "would change" if args.dry_run else "changed"
                print(f"[OK] Scanned {result.scanned} files, {label} {result.changed}")
                for path in result.changed_paths:
                    print(f"  {path}")
            for error in result.errors:
                print(f"Error: {error}", file=sys.stderr)
            if result.errors:
                sys.exit(1)
        except FileNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
