"""CLI for mdshield - format markdown prose without touching code, front matter or links."""

import argparse
import difflib
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .config import MdshieldConfig, load_config
from .format.formatter import FormatResult, format_file


def _iter_markdown(paths: list[Path]) -> list[Path]:
    """Expand directories into the markdown files below them."""
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(
                p for p in sorted(path.rglob("*.md"))
                if not any(part.startswith(".") for part in p.relative_to(path).parts)
            )
        else:
            files.append(path)
    return files


def _print_diff(result: FormatResult) -> None:
    diff = difflib.unified_diff(
        result.original_text.splitlines(keepends=True),
        result.formatted_text.splitlines(keepends=True),
        fromfile=f"a/{result.path}",
        tofile=f"b/{result.path}",
    )
    sys.stdout.writelines(diff)


def cmd_format(args: argparse.Namespace, config: MdshieldConfig) -> int:
    """Format files in place (or preview with --dry-run)."""
    failed = 0
    changed = 0

    for path in _iter_markdown(args.paths):
        try:
            result = format_file(path, config.format, dry_run=args.dry_run)
        except Exception as e:
            print(f"Error: {path}: {e}", file=sys.stderr)
            failed += 1
            continue

        if not result.changed:
            continue
        changed += 1

        if args.diff:
            _print_diff(result)
        elif not args.quiet:
            verb = "Would format" if args.dry_run else "Formatted"
            print(f"{verb} {path} ({', '.join(result.changes)})")

    if not args.quiet:
        print(f"{changed} file(s) {'would change' if args.dry_run else 'changed'}")

    return 1 if failed else 0


def cmd_check(args: argparse.Namespace, config: MdshieldConfig) -> int:
    """Exit non-zero if any file is not formatted."""
    unformatted = 0
    failed = 0

    for path in _iter_markdown(args.paths):
        try:
            result = format_file(path, config.format, dry_run=True)
        except Exception as e:
            print(f"Error: {path}: {e}", file=sys.stderr)
            failed += 1
            continue

        if result.changed:
            unformatted += 1
            if not args.quiet:
                print(f"{path}: {', '.join(result.changes)}")

    return 1 if unformatted or failed else 0


def cmd_watch(args: argparse.Namespace, config: MdshieldConfig) -> int:
    """Watch a directory and reformat markdown files on save."""
    from .watch import watch_directory

    debounce_ms = args.debounce_ms if args.debounce_ms is not None else config.watch.debounce_ms

    return watch_directory(
        root=args.root,
        options=config.format,
        debounce_ms=debounce_ms,
        quiet=args.quiet,
    )


def _version_string() -> str:
    return (
        f"mdshield {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.system().lower()}-{platform.machine()}"
    )


def _configure_logging(args: argparse.Namespace) -> None:
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdshield", description="Markdown formatter that leaves code, front matter and links alone"
    )
    parser.add_argument(
        "--version", action="version", version=_version_string()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/mdshield.toml, <target>/mdshield.toml)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    parser_format = subparsers.add_parser("format", help="Format markdown files in place")
    parser_format.add_argument("paths", nargs="+", type=Path, help="Files or directories")
    parser_format.add_argument(
        "--dry-run", action="store_true", help="Report changes without writing"
    )
    parser_format.add_argument(
        "--diff", action="store_true", help="Print a unified diff of each change"
    )

    parser_check = subparsers.add_parser("check", help="Fail if any file needs formatting")
    parser_check.add_argument("paths", nargs="+", type=Path, help="Files or directories")

    parser_watch = subparsers.add_parser("watch", help="Reformat files when they are saved")
    parser_watch.add_argument("root", type=Path, help="Directory to watch")
    parser_watch.add_argument(
        "--debounce-ms", type=int, default=None,
        help="Debounce window in milliseconds (default: from config, 150)",
    )

    return parser


def _config_root(args: argparse.Namespace) -> Path | None:
    if args.cmd == "watch":
        return args.root
    first = args.paths[0]
    return first if first.is_dir() else first.parent


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    handlers: dict[str, Any] = {
        "format": cmd_format,
        "check": cmd_check,
        "watch": cmd_watch,
    }
    handler = handlers.get(args.cmd)
    if handler is None:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)

    try:
        config = load_config(config_path=args.config, root=_config_root(args))
        exit_code = handler(args, config)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
