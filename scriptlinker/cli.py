"""CLI entrypoints for scriptlinker commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .logging import configure_logging
from .orchestrator import LinkError, Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        default=argparse.SUPPRESS if suppress_default else None,
        metavar="PATH",
        help="Also write a debug log to PATH (a directory gets one file per day).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scriptlinker",
        description="Link a multi-file script project into a single source file.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    link_parser = subparsers.add_parser(
        "link",
        help="Merge the entry point and the files it depends on.",
    )
    _add_verbose_option(link_parser, suppress_default=True)
    _add_log_file_option(link_parser, suppress_default=True)
    link_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory or .scriptlinker.yml path (defaults to current directory).",
    )
    link_parser.add_argument(
        "--entry",
        dest="entry_point",
        help=(
            "Entry-point source file relative to the project directory; "
            "overrides project.entry_point."
        ),
    )
    link_parser.add_argument(
        "--root-namespace",
        help="Only namespaces starting with this prefix are linked.",
    )
    link_parser.add_argument(
        "-o",
        "--output",
        help="Write the linked script here, overriding output.path.",
    )
    link_parser.add_argument(
        "-b",
        "--breakpoint",
        dest="breakpoints",
        action="append",
        default=[],
        metavar="FILE:LINE",
        help="Inject a debug break after LINE of FILE, relative to the project directory (repeatable).",
    )
    link_parser.add_argument(
        "--no-breakpoints",
        action="store_true",
        help="Do not inject any debug-break statements.",
    )
    link_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the linked script instead of writing it.",
    )
    link_parser.add_argument(
        "--list-files",
        action="store_true",
        help="Print the files that were linked.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_log_file_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for scriptlinker commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file or None)

    if args.command == "link":
        orchestrator = Orchestrator()
        try:
            outcome = orchestrator.run_link(
                args.path,
                entry_point=args.entry_point,
                root_namespace=args.root_namespace,
                output=args.output,
                breakpoints=args.breakpoints,
                inject_breakpoints=False if args.no_breakpoints else None,
                dry_run=bool(args.dry_run),
            )
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except (ConfigError, LinkError) as exc:
            parser.exit(1, f"scriptlinker link failed: {exc}\n")
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"scriptlinker link failed: {exc}\nRun with --verbose for more details.\n")

        if args.list_files:
            for path in outcome.result.linked_files:
                print(_relativize(path, outcome.project.project_dir))
        if outcome.dry_run or outcome.output_path is None:
            sys.stdout.write(outcome.result.content)
        else:
            print(
                f"Linked {len(outcome.result.linked_files)} file(s) into "
                f"{_relativize(outcome.output_path, Path.cwd())} "
                f"({outcome.result.elapsed_ms} ms)"
            )
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path, base: Path) -> str:
    try:
        return Path(path).relative_to(base).as_posix()
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
