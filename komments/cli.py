"""CLI entrypoints for komments commands."""

from __future__ import annotations

import argparse
import getpass
import sys
from pathlib import Path
from typing import Callable

from . import __version__
from .config import ConfigError, KommentsConfig, load_config, setup_api_key
from .git.status import GitError
from .llm.runner import LLMRunner
from .logging import configure_logging, get_logger, log_success
from .orchestrator import Orchestrator

OrchestratorFactory = Callable[[KommentsConfig], Orchestrator]

_logger = get_logger("cli")


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


def _temperature(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid temperature: {value}") from exc
    if not 0.0 <= parsed <= 1.0:
        raise argparse.ArgumentTypeError("temperature must be between 0.0 and 1.0")
    return parsed


def _add_scan_options(parser: argparse.ArgumentParser, *, suppress_default: bool = False) -> None:
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Review and apply suggestions interactively after scanning.",
    )
    parser.add_argument(
        "-t",
        "--temperature",
        type=_temperature,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Creativity of generated comments (0.0-1.0). Defaults to the configured value.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="komments",
        description="AI-powered code commenting for modified source files.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to .komments.yml or the project root (defaults to the current directory).",
    )
    _add_scan_options(parser)
    subparsers = parser.add_subparsers(dest="command")

    scan_parser = subparsers.add_parser(
        "scan",
        help="Suggest comments for code units in modified files (default command).",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_scan_options(scan_parser, suppress_default=True)

    import_parser = subparsers.add_parser(
        "import",
        help="Apply the latest suggestions from a komments.json history file.",
    )
    _add_verbose_option(import_parser, suppress_default=True)
    import_parser.add_argument(
        "file",
        nargs="?",
        default=None,
        help="History file to import (defaults to the configured komments.json).",
    )
    import_parser.add_argument(
        "-f",
        "--file",
        dest="file_flag",
        default=None,
        help="History file to import; same as the positional argument.",
    )
    import_parser.add_argument(
        "--no-interactive",
        "-a",
        "--apply-all",
        dest="interactive",
        action="store_false",
        default=True,
        help="Apply every suggestion without prompting.",
    )

    remove_parser = subparsers.add_parser(
        "remove-comments",
        help="Strip comments from the given files or from the whole codebase.",
    )
    _add_verbose_option(remove_parser, suppress_default=True)
    remove_parser.add_argument(
        "files",
        nargs="*",
        help="Files to process (defaults to every source file below the project root).",
    )
    remove_parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Skip the confirmation prompt.",
    )

    return parser


def main(
    argv: list[str] | None = None,
    *,
    orchestrator_factory: OrchestratorFactory = Orchestrator,
) -> None:
    """CLI entrypoint for komments commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))
    command = args.command or "scan"

    try:
        config = load_config(Path(args.config) if args.config else Path.cwd())
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    try:
        if command == "scan":
            _run_scan(parser, args, config, orchestrator_factory)
        elif command == "import":
            _run_import(parser, args, config, orchestrator_factory)
        elif command == "remove-comments":
            _run_remove(args, config, orchestrator_factory)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except KeyboardInterrupt:  # pragma: no cover - interactive
        parser.exit(130, "\nInterrupted.\n")
    except Exception as exc:  # pragma: no cover - unexpected failure
        parser.exit(1, f"komments {command} failed: {exc}\nRun with --verbose for more details.\n")


def _run_scan(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: KommentsConfig,
    factory: OrchestratorFactory,
) -> None:
    if config.api_key is None and _provider_requires_key(config):
        api_key = setup_api_key(config.root, prompt=getpass.getpass)
        if not api_key:
            _logger.error("Failed to set up API key. Exiting.")
            parser.exit(1)
        config = config.with_api_key(api_key)

    orchestrator = factory(config)
    try:
        orchestrator.run_scan(
            interactive=bool(getattr(args, "interactive", False)),
            temperature=getattr(args, "temperature", None),
        )
    except GitError as exc:
        _logger.warning("%s", exc)
        parser.exit(0)


def _run_import(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: KommentsConfig,
    factory: OrchestratorFactory,
) -> None:
    orchestrator = factory(config)
    history_file = args.file_flag or args.file
    history_path = Path(history_file).expanduser() if history_file else None
    try:
        orchestrator.run_import(history_path, interactive=bool(args.interactive))
    except FileNotFoundError as exc:
        _logger.error("%s", exc)
        parser.exit(1)
    log_success(_logger, "Import completed.")


def _run_remove(
    args: argparse.Namespace,
    config: KommentsConfig,
    factory: OrchestratorFactory,
) -> None:
    orchestrator = factory(config)
    confirm = config.remove.confirm and not args.yes
    orchestrator.run_remove(args.files or None, confirm=confirm)


def _provider_requires_key(config: KommentsConfig) -> bool:
    provider = (config.llm.provider or LLMRunner.DEFAULT_PROVIDER).lower()
    return provider == "gemini"


if __name__ == "__main__":
    main(sys.argv[1:])
