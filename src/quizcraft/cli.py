"""Command-line entry point for quizcraft."""

from __future__ import annotations

import argparse
import asyncio
import sys
from importlib import metadata
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich.console import Console

from .core import workspace as workspace_mod
from .core.ai import ClientConfigError, load_client
from .core.config import (
    ConfigError,
    QuizcraftConfig,
    load_config,
    resolve_config_path,
    write_template,
)
from .core.logging import configure_logger
from .generation.client import QuizGenerator

LOGGER_NAME = "quizcraft"

ClientLoader = Callable[..., object]


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="quizcraft",
        description="Generate a multiple-choice quiz on a topic and take it.",
    )
    p.add_argument(
        "-V", "--version", action="store_true", help="Print the version."
    )
    sub = p.add_subparsers(dest="command")

    for name, help_text in (
        ("tui", "Launch the full-screen Textual quiz app"),
        ("console", "Create and take quizzes in a plain Rich console"),
    ):
        sp = sub.add_parser(name, help=help_text)
        sp.add_argument(
            "--config",
            type=Path,
            help="Path to quizcraft.toml (defaults to the workspace config).",
        )
        sp.add_argument(
            "--log-level",
            help="Override the configured log level for this run.",
        )
        sp.add_argument(
            "--verbose",
            action="store_true",
            help="Mirror log output to stderr.",
        )

    sp_config = sub.add_parser("config", help="Manage quizcraft.toml")
    config_sub = sp_config.add_subparsers(dest="action", required=True)
    sp_init = config_sub.add_parser("init", help="Write the config template")
    sp_init.add_argument("--path", type=Path)
    sp_init.add_argument(
        "--force", action="store_true", help="Overwrite an existing file."
    )
    sp_path = config_sub.add_parser("path", help="Print the config path")
    sp_path.add_argument("--path", type=Path)
    sp_validate = config_sub.add_parser(
        "validate", help="Validate the active config file"
    )
    sp_validate.add_argument("--path", type=Path)
    return p


def _version() -> str:
    try:
        return metadata.version("quizcraft")
    except metadata.PackageNotFoundError:
        return "unknown"


def _cmd_config(args: argparse.Namespace) -> int:
    target = resolve_config_path(explicit_path=args.path)
    if args.action == "path":
        print(target)
        return 0
    if args.action == "init":
        try:
            written = write_template(target, overwrite=args.force)
        except ConfigError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        print(f"Created template {written}")
        return 0
    try:
        load_config(explicit_path=target)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    print(f"Config OK: {target}")
    return 0


def _prepare(
    args: argparse.Namespace, client_loader: ClientLoader
) -> tuple[QuizcraftConfig, QuizGenerator]:
    """Load config, logging and the OpenAI client before any UI starts.

    Raises ``ConfigError``, ``ClientConfigError`` or ``WorkspaceError``.
    """

    config = load_config(explicit_path=args.config)
    layout = workspace_mod.ensure_workspace()
    logger, log_path = configure_logger(
        LOGGER_NAME,
        log_dir=layout.path_for("logs"),
        level=args.log_level or config.logging.level,
        verbose=bool(args.verbose or config.logging.verbose),
    )
    logger.debug(
        "quizcraft starting",
        extra={"command": args.command, "log_path": str(log_path)},
    )
    client = client_loader(config.openai)
    return config, QuizGenerator(client, config.openai)


def _cmd_tui(config: QuizcraftConfig, generator: QuizGenerator) -> int:
    from .ui.tui import QuizcraftApp

    app = QuizcraftApp(generator, default_count=config.quiz.default_count)
    app.run()
    return 0


def _cmd_console(config: QuizcraftConfig, generator: QuizGenerator) -> int:
    from .ui.console import run_console_app

    console = Console()
    finished = asyncio.run(
        run_console_app(
            generator,
            console,
            lambda: console.input("> "),
            default_count=config.quiz.default_count,
        )
    )
    console.print(f"Finished {finished} quiz(zes). Goodbye!")
    return 0


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    client_loader: ClientLoader = load_client,
) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.version:
        print(_version())
        return 0
    if args.command is None:
        parser.print_help()
        return 2
    if args.command == "config":
        return _cmd_config(args)

    try:
        config, generator = _prepare(args, client_loader)
    except (
        ConfigError,
        ClientConfigError,
        workspace_mod.WorkspaceError,
    ) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if args.command == "tui":
        return _cmd_tui(config, generator)
    return _cmd_console(config, generator)


def run() -> None:
    raise SystemExit(main())
