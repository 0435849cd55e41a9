"""CLI entrypoint for the ai-pair terminal session."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ai_pair import __version__
from ai_pair.config import LOG_LEVELS, AppSettings
from ai_pair.core.orchestrator import PairOrchestrator
from ai_pair.credentials import CredentialStore
from ai_pair.errors import CredentialMissing
from ai_pair.llm.client import ChatClient
from ai_pair.logging import configure_logging
from ai_pair.session import Session
from ai_pair.storage.conversations import ConversationWriter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-pair",
        description="Ask one model, have a second model review the answer",
    )
    parser.add_argument("--version", action="version", version=f"ai-pair {__version__}")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Credential file (default: ~/.ai_vs_ai_config)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for conversations saved with /save",
    )
    parser.add_argument(
        "--review-language",
        default=None,
        help="Language the reviewer should answer in, e.g. 'Chinese'",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level",
    )
    return parser


def _apply_overrides(settings: AppSettings, args: argparse.Namespace) -> AppSettings:
    update: dict[str, object] = {}
    if args.config is not None:
        update["config_path"] = args.config.expanduser()
    if args.output_dir is not None:
        update["output_dir"] = args.output_dir.expanduser()
    if args.review_language:
        update["review_language"] = args.review_language
    if args.log_level:
        update["log_level"] = args.log_level
    return settings.model_copy(update=update) if update else settings


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _apply_overrides(AppSettings(), args)
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)
    console = Console()

    store = CredentialStore(
        settings.config_path,
        primary_label=settings.primary_name,
        reviewer_label=settings.reviewer_name,
    )
    try:
        credentials = store.load()
        if credentials is None:
            credentials = store.prompt_and_persist(prompt=console.input)
            console.print(f"[dim]Saved API keys to {escape(str(settings.config_path))}[/dim]")
    except CredentialMissing as e:
        console.print(f"[red]Configuration Error: {escape(str(e))}[/red]")
        return 2
    except (EOFError, KeyboardInterrupt):
        console.print()
        return 1
    except OSError as e:
        logger.exception("Cannot write credential file", extra={"path": str(settings.config_path)})
        console.print(f"[red]Configuration Error: {escape(str(e))}[/red]")
        return 1

    orchestrator = PairOrchestrator(
        primary=ChatClient(settings.primary_provider, credentials.primary_api_key),
        reviewer=ChatClient(settings.reviewer_provider, credentials.reviewer_api_key),
        primary_system_prompt=settings.primary_system_prompt,
        review_language=settings.review_language,
    )
    session = Session(
        orchestrator=orchestrator,
        writer=ConversationWriter(settings.output_dir),
        console=console,
    )

    try:
        session.run()
    except Exception:
        logger.exception("Session failed")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
