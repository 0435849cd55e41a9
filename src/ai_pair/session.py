"""Interactive read-eval loop."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule

from ai_pair.core.orchestrator import PairOrchestrator, TurnResult
from ai_pair.errors import FileSystemError, TurnError, UserInputEmpty
from ai_pair.storage.conversations import ConversationRecord, ConversationWriter

logger = logging.getLogger(__name__)

SAVE_COMMAND = "/save"
EXIT_COMMANDS = frozenset({"exit", "quit"})
PROMPT = "\n[bold green]User > [/bold green]"


class Session:
    """Reads questions from the terminal and prints both answers.

    API and filesystem errors are reported and the loop keeps going.
    """

    def __init__(
        self,
        orchestrator: PairOrchestrator,
        writer: ConversationWriter,
        console: Console | None = None,
        read_line: Callable[[], str] | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.writer = writer
        self.console = console or Console()
        self._read_line = read_line or (lambda: self.console.input(PROMPT))
        self.last_turn: TurnResult | None = None

    def print_banner(self) -> None:
        title = (
            f"AI Pair: {self.orchestrator.primary.name} (Answer) + "
            f"{self.orchestrator.reviewer.name} (Review)"
        )
        self.console.print(Rule(style="cyan"))
        self.console.print(f"[bold cyan]{escape(title)}[/bold cyan]", justify="center")
        self.console.print(Rule(style="cyan"))
        self.console.print(
            f"[dim]Type a question, '{SAVE_COMMAND}' to save the last answer, "
            "or 'exit' to quit.[/dim]"
        )

    def run(self) -> None:
        """Run until the user exits or input ends."""

        self.print_banner()
        while True:
            try:
                line = self._read_line()
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break
            try:
                if not self.handle_line(line):
                    break
            except KeyboardInterrupt:
                self.console.print("\n[yellow]Interrupted.[/yellow]")
                break

    def handle_line(self, line: str) -> bool:
        """Dispatch one line of input.

        Returns:
            False if the session should end.
        """
        text = line.strip()
        if text.lower() in EXIT_COMMANDS:
            return False
        if not text:
            return True
        if text == SAVE_COMMAND:
            self.save()
            return True

        self.ask(text)
        return True

    def _thinking(self, provider: str) -> None:
        self.console.print(f"[dim]Thinking ({escape(provider)}) ...[/dim]")

    def _print_answer(self, heading: str, style: str, text: str) -> None:
        self.console.print()
        self.console.print(f"[bold {style}]--- {escape(heading)} ---[/bold {style}]")
        self.console.print(text, markup=False, highlight=False)

    def ask(self, question: str) -> TurnResult | None:
        """Run one turn and print its answers.

        Returns:
            The completed turn, or None if it failed.
        """
        primary_name = self.orchestrator.primary.name
        reviewer_name = self.orchestrator.reviewer.name

        try:
            turn = self.orchestrator.run_turn(
                question,
                on_call=self._thinking,
                on_primary_answer=lambda answer: self._print_answer(
                    f"{primary_name} Answer", "blue", answer
                ),
            )
        except UserInputEmpty:
            return None
        except TurnError as exc:
            label = primary_name if exc.stage == "primary" else reviewer_name
            self.console.print(f"[red]{escape(label)} Error: {escape(exc.cause.detail)}[/red]")
            if exc.primary_answer is not None:
                self.console.print(
                    "[yellow]The review is unavailable; the answer above is unreviewed.[/yellow]"
                )
            return None

        self._print_answer(f"{reviewer_name} Review", "magenta", turn.reviewer_answer)
        self.console.print()
        self.console.print(Rule(style="dim"))
        self.last_turn = turn
        return turn

    def save(self) -> Path | None:
        """Save the most recent completed turn.

        Returns:
            The written path, or None if nothing was saved.
        """
        if self.last_turn is None:
            self.console.print("[yellow]Nothing to save yet: ask a question first.[/yellow]")
            return None

        primary = self.orchestrator.primary
        reviewer = self.orchestrator.reviewer
        record = ConversationRecord.from_turn(
            self.last_turn,
            primary_model=primary.model,
            reviewer_model=reviewer.model,
            primary_name=primary.name,
            reviewer_name=reviewer.name,
        )

        try:
            path = self.writer.save(record)
        except FileSystemError as exc:
            logger.error("Failed to save conversation", extra={"path": exc.path})
            self.console.print(f"[red]Save failed: {escape(str(exc))}[/red]")
            return None

        self.console.print(f"[green]Saved to {escape(str(path))}[/green]")
        return path
