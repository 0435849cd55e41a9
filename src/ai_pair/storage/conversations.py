"""Markdown persistence for completed turns."""

from __future__ import annotations

import logging
import re
import unicodedata
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from ai_pair.core.orchestrator import TurnResult
from ai_pair.errors import FileSystemError

logger = logging.getLogger(__name__)

SLUG_LENGTH = 20
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
FILENAME_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

_WHITESPACE = re.compile(r"\s+")


class ConversationRecord(BaseModel):
    """One saved turn: the question, both answers and who produced them."""

    model_config = ConfigDict(frozen=True)

    created_at: datetime = Field(default_factory=datetime.now)
    primary_model: str
    reviewer_model: str
    question: str
    primary_answer: str
    reviewer_answer: str

    primary_name: str | None = Field(default=None)
    reviewer_name: str | None = Field(default=None)

    @classmethod
    def from_turn(
        cls,
        turn: TurnResult,
        *,
        primary_model: str,
        reviewer_model: str,
        primary_name: str | None = None,
        reviewer_name: str | None = None,
        created_at: datetime | None = None,
    ) -> ConversationRecord:
        return cls(
            created_at=created_at or datetime.now(),
            primary_model=primary_model,
            reviewer_model=reviewer_model,
            question=turn.question,
            primary_answer=turn.primary_answer,
            reviewer_answer=turn.reviewer_answer,
            primary_name=primary_name,
            reviewer_name=reviewer_name,
        )


def slugify(text: str, length: int = SLUG_LENGTH) -> str:
    """Derive a filename-safe slug from a question.

    Punctuation, symbols and control characters are dropped, whitespace
    runs become a single underscore and the result is cut to ``length``
    characters. Letters outside ASCII are kept.
    """

    kept = "".join(
        ch
        for ch in text
        if ch.isspace() or not unicodedata.category(ch).startswith(("P", "S", "C"))
    )
    slug = _WHITESPACE.sub("_", kept.strip())[:length]
    return slug or "untitled"


def _quote_block(text: str) -> str:
    return "\n".join(f"> {line}" if line else ">" for line in text.splitlines() or [""])


def render_markdown(record: ConversationRecord) -> str:
    """Render a record as a Markdown document."""

    primary_heading = "Primary answer"
    if record.primary_name:
        primary_heading = f"{primary_heading} ({record.primary_name})"
    reviewer_heading = "Reviewer answer"
    if record.reviewer_name:
        reviewer_heading = f"{reviewer_heading} ({record.reviewer_name})"

    parts = [
        "# AI Pair Conversation",
        "",
        f"- **Created:** {record.created_at.strftime(TIMESTAMP_FORMAT)}",
        f"- **Primary model:** {record.primary_model}",
        f"- **Reviewer model:** {record.reviewer_model}",
        "",
        "## Question",
        "",
        _quote_block(record.question),
        "",
        f"## {primary_heading}",
        "",
        record.primary_answer.rstrip("\n"),
        "",
        f"## {reviewer_heading}",
        "",
        record.reviewer_answer.rstrip("\n"),
        "",
    ]
    return "\n".join(parts)


class ConversationWriter:
    """Writes each saved turn to a new Markdown file in one directory.

    Existing files are never overwritten: when the name for a record is
    taken, a counter suffix (``_2``, ``_3``, ...) is added.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    def filename_for(self, record: ConversationRecord, counter: int = 1) -> str:
        stem = f"{record.created_at.strftime(FILENAME_TIMESTAMP_FORMAT)}_{slugify(record.question)}"
        if counter > 1:
            stem = f"{stem}_{counter}"
        return f"{stem}.md"

    def save(self, record: ConversationRecord) -> Path:
        """Write a record to a new file.

        Returns:
            Path of the written file.

        Raises:
            FileSystemError: If the directory cannot be created or the file
                cannot be written.
        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as exc:
            raise FileSystemError(str(self.output_dir), f"cannot create directory: {exc}") from exc

        content = render_markdown(record)
        counter = 1
        while True:
            path = self.output_dir / self.filename_for(record, counter)
            try:
                f = open(path, "x", encoding="utf-8")
            except FileExistsError:
                counter += 1
                continue
            except (OSError, ValueError) as exc:
                raise FileSystemError(str(path), f"cannot create file: {exc}") from exc
            break

        try:
            with f:
                f.write(content)
        except OSError as exc:
            path.unlink(missing_ok=True)
            raise FileSystemError(str(path), f"cannot write file: {exc}") from exc

        logger.info("Conversation saved", extra={"path": str(path)})
        return path
