"""Per-user credential file for the two providers.

The file uses dotenv syntax, one ``KEY="value"`` line per credential:

    PRIMARY_API_KEY="..."
    REVIEWER_API_KEY="..."

Files written by older releases used ``MOONSHOT_API_KEY`` and
``DEEPSEEK_API_KEY``; those names are still accepted when reading.
Environment variables with the same names take precedence over the file.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ai_pair.errors import CredentialMissing

logger = logging.getLogger(__name__)

FILE_MODE = 0o600


class Credentials(BaseModel):
    """API keys for the primary and reviewer providers."""

    model_config = ConfigDict(frozen=True)

    primary_api_key: str
    reviewer_api_key: str


class _CredentialFile(BaseSettings):
    primary_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("PRIMARY_API_KEY", "MOONSHOT_API_KEY"),
    )
    reviewer_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("REVIEWER_API_KEY", "DEEPSEEK_API_KEY"),
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=None,
        extra="ignore",
    )


@dataclass(frozen=True, slots=True)
class CredentialSlot:
    field: str
    env_key: str
    label: str


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class CredentialStore:
    """Loads credentials from a fixed path and creates them on first run.

    Loading never prompts; :meth:`prompt_and_persist` is only called by the
    caller after :meth:`load` reported that something is missing.
    """

    def __init__(
        self,
        path: Path,
        primary_label: str = "primary provider",
        reviewer_label: str = "reviewer provider",
    ) -> None:
        self.path = path
        self.slots = (
            CredentialSlot("primary_api_key", "PRIMARY_API_KEY", primary_label),
            CredentialSlot("reviewer_api_key", "REVIEWER_API_KEY", reviewer_label),
        )

    def _read(self) -> _CredentialFile:
        return _CredentialFile(_env_file=self.path if self.path.exists() else None)

    def missing(self) -> list[CredentialSlot]:
        """Credential slots with no non-blank value."""

        current = self._read()
        return [slot for slot in self.slots if not getattr(current, slot.field).strip()]

    def load(self) -> Credentials | None:
        """Load both credentials.

        Returns:
            The credentials, or None if either one is missing.
        """
        current = self._read()
        primary = current.primary_api_key.strip()
        reviewer = current.reviewer_api_key.strip()
        if not primary or not reviewer:
            logger.info("Credentials incomplete", extra={"path": str(self.path)})
            return None
        return Credentials(primary_api_key=primary, reviewer_api_key=reviewer)

    def prompt_and_persist(self, prompt: Callable[[str], str] = input) -> Credentials:
        """Ask for each missing credential once and append it to the file.

        Args:
            prompt: Reads one line of input after showing the given text.

        Returns:
            The complete credentials.

        Raises:
            CredentialMissing: If the user enters a blank key.
            OSError: If the credential file cannot be written.
        """
        current = self._read()
        values = {
            "primary_api_key": current.primary_api_key.strip(),
            "reviewer_api_key": current.reviewer_api_key.strip(),
        }

        for slot in self.slots:
            if values[slot.field]:
                continue
            answer = prompt(f"Enter API Key for {slot.label}: ").strip()
            if not answer:
                raise CredentialMissing(slot.label)
            self._append(slot.env_key, answer)
            values[slot.field] = answer

        return Credentials(**values)

    def _append(self, key: str, value: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        line = f"{key}={_quote(value)}\n"
        if self.path.exists() and self.path.stat().st_size > 0:
            if not self.path.read_bytes().endswith(b"\n"):
                line = "\n" + line

        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, FILE_MODE)
        with os.fdopen(fd, "a", encoding="utf-8") as f:
            f.write(line)

        # os.open only applies the mode when it creates the file
        os.chmod(self.path, FILE_MODE)
        logger.info("Saved credential", extra={"key": key, "path": str(self.path)})
