"""Two-stage answer/review orchestration."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ai_pair.errors import ChatClientError, TurnError, UserInputEmpty
from ai_pair.llm.client import ChatClient
from ai_pair.llm.models import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_SYSTEM_PROMPT = "You are a helpful AI assistant."

REVIEWER_SYSTEM_PROMPT = (
    "You are an expert technical reviewer. Act as a rigorous technical reviewer "
    "of the following answer. The user's question and another AI assistant's "
    "answer follow. Point out any errors, hallucinations or missing information. "
    "If code is provided, check it for bugs. If the answer is correct, confirm it."
)


@dataclass(frozen=True, slots=True)
class TurnResult:
    """Outcome of a turn where both calls succeeded."""

    question: str
    primary_answer: str
    reviewer_answer: str


class PairOrchestrator:
    """Asks the primary model, then has the reviewer model critique the answer.

    The reviewer's prompt depends on the primary answer, so the two calls
    always run one after the other.
    """

    def __init__(
        self,
        primary: ChatClient,
        reviewer: ChatClient,
        primary_system_prompt: str | None = DEFAULT_PRIMARY_SYSTEM_PROMPT,
        review_language: str | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            primary: Client for the answering model.
            reviewer: Client for the reviewing model.
            primary_system_prompt: Persona for the primary model. None or an
                empty string sends no system message.
            review_language: If set, the reviewer is asked to write in it.
        """
        self.primary = primary
        self.reviewer = reviewer
        self.primary_system_prompt = primary_system_prompt
        self.review_language = review_language

    def primary_messages(self, question: str) -> list[ChatMessage]:
        messages: list[ChatMessage] = []
        if self.primary_system_prompt:
            messages.append(ChatMessage.system(self.primary_system_prompt))
        messages.append(ChatMessage.user(question))
        return messages

    def reviewer_messages(self, question: str, primary_answer: str) -> list[ChatMessage]:
        instruction = REVIEWER_SYSTEM_PROMPT
        if self.review_language:
            instruction = f"{instruction} Write your review entirely in {self.review_language}."
        return [
            ChatMessage.system(instruction),
            ChatMessage.user(question),
            ChatMessage.assistant(primary_answer),
        ]

    def run_primary(self, question: str) -> str:
        """Run the first stage of a turn.

        Raises:
            TurnError: With ``stage="primary"`` if the call fails.
        """
        try:
            return self.primary.send(self.primary_messages(question))
        except ChatClientError as exc:
            logger.warning("Primary call failed", extra={"provider": self.primary.name})
            raise TurnError("primary", exc) from exc

    def run_review(self, question: str, primary_answer: str) -> str:
        """Run the second stage of a turn.

        Raises:
            TurnError: With ``stage="reviewer"`` and the primary answer attached.
        """
        try:
            return self.reviewer.send(self.reviewer_messages(question, primary_answer))
        except ChatClientError as exc:
            logger.warning("Reviewer call failed", extra={"provider": self.reviewer.name})
            raise TurnError("reviewer", exc, primary_answer=primary_answer) from exc

    def run_turn(
        self,
        question: str,
        *,
        on_call: Callable[[str], None] | None = None,
        on_primary_answer: Callable[[str], None] | None = None,
    ) -> TurnResult:
        """Get an answer and its review for one question.

        Args:
            question: The user's question.
            on_call: Called with the provider name right before each request.
            on_primary_answer: Called with the primary answer before the
                reviewer request starts.

        Returns:
            Both answers.

        Raises:
            UserInputEmpty: If the question is blank.
            TurnError: If either call fails. The reviewer is never called when
                the primary call fails.
        """
        question = question.strip()
        if not question:
            raise UserInputEmpty()

        logger.info("Starting turn", extra={"question_chars": len(question)})
        if on_call is not None:
            on_call(self.primary.name)
        primary_answer = self.run_primary(question)
        if on_primary_answer is not None:
            on_primary_answer(primary_answer)

        if on_call is not None:
            on_call(self.reviewer.name)
        reviewer_answer = self.run_review(question, primary_answer)
        logger.info("Turn completed")

        return TurnResult(
            question=question,
            primary_answer=primary_answer,
            reviewer_answer=reviewer_answer,
        )
