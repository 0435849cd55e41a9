"""Core package initialization."""

from ai_pair.core.orchestrator import PairOrchestrator, TurnResult

__all__ = [
    "PairOrchestrator",
    "TurnResult",
]
