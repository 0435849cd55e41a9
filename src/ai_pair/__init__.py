"""AI Pair.

Ask one chat model a question, have a second model review the answer:
- OpenAI-compatible providers configured from the environment or `.env`
- per-user credential file created on first run
- completed turns saved as Markdown on request
"""

__version__ = "0.1.0"

from ai_pair.config import AppSettings

__all__ = ["__version__", "AppSettings"]
