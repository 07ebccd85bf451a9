from typing import Sequence

from ats_scan.ai.types import AICompletionError, ChatMessage


class DisabledProvider:
    """Stand-in used when no AI provider is configured; every call fails fast."""

    def __init__(self, reason: str = "AI provider is not configured."):
        self._reason = reason

    async def complete(
        self, messages: Sequence[ChatMessage], *, json_mode: bool = False
    ) -> str:
        raise AICompletionError(self._reason, code="llm_disabled")
