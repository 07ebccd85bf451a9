from __future__ import annotations

import asyncio
from typing import Any, Sequence

from openai import AsyncOpenAI

from ats_scan.ai.config import AIConfig
from ats_scan.ai.types import AICompletionError, ChatMessage


class OpenAIProvider:
    def __init__(self, config: AIConfig):
        key = (config.api_key or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self._model = config.model
        self._temperature = config.temperature
        # Hard ceiling across the SDK's own retries.
        self._deadline_s = config.timeout_s * (config.max_retries + 1)
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=config.base_url or None,
            timeout=config.timeout_s,
            max_retries=config.max_retries,
        )

    async def complete(
        self, messages: Sequence[ChatMessage], *, json_mode: bool = False
    ) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]

        create_kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": payload,
            "temperature": self._temperature,
        }
        if json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(**create_kwargs),
                timeout=self._deadline_s,
            )
        except asyncio.TimeoutError as exc:
            raise AICompletionError(
                f"AI provider did not answer within {self._deadline_s:.0f}s.", code="llm_timeout"
            ) from exc

        content = response.choices[0].message.content if response.choices else ""
        if not content:
            raise AICompletionError("AI provider returned an empty completion.", code="empty_response")
        return content
