import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


@dataclass(frozen=True)
class AIConfig:
    provider: str = "openai"
    model: str = "gpt-4o-mini"
    api_key: str | None = None
    base_url: str | None = None
    enabled: bool = True
    timeout_s: float = 20.0
    max_retries: int = 2
    temperature: float = 0.2

    @property
    def usable(self) -> bool:
        if not self.enabled:
            return False
        key = (self.api_key or "").strip()
        return bool(key) and not _looks_like_placeholder(key)


def load_ai_config() -> AIConfig:
    enabled = (os.getenv("AI_ENABLED") or "true").strip().lower() in {"1", "true", "yes", "y", "on"}
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o-mini").strip()
    return AIConfig(
        provider=provider,
        model=model,
        api_key=(os.getenv("OPENAI_API_KEY") or "").strip() or None,
        base_url=(os.getenv("OPENAI_BASE_URL") or "").strip() or None,
        enabled=enabled,
        timeout_s=float(os.getenv("AI_TIMEOUT_S", "20")),
        max_retries=int(os.getenv("AI_MAX_RETRIES", "2")),
        temperature=float(os.getenv("AI_TEMPERATURE", "0.2")),
    )
