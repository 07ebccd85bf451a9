import logging
from functools import lru_cache

from ats_scan.ai.config import AIConfig, load_ai_config
from ats_scan.ai.types import AIClient

from ats_scan.ai.providers.disabled_provider import DisabledProvider
from ats_scan.ai.providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


def get_ai_client(config: AIConfig) -> AIClient:
    if not config.usable:
        logger.info("ai_client_disabled provider=%s enabled=%s", config.provider, config.enabled)
        return DisabledProvider("AI analysis is disabled or OPENAI_API_KEY is not set.")

    if config.provider == "openai":
        return OpenAIProvider(config)

    raise ValueError(f"Unsupported AI_PROVIDER='{config.provider}'")


@lru_cache(maxsize=1)
def default_ai_client() -> AIClient:
    return get_ai_client(load_ai_config())
