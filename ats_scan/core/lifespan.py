import logging
from contextlib import asynccontextmanager

from ats_scan.ai.factory import default_ai_client
from ats_scan.ai.providers.disabled_provider import DisabledProvider
from ats_scan.core.scoring import get_scoring_config
from ats_scan.taxonomy import get_default_taxonomy_provider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    get_scoring_config()
    taxonomy = get_default_taxonomy_provider()
    client = default_ai_client()
    logger.info(
        "startup_ready skills=%s ai_enabled=%s",
        len(taxonomy.known_skills()),
        not isinstance(client, DisabledProvider),
    )
    yield
