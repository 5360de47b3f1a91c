from contextlib import asynccontextmanager
import logging

from cv_analyzer.ai.config import load_ai_config
from cv_analyzer.ai.factory import get_ai_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    cfg = load_ai_config()
    if cfg.api_key:
        logger.info("startup model=%s base_url=%s", cfg.model, cfg.base_url)
    else:
        logger.warning(
            "GROQ_API_KEY environment variable is not set. "
            "The /api/analyze endpoint will return an error until it is configured."
        )
    yield
    get_ai_client.cache_clear()
