from contextlib import asynccontextmanager
import logging

from app.core.config.scoring import get_scoring_config
from app.taxonomy import get_default_taxonomy_provider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    config = get_scoring_config()
    taxonomy = get_default_taxonomy_provider()
    logger.info(
        "scoring_warmup config_sections=%d stopwords=%d",
        len(config),
        len(taxonomy.stopwords()),
    )
    yield
