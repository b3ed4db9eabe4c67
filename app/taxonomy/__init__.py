from functools import lru_cache

from app.core.config import settings

from .local_taxonomy import LocalTaxonomy
from .provider import TaxonomyProvider


@lru_cache(maxsize=1)
def get_default_taxonomy_provider() -> TaxonomyProvider:
    """Bundled lexicon tables, or the copies under TAXONOMY_DIR when set."""
    return LocalTaxonomy(data_dir=settings.taxonomy_dir)


__all__ = ["TaxonomyProvider", "LocalTaxonomy", "get_default_taxonomy_provider"]
