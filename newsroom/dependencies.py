"""FastAPI dependencies wiring the engine to its collaborators.

The store and translator are created once per process from settings; tests
replace them through ``app.dependency_overrides`` or by resetting the
module-level singletons.
"""

import logging

from fastapi import Depends, Header, HTTPException

from newsroom.config import get_settings
from newsroom.services.article_store import ArticleStore, InMemoryArticleStore
from newsroom.services.articles import ArticleService
from newsroom.services.mongo_store import MongoArticleStore
from newsroom.services.translation import TranslationOrchestrator
from newsroom.services.translator import Translator, create_translator

logger = logging.getLogger(__name__)

# Lazy singletons, live for the process lifetime
_store: ArticleStore | None = None
_translator: Translator | None = None


def create_store() -> ArticleStore:
    """Build the configured article store (MongoDB, or in-memory without a URI)."""
    settings = get_settings()
    if settings.mongodb_uri:
        return MongoArticleStore(
            settings.mongodb_uri,
            settings.mongodb_database,
            settings.mongodb_collection,
        )
    logger.warning("MONGODB_URI not set; articles are kept in memory")
    return InMemoryArticleStore()


def get_store() -> ArticleStore:
    global _store
    if _store is None:
        _store = create_store()
    return _store


def get_translator() -> Translator:
    global _translator
    if _translator is None:
        _translator = create_translator(get_settings())
    return _translator


def get_article_service(store: ArticleStore = Depends(get_store)) -> ArticleService:
    return ArticleService(store)


def get_translation_orchestrator(
    articles: ArticleService = Depends(get_article_service),
    translator: Translator = Depends(get_translator),
) -> TranslationOrchestrator:
    return TranslationOrchestrator(articles, translator)


def require_admin(x_admin_key: str | None = Header(default=None)) -> None:
    """Reject writes without the admin key, when one is configured."""
    settings = get_settings()
    if settings.admin_api_key and x_admin_key != settings.admin_api_key:
        raise HTTPException(status_code=403, detail="Invalid admin key")
