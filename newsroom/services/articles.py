"""Article service: create, read, update and delete article records.

All writes go through ``_save``, which runs the consistency hook (size
limits, derived counts, overlay back-fill) before anything reaches the
store.

The load/merge/save sequences here are not atomic against concurrent
writers to the same article: the last save wins.
"""

import asyncio
import logging
from typing import Any

from newsroom.models.article import (
    DUAL_LANGUAGE_CODES,
    Article,
    ArticleCreate,
    ArticlePage,
    ArticleUpdate,
    DualLanguageFieldsUpdate,
    LanguageContent,
    TranslationMeta,
    utcnow,
)
from newsroom.services.article_store import ArticleStore, Filter
from newsroom.services.consistency import apply_consistency
from newsroom.services.dual_language import (
    NARROW_OVERLAYS,
    merge_language_content,
    merge_language_fields,
)
from newsroom.services.errors import ArticleNotFound, DualLanguageRequired

logger = logging.getLogger(__name__)

# Update fields that may be cleared by sending null
_NULLABLE_FIELDS = {"subtitle", "excerpt", "read_time", "series"}


def apply_update(article: Article, update: ArticleUpdate) -> None:
    """Apply a partial update to *article* in place.

    Plain fields are overwritten. Dual-language content blocks are merged
    field by field and the narrow overlays are merged additively, so an
    update never drops second-language data it does not mention.
    """
    for key in update.model_fields_set:
        if key == "dual_language" or key in NARROW_OVERLAYS:
            continue
        value = getattr(update, key)
        if value is None and key not in _NULLABLE_FIELDS:
            continue
        setattr(article, key, value)

    if update.dual_language is not None:
        for code in DUAL_LANGUAGE_CODES:
            block = update.dual_language.block(code)
            if block is not None:
                merge_language_content(article, code, block)

    overlays = {
        attr: getattr(update, attr)
        for attr in NARROW_OVERLAYS
        if getattr(update, attr) is not None
    }
    if overlays:
        merge_language_fields(article, DualLanguageFieldsUpdate(**overlays))


class ArticleService:
    """Article operations over an injected ``ArticleStore``."""

    def __init__(self, store: ArticleStore) -> None:
        self.store = store

    async def _save(self, article: Article, previous: Article | None) -> Article:
        apply_consistency(article, previous)
        doc = article.model_dump()
        if previous is None:
            stored = await self.store.insert(doc)
        else:
            stored = await self.store.replace(doc)
        return Article.model_validate(stored)

    async def get_article(self, article_id: str) -> Article:
        """Load an article by id. Raises ArticleNotFound."""
        doc = await self.store.find_by_id(article_id)
        if doc is None:
            raise ArticleNotFound(article_id)
        return Article.model_validate(doc)

    async def create_article(self, payload: ArticleCreate) -> Article:
        article = Article.model_validate(payload.model_dump())
        saved = await self._save(article, None)
        logger.info(
            "Created article %s (%s/%s)", saved.id, saved.slug, saved.language
        )
        return saved

    async def get_article_by_slug(self, slug: str, language: str) -> Article | None:
        """Find the article for *slug* in *language*.

        Falls back to an article carrying a dual-language block for
        *language* when no record has that primary language.
        """
        doc = await self.store.find_one({"slug": slug, "language": language})
        if doc is None:
            doc = await self.store.find_one(
                {"slug": slug, f"dual_language.{language}.status": {"$exists": True}}
            )
        return Article.model_validate(doc) if doc is not None else None

    async def list_articles(
        self, filter: Filter | None = None, limit: int = 20, page: int = 1
    ) -> ArticlePage:
        """List articles newest first, one page at a time (pages start at 1)."""
        filter = filter or {}
        skip = (page - 1) * limit
        docs, total = await asyncio.gather(
            self.store.find(filter, skip=skip, limit=limit),
            self.store.count(filter),
        )
        return ArticlePage(
            items=[Article.model_validate(d) for d in docs],
            total=total,
            page=page,
            limit=limit,
        )

    async def update_article(self, article_id: str, update: ArticleUpdate) -> Article:
        article = await self.get_article(article_id)
        previous = article.model_copy(deep=True)
        apply_update(article, update)
        saved = await self._save(article, previous)
        logger.info("Updated article %s", article_id)
        return saved

    async def delete_article(self, article_id: str) -> Article:
        doc = await self.store.delete(article_id)
        if doc is None:
            raise ArticleNotFound(article_id)
        logger.info("Deleted article %s", article_id)
        return Article.model_validate(doc)

    async def create_dual_language_article(self, payload: ArticleCreate) -> Article:
        """Create an article that carries at least one dual-language block."""
        blocks = (
            [payload.dual_language.en, payload.dual_language.ar]
            if payload.dual_language is not None
            else []
        )
        if not any(b is not None and not b.is_empty() for b in blocks):
            raise DualLanguageRequired()
        return await self.create_article(payload)

    async def update_dual_language_article(
        self, article_id: str, update: ArticleUpdate
    ) -> Article:
        """Update an article, merging any dual-language blocks it supplies."""
        return await self.update_article(article_id, update)

    async def add_secondary_language_content(
        self, article_id: str, language: str, partial: LanguageContent
    ) -> Article:
        """Merge *partial* into the article's dual-language block for *language*."""
        article = await self.get_article(article_id)
        previous = article.model_copy(deep=True)
        merge_language_content(article, language, partial)
        saved = await self._save(article, previous)
        logger.info("Merged %s content into article %s", language, article_id)
        return saved

    async def add_secondary_language_fields(
        self, article_id: str, fields: DualLanguageFieldsUpdate
    ) -> Article:
        """Add author/title/subtitle overlay values; empty values are ignored."""
        article = await self.get_article(article_id)
        previous = article.model_copy(deep=True)
        merge_language_fields(article, fields)
        return await self._save(article, previous)

    async def record_translation(
        self,
        article_id: str,
        target_language: str,
        translated_id: str | None,
        provider: str,
    ) -> Article:
        """Record that *article_id* was machine-translated into *target_language*.

        A translation that already has a status keeps it; new entries start
        as drafts.
        """
        article = await self.get_article(article_id)
        previous = article.model_copy(deep=True)
        existing = article.translations.get(target_language)
        article.translations[target_language] = TranslationMeta(
            article_id=translated_id,
            status=existing.status if existing is not None else "draft",
            last_translated_at=utcnow(),
            translation_provider=provider,
        )
        return await self._save(article, previous)


def build_filter(
    language: str | None = None,
    category: str | None = None,
    series: str | None = None,
    status: str | None = None,
) -> dict[str, Any]:
    """Build a store filter from optional listing parameters."""
    filter: dict[str, Any] = {}
    if language:
        filter["language"] = language
    if category:
        filter["categories"] = category
    if series:
        filter["series.id"] = series
    if status:
        filter["status"] = status
    return filter
