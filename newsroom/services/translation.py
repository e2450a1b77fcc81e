"""Article translation: persisted sibling translations and ephemeral previews.

``translate_article`` writes a separate article with the same slug in the
target language. ``preview_translation`` only returns translated text and
never touches the store.
"""

import asyncio
import logging

from newsroom.models.article import Article, new_id, utcnow
from newsroom.models.translation import TranslationPreview
from newsroom.services.articles import ArticleService
from newsroom.services.content_guard import validate_article_content
from newsroom.services.errors import TranslationProviderError
from newsroom.services.translator import Translator

logger = logging.getLogger(__name__)

# Fields copied verbatim from the source article onto its translation
COPIED_FIELDS = {
    "title",
    "subtitle",
    "excerpt",
    "author",
    "read_time",
    "featured_image",
    "categories",
    "series",
    "meta",
    "is_featured",
    "is_latest",
    "stats",
}


class TranslationOrchestrator:
    """Machine translation of stored articles through an injected ``Translator``."""

    def __init__(self, articles: ArticleService, translator: Translator) -> None:
        self.articles = articles
        self.translator = translator

    async def translate_article(self, article_id: str, target_language: str) -> Article:
        """Create or refresh the *target_language* translation of an article.

        The translation is stored as a draft sibling article keyed by
        ``(slug, target_language)``. Only the HTML body is translated; the
        plain text and word count are carried over from the source. If the
        provider fails, the source HTML is used unchanged.

        Raises:
            ArticleNotFound: No article has *article_id*.
        """
        source = await self.articles.get_article(article_id)
        if source.language == target_language:
            return source

        provider = self.translator.name
        try:
            html = await self.translator.translate_html(
                source.content.html, target_language
            )
        except TranslationProviderError as e:
            logger.warning(
                "Translating article %s into %s failed, keeping source HTML: %s",
                article_id,
                target_language,
                e.detail,
            )
            html = source.content.html
            provider = "none"

        fields = source.model_dump(include=COPIED_FIELDS)
        fields["content"] = {
            "html": html,
            "plain_text": source.content.plain_text,
            "word_count": source.content.word_count,
        }
        fields["status"] = "draft"

        key = {"slug": source.slug, "language": target_language}
        validate_article_content(Article.model_validate({**fields, **key}))

        now = utcnow()
        fields["updated_at"] = now
        stored = await self.articles.store.upsert(
            key,
            fields,
            on_insert={"id": new_id(), "created_at": now, "translations": {}},
        )
        translated = Article.model_validate(stored)
        logger.info(
            "Translated article %s into %s as %s (provider=%s)",
            article_id,
            target_language,
            translated.id,
            provider,
        )

        await self.articles.record_translation(
            source.id, target_language, translated.id, provider
        )
        return translated

    async def _translate_optional(self, text: str | None, language: str) -> str | None:
        if not text:
            return text
        return await self.translator.translate_text(text, language)

    async def preview_translation(
        self, article_id: str, target_language: str
    ) -> TranslationPreview:
        """Translate an article's title, subtitle, excerpt and body without saving.

        English is the canonical source language and is returned verbatim.

        Raises:
            ArticleNotFound: No article has *article_id*.
            TranslationProviderError: The provider failed.
        """
        article = await self.articles.get_article(article_id)
        if target_language == "en":
            return TranslationPreview(
                language="en",
                title=article.title,
                subtitle=article.subtitle,
                excerpt=article.excerpt,
                html=article.content.html,
            )

        title, subtitle, excerpt, html = await asyncio.gather(
            self.translator.translate_text(article.title, target_language),
            self._translate_optional(article.subtitle, target_language),
            self._translate_optional(article.excerpt, target_language),
            self.translator.translate_html(article.content.html, target_language),
        )
        return TranslationPreview(
            language=target_language,
            title=title,
            subtitle=subtitle,
            excerpt=excerpt,
            html=html,
        )
