"""Derived-field maintenance run before every article write.

``apply_consistency`` is the single save hook for the engine: it enforces the
content size limits, back-fills primary fields from the English narrow
overlays, and recomputes word counts and reading time when the underlying
plain text changed.
"""

import logging

from newsroom.models.article import (
    DUAL_LANGUAGE_CODES,
    Article,
    ArticleContent,
    DualLanguageFields,
    utcnow,
)
from newsroom.services.content_guard import validate_article_content
from newsroom.services.reading_time import count_words, estimate_reading_minutes

logger = logging.getLogger(__name__)

# (narrow overlay attribute, primary attribute it back-fills)
_OVERLAY_FIELDS = (
    ("dual_language_author", "author"),
    ("dual_language_title", "title"),
    ("dual_language_subtitle", "subtitle"),
)


def _plain_text(content: ArticleContent | None) -> str | None:
    return content.plain_text if content is not None else None


def _block_content(article: Article | None, code: str) -> ArticleContent | None:
    if article is None or article.dual_language is None:
        return None
    block = article.dual_language.block(code)
    return block.content if block is not None else None


def _overlay(article: Article | None, attr: str) -> DualLanguageFields | None:
    return getattr(article, attr) if article is not None else None


def _fill_primary_fields(article: Article, previous: Article | None) -> None:
    """Copy English overlay values into empty primary fields.

    Only fires when the overlay is new or changed, and never overwrites a
    primary field that already has a value.
    """
    for overlay_attr, primary_attr in _OVERLAY_FIELDS:
        overlay = _overlay(article, overlay_attr)
        if overlay is None or not overlay.en:
            continue
        if previous is not None and _overlay(previous, overlay_attr) == overlay:
            continue
        if not getattr(article, primary_attr):
            setattr(article, primary_attr, overlay.en)
            logger.debug(
                "Filled %s of article %s from %s.en",
                primary_attr,
                article.id,
                overlay_attr,
            )


def apply_consistency(article: Article, previous: Article | None = None) -> Article:
    """Validate *article* and refresh its derived fields in place.

    Args:
        article: The record about to be written.
        previous: The stored version it replaces, or None for a new record.

    Returns:
        The same article, for chaining.

    Raises:
        ContentTooLarge: A content body exceeds its limit. Nothing is modified.
    """
    validate_article_content(article)
    is_new = previous is None

    _fill_primary_fields(article, previous)

    plain = _plain_text(article.content)
    if is_new or plain != _plain_text(previous.content):
        article.content.word_count = count_words(plain)
        article.stats.reading_time = estimate_reading_minutes(plain)
    else:
        # Payloads cannot set derived counts; keep the stored one.
        article.content.word_count = previous.content.word_count

    for code in DUAL_LANGUAGE_CODES:
        content = _block_content(article, code)
        if content is None:
            continue
        previous_content = _block_content(previous, code)
        if (
            previous_content is None
            or content.plain_text != previous_content.plain_text
        ):
            content.word_count = count_words(content.plain_text)
        else:
            content.word_count = previous_content.word_count

    now = utcnow()
    if is_new:
        article.created_at = now
    article.updated_at = now
    return article
