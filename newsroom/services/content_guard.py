"""Size limits for article content bodies.

Every write path runs ``validate_article_content`` before touching the
store, so an oversized body never leaves a partially written record behind.
"""

from newsroom.models.article import DUAL_LANGUAGE_CODES, Article, ArticleContent
from newsroom.services.errors import ContentTooLarge

MAX_HTML_LENGTH = 10_000_000
MAX_PLAIN_TEXT_LENGTH = 5_000_000


def validate_content_size(block: ArticleContent | None, field: str = "content") -> None:
    """Raise ContentTooLarge if either body of *block* exceeds its limit."""
    if block is None:
        return
    if block.html and len(block.html) > MAX_HTML_LENGTH:
        raise ContentTooLarge(f"{field}.html", MAX_HTML_LENGTH, len(block.html))
    if block.plain_text and len(block.plain_text) > MAX_PLAIN_TEXT_LENGTH:
        raise ContentTooLarge(
            f"{field}.plain_text", MAX_PLAIN_TEXT_LENGTH, len(block.plain_text)
        )


def validate_article_content(article: Article) -> None:
    """Check the primary content and both dual-language content blocks."""
    validate_content_size(article.content, "content")
    if article.dual_language is None:
        return
    for code in DUAL_LANGUAGE_CODES:
        block = article.dual_language.block(code)
        if block is not None:
            validate_content_size(block.content, f"dual_language.{code}.content")
