"""Errors raised by the article content engine.

Each error carries the HTTP status the API layer answers with, so routers
can let them propagate to the shared exception handler in ``newsroom.main``.
"""


class ArticleError(Exception):
    """Base class for article engine errors."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ContentTooLarge(ArticleError):
    """A content body exceeds its size limit."""

    status_code = 413

    def __init__(self, field: str, limit: int, actual: int) -> None:
        super().__init__(
            f"{field} is too long: {actual} characters "
            f"(maximum allowed is {limit})"
        )
        self.field = field
        self.limit = limit
        self.actual = actual


class ArticleNotFound(ArticleError):
    """No article exists for the given identifier."""

    status_code = 404

    def __init__(self, article_id: str) -> None:
        super().__init__(f"Article not found: {article_id}")
        self.article_id = article_id


class DualLanguageRequired(ArticleError):
    """Dual-language create called without any language block."""

    status_code = 422

    def __init__(self) -> None:
        super().__init__(
            "At least one language (en or ar) must be provided in dual_language content"
        )


class UnsupportedLanguage(ArticleError):
    """A language code outside the dual-language overlay."""

    status_code = 422

    def __init__(self, language: str) -> None:
        super().__init__(f"Unsupported dual-language code: {language!r}")
        self.language = language


class DuplicateSlugLanguage(ArticleError):
    """Another article already uses this (slug, language) pair."""

    status_code = 409

    def __init__(self, slug: str, language: str) -> None:
        super().__init__(
            f"An article with slug {slug!r} already exists for {language!r}"
        )
        self.slug = slug
        self.language = language


class TranslationProviderError(ArticleError):
    """The machine-translation provider failed or returned an error."""

    status_code = 502

    def __init__(self, provider: str, detail: str) -> None:
        super().__init__(f"Translation provider {provider!r} failed: {detail}")
        self.provider = provider
        self.detail = detail
