"""Article data models."""

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, model_validator

Language = Literal["en", "ar", "id", "tr", "fr"]
DualLanguageCode = Literal["en", "ar"]
ArticleStatus = Literal["draft", "published", "archived"]

SUPPORTED_LANGUAGES: tuple[str, ...] = ("en", "ar", "id", "tr", "fr")
DUAL_LANGUAGE_CODES: tuple[str, ...] = ("en", "ar")

# Any single URL path segment; non-Latin slugs are allowed.
SLUG_PATTERN = r"^[^\s/?#]+$"


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArticleContent(BaseModel):
    """HTML body with its optional plain-text rendition."""

    html: str
    plain_text: str | None = None
    word_count: int = 0  # derived from plain_text on save


class ArticleImage(BaseModel):
    url: str
    alt: str = ""
    caption: str | None = None


class SeriesRef(BaseModel):
    id: str
    order: int = 0


class ArticleMeta(BaseModel):
    """SEO metadata."""

    description: str = ""
    keywords: list[str] = []
    og_image: str | None = None


class ArticleStats(BaseModel):
    views: int = 0
    shares: int = 0
    reading_time: int = 0  # minutes, derived from content.plain_text


class LanguageContent(BaseModel):
    """One language block of the dual-language overlay.

    Mirrors the primary content shape; every field is optional so a block can
    be filled in gradually. Each block carries its own publish status.
    """

    title: str | None = None
    subtitle: str | None = None
    excerpt: str | None = None
    content: ArticleContent | None = None
    featured_image: ArticleImage | None = None
    meta: ArticleMeta | None = None
    read_time: str | None = None
    status: ArticleStatus | None = None

    def is_empty(self) -> bool:
        """True when the block holds no content besides its status."""
        return not self.model_dump(exclude_none=True, exclude={"status"})


class DualLanguageContent(BaseModel):
    """Secondary-language content blocks co-resident on the article."""

    en: LanguageContent | None = None
    ar: LanguageContent | None = None

    def block(self, language: str) -> LanguageContent | None:
        return getattr(self, language, None)


class DualLanguageFields(BaseModel):
    """Narrow per-language overlay for a single string field."""

    en: str | None = None
    ar: str | None = None


class TranslationMeta(BaseModel):
    """Provenance of a machine translation made from this article."""

    article_id: str | None = None  # the sibling article holding the translation
    status: ArticleStatus = "draft"
    last_translated_at: datetime = Field(default_factory=utcnow)
    translation_provider: str | None = None


class ArticleBase(BaseModel):
    """Author-editable article fields shared by create payloads and records."""

    slug: str = Field(..., pattern=SLUG_PATTERN, max_length=200)
    language: Language = "en"
    title: str = ""
    subtitle: str | None = None
    excerpt: str | None = None
    author: str = ""
    read_time: str | None = None  # editorial label, e.g. "5 min read"
    content: ArticleContent
    featured_image: ArticleImage
    categories: list[str] = []
    series: SeriesRef | None = None
    meta: ArticleMeta = Field(default_factory=ArticleMeta)
    status: ArticleStatus = "draft"
    is_featured: bool = False
    is_latest: bool = False
    dual_language: DualLanguageContent | None = None
    dual_language_author: DualLanguageFields | None = None
    dual_language_title: DualLanguageFields | None = None
    dual_language_subtitle: DualLanguageFields | None = None


class ArticleCreate(ArticleBase):
    """Payload for creating an article."""

    @model_validator(mode="after")
    def _default_block_status(self) -> "ArticleCreate":
        """Supplied dual-language blocks start out as drafts."""
        if self.dual_language is not None:
            for code in DUAL_LANGUAGE_CODES:
                block = self.dual_language.block(code)
                if block is not None and block.status is None:
                    block.status = "draft"
        return self


class Article(ArticleBase):
    """A persisted article record."""

    id: str = Field(default_factory=new_id)
    stats: ArticleStats = Field(default_factory=ArticleStats)
    translations: dict[Language, TranslationMeta] = {}
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ArticleUpdate(BaseModel):
    """Partial update payload. Only fields that are explicitly set are applied."""

    slug: str | None = Field(None, pattern=SLUG_PATTERN, max_length=200)
    language: Language | None = None
    title: str | None = None
    subtitle: str | None = None
    excerpt: str | None = None
    author: str | None = None
    read_time: str | None = None
    content: ArticleContent | None = None
    featured_image: ArticleImage | None = None
    categories: list[str] | None = None
    series: SeriesRef | None = None
    meta: ArticleMeta | None = None
    status: ArticleStatus | None = None
    is_featured: bool | None = None
    is_latest: bool | None = None
    dual_language: DualLanguageContent | None = None
    dual_language_author: DualLanguageFields | None = None
    dual_language_title: DualLanguageFields | None = None
    dual_language_subtitle: DualLanguageFields | None = None


class DualLanguageFieldsUpdate(BaseModel):
    """Additive update for the narrow author/title/subtitle overlays."""

    dual_language_author: DualLanguageFields | None = None
    dual_language_title: DualLanguageFields | None = None
    dual_language_subtitle: DualLanguageFields | None = None

    @classmethod
    def for_language(
        cls,
        language: str,
        author: str | None = None,
        title: str | None = None,
        subtitle: str | None = None,
    ) -> "DualLanguageFieldsUpdate":
        """Build an update that sets the given fields for a single language."""
        return cls(
            dual_language_author=DualLanguageFields(**{language: author}),
            dual_language_title=DualLanguageFields(**{language: title}),
            dual_language_subtitle=DualLanguageFields(**{language: subtitle}),
        )


class LanguageFields(BaseModel):
    """Author/title/subtitle for one language."""

    author: str | None = None
    title: str | None = None
    subtitle: str | None = None


class ArticlePage(BaseModel):
    """One page of a filtered article listing."""

    items: list[Article]
    total: int
    page: int
    limit: int
