"""Translation request and response models."""

from pydantic import BaseModel, Field

from newsroom.models.article import Language


class TranslateArticleRequest(BaseModel):
    target_language: Language


class TranslationPreview(BaseModel):
    """Machine translation of an article's headline fields and body. Not stored."""

    language: Language
    title: str
    subtitle: str | None = None
    excerpt: str | None = None
    html: str


class TextTranslationRequest(BaseModel):
    text: str = Field(..., min_length=1)
    to: Language


class TextTranslationResponse(BaseModel):
    text: str
    to: Language
    original: str
    provider: str


class BatchTranslationRequest(BaseModel):
    texts: list[str] = Field(..., min_length=1, max_length=100)
    to: Language


class BatchTranslationResponse(BaseModel):
    translations: list[str]
    to: Language
    originals: list[str]
    count: int
    provider: str
