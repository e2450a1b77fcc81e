"""Merging partial second-language payloads into an article.

The two overlay mechanisms merge differently and must stay that way:

* ``dual_language.<code>`` content blocks take a shallow per-field overwrite:
  supplied fields replace, omitted fields survive.
* The narrow ``dual_language_author/title/subtitle`` maps are additive only:
  an empty or missing value never erases what is already stored.
"""

from newsroom.models.article import (
    DUAL_LANGUAGE_CODES,
    Article,
    DualLanguageContent,
    DualLanguageFields,
    DualLanguageFieldsUpdate,
    LanguageContent,
)
from newsroom.services.errors import UnsupportedLanguage

NARROW_OVERLAYS = (
    "dual_language_author",
    "dual_language_title",
    "dual_language_subtitle",
)


def merge_language_content(
    article: Article, language: str, partial: LanguageContent
) -> LanguageContent:
    """Merge *partial* over the article's existing block for *language*.

    Only fields set on *partial* are applied. A merged block without a
    status starts out as a draft.
    """
    if language not in DUAL_LANGUAGE_CODES:
        raise UnsupportedLanguage(language)
    if article.dual_language is None:
        article.dual_language = DualLanguageContent()

    existing = article.dual_language.block(language)
    merged = existing.model_dump() if existing is not None else {}
    merged.update(partial.model_dump(exclude_unset=True))
    if not merged.get("status"):
        merged["status"] = "draft"

    block = LanguageContent.model_validate(merged)
    setattr(article.dual_language, language, block)
    return block


def merge_language_fields(article: Article, fields: DualLanguageFieldsUpdate) -> None:
    """Add non-empty author/title/subtitle overlay values to the article."""
    for attr in NARROW_OVERLAYS:
        overlay = getattr(article, attr)
        if overlay is None:
            overlay = DualLanguageFields()
            setattr(article, attr, overlay)

        supplied = getattr(fields, attr)
        if supplied is None:
            continue
        for code in DUAL_LANGUAGE_CODES:
            value = getattr(supplied, code)
            if value:
                setattr(overlay, code, value)
