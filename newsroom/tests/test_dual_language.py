"""Tests for merging second-language content and overlay fields."""

import pytest

from newsroom.models.article import (
    Article,
    DualLanguageFields,
    DualLanguageFieldsUpdate,
    LanguageContent,
)
from newsroom.services.dual_language import (
    merge_language_content,
    merge_language_fields,
)
from newsroom.services.errors import UnsupportedLanguage


def _article(**overrides) -> Article:
    data = {
        "slug": "merge",
        "title": "Merge",
        "content": {"html": "<p>body</p>", "plain_text": "body"},
        "featured_image": {"url": "https://example.com/a.jpg"},
    }
    data.update(overrides)
    return Article.model_validate(data)


class TestMergeLanguageContent:
    def test_initializes_missing_overlay_with_draft_status(self):
        article = _article()
        merge_language_content(article, "ar", LanguageContent(title="عنوان"))
        assert article.dual_language is not None
        assert article.dual_language.ar.title == "عنوان"
        assert article.dual_language.ar.status == "draft"
        assert article.dual_language.en is None

    def test_shallow_overwrite_preserves_omitted_fields(self):
        article = _article(
            dual_language={
                "ar": {
                    "title": "قديم",
                    "excerpt": "مقتطف",
                    "status": "published",
                }
            }
        )
        merge_language_content(article, "ar", LanguageContent(title="جديد"))
        block = article.dual_language.ar
        assert block.title == "جديد"
        assert block.excerpt == "مقتطف"
        assert block.status == "published"

    def test_sibling_language_block_survives(self):
        article = _article(dual_language={"en": {"title": "English"}})
        merge_language_content(article, "ar", LanguageContent(title="عربي"))
        assert article.dual_language.en.title == "English"

    def test_supplied_content_replaces_nested_content_whole(self):
        article = _article(
            dual_language={
                "ar": {"content": {"html": "<p>old</p>", "plain_text": "old"}}
            }
        )
        partial = LanguageContent.model_validate({"content": {"html": "<p>new</p>"}})
        merge_language_content(article, "ar", partial)
        assert article.dual_language.ar.content.html == "<p>new</p>"
        assert article.dual_language.ar.content.plain_text is None

    def test_rejects_unsupported_language(self):
        with pytest.raises(UnsupportedLanguage) as exc_info:
            merge_language_content(_article(), "fr", LanguageContent(title="Titre"))
        assert exc_info.value.status_code == 422


class TestMergeLanguageFields:
    def test_additive_merge_keeps_existing_language(self):
        article = _article(dual_language_title={"en": "A"})
        fields = DualLanguageFieldsUpdate(
            dual_language_title=DualLanguageFields(ar="ب")
        )
        merge_language_fields(article, fields)
        assert article.dual_language_title.en == "A"
        assert article.dual_language_title.ar == "ب"

    def test_empty_values_never_erase(self):
        article = _article(dual_language_author={"en": "Amina", "ar": "أمينة"})
        fields = DualLanguageFieldsUpdate(
            dual_language_author=DualLanguageFields(en="", ar=None)
        )
        merge_language_fields(article, fields)
        assert article.dual_language_author.en == "Amina"
        assert article.dual_language_author.ar == "أمينة"

    def test_creates_all_overlays_when_missing(self):
        article = _article()
        merge_language_fields(
            article,
            DualLanguageFieldsUpdate(dual_language_subtitle=DualLanguageFields(en="S")),
        )
        assert article.dual_language_author == DualLanguageFields()
        assert article.dual_language_title == DualLanguageFields()
        assert article.dual_language_subtitle.en == "S"

    def test_for_language_builds_single_language_update(self):
        fields = DualLanguageFieldsUpdate.for_language("ar", author="أ", title="ع")
        article = _article(dual_language_author={"en": "A"})
        merge_language_fields(article, fields)
        assert article.dual_language_author.en == "A"
        assert article.dual_language_author.ar == "أ"
        assert article.dual_language_title.ar == "ع"
        assert article.dual_language_subtitle.ar is None
