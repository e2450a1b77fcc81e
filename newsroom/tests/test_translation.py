"""Tests for the translation orchestrator: persisted siblings and previews."""

import asyncio

import httpx
import pytest

from newsroom.services.errors import ArticleNotFound, TranslationProviderError
from newsroom.services.translation import TranslationOrchestrator
from newsroom.services.translator import LibreTranslateTranslator, PassthroughTranslator


class TestTranslateArticle:
    async def test_creates_draft_sibling_with_translated_html(
        self, orchestrator, service, translator, payload_factory
    ):
        source = await service.create_article(
            payload_factory(status="published", series={"id": "s1", "order": 3})
        )

        sibling = await orchestrator.translate_article(source.id, "ar")

        assert sibling.id != source.id
        assert sibling.slug == source.slug
        assert sibling.language == "ar"
        assert sibling.status == "draft"
        assert sibling.content.html == (
            "<div lang='ar'><p>Hello brave new world</p></div>"
        )
        # plain text and word count are carried over untranslated
        assert sibling.content.plain_text == source.content.plain_text
        assert sibling.content.word_count == source.content.word_count
        assert sibling.title == source.title
        assert sibling.series.order == 3
        assert translator.calls == [("html", source.content.html, "ar")]

    async def test_records_translation_on_source(
        self, orchestrator, service, payload_factory
    ):
        source = await service.create_article(payload_factory())

        sibling = await orchestrator.translate_article(source.id, "tr")

        reloaded = await service.get_article(source.id)
        meta = reloaded.translations["tr"]
        assert meta.article_id == sibling.id
        assert meta.status == "draft"
        assert meta.translation_provider == "fake"

    async def test_same_language_is_a_no_op(
        self, orchestrator, service, store, translator, payload_factory
    ):
        source = await service.create_article(payload_factory())

        result = await orchestrator.translate_article(source.id, "en")

        assert result == source
        assert translator.calls == []
        assert await store.count({}) == 1

    async def test_retranslation_updates_the_same_sibling(
        self, orchestrator, service, store, payload_factory
    ):
        source = await service.create_article(payload_factory())

        first = await orchestrator.translate_article(source.id, "id")
        second = await orchestrator.translate_article(source.id, "id")

        assert first.id == second.id
        assert first.created_at == second.created_at
        assert await store.count({"slug": source.slug, "language": "id"}) == 1

    async def test_concurrent_translations_create_one_sibling(
        self, orchestrator, service, store, payload_factory
    ):
        source = await service.create_article(payload_factory())

        results = await asyncio.gather(
            orchestrator.translate_article(source.id, "fr"),
            orchestrator.translate_article(source.id, "fr"),
        )

        assert results[0].id == results[1].id
        assert await store.count({"slug": source.slug, "language": "fr"}) == 1

    async def test_provider_failure_degrades_to_source_html(
        self, service, failing_translator, payload_factory
    ):
        orchestrator = TranslationOrchestrator(service, failing_translator)
        source = await service.create_article(payload_factory())

        sibling = await orchestrator.translate_article(source.id, "ar")

        assert sibling.content.html == source.content.html
        reloaded = await service.get_article(source.id)
        assert reloaded.translations["ar"].translation_provider == "none"

    async def test_unconfigured_provider_passes_through(self, service, payload_factory):
        orchestrator = TranslationOrchestrator(service, PassthroughTranslator())
        source = await service.create_article(payload_factory())

        sibling = await orchestrator.translate_article(source.id, "ar")
        assert sibling.content.html == source.content.html

    async def test_malformed_provider_reply_keeps_source_html(
        self, service, payload_factory
    ):
        def handler(request):
            return httpx.Response(200, text="<html>gateway page</html>")

        source = await service.create_article(payload_factory())
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            translator = LibreTranslateTranslator("https://libre.test", client=client)
            orchestrator = TranslationOrchestrator(service, translator)
            sibling = await orchestrator.translate_article(source.id, "ar")

        assert sibling.language == "ar"
        assert sibling.content.html == source.content.html
        reloaded = await service.get_article(source.id)
        assert reloaded.translations["ar"].translation_provider == "none"

    async def test_missing_article(self, orchestrator):
        with pytest.raises(ArticleNotFound):
            await orchestrator.translate_article("nope", "ar")


class TestPreviewTranslation:
    async def test_preview_does_not_touch_the_store(
        self, orchestrator, service, store, payload_factory
    ):
        source = await service.create_article(
            payload_factory(subtitle="A subtitle", excerpt="An excerpt")
        )
        before = await store.find({})

        preview = await orchestrator.preview_translation(source.id, "ar")

        assert preview.language == "ar"
        assert preview.title == "[ar] Hello World"
        assert preview.subtitle == "[ar] A subtitle"
        assert preview.excerpt == "[ar] An excerpt"
        assert preview.html.startswith("<div lang='ar'>")
        assert await store.find({}) == before

    async def test_preview_skips_missing_optional_fields(
        self, orchestrator, service, translator, payload_factory
    ):
        source = await service.create_article(payload_factory())

        preview = await orchestrator.preview_translation(source.id, "tr")

        assert preview.subtitle is None
        assert preview.excerpt is None
        assert sorted(kind for kind, _, _ in translator.calls) == ["html", "text"]

    async def test_english_preview_is_verbatim(
        self, orchestrator, service, translator, payload_factory
    ):
        source = await service.create_article(payload_factory(language="ar"))

        preview = await orchestrator.preview_translation(source.id, "en")

        assert preview.title == source.title
        assert preview.html == source.content.html
        assert translator.calls == []

    async def test_preview_propagates_provider_errors(
        self, service, failing_translator, payload_factory
    ):
        orchestrator = TranslationOrchestrator(service, failing_translator)
        source = await service.create_article(payload_factory())

        with pytest.raises(TranslationProviderError):
            await orchestrator.preview_translation(source.id, "ar")

    async def test_preview_missing_article(self, orchestrator):
        with pytest.raises(ArticleNotFound):
            await orchestrator.preview_translation("nope", "ar")
