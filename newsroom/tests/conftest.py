"""Shared fixtures for newsroom tests."""

import pytest

import newsroom.main  # noqa: F401  (binds the real get_settings before patching)
from newsroom.models.article import ArticleCreate
from newsroom.services.article_store import InMemoryArticleStore
from newsroom.services.articles import ArticleService
from newsroom.services.errors import TranslationProviderError
from newsroom.services.translation import TranslationOrchestrator
from newsroom.services.translator import Translator


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset all module-level singletons and caches between tests."""
    yield

    # 1. Settings LRU cache
    from newsroom.config import get_settings

    get_settings.cache_clear()

    # 2. Store and translator singletons
    import newsroom.dependencies as deps_mod

    deps_mod._store = None
    deps_mod._translator = None

    # 3. HTTP client singleton
    import newsroom.services.http_client as http_mod

    http_mod._client = None

    # 4. Health check cache
    import newsroom.main as main_mod

    main_mod._health_cache = None
    main_mod.app.dependency_overrides.clear()


@pytest.fixture
def mock_settings(monkeypatch):
    """Provide a Settings object with safe test defaults."""
    from newsroom.config import Settings, get_settings

    test_settings = Settings(
        _env_file=None,
        mongodb_uri="",
        translation_provider="none",
        openai_api_key="",
        libretranslate_url="",
        admin_api_key="",
        translation_timeout=5.0,
    )

    get_settings.cache_clear()
    monkeypatch.setattr("newsroom.config.get_settings", lambda: test_settings)

    # Patch get_settings in all modules that import it directly
    for mod_path in [
        "newsroom.dependencies",
        "newsroom.services.http_client",
        "newsroom.main",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings


class FakeTranslator(Translator):
    """Records every call and tags output with the target language."""

    name = "fake"
    configured = True

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[tuple[str, str, str]] = []

    async def translate_text(self, text: str, target_language: str) -> str:
        self.calls.append(("text", text, target_language))
        if self.fail:
            raise TranslationProviderError(self.name, "service unavailable")
        return f"[{target_language}] {text}"

    async def translate_html(self, html: str, target_language: str) -> str:
        self.calls.append(("html", html, target_language))
        if self.fail:
            raise TranslationProviderError(self.name, "service unavailable")
        return f"<div lang='{target_language}'>{html}</div>"


@pytest.fixture
def store():
    return InMemoryArticleStore()


@pytest.fixture
def service(store):
    return ArticleService(store)


@pytest.fixture
def translator():
    return FakeTranslator()


@pytest.fixture
def orchestrator(service, translator):
    return TranslationOrchestrator(service, translator)


def make_payload(**overrides) -> ArticleCreate:
    """Build a minimal valid create payload."""
    data = {
        "slug": "hello-world",
        "language": "en",
        "title": "Hello World",
        "author": "Amina",
        "content": {
            "html": "<p>Hello brave new world</p>",
            "plain_text": "Hello brave new world",
        },
        "featured_image": {"url": "https://example.com/cover.jpg", "alt": "Cover"},
        "categories": ["history"],
    }
    data.update(overrides)
    return ArticleCreate.model_validate(data)


@pytest.fixture
def payload_factory():
    return make_payload


@pytest.fixture
def client_app(mock_settings, store, translator):
    """The FastAPI app wired to the in-memory store and fake translator."""
    from newsroom.dependencies import get_store, get_translator
    from newsroom.main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_translator] = lambda: translator
    return app


@pytest.fixture
def failing_translator():
    return FakeTranslator(fail=True)
