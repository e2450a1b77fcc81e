"""Machine-translation providers.

Usage:
    from newsroom.services.translator import create_translator

    translator = create_translator(get_settings())
    html = await translator.translate_html("<p>Hello</p>", "ar")

Every provider returns its input unchanged when it has nothing to do
(blank input, or no provider configured). Provider failures, including
timeouts and non-2xx responses, raise TranslationProviderError.
"""

import asyncio
import logging

import httpx
from openai import APIError, AsyncOpenAI

from newsroom.config import Settings
from newsroom.services.errors import TranslationProviderError
from newsroom.services.http_client import get_shared_client

logger = logging.getLogger(__name__)

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "ar": "Arabic",
    "id": "Bahasa Indonesia",
    "tr": "Turkish",
    "fr": "French",
}

HTML_PROMPT = (
    "You are a professional translator. Translate the user's HTML content "
    "into {language}.\n"
    "- Preserve all HTML tags and structure.\n"
    "- Only translate human-readable text.\n"
    "- Do not add explanations. Return only the translated HTML."
)

TEXT_PROMPT = (
    "You are a professional translator. Translate the user's text into "
    "{language}. Return only the translated text."
)


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code, code)


class Translator:
    """Base translator. Returns its input unchanged."""

    name = "none"
    configured = False

    async def translate_text(self, text: str, target_language: str) -> str:
        return text

    async def translate_html(self, html: str, target_language: str) -> str:
        return html

    async def translate_batch(
        self, texts: list[str], target_language: str
    ) -> list[str]:
        """Translate several texts concurrently, preserving order."""
        return list(
            await asyncio.gather(
                *(self.translate_text(t, target_language) for t in texts)
            )
        )


class PassthroughTranslator(Translator):
    """Used when no provider is configured: translation is the identity."""


class OpenAITranslator(Translator):
    """Translation through an OpenAI-compatible chat completions API."""

    name = "openai"
    configured = True

    def __init__(self, client: AsyncOpenAI, model: str, temperature: float = 0.2):
        self._client = client
        self._model = model
        self._temperature = temperature

    async def _complete(self, system: str, content: str) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": content},
                ],
                temperature=self._temperature,
            )
        except APIError as e:
            raise TranslationProviderError(self.name, str(e)) from e
        if not response.choices:
            return content
        return response.choices[0].message.content or content

    async def translate_text(self, text: str, target_language: str) -> str:
        if not text.strip():
            return text
        system = TEXT_PROMPT.format(language=language_name(target_language))
        return await self._complete(system, text)

    async def translate_html(self, html: str, target_language: str) -> str:
        if not html.strip():
            return html
        system = HTML_PROMPT.format(language=language_name(target_language))
        return await self._complete(system, html)


class LibreTranslateTranslator(Translator):
    """Translation through a LibreTranslate server's ``/translate`` endpoint."""

    name = "libretranslate"
    configured = True

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._url = base_url.rstrip("/") + "/translate"
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    async def _translate(self, q: str, target_language: str, fmt: str) -> str:
        payload = {"q": q, "source": "auto", "target": target_language, "format": fmt}
        if self._api_key:
            payload["api_key"] = self._api_key

        client = self._client or get_shared_client()
        try:
            resp = await client.post(self._url, json=payload, timeout=self._timeout)
        except httpx.HTTPError as e:
            raise TranslationProviderError(self.name, f"{type(e).__name__}: {e}") from e

        if resp.status_code != 200:
            logger.warning(
                "LibreTranslate returned %d for %s", resp.status_code, target_language
            )
            raise TranslationProviderError(
                self.name, f"HTTP {resp.status_code}: {resp.text[:200]}"
            )
        try:
            return resp.json().get("translatedText", q)
        except (ValueError, AttributeError) as e:
            raise TranslationProviderError(self.name, "invalid response body") from e

    async def translate_text(self, text: str, target_language: str) -> str:
        if not text.strip():
            return text
        return await self._translate(text, target_language, "text")

    async def translate_html(self, html: str, target_language: str) -> str:
        if not html.strip():
            return html
        return await self._translate(html, target_language, "html")


def create_translator(settings: Settings) -> Translator:
    """Build the translator selected by configuration.

    An unset ``translation_provider`` picks OpenAI when an API key is
    present, otherwise the passthrough translator.
    """
    provider = settings.translation_provider.strip().lower()
    if not provider:
        provider = "openai" if settings.openai_api_key else "none"

    if provider == "openai" and settings.openai_api_key:
        client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url or None,
            timeout=settings.translation_timeout,
            max_retries=0,
        )
        return OpenAITranslator(client, settings.openai_model)

    if provider == "libretranslate" and settings.libretranslate_url:
        return LibreTranslateTranslator(
            settings.libretranslate_url,
            api_key=settings.libretranslate_api_key,
            timeout=settings.translation_timeout,
        )

    if provider != "none":
        logger.warning(
            "Translation provider %r is not configured; translations pass through",
            provider,
        )
    return PassthroughTranslator()
