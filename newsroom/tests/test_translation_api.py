"""Tests for the free-form translation endpoints."""

from httpx import ASGITransport, AsyncClient

BASE = "/api/newsroom/translate"


async def test_translate_text(client_app):
    async with AsyncClient(
        transport=ASGITransport(app=client_app), base_url="http://test"
    ) as client:
        response = await client.post(BASE, json={"text": "Hello", "to": "tr"})

    assert response.status_code == 200
    assert response.json() == {
        "text": "[tr] Hello",
        "to": "tr",
        "original": "Hello",
        "provider": "fake",
    }


async def test_translate_text_validates_input(client_app):
    async with AsyncClient(
        transport=ASGITransport(app=client_app), base_url="http://test"
    ) as client:
        empty = await client.post(BASE, json={"text": "", "to": "ar"})
        unknown = await client.post(BASE, json={"text": "Hi", "to": "xx"})

    assert empty.status_code == 422
    assert unknown.status_code == 422


async def test_translate_batch(client_app):
    async with AsyncClient(
        transport=ASGITransport(app=client_app), base_url="http://test"
    ) as client:
        response = await client.post(
            f"{BASE}/batch", json={"texts": ["One", "Two"], "to": "fr"}
        )

    data = response.json()
    assert data["translations"] == ["[fr] One", "[fr] Two"]
    assert data["originals"] == ["One", "Two"]
    assert data["count"] == 2


async def test_translate_text_provider_failure(client_app, failing_translator):
    from newsroom.dependencies import get_translator

    client_app.dependency_overrides[get_translator] = lambda: failing_translator
    async with AsyncClient(
        transport=ASGITransport(app=client_app), base_url="http://test"
    ) as client:
        response = await client.post(BASE, json={"text": "Hello", "to": "ar"})

    assert response.status_code == 502


async def test_languages_and_health(client_app):
    async with AsyncClient(
        transport=ASGITransport(app=client_app), base_url="http://test"
    ) as client:
        languages = await client.get(f"{BASE}/languages")
        health = await client.get(f"{BASE}/health")

    assert set(languages.json()) == {"en", "ar", "id", "tr", "fr"}
    assert health.json() == {"status": "ok", "provider": "fake", "configured": True}
