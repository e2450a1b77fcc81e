"""Tests for the shared outbound HTTP client."""

from newsroom.services.http_client import close_shared_client, get_shared_client


async def test_client_is_shared(mock_settings):
    first = get_shared_client()
    assert get_shared_client() is first
    await close_shared_client()


async def test_client_uses_configured_timeout(mock_settings):
    mock_settings.translation_timeout = 7.5
    client = get_shared_client()
    assert client.timeout.read == 7.5
    await close_shared_client()


async def test_closed_client_is_recreated(mock_settings):
    first = get_shared_client()
    await close_shared_client()
    assert first.is_closed
    assert get_shared_client() is not first
    await close_shared_client()


async def test_close_without_client_is_a_no_op():
    await close_shared_client()
