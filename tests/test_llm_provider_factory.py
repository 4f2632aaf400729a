"""Tests for hot-swappable LLM provider factory."""

import pytest

from feed_relay.config import EnrichConfig, ProviderConfig
from feed_relay.llm.providers.factory import available_providers, create_provider
from feed_relay.llm.providers.gemini import GeminiProvider
from feed_relay.llm.providers.openai_compatible import OpenAICompatibleProvider


def test_available_providers_contains_expected_backends():
    names = available_providers()
    assert "gemini" in names
    assert "openai" in names
    assert "openai_compatible" in names


def test_create_provider_gemini():
    provider = create_provider(
        ProviderConfig(name="gemini", model="gemini-2.5-flash", api_key="test-key"),
        EnrichConfig(),
    )
    assert isinstance(provider, GeminiProvider)


def test_create_provider_openai_compatible():
    provider = create_provider(
        ProviderConfig(
            name="OpenAI-Compatible",
            model="gpt-4.1-mini",
            api_key="test-key",
            base_url="http://localhost:8000/v1",
        ),
        EnrichConfig(),
    )
    assert isinstance(provider, OpenAICompatibleProvider)


def test_create_provider_rejects_unknown_backend():
    with pytest.raises(ValueError, match="Unsupported provider"):
        create_provider(ProviderConfig(name="unknown-provider", api_key="test-key"), EnrichConfig())


def test_create_provider_requires_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(ValueError, match="Missing OpenAI API key"):
        create_provider(ProviderConfig(name="openai"), EnrichConfig())
