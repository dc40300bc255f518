"""Unit tests for the Gemini client factory."""

import httpx
import pytest

from gemini_samples.llm.errors import ConfigError
from gemini_samples.llm.factory import create_client
from gemini_samples.llm.gemini_client import GeminiClient


class TestCreateClient:
    """Tests for the create_client factory."""

    def test_api_key_creates_client(self) -> None:
        """Should create a GeminiClient when an API key is provided."""
        with create_client(api_key="test-key") as client:
            assert isinstance(client, GeminiClient)

    def test_no_credentials_raises_config_error(self) -> None:
        """Should raise ConfigError when no key is provided."""
        with pytest.raises(ConfigError, match="GEMINI_API_KEY"):
            create_client(api_key=None)

    def test_empty_string_treated_as_missing(self) -> None:
        """Should treat an empty key as missing."""
        with pytest.raises(ConfigError):
            create_client(api_key="")

    def test_custom_base_url_is_used(self) -> None:
        """Should send requests to the configured base URL."""
        seen: list[httpx.URL] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, json={"candidates": []})

        with create_client(
            api_key="test-key",
            base_url="http://localhost:8080",
            transport=httpx.MockTransport(handler),
        ) as client:
            client.generative_model("gemini-1.5-flash").generate_content()

        assert seen[0].host == "localhost"
        assert seen[0].port == 8080
