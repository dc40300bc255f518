"""Factory for creating Gemini clients."""

import httpx
import structlog

from gemini_samples.llm.errors import ConfigError
from gemini_samples.llm.gemini_client import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    GeminiClient,
)


logger = structlog.get_logger()


def create_client(
    *,
    api_key: str | None,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> GeminiClient:
    """Create a Gemini client from an API key.

    No request is made here; a missing key is reported before any
    network access.

    Args:
        api_key: Gemini API key.
        base_url: API root URL.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (used to stub the API).

    Returns:
        A client ready to be used as a context manager.

    Raises:
        ConfigError: If no API key is provided.
    """
    log = logger.bind(component="llm", subcomponent="factory")

    if not api_key:
        msg = "No Gemini credentials configured (need GEMINI_API_KEY)"
        raise ConfigError(msg)

    log.info("llm_client_created", auth_method="api_key", base_url=base_url)
    return GeminiClient(
        api_key=api_key,
        base_url=base_url,
        timeout=timeout,
        transport=transport,
    )
