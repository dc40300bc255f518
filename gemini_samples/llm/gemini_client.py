"""Gemini API client using API key authentication."""

from collections.abc import Generator
from http import HTTPStatus
from types import TracebackType

import httpx
import structlog

from gemini_samples.llm.errors import ProviderError
from gemini_samples.llm.models import (
    ROLE_MODEL,
    Content,
    GenerateContentResponse,
    Part,
    user_turn,
)
from gemini_samples.llm.wire import build_request_body, decode_json, error_message


logger = structlog.get_logger()

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_TIMEOUT = 60.0

_API_VERSION = "v1beta"
_SSE_DATA_PREFIX = "data:"


class GeminiClient:
    """Scoped handle on the Gemini REST API.

    Owns a single ``httpx.Client`` carrying the ``x-goog-api-key``
    header. Use it as a context manager so the connection pool is
    released on every exit path.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Gemini API key.
            base_url: API root, without the version segment.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used to stub the API).
        """
        self._http = httpx.Client(
            base_url=base_url,
            headers={
                "x-goog-api-key": api_key,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )
        self._log = logger.bind(component="llm", subcomponent="gemini_client")

    def __enter__(self) -> "GeminiClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def is_closed(self) -> bool:
        """Whether the underlying HTTP client has been closed."""
        return self._http.is_closed

    def close(self) -> None:
        """Release the HTTP connection pool. Safe to call twice."""
        if not self._http.is_closed:
            self._http.close()
            self._log.debug("llm_client_closed")

    def generative_model(self, name: str) -> "GeminiModel":
        """Return a model handle bound to this client.

        Args:
            name: Model identifier, e.g. ``gemini-1.5-flash``.
        """
        return GeminiModel(self._http, name)


class GeminiModel:
    """Content generation against one Gemini model.

    Attributes:
        name: Model identifier.
    """

    def __init__(self, http: httpx.Client, name: str) -> None:
        self._http = http
        self.name = name
        self._log = logger.bind(component="llm", subcomponent="model", model=name)

    def _path(self, method: str) -> str:
        return f"/{_API_VERSION}/models/{self.name}:{method}"

    def generate_content(self, *parts: Part) -> GenerateContentResponse:
        """Send a single user turn and wait for the full response.

        Args:
            parts: Parts of the prompt, in order.

        Returns:
            Decoded response with all candidates.

        Raises:
            ProviderError: On network failure, non-200 status, or a
                malformed or blocked response.
        """
        return self.generate_from_contents([user_turn(*parts)])

    def generate_from_contents(
        self, contents: list[Content]
    ) -> GenerateContentResponse:
        """Send a list of turns and wait for the full response.

        Raises:
            ProviderError: On network failure, non-200 status, or a
                malformed or blocked response.
        """
        body = build_request_body(contents)
        self._log.info("generate_content_started", turns=len(contents))

        try:
            response = self._http.post(self._path("generateContent"), json=body)
        except httpx.HTTPError as exc:
            self._log.warning("provider_error", error=str(exc))
            msg = f"Gemini API request failed: {exc}"
            raise ProviderError(msg) from exc

        if response.status_code != HTTPStatus.OK:
            self._log.warning("provider_error", status=response.status_code)
            raise ProviderError(
                error_message(response.text, response.status_code),
                status_code=response.status_code,
            )

        result = decode_json(response.text)
        self._log.info(
            "generate_content_complete",
            candidates=len(result.candidates),
            total_tokens=result.usage.total_token_count if result.usage else None,
        )
        return result

    def generate_content_stream(self, *parts: Part) -> "ResponseStream":
        """Start a streamed generation for a single user turn.

        Nothing is sent until the first chunk is pulled.

        Args:
            parts: Parts of the prompt, in order.

        Returns:
            Lazy iterator of response chunks.
        """
        body = build_request_body([user_turn(*parts)])
        return ResponseStream(self._http, self._path("streamGenerateContent"), body)

    def start_chat(self, history: list[Content] | None = None) -> "GeminiChatSession":
        """Open a chat session seeded with ``history``.

        Args:
            history: Prior turns, oldest first. Copied, not shared.
        """
        return GeminiChatSession(self, list(history or []))


class GeminiChatSession:
    """A conversation whose history is replayed with every message.

    Attributes:
        history: Completed turns, oldest first. Only ever appended to.
    """

    def __init__(self, model: GeminiModel, history: list[Content]) -> None:
        self._model = model
        self.history = history
        self._log = logger.bind(component="llm", subcomponent="chat")

    def send_message(self, *parts: Part) -> GenerateContentResponse:
        """Send a user message after the current history.

        On success the user turn and the first candidate's content are
        appended to ``history``. On failure history is left untouched.

        Raises:
            ProviderError: If the API call fails.
        """
        turn = user_turn(*parts)
        response = self._model.generate_from_contents([*self.history, turn])

        self.history.append(turn)
        if response.candidates:
            reply = response.candidates[0].content
            self.history.append(Content(role=ROLE_MODEL, parts=reply.parts))

        self._log.info("chat_message_sent", history_turns=len(self.history))
        return response


class ResponseStream:
    """Lazy, finite, non-restartable sequence of streamed response chunks.

    The HTTP request is issued on the first pull and the connection is
    held until the server ends the stream, an error occurs, or
    ``close()`` is called. Once finished, further pulls raise
    ``StopIteration`` without touching the network.
    """

    def __init__(self, http: httpx.Client, path: str, body: dict[str, object]) -> None:
        self._http = http
        self._path = path
        self._body = body
        self._chunks: Generator[GenerateContentResponse, None, None] | None = None
        self._done = False
        self._log = logger.bind(component="llm", subcomponent="stream")

    def __iter__(self) -> "ResponseStream":
        return self

    def __next__(self) -> GenerateContentResponse:
        if self._done:
            raise StopIteration
        if self._chunks is None:
            self._chunks = self._iter_chunks()
        try:
            return next(self._chunks)
        except BaseException:
            self._done = True
            raise

    def close(self) -> None:
        """Abandon the stream and release its connection."""
        self._done = True
        if self._chunks is not None:
            self._chunks.close()

    def _iter_chunks(self) -> Generator[GenerateContentResponse, None, None]:
        self._log.info("stream_started")
        count = 0
        try:
            with self._http.stream(
                "POST", self._path, params={"alt": "sse"}, json=self._body
            ) as response:
                if response.status_code != HTTPStatus.OK:
                    response.read()
                    self._log.warning("provider_error", status=response.status_code)
                    raise ProviderError(
                        error_message(response.text, response.status_code),
                        status_code=response.status_code,
                    )

                for line in response.iter_lines():
                    line = line.strip()
                    if not line.startswith(_SSE_DATA_PREFIX):
                        continue
                    chunk = decode_json(line[len(_SSE_DATA_PREFIX) :].strip())
                    count += 1
                    self._log.debug("stream_chunk_received", chunk=count)
                    yield chunk
        except httpx.HTTPError as exc:
            self._log.warning("provider_error", error=str(exc))
            msg = f"Gemini API stream failed: {exc}"
            raise ProviderError(msg) from exc

        self._log.info("stream_complete", chunks=count)
