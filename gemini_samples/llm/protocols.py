"""Protocol interfaces for generative model clients."""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from gemini_samples.llm.models import Content, GenerateContentResponse, Part


class ResponseChunks(Protocol):
    """Protocol for a streamed response that holds an open connection."""

    def __iter__(self) -> Iterator[GenerateContentResponse]: ...

    def __next__(self) -> GenerateContentResponse: ...

    def close(self) -> None:
        """Release the connection; safe to call more than once."""
        ...


@runtime_checkable
class ChatSession(Protocol):
    """Protocol for a conversation seeded with prior turns.

    The provider is the only source of conversational memory; the
    session just replays ``history`` with every message it sends.
    """

    history: list[Content]

    def send_message(self, *parts: Part) -> GenerateContentResponse:
        """Send a user message after the current history.

        Args:
            parts: Parts of the new user turn.

        Returns:
            The model's response.

        Raises:
            ProviderError: If the API call fails.
        """
        ...


@runtime_checkable
class GenerativeModel(Protocol):
    """Protocol for content generation against one fixed model.

    Any object implementing these three calls can stand in for the
    Gemini client, which is how the dispatcher is tested.
    """

    def generate_content(self, *parts: Part) -> GenerateContentResponse:
        """Generate a response for a single user turn.

        Raises:
            ProviderError: If the API call fails.
        """
        ...

    def generate_content_stream(
        self, *parts: Part
    ) -> ResponseChunks:
        """Generate a response incrementally.

        Returns:
            Lazy, finite iterator of response chunks. Exhaustion is the
            end signal; any other failure raises ``ProviderError``. The
            caller closes it when done.
        """
        ...

    def start_chat(self, history: list[Content] | None = None) -> ChatSession:
        """Open a chat session seeded with ``history``."""
        ...
