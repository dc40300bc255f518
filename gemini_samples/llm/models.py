"""Data models for Gemini requests and responses."""

from dataclasses import dataclass, field


ROLE_USER = "user"
ROLE_MODEL = "model"


@dataclass(frozen=True)
class Text:
    """A UTF-8 text part.

    Attributes:
        text: The text content.
    """

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Blob:
    """A binary part tagged with its MIME type.

    Attributes:
        mime_type: Full MIME type, e.g. ``image/png``.
        data: Raw bytes.
    """

    mime_type: str
    data: bytes

    def __str__(self) -> str:
        return f"<{self.mime_type}: {len(self.data)} bytes>"


Part = Text | Blob


def image_data(image_format: str, data: bytes) -> Blob:
    """Build an image part from its subtype and bytes.

    Args:
        image_format: Image subtype such as ``png`` or ``jpeg``.
        data: Encoded image bytes.

    Returns:
        Blob tagged ``image/<image_format>``.
    """
    return Blob(mime_type=f"image/{image_format}", data=data)


@dataclass(frozen=True)
class Content:
    """One turn of a conversation.

    Attributes:
        role: ``user`` or ``model``.
        parts: Ordered parts of the turn.
    """

    role: str
    parts: tuple[Part, ...]


def user_turn(*parts: Part | str) -> Content:
    """Build a user turn, wrapping plain strings as text parts."""
    return Content(role=ROLE_USER, parts=_as_parts(parts))


def model_turn(*parts: Part | str) -> Content:
    """Build a model turn, wrapping plain strings as text parts."""
    return Content(role=ROLE_MODEL, parts=_as_parts(parts))


def _as_parts(parts: tuple[Part | str, ...]) -> tuple[Part, ...]:
    return tuple(Text(p) if isinstance(p, str) else p for p in parts)


@dataclass(frozen=True)
class Candidate:
    """A ranked alternative output returned by the model.

    Attributes:
        index: Position of the candidate in the response.
        content: Generated content (role ``model``).
        finish_reason: Why generation stopped, if reported.
    """

    index: int
    content: Content
    finish_reason: str | None = None


@dataclass(frozen=True)
class UsageMetadata:
    """Token accounting reported with a response."""

    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: int = 0


@dataclass(frozen=True)
class GenerateContentResponse:
    """A full response, or one chunk of a streamed response.

    Attributes:
        candidates: Candidates in the order returned.
        usage: Token usage, if reported.
    """

    candidates: list[Candidate] = field(default_factory=list)
    usage: UsageMetadata | None = None
