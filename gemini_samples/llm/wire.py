"""JSON wire format for the Gemini ``generateContent`` family of endpoints.

Encodes contents into request bodies and decodes response payloads into
the dataclasses in ``models``. Decoding is lenient about missing optional
fields (a JSON null counts as missing) but strict about the overall
shape: a value of the wrong JSON type raises ``ProviderError``.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from gemini_samples.llm.errors import ProviderError
from gemini_samples.llm.models import (
    ROLE_MODEL,
    Blob,
    Candidate,
    Content,
    GenerateContentResponse,
    Part,
    Text,
    UsageMetadata,
)


def encode_part(part: Part) -> dict[str, object]:
    """Encode a single part.

    Args:
        part: Text or Blob part.

    Returns:
        Wire representation of the part.
    """
    if isinstance(part, Text):
        return {"text": part.text}
    return {
        "inlineData": {
            "mimeType": part.mime_type,
            "data": base64.b64encode(part.data).decode("ascii"),
        }
    }


def encode_content(content: Content) -> dict[str, object]:
    """Encode a conversation turn."""
    return {
        "role": content.role,
        "parts": [encode_part(p) for p in content.parts],
    }


def build_request_body(contents: list[Content]) -> dict[str, object]:
    """Build the request body for a generate call.

    Args:
        contents: Turns to send, oldest first.

    Returns:
        JSON-serializable request body.
    """
    return {"contents": [encode_content(c) for c in contents]}


def _field_object(raw: dict[str, Any], key: str) -> dict[str, Any]:
    """Return ``raw[key]`` as an object; missing or null is empty."""
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"Expected object for {key!r}, got {type(value).__name__}"
        raise ProviderError(msg)
    return value


def _field_array(raw: dict[str, Any], key: str) -> list[Any]:
    """Return ``raw[key]`` as an array; missing or null is empty."""
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        msg = f"Expected array for {key!r}, got {type(value).__name__}"
        raise ProviderError(msg)
    return value


def _require_object(value: object, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        msg = f"Expected JSON object for {what}, got {type(value).__name__}"
        raise ProviderError(msg)
    return value


def decode_part(raw: object) -> Part:
    """Decode a single response part.

    Parts that carry neither text nor inline data (function calls and
    the like) decode to empty text.

    Raises:
        ProviderError: If the part is not an object or its inline data
            is not valid base64.
    """
    part = _require_object(raw, "part")
    if "inlineData" in part:
        inline = _field_object(part, "inlineData")
        try:
            data = base64.b64decode(inline.get("data") or "", validate=True)
        except (binascii.Error, ValueError, TypeError) as exc:
            msg = f"Invalid inline data in response: {exc}"
            raise ProviderError(msg) from exc
        return Blob(mime_type=inline.get("mimeType", ""), data=data)
    return Text(str(part.get("text") or ""))


def decode_response(data: object) -> GenerateContentResponse:
    """Decode a ``GenerateContentResponse`` payload.

    Args:
        data: Parsed JSON payload.

    Returns:
        Decoded response.

    Raises:
        ProviderError: If the payload is not an object or the prompt
            was blocked.
    """
    data = _require_object(data, "response")

    block_reason = _field_object(data, "promptFeedback").get("blockReason")
    if block_reason:
        msg = f"Prompt blocked by provider: {block_reason}"
        raise ProviderError(msg)

    candidates: list[Candidate] = []
    for position, item in enumerate(_field_array(data, "candidates")):
        raw_candidate = _require_object(item, "candidate")
        raw_content = _field_object(raw_candidate, "content")
        parts = tuple(decode_part(p) for p in _field_array(raw_content, "parts"))
        candidates.append(
            Candidate(
                index=raw_candidate.get("index", position),
                content=Content(role=raw_content.get("role", ROLE_MODEL), parts=parts),
                finish_reason=raw_candidate.get("finishReason"),
            )
        )

    usage = None
    raw_usage = _field_object(data, "usageMetadata")
    if raw_usage:
        usage = UsageMetadata(
            prompt_token_count=raw_usage.get("promptTokenCount", 0),
            candidates_token_count=raw_usage.get("candidatesTokenCount", 0),
            total_token_count=raw_usage.get("totalTokenCount", 0),
        )

    return GenerateContentResponse(candidates=candidates, usage=usage)


def decode_json(text: str) -> GenerateContentResponse:
    """Parse JSON text and decode it as a response.

    Raises:
        ProviderError: If the text is not valid JSON.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Malformed JSON in response: {exc}"
        raise ProviderError(msg) from exc
    return decode_response(data)


def error_message(text: str, status_code: int) -> str:
    """Extract a readable message from an error response body.

    Args:
        text: Raw response body.
        status_code: HTTP status code.

    Returns:
        The provider's ``error.message`` if present, else a generic message.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None

    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        message = data["error"].get("message")
        if message:
            return f"Gemini API returned {status_code}: {message}"
    return f"Gemini API returned {status_code}"
