"""Unit tests for the Gemini wire format."""

import base64

import pytest

from gemini_samples.llm.errors import ProviderError
from gemini_samples.llm.models import Blob, Text, model_turn, user_turn
from gemini_samples.llm.wire import (
    build_request_body,
    decode_json,
    decode_response,
    encode_part,
    error_message,
)


class TestEncode:
    """Tests for request encoding."""

    def test_text_part(self) -> None:
        """Should encode text as a text field."""
        assert encode_part(Text("hi")) == {"text": "hi"}

    def test_blob_part_is_base64(self) -> None:
        """Should encode blobs as base64 inline data."""
        encoded = encode_part(Blob("image/png", b"\x89PNG"))

        assert encoded == {
            "inlineData": {
                "mimeType": "image/png",
                "data": base64.b64encode(b"\x89PNG").decode("ascii"),
            }
        }

    def test_request_body_keeps_turn_order_and_roles(self) -> None:
        """Should encode turns in order with their role labels."""
        body = build_request_body([user_turn("q1"), model_turn("a1"), user_turn("q2")])

        contents = body["contents"]
        assert [c["role"] for c in contents] == ["user", "model", "user"]
        assert [c["parts"][0]["text"] for c in contents] == ["q1", "a1", "q2"]


class TestDecode:
    """Tests for response decoding."""

    def test_candidates_in_order(self) -> None:
        """Should decode every candidate and part in order."""
        response = decode_response(
            {
                "candidates": [
                    {
                        "content": {"role": "model", "parts": [{"text": "a"}, {"text": "b"}]},
                        "finishReason": "STOP",
                    },
                    {"content": {"role": "model", "parts": [{"text": "c"}]}, "index": 1},
                ],
                "usageMetadata": {
                    "promptTokenCount": 4,
                    "candidatesTokenCount": 6,
                    "totalTokenCount": 10,
                },
            }
        )

        assert len(response.candidates) == 2
        assert response.candidates[0].content.parts == (Text("a"), Text("b"))
        assert response.candidates[0].finish_reason == "STOP"
        assert response.candidates[1].index == 1
        assert response.usage is not None
        assert response.usage.total_token_count == 10

    def test_missing_candidates_is_empty(self) -> None:
        """Should decode a response without candidates as empty."""
        response = decode_response({})

        assert response.candidates == []
        assert response.usage is None

    def test_candidate_without_content(self) -> None:
        """Should decode a candidate with no content as having no parts."""
        response = decode_response({"candidates": [{"finishReason": "SAFETY"}]})

        assert response.candidates[0].content.parts == ()
        assert response.candidates[0].finish_reason == "SAFETY"

    def test_inline_data_decoded(self) -> None:
        """Should decode inline data back to bytes."""
        payload = base64.b64encode(b"img").decode("ascii")
        response = decode_response(
            {
                "candidates": [
                    {
                        "content": {
                            "parts": [
                                {"inlineData": {"mimeType": "image/png", "data": payload}}
                            ]
                        }
                    }
                ]
            }
        )

        assert response.candidates[0].content.parts == (Blob("image/png", b"img"),)

    def test_blocked_prompt_raises(self) -> None:
        """Should raise ProviderError when the prompt was blocked."""
        with pytest.raises(ProviderError, match="SAFETY"):
            decode_response({"promptFeedback": {"blockReason": "SAFETY"}})

    def test_non_object_raises(self) -> None:
        """Should raise ProviderError when the payload is not an object."""
        with pytest.raises(ProviderError, match="Expected JSON object"):
            decode_response([1, 2])

    def test_malformed_json_raises(self) -> None:
        """Should raise ProviderError on malformed JSON."""
        with pytest.raises(ProviderError, match="Malformed JSON"):
            decode_json("{not json")


class TestErrorMessage:
    """Tests for error body extraction."""

    def test_uses_provider_message(self) -> None:
        """Should include the provider's error message."""
        body = '{"error": {"code": 400, "message": "API key not valid"}}'

        assert error_message(body, 400) == "Gemini API returned 400: API key not valid"

    def test_falls_back_on_plain_body(self) -> None:
        """Should fall back to a generic message for non-JSON bodies."""
        assert error_message("Service Unavailable", 503) == "Gemini API returned 503"


class TestDecodeShape:
    """Tests for payloads whose fields have the wrong JSON type."""

    @pytest.mark.parametrize(
        "payload",
        [
            {"candidates": None},
            {"promptFeedback": None, "candidates": []},
            {"candidates": [{"content": None}]},
            {"candidates": [{"content": {"parts": None}}]},
            {"usageMetadata": None},
        ],
    )
    def test_null_fields_treated_as_missing(
        self, payload: dict[str, object]
    ) -> None:
        """Should decode null optional fields as absent."""
        response = decode_response(payload)

        assert all(c.content.parts == () for c in response.candidates)
        assert response.usage is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"candidates": "oops"},
            {"candidates": ["oops"]},
            {"candidates": [{"content": "oops"}]},
            {"candidates": [{"content": {"parts": {"text": "a"}}}]},
            {"candidates": [{"content": {"parts": ["oops"]}}]},
            {"candidates": [{"content": {"parts": [{"inlineData": "oops"}]}}]},
            {"candidates": [{"content": {"parts": [{"inlineData": {"data": 7}}]}}]},
            {"promptFeedback": "oops"},
            {"usageMetadata": [1, 2]},
        ],
    )
    def test_wrong_type_raises_provider_error(
        self, payload: dict[str, object]
    ) -> None:
        """Should raise ProviderError rather than a TypeError or AttributeError."""
        with pytest.raises(ProviderError, match="Expected|Invalid inline data"):
            decode_response(payload)
