"""Unit tests for response classification."""

import httpx
import pytest
import pytest_check as check

from edubot.client.classifier import (
    classify_error,
    classify_response,
    extract_detail,
    has_answer,
    is_history,
)
from edubot.client.outcomes import OutcomeKind


class TestSuccessfulResponses:
    """2xx bodies are success only when their shape is recognized."""

    def test_chat_answer_is_success(self) -> None:
        """A body with an answer field yields SUCCESS with the parsed payload."""
        outcome = classify_response(200, b'{"result": "42", "chat_id": "abc"}', has_answer)

        check.equal(outcome.kind, OutcomeKind.SUCCESS)
        check.equal(outcome.payload, {"result": "42", "chat_id": "abc"})
        check.equal(outcome.status_code, 200)

    def test_empty_answer_field_is_still_recognized(self) -> None:
        """A null answer field is a recognized shape, not a malformed body."""
        outcome = classify_response(200, '{"result": null}', has_answer)

        assert outcome.kind is OutcomeKind.SUCCESS

    def test_unrecognized_shape_is_malformed(self) -> None:
        """JSON without any answer field yields MALFORMED with the raw text."""
        outcome = classify_response(200, b'{"chat_id": "abc"}', has_answer)

        check.equal(outcome.kind, OutcomeKind.MALFORMED)
        check.equal(outcome.raw, '{"chat_id": "abc"}')

    def test_non_json_body_is_malformed(self) -> None:
        outcome = classify_response(200, b"<html>gateway</html>", has_answer)

        assert outcome.kind is OutcomeKind.MALFORMED

    def test_raw_text_is_truncated(self) -> None:
        outcome = classify_response(200, "x" * 5000, has_answer)

        assert len(outcome.raw) == 500

    def test_any_body_accepted_without_shape_check(self) -> None:
        """Delete-style calls accept empty and plain-text 2xx bodies."""
        empty = classify_response(204, b"", None)
        text = classify_response(200, b"deleted", None)

        check.equal(empty.kind, OutcomeKind.SUCCESS)
        check.equal(empty.payload, {})
        check.equal(text.kind, OutcomeKind.SUCCESS)

    def test_history_shapes(self) -> None:
        check.is_true(is_history([]))
        check.is_true(is_history({"messages": []}))
        check.is_true(is_history({"history": [{"role": "user"}]}))
        check.is_false(is_history({"messages": "nope"}))
        check.is_false(is_history("[]"))


class TestErrorStatuses:
    """Each error status maps to exactly one outcome kind."""

    @pytest.mark.parametrize(
        ("status", "kind"),
        [
            (404, OutcomeKind.SESSION_EXPIRED),
            (401, OutcomeKind.UNAUTHORIZED),
            (403, OutcomeKind.UNAUTHORIZED),
            (400, OutcomeKind.VALIDATION_ERROR),
            (422, OutcomeKind.VALIDATION_ERROR),
            (413, OutcomeKind.PAYLOAD_TOO_LARGE),
            (429, OutcomeKind.RATE_LIMITED),
            (500, OutcomeKind.SERVER_ERROR),
            (503, OutcomeKind.SERVER_ERROR),
            (409, OutcomeKind.VALIDATION_ERROR),
            (302, OutcomeKind.MALFORMED),
        ],
    )
    def test_status_mapping(self, status: int, kind: OutcomeKind) -> None:
        outcome = classify_response(status, b'{"detail": "nope"}', has_answer)

        check.equal(outcome.kind, kind)
        check.equal(outcome.status_code, status)

    def test_validation_error_uses_server_detail(self) -> None:
        outcome = classify_response(422, b'{"detail": "query must not be empty"}')

        assert outcome.message == "query must not be empty"

    def test_validation_error_joins_fastapi_detail_list(self) -> None:
        body = b'{"detail": [{"loc": ["body", "query"], "msg": "field required"}, {"msg": "too short"}]}'

        outcome = classify_response(422, body)

        assert outcome.message == "field required; too short"

    def test_unparseable_validation_body_gets_generic_message(self) -> None:
        outcome = classify_response(422, b"Unprocessable \xff\xfe garbage")

        check.equal(outcome.kind, OutcomeKind.VALIDATION_ERROR)
        check.equal(outcome.message, "The request was rejected as invalid")

    def test_server_error_falls_back_to_status_text(self) -> None:
        outcome = classify_response(502, b"Bad Gateway")

        assert outcome.message == "HTTP 502"

    def test_server_error_prefers_message_field(self) -> None:
        outcome = classify_response(500, b'{"message": "index offline"}')

        assert outcome.message == "index offline"


class TestTransportErrors:
    """Failures without a response."""

    def test_builtin_timeout_is_timeout(self) -> None:
        assert classify_error(TimeoutError()).kind is OutcomeKind.TIMEOUT

    def test_httpx_timeout_is_timeout(self) -> None:
        assert classify_error(httpx.ReadTimeout("slow")).kind is OutcomeKind.TIMEOUT

    def test_connect_error_is_network_error(self) -> None:
        outcome = classify_error(httpx.ConnectError("Name or service not known"))

        check.equal(outcome.kind, OutcomeKind.NETWORK_ERROR)
        check.is_in("Name or service not known", outcome.message)

    def test_os_error_is_network_error(self) -> None:
        outcome = classify_error(ConnectionRefusedError())

        check.equal(outcome.kind, OutcomeKind.NETWORK_ERROR)
        check.is_in("ConnectionRefusedError", outcome.message)


class TestPurity:
    """Classification has no hidden state and never raises."""

    def test_same_input_gives_equal_outcomes(self) -> None:
        body = b'{"detail": "slow down"}'

        assert classify_response(429, body) == classify_response(429, body)

    @pytest.mark.parametrize(
        "body",
        [None, b"", b"\x00\x01\x02", "[" * 100000, b'{"detail": 5}', b"null", b"[1, 2]"],
    )
    def test_garbage_bodies_never_raise(self, body: bytes | str | None) -> None:
        for status in (200, 404, 422, 500):
            classify_response(status, body, has_answer)

    def test_extract_detail_ignores_non_objects(self) -> None:
        check.is_none(extract_detail([{"detail": "x"}]))
        check.is_none(extract_detail({"detail": "   "}))
        check.equal(extract_detail({"error": "boom"}), "boom")
