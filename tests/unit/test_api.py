"""Unit tests for ServiceClient request shapes and failure containment."""

import httpx
import pytest_check as check

from edubot.client.api import ServiceClient
from edubot.client.outcomes import OutcomeKind
from tests.support import HANG, ScriptedService, form_fields, json_response


class TestSubmitTurn:
    """POST /chat/rag."""

    async def test_sends_query_and_chat_id_as_form(
        self, client: ServiceClient, service: ScriptedService
    ) -> None:
        service.on("POST", "/chat/rag", json_response(200, {"result": "Hi!"}))

        outcome = await client.submit_turn("hello", "chat-1")

        request = service.calls("POST", "/chat/rag")[0]
        check.equal(form_fields(request), {"query": "hello", "chat_id": "chat-1"})
        check.equal(outcome.kind, OutcomeKind.SUCCESS)
        check.equal(outcome.payload["result"], "Hi!")

    async def test_omits_chat_id_when_unbound(
        self, client: ServiceClient, service: ScriptedService
    ) -> None:
        service.on("POST", "/chat/rag", json_response(200, {"result": "Hi!"}))

        await client.submit_turn("hello")

        assert "chat_id" not in form_fields(service.requests[0])

    async def test_hanging_call_times_out(
        self, client: ServiceClient, service: ScriptedService
    ) -> None:
        """A call exceeding chat_timeout is cancelled and yields TIMEOUT."""
        service.on("POST", "/chat/rag", HANG)

        outcome = await client.submit_turn("hello")

        assert outcome.kind is OutcomeKind.TIMEOUT

    async def test_connection_failure_is_contained(
        self, client: ServiceClient, service: ScriptedService
    ) -> None:
        service.on("POST", "/chat/rag", httpx.ConnectError("connection refused"))

        outcome = await client.submit_turn("hello")

        assert outcome.kind is OutcomeKind.NETWORK_ERROR


class TestDocumentCalls:
    """Upload, delete and history endpoints."""

    async def test_upload_sends_subject_and_multipart_file(
        self, client: ServiceClient, service: ScriptedService
    ) -> None:
        service.on("POST", "/files/upload", json_response(200, {"file_id": "f1"}))

        outcome = await client.upload_document("notes.pdf", b"%PDF-1.4 data", "Biology")

        request = service.calls("POST", "/files/upload")[0]
        check.equal(request.url.params["subject"], "Biology")
        check.is_in(b'filename="notes.pdf"', request.content)
        check.is_in(b"%PDF-1.4 data", request.content)
        check.equal(outcome.kind, OutcomeKind.SUCCESS)

    async def test_delete_quotes_document_id(
        self, client: ServiceClient, service: ScriptedService
    ) -> None:
        service.on("DELETE", "/files/delete/", httpx.Response(204))

        outcome = await client.delete_document("a/b c")

        request = service.calls("DELETE", "/files/delete/")[0]
        check.equal(request.url.raw_path, b"/files/delete/a%2Fb%20c")
        check.equal(outcome.kind, OutcomeKind.SUCCESS)

    async def test_history_passes_limit(
        self, client: ServiceClient, service: ScriptedService
    ) -> None:
        service.on("GET", "/chat/history/", json_response(200, []))

        outcome = await client.get_history("chat-1", 20)

        request = service.calls("GET", "/chat/history/")[0]
        check.equal(request.url.path, "/chat/history/chat-1")
        check.equal(request.url.params["limit"], "20")
        check.equal(outcome.kind, OutcomeKind.SUCCESS)
