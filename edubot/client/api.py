"""HTTP client for the remote document Q&A service.

Every public method performs exactly one bounded request and returns an
Outcome. HTTP errors and transport failures are classified, never raised;
only task cancellation propagates to the caller.
"""

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx

from edubot.client.classifier import (
    ShapeCheck,
    classify_error,
    classify_response,
    has_answer,
    is_history,
    is_object,
)
from edubot.client.outcomes import Outcome
from edubot.config import ClientConfig, get_client_config

logger = logging.getLogger(__name__)


class ServiceClient:
    """Async client for the chat, upload, delete and history endpoints.

    Wraps a single httpx.AsyncClient. Each call is additionally bounded by
    ``asyncio.wait_for`` so the whole request (connect, upload, read) fits
    the configured timeout, not just each network phase.

    Usage:
        async with ServiceClient() as client:
            outcome = await client.submit_turn("hello", session_id)
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Optional client configuration.
                    Loads from environment if not provided.
            transport: Optional httpx transport (tests inject a mock or ASGI app).
        """
        self._config = config or get_client_config()
        self._http = httpx.AsyncClient(
            base_url=self._config.api_base_url,
            transport=transport,
            # The outer wait_for owns the deadline.
            timeout=None,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def __aenter__(self) -> "ServiceClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        timeout: float,
        accepts: ShapeCheck,
        **kwargs: Any,
    ) -> Outcome:
        logger.debug(f"{method} {url} (timeout {timeout}s)")
        try:
            response = await asyncio.wait_for(
                self._http.request(method, url, **kwargs), timeout=timeout
            )
        except (TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"{method} {url} timed out after {timeout}s")
            return classify_error(e)
        except (httpx.HTTPError, OSError) as e:
            logger.warning(f"{method} {url} failed: {e!r}")
            return classify_error(e)

        outcome = classify_response(response.status_code, response.content, accepts)
        if not outcome.ok:
            logger.info(f"{method} {url} -> {response.status_code} ({outcome.kind.value})")
        return outcome

    async def submit_turn(self, text: str, session_id: str | None = None) -> Outcome:
        """Send one user question to the chat endpoint.

        Args:
            text: The user's question.
            session_id: Current chat id, omitted when unbound.

        Returns:
            SUCCESS with a payload naming at least one answer field, or a failure.
        """
        form = {"query": text}
        if session_id:
            form["chat_id"] = session_id
        return await self._request(
            "POST",
            "/chat/rag",
            data=form,
            timeout=self._config.chat_timeout,
            accepts=has_answer,
        )

    async def upload_document(
        self,
        filename: str,
        content: bytes,
        subject: str,
    ) -> Outcome:
        """Upload a PDF to the remote library under a subject label."""
        return await self._request(
            "POST",
            "/files/upload",
            params={"subject": subject},
            files={"file": (filename, content, "application/pdf")},
            timeout=self._config.upload_timeout,
            accepts=is_object,
        )

    async def delete_document(self, document_id: str) -> Outcome:
        """Delete a document from the remote library.

        A 2xx response is success whatever its body looks like.
        """
        return await self._request(
            "DELETE",
            f"/files/delete/{quote(document_id, safe='')}",
            timeout=self._config.delete_timeout,
            accepts=None,
        )

    async def get_history(self, session_id: str, limit: int) -> Outcome:
        """Fetch the stored turn log of a chat."""
        return await self._request(
            "GET",
            f"/chat/history/{quote(session_id, safe='')}",
            params={"limit": limit},
            timeout=self._config.history_timeout,
            accepts=is_history,
        )
