from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any

import anyio
import httpx

from app.core.settings import Settings, get_settings
from app.models.chat import ChatMessage
from app.services.stream_parser import StreamParser

logger = logging.getLogger(__name__)


class UpstreamStatusError(Exception):
    """The completion endpoint answered with a non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"Upstream returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class UpstreamTransportError(Exception):
    """The completion endpoint could not be reached."""


class ChatStream:
    """An open streamed completion. Iterate ``fragments()`` exactly once."""

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response):
        self._client = client
        self._response = response
        self._closed = False

    async def fragments(self) -> AsyncIterator[str]:
        parser = StreamParser()
        try:
            async for chunk in self._response.aiter_bytes():
                for fragment in parser.feed(chunk):
                    yield fragment
                if parser.done:
                    logger.debug("Upstream stream completed with sentinel")
                    return
            for fragment in parser.close():
                yield fragment
        except (httpx.HTTPError, UnicodeDecodeError):
            logger.warning("Upstream stream aborted mid-response", exc_info=True)
        finally:
            # Runs on caller disconnect too, where the task is already cancelled.
            with anyio.CancelScope(shield=True):
                await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._response.aclose()
        await self._client.aclose()


class BigModelClient:
    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings or get_settings()
        # Injected in tests; None means the default network transport.
        self._transport = transport

    async def open_chat_stream(
        self,
        messages: Sequence[ChatMessage],
        api_key: str,
        model: str | None = None,
    ) -> ChatStream:
        """Send the conversation upstream and return once response headers arrive.

        Raises ``UpstreamStatusError`` before any body is read when the
        upstream rejects the request.
        """
        payload = {
            "model": model or self._settings.default_model,
            "messages": [m.model_dump() for m in messages],
            "temperature": self._settings.chat_temperature,
            "max_tokens": self._settings.chat_max_tokens,
            "stream": True,
        }

        client = self._new_client()
        request = client.build_request(
            "POST",
            self._settings.bigmodel_api_url,
            json=payload,
            headers=self._headers(api_key),
        )
        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as e:
            await client.aclose()
            raise UpstreamTransportError(str(e)) from e

        if not response.is_success:
            try:
                body = (await response.aread()).decode("utf-8", errors="replace")
            except httpx.HTTPError:
                body = ""
            finally:
                await response.aclose()
                await client.aclose()
            raise UpstreamStatusError(response.status_code, body)

        return ChatStream(client, response)

    async def probe(self, api_key: str, model: str | None = None) -> str:
        """One short non-streamed completion; returns the model's reply text."""
        payload = {
            "model": model or self._settings.default_model,
            "messages": [{"role": "user", "content": self._settings.probe_prompt}],
            "max_tokens": self._settings.probe_max_tokens,
            "stream": False,
        }

        async with self._new_client() as client:
            try:
                response = await client.post(
                    self._settings.bigmodel_api_url,
                    json=payload,
                    headers=self._headers(api_key),
                )
            except httpx.HTTPError as e:
                raise UpstreamTransportError(str(e)) from e

        if not response.is_success:
            raise UpstreamStatusError(response.status_code, response.text)

        data: Any = response.json()
        choices = data.get("choices") if isinstance(data, dict) else None
        choice = choices[0] if isinstance(choices, list) and choices else None
        message = choice.get("message") if isinstance(choice, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        return content if isinstance(content, str) and content else "Test completed"

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._settings.upstream_timeout,
            transport=self._transport,
        )

    @staticmethod
    def _headers(api_key: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
