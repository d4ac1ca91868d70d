"""
Live API entry point.

Opens the WebSocket, performs the setup handshake and hands back an
AsyncSession.

Handshake:
1. open the socket (on_open fires)
2. send ``{"setup": ...}`` as the very first frame
3. the first server frame must be ``setupComplete``; it is kept and becomes
   the first message the caller observes
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import quote

from loguru import logger
from websockets.asyncio.client import connect as websocket_connect

from ..errors import LiveProtocolError
from ..protocol.dialect import Dialect
from ..protocol.enums import Modality
from ..protocol.mapping import to_dialect
from ..protocol.message_types import LiveConnectConfig
from ..resources.models import coerce_config
from ..transport.api_client import ApiClient
from .session import AsyncSession, LiveCallbacks, _invoke


ConnectFactory = Callable[..., Awaitable[Any]]

MLDEV_LIVE_METHOD = (
    "ws/google.ai.generativelanguage.{version}.GenerativeService.BidiGenerateContent"
)
VERTEX_LIVE_METHOD = "ws/google.cloud.aiplatform.{version}.LlmBidiService/BidiGenerateContent"


def websocket_base_url(base_url: str) -> str:
    if base_url.startswith("https://"):
        base_url = "wss://" + base_url[len("https://") :]
    elif base_url.startswith("http://"):
        base_url = "ws://" + base_url[len("http://") :]
    return base_url.rstrip("/")


class Live:
    """
    Factory for Live sessions bound to one ApiClient.

    Args:
        api_client: Supplies the dialect, URLs and auth headers
        connect: WebSocket connect function, called as
            ``connect(url, additional_headers=...)``
    """

    def __init__(self, api_client: ApiClient, connect: ConnectFactory | None = None) -> None:
        self._api_client = api_client
        self._connect = connect or websocket_connect

    def url(self) -> str:
        options = self._api_client.http_options
        base = websocket_base_url(options.base_url or "")
        version = options.api_version
        if self._api_client.dialect is Dialect.VERTEX:
            return f"{base}/{VERTEX_LIVE_METHOD.format(version=version)}"
        url = f"{base}/{MLDEV_LIVE_METHOD.format(version=version)}"
        if self._api_client.api_key:
            url += f"?key={quote(self._api_client.api_key)}"
        return url

    def setup_message(
        self, model: str, config: LiveConnectConfig | dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Build the ``{"setup": ...}`` frame for this client's dialect."""
        live_config = coerce_config(LiveConnectConfig, config) or LiveConnectConfig()

        if live_config.generation_config is not None:
            logger.warning(
                "[Live] Setting `generation_config` on LiveConnectConfig is deprecated; "
                "set its fields on LiveConnectConfig directly."
            )
        if self._api_client.dialect is Dialect.VERTEX:
            nested = live_config.generation_config
            if not live_config.response_modalities and not (nested and nested.response_modalities):
                live_config = live_config.model_copy(
                    update={"response_modalities": [Modality.AUDIO]}
                )

        return to_dialect(
            "LiveConnectParameters",
            {"model": model, "config": live_config},
            self._api_client.context,
        )

    @asynccontextmanager
    async def connect(
        self,
        *,
        model: str,
        config: LiveConnectConfig | dict[str, Any] | None = None,
        callbacks: LiveCallbacks | None = None,
    ) -> AsyncIterator[AsyncSession]:
        """
        Open a Live session.

        Raises:
            LiveProtocolError: the server's first frame is not setupComplete
            UnsupportedFieldError: the config uses a field the dialect lacks
        """
        setup = self.setup_message(model, config)
        headers = await self._api_client.build_headers()
        headers.pop("Content-Type", None)

        logger.info(f"[Live] Connecting ({self._api_client.dialect.value}) model={model}")
        websocket = await self._connect(self.url(), additional_headers=headers)
        session = AsyncSession(websocket, self._api_client.context, callbacks)
        try:
            await _invoke(session._callbacks.on_open)
            await session._send_frame(setup)

            first = await session._receive()
            if first is None or first.setup_complete is None:
                raise LiveProtocolError("The first server message must be setupComplete.")
            session._pending.append(first)
            logger.info("[Live] Setup complete")

            if callbacks is not None and callbacks.on_message is not None:
                session._start_reader()
            yield session
        finally:
            await session.close()
