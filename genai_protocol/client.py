"""
Client facade.

Resolves the dialect once (through ApiClient) and wires every module to the
same transport.
"""

from __future__ import annotations

from typing import Any

import aiohttp

from .chats import Chats
from .config import ClientSettings, HttpOptions
from .live import Live
from .live.live import ConnectFactory
from .protocol.dialect import Dialect
from .resources import Caches, Files, Models, Tunings
from .transport.api_client import ApiClient
from .transport.auth import Auth


class Client:
    """
    Entry point of the library.

    Example:
        async with Client(api_key="...") as client:
            response = await client.models.generate_content(
                model="gemini-2.0-flash", contents="Hello"
            )
            print(response.text)
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        vertexai: bool | None = None,
        project: str | None = None,
        location: str | None = None,
        http_options: HttpOptions | None = None,
        settings: ClientSettings | None = None,
        auth: Auth | None = None,
        session: aiohttp.ClientSession | None = None,
        websocket_connect: ConnectFactory | None = None,
    ) -> None:
        if settings is not None:
            api_key = api_key if api_key is not None else settings.api_key
            vertexai = vertexai if vertexai is not None else settings.vertexai
            project = project or settings.project
            location = location or settings.location
            http_options = settings.http_options().merged(http_options)

        self._api_client = ApiClient(
            api_key=api_key,
            vertexai=vertexai,
            project=project,
            location=location,
            http_options=http_options,
            auth=auth,
            session=session,
        )
        self.models = Models(self._api_client)
        self.chats = Chats(self.models)
        self.live = Live(self._api_client, connect=websocket_connect)
        self.files = Files(self._api_client)
        self.caches = Caches(self._api_client)
        self.tunings = Tunings(self._api_client)

    @classmethod
    def from_env(cls, env_file: str | None = ".env.local", **kwargs: Any) -> Client:
        return cls(settings=ClientSettings.from_env(env_file), **kwargs)

    @property
    def api_client(self) -> ApiClient:
        return self._api_client

    @property
    def dialect(self) -> Dialect:
        return self._api_client.dialect

    @property
    def vertexai(self) -> bool:
        return self._api_client.vertexai

    async def aclose(self) -> None:
        await self._api_client.aclose()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()
