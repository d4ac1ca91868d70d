"""
Cached contents resource.
"""

from __future__ import annotations

from typing import Any

from ..pagers import AsyncPager
from ..protocol.enums import PagedItem
from ..protocol.mapping import from_dialect
from ..protocol.message_types import (
    CachedContent,
    CreateCachedContentConfig,
    ListCachedContentsConfig,
    ListCachedContentsResponse,
)
from ._base import BaseResource
from .models import coerce_config


class Caches(BaseResource):
    async def create(
        self,
        *,
        model: str,
        config: CreateCachedContentConfig | dict[str, Any] | None = None,
    ) -> CachedContent:
        request = self._prepare(
            "CreateCachedContentParameters",
            model=model,
            config=coerce_config(CreateCachedContentConfig, config),
        )
        response = await self._api_client.request("POST", "cachedContents", request.body)
        return CachedContent.model_validate(
            from_dialect("CachedContent", response.json, self._context)
        )

    async def get(self, *, name: str) -> CachedContent:
        request = self._prepare("GetCachedContentParameters", name=name)
        response = await self._api_client.request("GET", request.url["name"])
        return CachedContent.model_validate(
            from_dialect("CachedContent", response.json, self._context)
        )

    async def delete(self, *, name: str) -> None:
        request = self._prepare("GetCachedContentParameters", name=name)
        await self._api_client.request("DELETE", request.url["name"])

    async def _list(
        self, *, config: ListCachedContentsConfig | dict[str, Any] | None = None
    ) -> ListCachedContentsResponse:
        request = self._prepare(
            "ListCachedContentsParameters", config=coerce_config(ListCachedContentsConfig, config)
        )
        response = await self._api_client.request("GET", "cachedContents", query=request.query)
        return ListCachedContentsResponse.model_validate(
            from_dialect("ListCachedContentsResponse", response.json, self._context)
        )

    async def list(
        self, *, config: ListCachedContentsConfig | dict[str, Any] | None = None
    ) -> AsyncPager[CachedContent]:
        list_config = coerce_config(ListCachedContentsConfig, config)
        response = await self._list(config=list_config)
        return AsyncPager(PagedItem.CACHED_CONTENTS, self._list, response, list_config)
