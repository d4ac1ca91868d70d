"""
Models resource: generation, embeddings, images and model metadata.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel

from ..pagers import AsyncPager
from ..protocol.dialect import Dialect
from ..protocol.enums import PagedItem
from ..protocol.identifiers import t_models_url
from ..protocol.mapping import from_dialect
from ..protocol.message_types import (
    ContentListUnion,
    EmbedContentConfig,
    EmbedContentResponse,
    GenerateContentConfig,
    GenerateContentResponse,
    GenerateImagesConfig,
    GenerateImagesResponse,
    ListModelsConfig,
    ListModelsResponse,
    Model,
)
from ._base import BaseResource


M = TypeVar("M", bound=BaseModel)


def coerce_config(model_cls: type[M], config: M | dict[str, Any] | None) -> M | None:
    """Validate a dict config into ``model_cls``; models pass through."""
    if config is None or isinstance(config, model_cls):
        return config
    return model_cls.model_validate(config)


class Models(BaseResource):
    async def generate_content(
        self,
        *,
        model: str,
        contents: ContentListUnion,
        config: GenerateContentConfig | dict[str, Any] | None = None,
    ) -> GenerateContentResponse:
        request = self._prepare(
            "GenerateContentParameters",
            model=model,
            contents=contents,
            config=coerce_config(GenerateContentConfig, config),
        )
        path = f"{request.url['model']}:generateContent"
        response = await self._api_client.request("POST", path, request.body, query=request.query)
        return GenerateContentResponse.model_validate(
            from_dialect("GenerateContentResponse", response.json, self._context)
        )

    async def generate_content_stream(
        self,
        *,
        model: str,
        contents: ContentListUnion,
        config: GenerateContentConfig | dict[str, Any] | None = None,
    ) -> AsyncIterator[GenerateContentResponse]:
        """Build the request and return an iterator yielding one response per chunk.

        Usage errors are raised here, before the iterator is returned. The
        HTTP request itself is sent on the first ``__anext__``.
        """
        request = self._prepare(
            "GenerateContentParameters",
            model=model,
            contents=contents,
            config=coerce_config(GenerateContentConfig, config),
        )
        path = f"{request.url['model']}:streamGenerateContent"
        return self._stream_responses(path, request.body, request.query)

    async def _stream_responses(
        self, path: str, body: dict[str, Any], query: dict[str, Any]
    ) -> AsyncIterator[GenerateContentResponse]:
        stream = self._api_client.request_streamed("POST", path, body, query=query)
        try:
            async for chunk in stream:
                yield GenerateContentResponse.model_validate(
                    from_dialect("GenerateContentResponse", chunk.json, self._context)
                )
        finally:
            await stream.aclose()

    async def embed_content(
        self,
        *,
        model: str,
        contents: ContentListUnion,
        config: EmbedContentConfig | dict[str, Any] | None = None,
    ) -> EmbedContentResponse:
        request = self._prepare(
            "EmbedContentParameters",
            model=model,
            contents=contents,
            config=coerce_config(EmbedContentConfig, config),
        )
        method = "predict" if self._dialect is Dialect.VERTEX else "batchEmbedContents"
        path = f"{request.url['model']}:{method}"
        response = await self._api_client.request("POST", path, request.body, query=request.query)
        return EmbedContentResponse.model_validate(
            from_dialect("EmbedContentResponse", response.json, self._context)
        )

    async def generate_images(
        self,
        *,
        model: str,
        prompt: str,
        config: GenerateImagesConfig | dict[str, Any] | None = None,
    ) -> GenerateImagesResponse:
        request = self._prepare(
            "GenerateImagesParameters",
            model=model,
            prompt=prompt,
            config=coerce_config(GenerateImagesConfig, config),
        )
        path = f"{request.url['model']}:predict"
        response = await self._api_client.request("POST", path, request.body, query=request.query)
        result = GenerateImagesResponse.model_validate(
            from_dialect("GenerateImagesResponse", response.json, self._context)
        )
        count = len(result.generated_images or [])
        logger.debug(f"[Models] generate_images returned {count} images")
        return result

    async def get(self, *, model: str) -> Model:
        request = self._prepare("GetModelParameters", model=model)
        response = await self._api_client.request("GET", request.url["name"], query=request.query)
        return Model.model_validate(from_dialect("Model", response.json, self._context))

    async def _list(
        self, *, config: ListModelsConfig | dict[str, Any] | None = None
    ) -> ListModelsResponse:
        config = coerce_config(ListModelsConfig, config)
        request = self._prepare("ListModelsParameters", config=config)
        path = request.url.get("models_url") or t_models_url(self._context, True)
        response = await self._api_client.request("GET", path, query=request.query)
        return ListModelsResponse.model_validate(
            from_dialect("ListModelsResponse", response.json, self._context)
        )

    async def list(
        self, *, config: ListModelsConfig | dict[str, Any] | None = None
    ) -> AsyncPager[Model]:
        """List base models (or tuned models with ``query_base=False``)."""
        list_config = coerce_config(ListModelsConfig, config) or ListModelsConfig()
        if list_config.query_base is None:
            list_config = list_config.model_copy(update={"query_base": True})
        response = await self._list(config=list_config)
        return AsyncPager(PagedItem.MODELS, self._list, response, list_config)
