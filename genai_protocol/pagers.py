"""
Pager over list endpoints.

An AsyncPager holds one page of items and the continuation token of the
response that produced it. It is in the has-more state while that token is
not None (an empty page with a token still has more) and exhausted otherwise.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Generic, TypeVar

from loguru import logger
from pydantic import BaseModel

from .errors import PagerExhaustedError
from .protocol.enums import PagedItem
from .protocol.paths import get_value_by_path


T = TypeVar("T")

PageRequest = Callable[..., Awaitable[Any]]


def _config_dict(config: Any) -> dict[str, Any]:
    if config is None:
        return {}
    if isinstance(config, BaseModel):
        return config.model_dump(exclude_none=True)
    if isinstance(config, Mapping):
        return dict(config)
    raise TypeError(f"Unsupported pager config type: {type(config).__name__}")


def _next_page_token(response: Any) -> str | None:
    token = get_value_by_path(response, "next_page_token")
    if token is None:
        token = get_value_by_path(response, "nextPageToken")
    return token


class AsyncPager(Generic[T]):  # noqa: UP046
    """
    Lazily walks every item of a list endpoint.

    Args:
        name: Response attribute holding the items (a PagedItem or any key)
        request: Page fetch function, called as ``request(config=...)``
        response: Already fetched first response (model or dict)
        config: Request config of the first call; ``page_token`` is set on it
            for every following call

    Iteration is stateful: a pager that has started iterating continues from
    where it stopped and cannot be rewound.
    """

    def __init__(
        self,
        name: PagedItem | str,
        request: PageRequest,
        response: Any,
        config: Any = None,
    ) -> None:
        self._name = name.value if isinstance(name, PagedItem) else name
        self._request = request
        self._config = _config_dict(config)
        self._init_page(response)

    def _init_page(self, response: Any) -> None:
        self._page: list[T] = list(get_value_by_path(response, self._name) or [])
        self._next_page_token = _next_page_token(response)
        self._page_size = self._config.get("page_size") or len(self._page)
        self._idx = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def page(self) -> list[T]:
        """Items of the most recently fetched page."""
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def config(self) -> dict[str, Any]:
        """Request config of the most recent call, including ``page_token``."""
        return dict(self._config)

    def has_next_page(self) -> bool:
        return self._next_page_token is not None

    async def next_page(self) -> list[T]:
        """
        Fetch the next page, replacing the current one.

        Raises:
            PagerExhaustedError: The last response carried no continuation token
        """
        if not self.has_next_page():
            raise PagerExhaustedError()
        self._config["page_token"] = self._next_page_token
        logger.debug(f"[Pager] Fetching next {self._name} page")
        response = await self._request(config=dict(self._config))
        self._init_page(response)
        return self._page

    def __aiter__(self) -> AsyncPager[T]:
        return self

    async def __anext__(self) -> T:
        while self._idx >= len(self._page):
            if not self.has_next_page():
                raise StopAsyncIteration
            await self.next_page()
        item = self._page[self._idx]
        self._idx += 1
        return item

    def __len__(self) -> int:
        return len(self._page)
