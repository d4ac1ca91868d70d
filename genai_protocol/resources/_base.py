"""
Shared plumbing for resource methods.

Every resource method runs the same pipeline:

    canonical params -> to_dialect -> pop placeholders -> ApiClient -> from_dialect -> model

Placeholders written by the concept tables:
    - ``_url.<name>``: path parameters (model name, resource name, ...)
    - ``_query.<name>``: query string parameters (page size, page token, ...)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..errors import UsageError
from ..protocol.dialect import Dialect, TransformContext
from ..protocol.mapping import to_dialect
from ..transport.api_client import ApiClient


@dataclass
class PreparedRequest:
    body: dict[str, Any]
    url: dict[str, Any] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)


def prepare_request(
    concept: str,
    params: dict[str, Any],
    context: TransformContext,
) -> PreparedRequest:
    body = to_dialect(concept, params, context)
    url = body.pop("_url", None) or {}
    query = body.pop("_query", None) or {}
    return PreparedRequest(body=body, url=url, query=query)


class BaseResource:
    def __init__(self, api_client: ApiClient) -> None:
        self._api_client = api_client

    @property
    def _context(self) -> TransformContext:
        return self._api_client.context

    @property
    def _dialect(self) -> Dialect:
        return self._api_client.dialect

    def _prepare(self, concept: str, **params: Any) -> PreparedRequest:
        present = {key: value for key, value in params.items() if value is not None}
        return prepare_request(concept, present, self._context)

    def _require_mldev(self) -> None:
        if self._dialect is Dialect.VERTEX:
            raise UsageError("This method is only supported in the Gemini Developer API client.")
