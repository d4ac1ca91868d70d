"""
API Client (HTTP transport)

Sends dialect payloads to the backend and hands decoded JSON back to the
resource layer.

Responsibilities:
- Resolve the dialect once from the constructor arguments
- Build URLs (base URL + API version + path, Vertex project prefix)
- Unary JSON requests with status classification into ClientError/ServerError
- Server-Sent-Event streaming with per-frame JSON decoding and embedded-error
  detection
- Raw byte uploads to absolute URLs (used by the resumable uploader)

Timeouts come from HttpOptions.timeout (milliseconds) and are applied with
asyncio.timeout. Callers abort a request by cancelling the task awaiting it.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from loguru import logger

from ..chunk_logger import chunk_logger
from ..config import HttpOptions
from ..errors import APIError, StreamParseError, UsageError
from ..protocol.dialect import Dialect, TransformContext
from ..result import Error, Ok
from ..utils import _parse_json_safely, _sse_frame_data
from .auth import ApiKeyAuth, Auth


MLDEV_BASE_URL = "https://generativelanguage.googleapis.com/"
VERTEX_GLOBAL_BASE_URL = "https://aiplatform.googleapis.com/"
MLDEV_API_VERSION = "v1beta"
VERTEX_API_VERSION = "v1beta1"
SDK_VERSION = "0.1.0"
USER_AGENT = f"genai-protocol/{SDK_VERSION}"


@dataclass
class HttpResponse:
    """Response headers (lower-cased keys) and the decoded JSON body."""

    headers: dict[str, str] = field(default_factory=dict)
    json: dict[str, Any] = field(default_factory=dict)


def _vertex_base_url(location: str | None) -> str:
    if not location or location == "global":
        return VERTEX_GLOBAL_BASE_URL
    return f"https://{location}-aiplatform.googleapis.com/"


def _lower_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {key.lower(): value for key, value in headers.items()}


async def _iter_sse_frames(lines: AsyncIterator[bytes]) -> AsyncIterator[str]:
    """Group raw lines into frames separated by blank lines."""
    buffer: list[str] = []
    async for raw_line in lines:
        line = raw_line.decode("utf-8").rstrip("\r\n")
        if line:
            buffer.append(line)
            continue
        if buffer:
            yield "\n".join(buffer)
            buffer = []
    if buffer:
        yield "\n".join(buffer)


class ApiClient:
    """
    HTTP transport shared by every resource of one Client.

    The aiohttp session is created lazily unless one is injected; an injected
    session is never closed by this client.
    """

    def __init__(
        self,
        api_key: str | None = None,
        vertexai: bool | None = None,
        project: str | None = None,
        location: str | None = None,
        http_options: HttpOptions | None = None,
        auth: Auth | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.vertexai = bool(vertexai)
        self.dialect = Dialect.resolve(self.vertexai)
        self.api_key = api_key
        self.project = project
        self.location = location

        if self.vertexai and not api_key and auth is None and not (project and location):
            raise UsageError(
                "Project and location or API key must be set when using the Vertex AI API."
            )
        if not self.vertexai and not api_key and auth is None:
            raise UsageError("An API key must be set when using the Gemini Developer API.")

        options = http_options or HttpOptions()
        if options.base_url is None:
            options = options.model_copy(
                update={
                    "base_url": _vertex_base_url(location) if self.vertexai else MLDEV_BASE_URL
                }
            )
        if options.api_version is None:
            options = options.model_copy(
                update={"api_version": VERTEX_API_VERSION if self.vertexai else MLDEV_API_VERSION}
            )
        self.http_options = options

        self._auth = auth if auth is not None else (ApiKeyAuth(api_key) if api_key else None)
        self._session = session
        self._owns_session = session is None

        logger.info(
            f"[ApiClient] dialect={self.dialect.value} base_url={options.base_url} "
            f"api_version={options.api_version}"
        )

    @property
    def context(self) -> TransformContext:
        return TransformContext(dialect=self.dialect, project=self.project, location=self.location)

    def is_vertexai(self) -> bool:
        return self.vertexai

    # ------------------------------------------------------------------
    # URL and header construction
    # ------------------------------------------------------------------

    def build_url(self, path: str, http_options: HttpOptions | None = None) -> str:
        options = self.http_options.merged(http_options)
        if (
            self.vertexai
            and not self.api_key
            and not path.startswith("projects/")
            and self.project
            and self.location
        ):
            path = f"projects/{self.project}/locations/{self.location}/{path}"
        base_url = (options.base_url or "").rstrip("/")
        segments = [base_url, options.api_version or "", path.lstrip("/")]
        return "/".join(segment for segment in segments if segment)

    async def build_headers(self, http_options: HttpOptions | None = None) -> dict[str, str]:
        options = self.http_options.merged(http_options)
        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            "x-goog-api-client": USER_AGENT,
        }
        if self._auth is not None:
            headers.update(await self._auth.get_headers())
        headers.update(options.headers)
        return headers

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    def _timeout_seconds(self, http_options: HttpOptions | None) -> float | None:
        timeout = self.http_options.merged(http_options).timeout
        return timeout / 1000 if timeout else None

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        http_options: HttpOptions | None = None,
        *,
        query: Mapping[str, Any] | None = None,
    ) -> HttpResponse:
        """
        Send one JSON request and return the decoded response.

        Raises:
            ClientError: 4xx response
            ServerError: 5xx response
        """
        url = self.build_url(path, http_options)
        headers = await self.build_headers(http_options)
        logger.debug(f"[ApiClient] {method} {path}")
        chunk_logger.log_chunk(
            location="http-request",
            direction="out",
            chunk=body,
            mode=self.dialect.value,
            metadata={"method": method, "path": path},
        )

        session = self._get_session()
        async with asyncio.timeout(self._timeout_seconds(http_options)):
            async with session.request(
                method, url, json=body, headers=headers, params=_query_params(query)
            ) as response:
                payload = await _read_json(response)
                response_headers = _lower_headers(response.headers)

        chunk_logger.log_chunk(
            location="http-response",
            direction="in",
            chunk=payload,
            mode=self.dialect.value,
            metadata={"path": path, "status": response.status},
        )
        APIError.raise_for_status(response.status, payload)
        return HttpResponse(headers=response_headers, json=payload)

    async def request_streamed(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        http_options: HttpOptions | None = None,
        *,
        query: Mapping[str, Any] | None = None,
    ) -> AsyncIterator[HttpResponse]:
        """
        Send a request with ``alt=sse`` and yield one response per SSE frame.

        The timeout bounds the request up to the response headers. The
        HTTP response is released when the caller stops iterating early.

        Raises:
            ClientError / ServerError: on an error status or an ``error``
                object embedded in a frame
            StreamParseError: a frame's data is not a JSON object
        """
        url = self.build_url(path, http_options)
        headers = await self.build_headers(http_options)
        params = {**_query_params(query), "alt": "sse"}
        logger.debug(f"[ApiClient] {method} {path} (stream)")
        chunk_logger.log_chunk(
            location="http-request",
            direction="out",
            chunk=body,
            mode=self.dialect.value,
            metadata={"method": method, "path": path, "stream": True},
        )

        session = self._get_session()
        async with asyncio.timeout(self._timeout_seconds(http_options)):
            response = await session.request(method, url, json=body, headers=headers, params=params)

        try:
            if response.status >= 300:
                APIError.raise_for_status(response.status, await _read_json(response))
            response_headers = _lower_headers(response.headers)

            frame_count = 0
            async for frame in _iter_sse_frames(response.content):
                data = _sse_frame_data(frame)
                if data is None:
                    continue
                match _parse_json_safely(data):
                    case Ok(chunk):
                        frame_count += 1
                        chunk_logger.log_chunk(
                            location="sse-chunk",
                            direction="in",
                            chunk=chunk,
                            mode=self.dialect.value,
                            metadata={"path": path},
                        )
                        APIError.raise_for_embedded_error(chunk)
                        yield HttpResponse(headers=response_headers, json=chunk)
                    case Error(reason):
                        logger.error(f"[ApiClient] Undecodable SSE frame on {path}: {reason}")
                        raise StreamParseError(f"Failed to parse SSE frame: {reason}")
            logger.debug(f"[ApiClient] Stream {path} finished after {frame_count} frames")
        finally:
            response.release()

    async def request_raw(
        self,
        method: str,
        url: str,
        data: bytes,
        headers: Mapping[str, str],
        http_options: HttpOptions | None = None,
    ) -> HttpResponse:
        """POST raw bytes to an absolute URL (resumable upload session)."""
        request_headers = {**(await self.build_headers(http_options)), **headers}
        request_headers.pop("Content-Type", None)
        session = self._get_session()
        async with asyncio.timeout(self._timeout_seconds(http_options)):
            async with session.request(method, url, data=data, headers=request_headers) as response:
                payload = await _read_json(response)
                response_headers = _lower_headers(response.headers)
        APIError.raise_for_status(response.status, payload)
        return HttpResponse(headers=response_headers, json=payload)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            logger.debug("[ApiClient] Session closed")


def _query_params(query: Mapping[str, Any] | None) -> dict[str, str]:
    if not query:
        return {}
    params = {}
    for key, value in query.items():
        if value is None:
            continue
        params[key] = str(value).lower() if isinstance(value, bool) else str(value)
    return params


async def _read_json(response: aiohttp.ClientResponse) -> dict[str, Any]:
    text = await response.text()
    if not text.strip():
        return {}
    match _parse_json_safely(text):
        case Ok(payload):
            return payload
        case Error(reason):
            if response.status >= 300:
                return {"error": {"code": response.status, "message": text}}
            raise StreamParseError(f"Failed to parse response body: {reason}")
