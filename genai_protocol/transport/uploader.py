"""
Resumable upload protocol.

Flow:
1. start: POST the file metadata with ``X-Goog-Upload-Command: start``; the
   session URL comes back in the ``x-goog-upload-url`` response header.
2. upload: POST 8 MiB chunks with ``X-Goog-Upload-Command: upload`` and the
   byte offset; the last chunk uses ``upload, finalize``.
3. The upload succeeded when the final response reports
   ``x-goog-upload-status: final``.

Each chunk is attempted up to MAX_RETRY_COUNT times with a doubling delay. A
chunk attempt counts as answered as soon as its response carries any upload
status header.
"""

from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger

from ..config import HttpOptions
from ..errors import ServerError, UploadError
from .api_client import ApiClient, HttpResponse


MAX_CHUNK_SIZE = 1024 * 1024 * 8  # 8 MiB
MAX_RETRY_COUNT = 3
INITIAL_RETRY_DELAY_MS = 1000
DELAY_MULTIPLIER = 2

UPLOAD_STATUS_HEADER = "x-goog-upload-status"
UPLOAD_URL_HEADER = "x-goog-upload-url"


async def start_resumable_upload(
    api_client: ApiClient,
    path: str,
    body: dict[str, Any],
    size_bytes: int,
    mime_type: str,
    http_options: HttpOptions | None = None,
) -> str:
    """Open an upload session and return its URL."""
    options = HttpOptions(
        api_version="",
        headers={
            "X-Goog-Upload-Protocol": "resumable",
            "X-Goog-Upload-Command": "start",
            "X-Goog-Upload-Header-Content-Length": str(size_bytes),
            "X-Goog-Upload-Header-Content-Type": mime_type,
        },
    ).merged(http_options)
    response = await api_client.request("POST", path, body, options)
    upload_url = response.headers.get(UPLOAD_URL_HEADER)
    if not upload_url:
        raise UploadError(
            "Failed to get upload url. Server did not return the x-goog-upload-url in the headers"
        )
    logger.info(f"[Upload] Session opened for {size_bytes} bytes ({mime_type})")
    return upload_url


async def _send_chunk(
    api_client: ApiClient,
    upload_url: str,
    chunk: bytes,
    offset: int,
    command: str,
    http_options: HttpOptions | None,
) -> HttpResponse | None:
    response: HttpResponse | None = None
    delay_ms = INITIAL_RETRY_DELAY_MS
    for attempt in range(1, MAX_RETRY_COUNT + 1):
        try:  # nosemgrep: forbid-try-except
            response = await api_client.request_raw(
                "POST",
                upload_url,
                chunk,
                {
                    "X-Goog-Upload-Command": command,
                    "X-Goog-Upload-Offset": str(offset),
                    "Content-Length": str(len(chunk)),
                },
                http_options,
            )
        except ServerError as e:
            if attempt == MAX_RETRY_COUNT:
                raise
            logger.warning(f"[Upload] Chunk at offset {offset} failed (attempt {attempt}): {e}")
        else:
            if response.headers.get(UPLOAD_STATUS_HEADER):
                return response
            logger.warning(
                f"[Upload] Chunk at offset {offset} got no upload status (attempt {attempt})"
            )
        if attempt < MAX_RETRY_COUNT:
            await asyncio.sleep(delay_ms / 1000)
            delay_ms *= DELAY_MULTIPLIER
    return response


async def upload_bytes(
    api_client: ApiClient,
    upload_url: str,
    data: bytes,
    http_options: HttpOptions | None = None,
) -> dict[str, Any]:
    """
    Upload ``data`` to an open session and return the final response body.

    Raises:
        UploadError: all bytes were sent while the server still reported
            ``active``, or the last status was not ``final``
        ClientError: a chunk was rejected
    """
    size = len(data)
    offset = 0
    response: HttpResponse | None = None

    while offset < size:
        chunk_size = min(MAX_CHUNK_SIZE, size - offset)
        command = "upload"
        if offset + chunk_size >= size:
            command += ", finalize"

        response = await _send_chunk(
            api_client,
            upload_url,
            data[offset : offset + chunk_size],
            offset,
            command,
            http_options,
        )
        offset += chunk_size
        logger.debug(f"[Upload] Sent {offset}/{size} bytes")

        status = response.headers.get(UPLOAD_STATUS_HEADER) if response is not None else None
        if status != "active":
            break
        if size <= offset:
            raise UploadError(
                "All content has been uploaded, but the upload status is not finalized."
            )

    status = response.headers.get(UPLOAD_STATUS_HEADER) if response is not None else None
    if status != "final":
        raise UploadError(
            f"Failed to upload file: Upload status is not finalized (status={status})."
        )
    logger.info(f"[Upload] Finalized after {size} bytes")
    return response.json
