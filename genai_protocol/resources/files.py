"""
Files resource (Gemini Developer API only).
"""

from __future__ import annotations

import asyncio
import mimetypes
import os
from pathlib import Path
from typing import Any

from loguru import logger

from ..errors import UsageError
from ..pagers import AsyncPager
from ..protocol.enums import PagedItem
from ..protocol.mapping import from_dialect, to_dialect
from ..protocol.message_types import File, ListFilesConfig, ListFilesResponse, UploadFileConfig
from ..transport.uploader import start_resumable_upload, upload_bytes
from ._base import BaseResource
from .models import coerce_config


UPLOAD_PATH = "upload/v1beta/files"


class Files(BaseResource):
    async def upload(
        self,
        *,
        file: str | os.PathLike[str] | bytes,
        config: UploadFileConfig | dict[str, Any] | None = None,
    ) -> File:
        """
        Upload a local file (or raw bytes) with the resumable upload protocol.

        Raises:
            UsageError: the mime type is unknown, or called on a Vertex client
            UploadError: the server did not finalize the upload
        """
        self._require_mldev()
        upload_config = coerce_config(UploadFileConfig, config) or UploadFileConfig()

        if isinstance(file, bytes):
            data = file
            mime_type = upload_config.mime_type
        else:
            path = Path(file)
            data = await asyncio.to_thread(path.read_bytes)
            mime_type = upload_config.mime_type or mimetypes.guess_type(path.name)[0]
        if not mime_type:
            raise UsageError(
                "Unknown mime type: could not determine the mime type of the file, "
                "please set config.mime_type."
            )

        file_obj: dict[str, Any] = {"mime_type": mime_type, "size_bytes": len(data)}
        if upload_config.display_name:
            file_obj["display_name"] = upload_config.display_name
        if upload_config.name:
            name = upload_config.name
            file_obj["name"] = name if name.startswith("files/") else f"files/{name}"

        body = {"file": to_dialect("File", file_obj, self._context)}
        upload_url = await start_resumable_upload(
            self._api_client, UPLOAD_PATH, body, len(data), mime_type
        )
        result = await upload_bytes(self._api_client, upload_url, data)
        uploaded = File.model_validate(from_dialect("File", result.get("file", {}), self._context))
        logger.info(f"[Files] Uploaded {uploaded.name} ({len(data)} bytes)")
        return uploaded

    async def get(self, *, name: Any) -> File:
        self._require_mldev()
        request = self._prepare("GetFileParameters", name=name)
        response = await self._api_client.request("GET", f"files/{request.url['file']}")
        return File.model_validate(from_dialect("File", response.json, self._context))

    async def delete(self, *, name: Any) -> None:
        self._require_mldev()
        request = self._prepare("GetFileParameters", name=name)
        await self._api_client.request("DELETE", f"files/{request.url['file']}")

    async def _list(
        self, *, config: ListFilesConfig | dict[str, Any] | None = None
    ) -> ListFilesResponse:
        config = coerce_config(ListFilesConfig, config)
        request = self._prepare("ListFilesParameters", config=config)
        response = await self._api_client.request("GET", "files", query=request.query)
        return ListFilesResponse.model_validate(
            from_dialect("ListFilesResponse", response.json, self._context)
        )

    async def list(
        self, *, config: ListFilesConfig | dict[str, Any] | None = None
    ) -> AsyncPager[File]:
        self._require_mldev()
        list_config = coerce_config(ListFilesConfig, config)
        response = await self._list(config=list_config)
        return AsyncPager(PagedItem.FILES, self._list, response, list_config)
