"""
Transport Layer

This package moves dialect payloads over HTTP.

Components:
    - ApiClient: unary JSON requests and SSE streaming (aiohttp)
    - ApiKeyAuth / BearerTokenAuth: injected header strategies
    - start_resumable_upload / upload_bytes: chunked resumable upload protocol
"""

from .api_client import ApiClient, HttpResponse
from .auth import ApiKeyAuth, Auth, BearerTokenAuth
from .uploader import start_resumable_upload, upload_bytes


__all__ = [
    "ApiClient",
    "ApiKeyAuth",
    "Auth",
    "BearerTokenAuth",
    "HttpResponse",
    "start_resumable_upload",
    "upload_bytes",
]
