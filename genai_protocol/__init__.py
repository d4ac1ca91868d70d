"""
genai_protocol

Asyncio client for the Gemini Developer API and Vertex AI generative
endpoints, built around one table-driven request/response transformer.

Components:
    - Client: facade wiring every resource to one ApiClient
    - Models / Files / Caches / Tunings: resource methods
    - Chats / Chat: multi-turn sessions with curated history
    - Live / AsyncSession: bidirectional WebSocket sessions
    - AsyncPager: lazy iteration over list endpoints
    - protocol: canonical types, dialect transformer, identifier normalizers
"""

from .chats import Chat, Chats, extract_curated_history, is_valid_content, is_valid_response
from .chunk_logger import ChunkLogger, chunk_logger
from .client import Client
from .config import ClientSettings, HttpOptions
from .errors import (
    APIError,
    ClientError,
    GenAIError,
    HistoryError,
    LiveProtocolError,
    PagerExhaustedError,
    PathError,
    ServerError,
    StreamParseError,
    UnsupportedFieldError,
    UploadError,
    UsageError,
)
from .gemini_api import fetch_gemini_response
from .live import AsyncSession, Live, LiveCallbacks
from .logging_config import configure_logging
from .pagers import AsyncPager
from .protocol import Dialect, from_dialect, normalize_id, to_dialect
from .resources import Caches, Files, Models, Tunings
from .transport import ApiClient, ApiKeyAuth, BearerTokenAuth


__all__ = [
    "APIError",
    "ApiClient",
    "ApiKeyAuth",
    "AsyncPager",
    "AsyncSession",
    "BearerTokenAuth",
    "Caches",
    "Chat",
    "Chats",
    "ChunkLogger",
    "Client",
    "ClientError",
    "ClientSettings",
    "Dialect",
    "Files",
    "GenAIError",
    "HistoryError",
    "HttpOptions",
    "Live",
    "LiveCallbacks",
    "LiveProtocolError",
    "Models",
    "PagerExhaustedError",
    "PathError",
    "ServerError",
    "StreamParseError",
    "Tunings",
    "UnsupportedFieldError",
    "UploadError",
    "UsageError",
    "chunk_logger",
    "configure_logging",
    "extract_curated_history",
    "fetch_gemini_response",
    "from_dialect",
    "is_valid_content",
    "is_valid_response",
    "normalize_id",
    "to_dialect",
]
