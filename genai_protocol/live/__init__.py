"""
Live Layer - bidirectional WebSocket sessions.

Components:
    - Live: builds the URL and setup frame, opens sessions
    - AsyncSession: client message senders and server message receiver
    - LiveCallbacks: optional on_message/on_open/on_error/on_close handlers
"""

from .live import Live, websocket_base_url
from .session import AsyncSession, LiveCallbacks


__all__ = [
    "AsyncSession",
    "Live",
    "LiveCallbacks",
    "websocket_base_url",
]
