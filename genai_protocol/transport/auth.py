"""Authentication strategies injected into ApiClient."""

from __future__ import annotations

from typing import Protocol


API_KEY_HEADER = "x-goog-api-key"


class Auth(Protocol):
    async def get_headers(self) -> dict[str, str]: ...


class ApiKeyAuth:
    def __init__(self, api_key: str):
        self.api_key = api_key

    async def get_headers(self) -> dict[str, str]:
        return {API_KEY_HEADER: self.api_key}


class BearerTokenAuth:
    """Static OAuth access token. Token refresh is the caller's concern."""

    def __init__(self, token: str):
        self.token = token

    async def get_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}
