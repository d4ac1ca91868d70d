"""
Client configuration.

Components:
    - HttpOptions: per-client (and per-request) HTTP overrides
    - ClientSettings: everything needed to construct a Client, loadable from
      the environment and an optional dotenv file

Environment Variables:
    GOOGLE_API_KEY: API key (fallbacks: GEMINI_API_KEY, NEXT_PUBLIC_GEMINI_API_KEY)
    GOOGLE_GENAI_USE_VERTEXAI: "true" or "1" selects the Vertex AI dialect
    GOOGLE_CLOUD_PROJECT / GOOGLE_CLOUD_LOCATION: Vertex AI project context
    GOOGLE_GENAI_API_VERSION: API version override
    GOOGLE_GENAI_BASE_URL: Base URL override
    GOOGLE_GENAI_TIMEOUT: Request timeout in milliseconds
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field


API_KEY_ENV_VARS = ("GOOGLE_API_KEY", "GEMINI_API_KEY", "NEXT_PUBLIC_GEMINI_API_KEY")


class HttpOptions(BaseModel):
    """HTTP overrides. ``timeout`` is in milliseconds."""

    base_url: str | None = None
    api_version: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: int | None = None

    def merged(self, override: HttpOptions | None) -> HttpOptions:
        """Return a copy with ``override``'s set fields applied (headers are merged)."""
        if override is None:
            return self
        data = self.model_dump()
        for key, value in override.model_dump(exclude_none=True).items():
            if key == "headers":
                data["headers"] = {**self.headers, **value}
            else:
                data[key] = value
        return HttpOptions.model_validate(data)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"true", "1"}


class ClientSettings(BaseModel):
    api_key: str | None = None
    vertexai: bool = False
    project: str | None = None
    location: str | None = None
    api_version: str | None = None
    base_url: str | None = None
    timeout: int | None = None

    @classmethod
    def from_env(cls, env_file: str | None = ".env.local") -> ClientSettings:
        """
        Build settings from the process environment.

        Args:
            env_file: dotenv file loaded first; existing environment variables win.
                Pass None to skip loading.
        """
        if env_file is not None and load_dotenv(env_file):
            logger.debug(f"[Config] Loaded environment from {env_file}")

        api_key = next((os.getenv(name) for name in API_KEY_ENV_VARS if os.getenv(name)), None)
        settings = cls(
            api_key=api_key,
            vertexai=_env_flag("GOOGLE_GENAI_USE_VERTEXAI"),
            project=os.getenv("GOOGLE_CLOUD_PROJECT") or None,
            location=os.getenv("GOOGLE_CLOUD_LOCATION") or None,
            api_version=os.getenv("GOOGLE_GENAI_API_VERSION") or None,
            base_url=os.getenv("GOOGLE_GENAI_BASE_URL") or None,
            timeout=os.getenv("GOOGLE_GENAI_TIMEOUT") or None,
        )
        logger.debug(
            f"[Config] vertexai={settings.vertexai} project={settings.project} "
            f"location={settings.location} api_key={'set' if api_key else 'unset'}"
        )
        return settings

    def http_options(self) -> HttpOptions:
        return HttpOptions(
            base_url=self.base_url, api_version=self.api_version, timeout=self.timeout
        )
