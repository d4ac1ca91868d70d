"""Tests for HttpOptions merging and ClientSettings environment loading."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from genai_protocol.config import API_KEY_ENV_VARS, ClientSettings, HttpOptions


_ENV_VARS = (
    *API_KEY_ENV_VARS,
    "GOOGLE_GENAI_USE_VERTEXAI",
    "GOOGLE_CLOUD_PROJECT",
    "GOOGLE_CLOUD_LOCATION",
    "GOOGLE_GENAI_API_VERSION",
    "GOOGLE_GENAI_BASE_URL",
    "GOOGLE_GENAI_TIMEOUT",
)


@pytest.fixture
def clean_env():
    with patch.dict(os.environ, {}, clear=False):
        for name in _ENV_VARS:
            os.environ.pop(name, None)
        yield


class TestHttpOptions:
    def test_merged_without_override_is_identity(self) -> None:
        options = HttpOptions(base_url="https://a/")
        assert options.merged(None) is options

    def test_set_fields_win_and_headers_merge(self) -> None:
        # given
        base = HttpOptions(
            base_url="https://a/", api_version="v1", headers={"X-A": "1"}, timeout=5
        )

        # when
        merged = base.merged(HttpOptions(api_version="v2", headers={"X-B": "2"}))

        # then
        assert merged.base_url == "https://a/"
        assert merged.api_version == "v2"
        assert merged.timeout == 5
        assert merged.headers == {"X-A": "1", "X-B": "2"}


@pytest.mark.usefixtures("clean_env")
class TestClientSettings:
    def test_api_key_fallback_order(self) -> None:
        # given
        os.environ["GEMINI_API_KEY"] = "gemini"
        os.environ["NEXT_PUBLIC_GEMINI_API_KEY"] = "public"

        # when
        settings = ClientSettings.from_env(env_file=None)

        # then
        assert settings.api_key == "gemini"
        assert not settings.vertexai

    @pytest.mark.parametrize(("flag", "expected"), [("true", True), ("1", True), ("no", False)])
    def test_vertex_flag(self, flag: str, expected: bool) -> None:
        os.environ["GOOGLE_GENAI_USE_VERTEXAI"] = flag
        assert ClientSettings.from_env(env_file=None).vertexai is expected

    def test_vertex_context_and_overrides(self) -> None:
        # given
        os.environ.update(
            {
                "GOOGLE_CLOUD_PROJECT": "p",
                "GOOGLE_CLOUD_LOCATION": "europe-west4",
                "GOOGLE_GENAI_API_VERSION": "v1",
                "GOOGLE_GENAI_BASE_URL": "http://localhost:8080/",
            }
        )

        # when
        settings = ClientSettings.from_env(env_file=None)

        # then
        assert settings.project == "p"
        assert settings.location == "europe-west4"
        assert settings.http_options() == HttpOptions(
            base_url="http://localhost:8080/", api_version="v1"
        )

    def test_timeout_is_read_in_milliseconds(self) -> None:
        # given
        os.environ["GOOGLE_GENAI_TIMEOUT"] = "30000"

        # when
        settings = ClientSettings.from_env(env_file=None)

        # then
        assert settings.timeout == 30000
        assert settings.http_options().timeout == 30000

    def test_timeout_defaults_to_none(self) -> None:
        assert ClientSettings.from_env(env_file=None).http_options().timeout is None

    def test_dotenv_file_is_loaded_without_overriding_environment(self, tmp_path: Path) -> None:
        # given
        env_file = tmp_path / ".env.local"
        env_file.write_text("GOOGLE_API_KEY=from-file\nGOOGLE_CLOUD_PROJECT=file-project\n")
        os.environ["GOOGLE_CLOUD_PROJECT"] = "env-project"

        # when
        settings = ClientSettings.from_env(env_file=str(env_file))

        # then
        assert settings.api_key == "from-file"
        assert settings.project == "env-project"

    def test_missing_dotenv_file_is_ignored(self, tmp_path: Path) -> None:
        settings = ClientSettings.from_env(env_file=str(tmp_path / "missing.env"))
        assert settings.api_key is None
