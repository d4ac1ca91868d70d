"""
Tests for ChunkLogger: environment loading and JSONL output per location.
"""

import json
import os
from pathlib import Path
from unittest.mock import patch

from genai_protocol.chunk_logger import ChunkLogger


class TestChunkLoggerEnvironment:
    def test_reads_environment_variables(self) -> None:
        # given
        env = {"CHUNK_LOGGER_ENABLED": "true", "CHUNK_LOGGER_OUTPUT_DIR": "./test_chunks"}

        # when
        with patch.dict(os.environ, env), patch("pathlib.Path.mkdir"):
            logger = ChunkLogger()

        # then
        assert logger.is_enabled()
        assert str(logger._output_dir) == "test_chunks"

    def test_disabled_by_default(self) -> None:
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("CHUNK_LOGGER_ENABLED", None)
            assert not ChunkLogger().is_enabled()

    def test_session_id_from_environment(self) -> None:
        with patch.dict(os.environ, {"CHUNK_LOGGER_SESSION_ID": "test-session-2025"}):
            assert ChunkLogger(enabled=False)._session_id == "test-session-2025"

    def test_generates_session_id_if_not_set(self) -> None:
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("CHUNK_LOGGER_SESSION_ID", None)
            logger = ChunkLogger(enabled=False)
        assert logger._session_id.startswith("session-")


class TestChunkLoggerOutput:
    def test_writes_one_jsonl_file_per_location(self, tmp_path: Path) -> None:
        # given
        logger = ChunkLogger(enabled=True, output_dir=str(tmp_path), session_id="s1")

        # when
        with logger:
            logger.log_chunk("sse-chunk", "in", {"n": 1}, mode="vertex", metadata={"path": "p"})
            logger.log_chunk("sse-chunk", "in", {"n": 2}, mode="vertex")
            logger.log_chunk("http-request", "out", {"contents": []})

        # then
        sse = (tmp_path / "s1" / "sse-chunk.jsonl").read_text().splitlines()
        entries = [json.loads(line) for line in sse]
        assert [entry["sequence_number"] for entry in entries] == [1, 2]
        assert entries[0]["chunk"] == {"n": 1}
        assert entries[0]["mode"] == "vertex"
        assert entries[0]["metadata"] == {"path": "p"}
        request = json.loads((tmp_path / "s1" / "http-request.jsonl").read_text())
        assert request["direction"] == "out"
        assert request["sequence_number"] == 1

    def test_bytes_are_written_as_strings(self, tmp_path: Path) -> None:
        logger = ChunkLogger(enabled=True, output_dir=str(tmp_path), session_id="s1")
        with logger:
            logger.log_chunk("live-server-frame", "in", b"\x00\x01")
        entry = json.loads((tmp_path / "s1" / "live-server-frame.jsonl").read_text())
        assert entry["chunk"] == "b'\\x00\\x01'"

    def test_disabled_logger_writes_nothing(self, tmp_path: Path) -> None:
        logger = ChunkLogger(enabled=False, output_dir=str(tmp_path), session_id="s1")
        logger.log_chunk("sse-chunk", "in", {"n": 1})
        assert not (tmp_path / "s1").exists()

    def test_get_info(self, tmp_path: Path) -> None:
        logger = ChunkLogger(enabled=True, output_dir=str(tmp_path), session_id="s1")
        assert logger.get_info() == {
            "enabled": True,
            "output_dir": str(tmp_path),
            "session_id": "s1",
            "output_path": str(tmp_path / "s1"),
        }
