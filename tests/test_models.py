"""Tests for chunk_uploader models."""
import pytest
from chunk_uploader.models import (
    Chunk,
    DEFAULT_CHUNK_SIZE,
    UploadConfig,
    UploadOutcome,
    UploadStatus,
)


class TestUploadOutcome:
    def test_completed_outcome(self):
        outcome = UploadOutcome.completed("video.mp4", 1000, handle="h1")
        assert outcome.success is True
        assert outcome.status == UploadStatus.COMPLETED
        assert outcome.bytes_transferred == 1000
        assert outcome.progress == 1.0
        assert outcome.error is None

    def test_cancelled_outcome(self):
        outcome = UploadOutcome.cancelled("video.mp4", 250, 1000, handle="h1")
        assert outcome.success is False
        assert outcome.was_cancelled is True
        assert outcome.progress == 0.25

    def test_fail_outcome(self):
        outcome = UploadOutcome.fail(
            filename="video.mp4",
            error="chunk at offset 0 failed",
            error_kind="TransportError",
        )
        assert outcome.success is False
        assert outcome.was_cancelled is False
        assert outcome.status == UploadStatus.FAILED
        assert outcome.error_kind == "TransportError"

    def test_zero_length_completed_reports_full_progress(self):
        outcome = UploadOutcome.completed("empty.bin", 0)
        assert outcome.progress == 1.0

    def test_immutable(self):
        outcome = UploadOutcome.completed("file.mp4", 10)
        with pytest.raises(Exception):
            outcome.filename = "other.mp4"


class TestChunk:
    def test_size_and_end(self):
        chunk = Chunk(offset=1024, data=memoryview(b"abcd"), is_final=True)
        assert chunk.size == 4
        assert chunk.end == 1028


class TestUploadConfig:
    def test_defaults(self):
        config = UploadConfig()
        assert config.chunk_size == DEFAULT_CHUNK_SIZE == 524288
        assert config.base_url is None
        assert config.whole_upload_field == "file"

    def test_rejects_non_positive_chunk_size(self):
        with pytest.raises(ValueError, match="chunk_size"):
            UploadConfig(chunk_size=0)

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError, match="timeout"):
            UploadConfig(timeout=0)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CHUNK_UPLOAD_API_URL", "http://localhost:5000")
        monkeypatch.setenv("CHUNK_UPLOAD_CHUNK_SIZE", "1024")
        monkeypatch.setenv("CHUNK_UPLOAD_TIMEOUT", "5")

        config = UploadConfig.from_env()

        assert config.base_url == "http://localhost:5000"
        assert config.chunk_size == 1024
        assert config.timeout == 5.0

    def test_from_env_overrides_win(self, monkeypatch):
        monkeypatch.delenv("CHUNK_UPLOAD_TIMEOUT", raising=False)
        monkeypatch.setenv("CHUNK_UPLOAD_API_URL", "http://localhost:5000")
        monkeypatch.setenv("CHUNK_UPLOAD_CHUNK_SIZE", "1024")

        config = UploadConfig.from_env(base_url="http://other", chunk_size=None)

        assert config.base_url == "http://other"
        assert config.chunk_size == 1024

    def test_from_env_invalid_chunk_size(self, monkeypatch):
        monkeypatch.setenv("CHUNK_UPLOAD_CHUNK_SIZE", "big")
        with pytest.raises(ValueError, match="CHUNK_UPLOAD_CHUNK_SIZE"):
            UploadConfig.from_env()
