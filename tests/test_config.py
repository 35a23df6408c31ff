"""Tests for runtime configuration."""

from rnaseq_deliverables.config import (
    DEFAULT_ENCODING,
    DEFAULT_MAX_WORKERS,
    ENV_ENCODING,
    ENV_MAX_WORKERS,
    PipelineConfig,
)


class TestPipelineConfig:

    def test_defaults(self):
        config = PipelineConfig.from_env({})
        assert config.max_workers == DEFAULT_MAX_WORKERS
        assert config.text_encoding == DEFAULT_ENCODING

    def test_reads_environment(self):
        config = PipelineConfig.from_env({ENV_MAX_WORKERS: "8", ENV_ENCODING: "latin-1"})
        assert config.max_workers == 8
        assert config.text_encoding == "latin-1"

    def test_invalid_workers_fall_back(self, caplog):
        config = PipelineConfig.from_env({ENV_MAX_WORKERS: "many"})
        assert config.max_workers == DEFAULT_MAX_WORKERS
        assert "Invalid" in caplog.text

    def test_non_positive_workers_fall_back(self):
        config = PipelineConfig.from_env({ENV_MAX_WORKERS: "0"})
        assert config.max_workers == DEFAULT_MAX_WORKERS
