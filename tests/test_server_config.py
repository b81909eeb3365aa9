"""Tests for server settings validation."""

import pytest

from dropserver import config


def test_default_settings_are_valid():
    config.validate_settings()


@pytest.mark.parametrize("ttl_ms", [0, -1000])
def test_rejects_non_positive_default_ttl(monkeypatch, ttl_ms):
    monkeypatch.setattr(config, "DEFAULT_TTL_MS", ttl_ms)

    with pytest.raises(ValueError, match="DROP_DEFAULT_TTL_SECONDS"):
        config.validate_settings()


@pytest.mark.parametrize("chunk_size", [0, -3, 1000, 3 * 1024 * 1024 + 1])
def test_rejects_chunk_size_not_divisible_by_three(monkeypatch, chunk_size):
    monkeypatch.setattr(config, "CHUNK_SIZE", chunk_size)

    with pytest.raises(ValueError, match="DROP_CHUNK_SIZE"):
        config.validate_settings()


def test_accepts_chunk_size_divisible_by_three(monkeypatch):
    monkeypatch.setattr(config, "CHUNK_SIZE", 300)

    config.validate_settings()
