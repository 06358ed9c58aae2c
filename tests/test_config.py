"""Tests for Settings loading and defaults."""

from __future__ import annotations

import pytest

from townhall.config import Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in ("STORAGE_BACKEND", "TRANSCRIPTION_PROVIDER", "MINUTES_LANGUAGE"):
            monkeypatch.delenv(key, raising=False)
        cfg = Settings(_env_file=None)  # type: ignore[call-arg]
        assert cfg.storage_backend == "memory"
        assert cfg.transcription_provider == "elevenlabs"
        assert cfg.elevenlabs_model_id == "scribe_v1"
        assert cfg.minutes_language == "Japanese"
        assert cfg.unknown_speaker_label == "Unknown"
        assert cfg.assemblyai_speech_models == ["universal-3-pro"]

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TRANSCRIPTION_PROVIDER", "assemblyai")
        monkeypatch.setenv("API_PORT", "9000")
        cfg = Settings(_env_file=None)  # type: ignore[call-arg]
        assert cfg.transcription_provider == "assemblyai"
        assert cfg.api_port == 9000

    def test_invalid_port_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_PORT", "not-a-number")
        with pytest.raises(ValueError):
            Settings(_env_file=None)  # type: ignore[call-arg]

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
