from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    anthropic_api_key: str = ""
    elevenlabs_api_key: str = ""
    assemblyai_api_key: str = ""  # Optional — only used when transcription_provider="assemblyai"

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"
    storage_backend: str = "memory"  # "memory" or "supabase"

    # Transcription
    transcription_provider: str = "elevenlabs"  # "elevenlabs" or "assemblyai"
    elevenlabs_model_id: str = "scribe_v1"
    elevenlabs_api_url: str = "https://api.elevenlabs.io/v1/speech-to-text"
    # Current AssemblyAI API rejects the empty list older SDKs send by default
    assemblyai_speech_models: list[str] = ["universal-3-pro"]
    transcription_timeout: float = 300.0
    unknown_speaker_label: str = "Unknown"

    # Minutes generation
    llm_model: str = "claude-sonnet-4-20250514"
    minutes_language: str = "Japanese"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
