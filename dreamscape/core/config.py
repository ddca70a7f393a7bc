"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Dreamscape application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        llm_provider: Which LLM backend structures transcripts ("groq", "claude", "ollama").
        stt_provider: Speech-to-text backend ("groq").
        video_provider: Text-to-video backend ("veo").
        archive_backend: Where Dream Records live ("local" JSON file or "database").
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- LLM Provider ---
    # Selects the text model used for emoji detection and structuring
    llm_provider: str = "groq"

    # Groq settings (also used for transcription)
    groq_api_key: str = ""
    groq_chat_model: str = "llama-3.1-8b-instant"
    groq_transcription_model: str = "whisper-large-v3-turbo"

    # Claude (Anthropic API) settings
    claude_api_key: str = ""  # Required when llm_provider="claude"
    claude_model: str = "claude-sonnet-4-20250514"

    # Ollama (local LLM server) settings
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # --- Speech-to-text ---
    stt_provider: str = "groq"
    transcription_language: str = "en"  # Empty = auto-detect

    # --- Video generation ---
    video_provider: str = "veo"
    google_api_key: str = ""
    veo_model: str = "veo-2.0-generate-001"
    video_poll_interval: float = 10.0  # Seconds between operation polls
    video_max_poll_attempts: int = 60
    video_deadline_seconds: float = 900.0  # Overall cap on one generation
    thumbnail_placeholder: str = "/static/dreambackground1.png"

    # --- Capture ---
    sample_rate: int = 16000
    chunk_interval_ms: int = 5000
    max_recording_ms: int = 60000
    min_chunk_bytes: int = 1024
    max_audio_bytes: int = 50 * 1024 * 1024
    upload_concurrency: int = 3

    # --- Archive ---
    archive_backend: str = "local"  # "local" = JSON file, "database" = SQLAlchemy table
    local_store_path: str = "data/dreamscape.json"  # Profile + local archive
    database_url: str = "sqlite+aiosqlite:///data/dreamscape.db"

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = [
        "http://localhost:8501",  # Streamlit
        "http://localhost:3000",  # Dev frontend
    ]


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
