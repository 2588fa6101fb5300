from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    APP_ENV: str = "development"
    CORS_ORIGINS: List[str] = ["*"]
    DEMO_MODE: bool = False

    # Scoring service
    SCORING_API_BASE_URL: str = "http://localhost:8000"
    SCORING_API_KEY: str = ""
    SCORING_API_KEY_HEADER: str = "X-API-Key"
    SCORING_TIMEOUT_SEC: float = 300.0

    # Upload
    MAX_UPLOAD_SIZE_MB: int = 200
    ALLOWED_AUDIO_EXTENSIONS: List[str] = [".mp3", ".wav", ".m4a", ".flac"]

    # Export
    EXPORT_FILENAME: str = "lyric_coach_results.csv"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
