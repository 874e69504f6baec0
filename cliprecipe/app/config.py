from __future__ import annotations

from typing import Literal, Optional

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SUPABASE_URL: Optional[AnyUrl] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None
    APP_ENV: str = "local"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
    )

    RECIPE_STORE: Literal["memory", "supabase"] = "memory"
    RECIPES_TABLE: str = "recipes"

    PIPELINE_TIMEOUT_SECONDS: int = Field(default=540, ge=1)
    PIPELINE_TEMP_DIR: str = "/tmp/cliprecipe"

    YTDLP_FORMAT: str = "bestaudio[ext=m4a]/bestaudio"
    FFMPEG_BINARY: str = "ffmpeg"
    WHISPER_MODEL: str = "small"
    WHISPER_DEVICE: Literal["auto", "cuda", "cpu"] = "auto"
    WHISPER_BEAM_SIZE: int = Field(default=5, ge=1)

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_SERVICE_ROLE_KEY)


settings = Settings()
