from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="RECIPE_VOYAGE_", extra="ignore"
    )

    database_url: str = "sqlite:///./recipe_voyage.db"

    # File-backed resources (audio narration, photo blobs)
    media_root: Optional[str] = None
    audio_dir: str = "audio"
    photo_dir: str = "photos"

    # Styling defaults for new recipes
    default_symbol: str = "fork.knife"
    default_font: str = "Georgia-Bold"
    default_accent_color: str = "#8B4513"

    # Simulated "incoming mail" job
    auto_inbox_enabled: bool = False
    auto_inbox_interval_seconds: int = 60

    log_level: str = "INFO"


settings = Settings()
