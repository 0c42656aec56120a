# campus_market/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    ENV: str = "development"
    PORT: int = 5000

    DATA_DIR: Path = Path("data")  # where the CSV tables live
    SECTIONS_FILE: str = "sections.csv"
    PRODUCTS_FILE: str = "products.csv"
    LOCK_TIMEOUT: float = 10.0  # seconds to wait for a table lock

    ADMIN_PASSWORD: str = "adminpass"  # change for prod

    # "cloudinary" in production, "local" stores files under MEDIA_DIR
    MEDIA_BACKEND: str = "cloudinary"
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    MEDIA_FOLDER: str = "futa-market"
    MEDIA_DIR: str = "static/media"
    PUBLIC_BASE_URL: str = "http://localhost:5000"

    MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024

    CORS_ORIGINS: str = ""

    # Example .env:
    # ADMIN_PASSWORD=something-long
    # CLOUDINARY_CLOUD_NAME=...
    # MEDIA_BACKEND=local

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()
