from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import computed_field

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_name: str = "CMS Featured Images"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # DB settings
    db_user: str = "cms"
    db_pass: str = "cms"
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "cms"

    # Auth (tokens are issued by the external identity service; required, no default)
    jwt_secret: str
    jwt_issuer: str = "cms"
    jwt_audience: str = "cms-clients"

    # Secret store (Flickr API key at rest)
    encryption_secret: Optional[str] = None
    allow_insecure_encryption_fallback: bool = False

    # Resolution cache
    redis_url: str = "redis://localhost:6379/0"
    cache_backend: Literal["redis", "memory"] = "redis"

    # Flickr
    flickr_api_url: str = "https://www.flickr.com/services/rest/"
    flickr_timeout_seconds: float = 15.0

    # Direct image URLs are recognised by these path extensions
    featured_image_extensions: list[str] = ["jpg", "jpeg", "png"]

    @computed_field
    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_pass}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

settings = Settings()
