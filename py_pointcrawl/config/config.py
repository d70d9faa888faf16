from pathlib import Path
from typing import Optional

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from POINTCRAWL_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="POINTCRAWL_", extra="ignore")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")
    allowed_origins: str = Field(default="*", description="CORS allowed origins, comma separated")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Generation Configuration
    default_site_count: int = Field(default=15, ge=1, description="Default number of sites")
    default_map_width: int = Field(default=2480, description="Default map width")
    default_map_height: int = Field(default=1240, description="Default map height")
    max_map_width: int = Field(default=4960, description="Max allowed map width")
    max_map_height: int = Field(default=2480, description="Max allowed map height")
    max_site_count: int = Field(default=200, description="Max sites per request")

    # Content Configuration
    content_dir: Optional[str] = Field(
        default=None, description="Directory with locations/descriptors/features CSV files"
    )

    @property
    def cors_origins(self):
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


# Instantiate singleton settings object
settings = Settings()
