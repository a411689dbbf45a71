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
    """Application settings pulled from ORBIS_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ORBIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    # Classification Configuration
    default_preset: str = Field(default="orbis_demo", description="Dimension preset served by default")

    # Blending Configuration
    world_seed: int = Field(default=235623651371436421, description="Seed for scatter point placement")
    chunk_width: int = Field(default=16, gt=0, description="Cells along each chunk edge")
    min_blend_radius: float = Field(default=32.0, ge=0, description="Biome transition radius")
    point_frequency: float = Field(default=0.04, gt=0, description="Scatter points per unit")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Performance Configuration
    max_area_chunks: int = Field(default=64, gt=0, description="Max chunks blended per request")
    max_workers: Optional[int] = Field(default=None, description="Blend thread pool size")


# Instantiate singleton settings object
settings = Settings()
