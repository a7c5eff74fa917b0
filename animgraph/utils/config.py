"""Application configuration.

Settings are read from `.env` and `ANIMGRAPH_*` environment variables.
"""
from __future__ import annotations

from typing import List, Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings loaded from .env and environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="ANIMGRAPH_", extra="ignore"
    )

    animation_folder: str = Field(
        default="Assets/",
        validation_alias=AliasChoices("ANIMGRAPH_ANIMATION_FOLDER", "ANIMATION_FOLDER"),
    )
    output_dir: str = "outputs"
    clip_extensions: List[str] = [".anim", ".fbx"]
    dedup_key: Literal["state", "end_state"] = "state"
    log_level: str = "INFO"


settings = Settings()
