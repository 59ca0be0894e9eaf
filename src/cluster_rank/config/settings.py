from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CLUSTER_RANK_")

    log_json: bool = False
    log_level: str = "INFO"
    config_path: Path = Path("config/clustering.yaml")


@lru_cache
def get_settings() -> Settings:
    return Settings()
