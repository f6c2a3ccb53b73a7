from __future__ import annotations
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from sre_assessment.core.questionnaire import DEFAULT_QUESTIONNAIRE_PATH


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SRE_ASSESSMENT_", env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./questionnaire.db"
    api_base_url: str = "http://localhost:8080"
    questionnaire_path: Path = DEFAULT_QUESTIONNAIRE_PATH
    request_timeout: float = 5.0
    top_teams_limit: int = 10
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080


@lru_cache
def get_settings() -> Settings:
    return Settings()
