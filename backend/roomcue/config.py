"""
Configuration Settings

Environment variables and engine configuration.
Every threshold, streak length and time window used by the recognition
engine is declared here so the matching code itself stays parameter-free.
Includes logging and LangSmith tracing setup.
"""

import os
import logging
from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache

from roomcue.models.state import StabilizerConfig


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Logging
    log_level: str = "INFO"
    
    # Room recognition (stabilizer)
    room_confirmation_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    room_required_consecutive: int = Field(default=3, ge=1)
    room_detection_cooldown_ms: int = Field(default=30_000, ge=0)
    
    # Transcript triggers
    trigger_cooldown_ms: int = Field(default=45_000, ge=0)
    transcript_repeat_window_ms: int = Field(default=20_000, ge=0)
    
    # Room scanning
    scan_max_observations: int = Field(default=25, ge=1)
    
    # LangSmith Tracing
    langchain_tracing_v2: bool = False
    langchain_api_key: str = ""
    langchain_project: str = "roomcue"
    langchain_endpoint: str = "https://api.smith.langchain.com"
    
    class Config:
        env_file = (".env", "../.env")
        env_file_encoding = "utf-8"
        extra = "ignore"

    def stabilizer_config(self) -> StabilizerConfig:
        """Build the stabilizer configuration for a live recognition session."""
        return StabilizerConfig(
            confirmation_threshold=self.room_confirmation_threshold,
            required_consecutive=self.room_required_consecutive,
            cooldown_ms=self.room_detection_cooldown_ms,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def setup_logging(level: str = None) -> None:
    """Configure the root logger from settings (or an explicit level)."""
    settings = get_settings()
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def setup_langsmith() -> bool:
    """
    Setup LangSmith tracing environment variables.
    
    Call this at application startup to enable tracing of scoring,
    matching and aggregation calls.
    Returns True if tracing is enabled, False otherwise.
    """
    settings = get_settings()
    
    if settings.langchain_api_key and settings.langchain_tracing_v2:
        os.environ["LANGCHAIN_TRACING_V2"] = "true"
        os.environ["LANGCHAIN_API_KEY"] = settings.langchain_api_key
        os.environ["LANGCHAIN_PROJECT"] = settings.langchain_project
        os.environ["LANGCHAIN_ENDPOINT"] = settings.langchain_endpoint
        
        logger.info(
            "LangSmith tracing enabled (project=%s, endpoint=%s)",
            settings.langchain_project,
            settings.langchain_endpoint,
        )
        return True
    
    logger.info("LangSmith tracing not configured; set LANGCHAIN_API_KEY to enable it")
    return False
