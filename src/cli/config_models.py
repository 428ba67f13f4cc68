"""Pydantic configuration models for StudyFlow."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

VALID_LLM_PROVIDERS = {"auto", "openai", "together", "claude", "fallback"}


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = "auto"
    model: Optional[str] = None  # None = use provider default
    api_key: Optional[str] = None
    max_tokens: int = 1000
    temperature: float = 0.7

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        if v not in VALID_LLM_PROVIDERS:
            raise ValueError(f"Invalid LLM provider: {v}. Must be one of {VALID_LLM_PROVIDERS}")
        return v

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"temperature must be 0-2, got {v}")
        return v


class PathsConfig(BaseModel):
    """File paths configuration."""

    db: Path = Path("~/studyflow/studyflow.db")
    log_file: Optional[Path] = None  # None = stderr only

    @model_validator(mode="after")
    def expand_paths(self):
        """Expand ~ in all paths."""
        self.db = self.db.expanduser()
        if self.log_file:
            self.log_file = self.log_file.expanduser()
        return self


VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    json_mode: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
        return v_upper


class HabitsConfig(BaseModel):
    """Habit dashboard defaults."""

    top_n: int = 3
    insights_window: int = 20

    @field_validator("top_n", "insights_window")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"must be >= 1, got {v}")
        return v


class StudyflowConfig(BaseModel):
    """Main configuration model."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    habits: HabitsConfig = Field(default_factory=HabitsConfig)

    @model_validator(mode="after")
    def expand_env_vars(self):
        """Expand ${VAR} in the API key and apply STUDYFLOW_DB."""
        if self.llm.api_key:
            key = self.llm.api_key
            if key.startswith("${") and key.endswith("}"):
                env_var = key[2:-1]
                self.llm.api_key = os.getenv(env_var, "")
        db_override = os.getenv("STUDYFLOW_DB")
        if db_override:
            self.paths.db = Path(db_override).expanduser()
        return self

    @classmethod
    def from_dict(cls, data: dict) -> "StudyflowConfig":
        return cls.model_validate(data)

    def to_dict(self) -> dict:
        return self.model_dump(mode="python")
