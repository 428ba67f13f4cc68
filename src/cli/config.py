"""Configuration loading."""

from pathlib import Path
from typing import Optional

import yaml

from .config_models import StudyflowConfig


def find_config() -> Optional[Path]:
    """Find config file in standard locations."""
    locations = [
        Path.cwd() / "config.yaml",
        Path.home() / ".studyflow" / "config.yaml",
        Path.home() / "studyflow" / "config.yaml",
    ]
    for loc in locations:
        if loc.exists():
            return loc
    return None


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration as a plain dict. Use load_config_model() for typed access."""
    return load_config_model(config_path).to_dict()


def load_config_model(config_path: Optional[Path] = None) -> StudyflowConfig:
    """Load configuration as Pydantic model with validation."""
    base_config = {}

    path = config_path or find_config()
    if path and path.exists():
        try:
            with open(path) as f:
                base_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")

    try:
        return StudyflowConfig.from_dict(base_config)
    except Exception as e:
        raise ValueError(f"Config validation failed: {e}")


def get_db_path(config: StudyflowConfig) -> Path:
    """Habit database path, parent directory created."""
    path = Path(config.paths.db).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path
