"""Configuration management for studycards."""

import json
import os
import shutil
from dataclasses import dataclass, asdict
from pathlib import Path

from .paths import DATA_DIR, CONFIG_FILE, CARDS_FILE, atomic_json_write

# Claude models suitable for routing, with their specifications
CLAUDE_MODELS: dict[str, dict] = {
    "claude-haiku-4-5-20251001": {
        "name": "Claude Haiku 4.5",
        "context_window": 200_000,
        "max_output_tokens": 8_192,
    },
    "claude-sonnet-4-5-20250929": {
        "name": "Claude Sonnet 4.5",
        "context_window": 200_000,
        "max_output_tokens": 16_384,
    },
    "claude-sonnet-4-20250514": {
        "name": "Claude Sonnet 4",
        "context_window": 200_000,
        "max_output_tokens": 16_384,
    },
}

DEFAULT_MODEL = "claude-haiku-4-5-20251001"


def get_model_specs(model_id: str) -> dict:
    """Get specs for a model, with fallback defaults."""
    return CLAUDE_MODELS.get(model_id, {
        "name": model_id,
        "context_window": 200_000,
        "max_output_tokens": 8_192,
    })


@dataclass
class Config:
    """Application configuration."""

    model: str = DEFAULT_MODEL
    max_tokens: int = 1024
    store_file: str = ""
    default_user: str = "local"

    @property
    def store_path(self) -> Path:
        """Where the card collection lives."""
        return Path(self.store_file) if self.store_file else CARDS_FILE


def load_config() -> Config:
    """Load config from disk, creating defaults if needed.

    STUDYCARDS_MODEL in the environment overrides the saved model.
    """
    DATA_DIR.mkdir(parents=True, exist_ok=True)

    config = None
    if CONFIG_FILE.exists():
        try:
            with open(CONFIG_FILE) as f:
                data = json.load(f)
            config = Config(
                **{k: v for k, v in data.items() if k in Config.__dataclass_fields__}
            )
        except (json.JSONDecodeError, TypeError):
            # Back up corrupted config before overwriting with defaults
            backup_path = CONFIG_FILE.with_suffix(".json.bak")
            try:
                shutil.copy2(CONFIG_FILE, backup_path)
            except OSError:
                pass

    if config is None:
        config = Config()
        save_config(config)

    env_model = os.environ.get("STUDYCARDS_MODEL")
    if env_model:
        config.model = env_model
    return config


def save_config(config: Config) -> None:
    """Save config to disk."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    atomic_json_write(CONFIG_FILE, asdict(config))
