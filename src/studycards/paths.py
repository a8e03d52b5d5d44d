"""Centralized storage paths for studycards."""

import json
import os
import tempfile
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from current directory or project root
load_dotenv()
load_dotenv(Path(__file__).parent.parent.parent / ".env")

# Base data directory for all persistent storage
DATA_DIR = Path(
    os.environ.get("STUDYCARDS_HOME")
    or Path(__file__).parent.parent.parent / ".studycards"
)

# Configuration
CONFIG_FILE = DATA_DIR / "config.json"

# Card collection
CARDS_FILE = DATA_DIR / "flashcards.json"

# Chat log (readable history)
CHAT_LOG_FILE = DATA_DIR / "chat_log.json"

# Chat input history (prompt_toolkit)
HISTORY_FILE = DATA_DIR / "chat_history"


def ensure_data_dir() -> None:
    """Ensure the data directory exists."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def atomic_json_write(path: Path, data, *, indent: int = 2, ensure_ascii: bool = False) -> None:
    """Write JSON data to a file atomically.

    Writes to a temporary file in the same directory, then renames it
    over the target path, so readers see either the old or the new file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
