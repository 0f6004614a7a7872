"""Configuration management for kitab-tui."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from kitab_tui.data.types import SearchMode
from kitab_tui.debounce import SCROLL_DEBOUNCE_DELAY
from kitab_tui.history import MAX_ENTRIES

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "kitab-tui"
CONFIG_FILE = CONFIG_DIR / "config.json"
STATE_FILE_NAME = "state.json"
LOG_FILE_NAME = "kitab-tui.log"


@dataclass
class Config:
    """Application configuration."""

    corpus_path: Optional[str] = None  # None = built-in demo corpus
    state_file: Optional[str] = None  # None = state.json beside the config
    default_search_mode: SearchMode = SearchMode.PARTIAL
    history_limit: int = MAX_ENTRIES
    scroll_debounce: float = SCROLL_DEBOUNCE_DELAY
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    config_dir: Path = CONFIG_DIR

    @property
    def state_path(self) -> Path:
        if self.state_file:
            return Path(self.state_file).expanduser()
        return self.config_dir / STATE_FILE_NAME

    @property
    def log_path(self) -> Path:
        if self.log_file:
            return Path(self.log_file).expanduser()
        return self.config_dir / LOG_FILE_NAME

    @classmethod
    def load(cls, path: Path = CONFIG_FILE) -> "Config":
        """Load config from file, or return defaults."""
        path = Path(path)
        if not path.exists():
            return cls(config_dir=path.parent)

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("config is not a JSON object")
            history_limit = int(data.get("history_limit", MAX_ENTRIES))
            scroll_debounce = float(data.get("scroll_debounce", SCROLL_DEBOUNCE_DELAY))
            return cls(
                corpus_path=data.get("corpus_path"),
                state_file=data.get("state_file"),
                default_search_mode=SearchMode.parse(data.get("default_search_mode")),
                history_limit=history_limit if history_limit > 0 else MAX_ENTRIES,
                scroll_debounce=scroll_debounce if scroll_debounce >= 0 else SCROLL_DEBOUNCE_DELAY,
                log_level=str(data.get("log_level", "WARNING")).upper(),
                log_file=data.get("log_file"),
                config_dir=path.parent,
            )
        except (json.JSONDecodeError, OSError, TypeError, ValueError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", path, exc)
            return cls(config_dir=path.parent)

    def save(self, path: Optional[Path] = None) -> None:
        """Save config to file."""
        path = Path(path) if path else self.config_dir / CONFIG_FILE.name
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "corpus_path": self.corpus_path,
            "state_file": self.state_file,
            "default_search_mode": SearchMode(self.default_search_mode).value,
            "history_limit": self.history_limit,
            "scroll_debounce": self.scroll_debounce,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)


def get_config(path: Path = CONFIG_FILE) -> Config:
    """Get the application config."""
    return Config.load(path)
