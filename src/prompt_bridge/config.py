"""
User Settings

Defaults the CLI applies when a flag is not given.

Settings stored in: ~/.config/prompt-bridge/config.json
    {
      "default_target": "cursor",
      "author": "Jane Doe <jane@example.com>",
      "max_workers": 4,
      "penalties": {"lossy_warning": 10, "subtype_incompatible": 20}
    }
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Optional

from .scoring import DEFAULT_PENALTIES, ScoringPenalties

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "prompt-bridge"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_MAX_WORKERS = 4


@dataclass
class Settings:
    default_target: Optional[str] = None
    author: Optional[str] = None
    max_workers: int = DEFAULT_MAX_WORKERS
    penalties: ScoringPenalties = field(default_factory=lambda: DEFAULT_PENALTIES)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Build settings from parsed JSON. Unknown keys are ignored."""
        penalty_keys = {f.name for f in fields(ScoringPenalties)}
        penalties = data.get("penalties") or {}
        max_workers = data.get("max_workers", DEFAULT_MAX_WORKERS)
        return cls(
            default_target=data.get("default_target"),
            author=data.get("author"),
            max_workers=max_workers if isinstance(max_workers, int) and max_workers > 0 else DEFAULT_MAX_WORKERS,
            penalties=ScoringPenalties(**{k: int(v) for k, v in penalties.items() if k in penalty_keys}),
        )


def load_settings(path: Path = None) -> Settings:
    """Load settings from ``path``, or return defaults if it is missing or malformed."""
    path = path or CONFIG_FILE
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise TypeError("settings must be a JSON object")
        return Settings.from_dict(data)
    except (json.JSONDecodeError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Ignoring malformed settings in %s: %s", path, e)
        return Settings()


def save_settings(settings: Settings, path: Path = None) -> None:
    """Persist settings to disk."""
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(settings), indent=2, ensure_ascii=False), encoding="utf-8")
