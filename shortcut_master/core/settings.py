from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"
DEFAULT_CONFIG_PATH = Path.home() / ".shortcut_master" / "config.yaml"


class GameMode(Enum):
    QUIZ = "quiz"
    PRACTICAL = "practical"


class OperatingSystem(Enum):
    WINDOWS = "windows"
    MAC = "mac"

    @property
    def primary_modifier_label(self) -> str:
        return "Cmd" if self is OperatingSystem.MAC else "Ctrl"


@dataclass(frozen=True)
class GameSettings:
    mode: GameMode = GameMode.QUIZ
    os: OperatingSystem = OperatingSystem.WINDOWS
    category: str = ALL_CATEGORIES
    question_count: int = 10

    def __post_init__(self) -> None:
        if not isinstance(self.mode, GameMode):
            raise ValueError(f"invalid mode: {self.mode!r}")
        if not isinstance(self.os, OperatingSystem):
            raise ValueError(f"invalid os: {self.os!r}")
        if not self.category:
            raise ValueError("category must not be empty")
        if isinstance(self.question_count, bool) or not isinstance(self.question_count, int):
            raise ValueError(f"question_count must be an integer, got {self.question_count!r}")
        if self.question_count < 1:
            raise ValueError(f"question_count must be positive, got {self.question_count}")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], defaults: Optional["GameSettings"] = None) -> "GameSettings":
        """Build settings from plain values, e.g. a YAML section or widget state."""
        defaults = defaults or cls()
        count = raw.get("question_count", raw.get("questionCount", defaults.question_count))
        try:
            mode = GameMode(str(raw.get("mode", defaults.mode.value)).lower())
            os = OperatingSystem(str(raw.get("os", defaults.os.value)).lower())
            count = int(count)
        except ValueError as e:
            raise ValueError(f"invalid game settings: {e}") from e
        category = str(raw.get("category", defaults.category))
        if category.lower() == ALL_CATEGORIES.lower():
            category = ALL_CATEGORIES
        return cls(
            mode=mode,
            os=os,
            category=category,
            question_count=count,
        )


@dataclass(frozen=True)
class Timings:
    """Engine delays in milliseconds."""

    tick_ms: int = 50
    success_hold_ms: int = 400
    error_cooldown_ms: int = 500
    practical_success_ms: int = 600
    mouse_warning_ms: int = 2000

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Timings":
        values = {}
        for f in fields(cls):
            if f.name in raw:
                value = int(raw[f.name])
                if value < 0 or (f.name == "tick_ms" and value == 0):
                    raise ValueError(f"invalid timing {f.name}={value}")
                values[f.name] = value
        return cls(**values)


def load_config(
    path: Optional[Path] = None,
    defaults: Optional[GameSettings] = None,
) -> Tuple[GameSettings, Timings]:
    """Read default settings and timings from YAML; fall back to defaults on any problem."""
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        return defaults or GameSettings(), Timings()
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError("expected a YAML mapping")
        settings = GameSettings.from_mapping(raw.get("settings") or {}, defaults)
        timings = Timings.from_mapping(raw.get("timings") or {})
    except (yaml.YAMLError, OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Could not load config from %s: %s", config_path, e)
        return defaults or GameSettings(), Timings()
    logger.info("Loaded config from %s", config_path)
    return settings, timings
