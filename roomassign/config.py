from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONFIG_ENV_VAR = "ROOMASSIGN_CONFIG"


def _default_config_path() -> Path:
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path(__file__).resolve().parent.parent / "config.yaml"


def _require_int(value: Any, default: int, name: str) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer") from exc


def _require_level(value: Any, default: str) -> str:
    if value is None:
        return default
    level = str(value).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"log_level {value!r} is not a logging level")
    return level


@dataclass(frozen=True)
class RoomSettings:
    default_page_size: int = 100
    max_page_size: int = 500
    max_guests: int = 3

    def __post_init__(self) -> None:
        if self.default_page_size <= 0:
            raise ValueError("rooms.default_page_size must be positive")
        if self.max_page_size < self.default_page_size:
            raise ValueError("rooms.max_page_size must be >= default_page_size")
        if not 1 <= self.max_guests <= 3:
            raise ValueError("rooms.max_guests must be between 1 and 3")


@dataclass(frozen=True)
class Config:
    log_level: str = "INFO"
    rooms: RoomSettings = field(default_factory=RoomSettings)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "Config":
        config_path = Path(path) if path else _default_config_path()
        if not config_path.exists():
            return cls()
        raw = yaml.safe_load(config_path.read_text()) or {}
        if not isinstance(raw, dict):
            raise ValueError("config.yaml must contain a mapping")
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        defaults = cls()
        rooms_data = data.get("rooms")
        if not isinstance(rooms_data, dict):
            rooms_data = {}
        rooms = RoomSettings(
            default_page_size=_require_int(
                rooms_data.get("default_page_size"),
                defaults.rooms.default_page_size,
                "rooms.default_page_size",
            ),
            max_page_size=_require_int(
                rooms_data.get("max_page_size"),
                defaults.rooms.max_page_size,
                "rooms.max_page_size",
            ),
            max_guests=_require_int(
                rooms_data.get("max_guests"),
                defaults.rooms.max_guests,
                "rooms.max_guests",
            ),
        )
        return cls(
            log_level=_require_level(data.get("log_level"), defaults.log_level),
            rooms=rooms,
        )
