from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "padding": 4,
    "min_width": 20,
    "default_width": 80,
    "completion_delay_ms": 800,
    "resize_poll_ms": 250,
    "dissolve": {
        "first_tick_ms": 300,
        "tick_ms": 200,
        "max_frame": 7,
    },
    "theme": "auto",
    "color": True,
    "palette": {
        "dark": {
            "correct": {"fg": "#FAFAFA"},
            "incorrect": {"fg": "#FF4444", "bg": "#442222"},
            "cursor": {"fg": "#888888", "underline": True},
            "pending": {"fg": "#555555"},
            "decorative": {"fg": "#555555"},
            "faded": {"fg": "#333333"},
        },
        "light": {
            "correct": {"fg": "#1A1A1A"},
            "incorrect": {"fg": "#CC3333", "bg": "#FFD9D9"},
            "cursor": {"fg": "#666666", "underline": True},
            "pending": {"fg": "#AAAAAA"},
            "decorative": {"fg": "#AAAAAA"},
            "faded": {"fg": "#CCCCCC"},
        },
    },
}


@dataclass(frozen=True)
class DissolveConfig:
    first_tick_ms: int = 300
    tick_ms: int = 200
    max_frame: int = 7


@dataclass(frozen=True)
class AppConfig:
    padding: int = 4
    min_width: int = 20
    default_width: int = 80
    completion_delay_ms: int = 800
    resize_poll_ms: int = 250
    dissolve: DissolveConfig = field(default_factory=DissolveConfig)
    theme: str = "auto"
    color: bool = True
    palette: Mapping[str, Mapping[str, Mapping[str, Any]]] = field(
        default_factory=lambda: DEFAULT_CONFIG["palette"]
    )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppConfig":
        """Build a config from merged settings. Raises ValueError on a bad shape or value."""
        for key in ("dissolve", "palette"):
            if not isinstance(data.get(key), Mapping):
                raise ValueError(f"'{key}' must be a mapping")
        dissolve = data["dissolve"]
        try:
            return cls(
                padding=int(data["padding"]),
                min_width=int(data["min_width"]),
                default_width=int(data["default_width"]),
                completion_delay_ms=int(data["completion_delay_ms"]),
                resize_poll_ms=int(data["resize_poll_ms"]),
                dissolve=DissolveConfig(
                    first_tick_ms=int(dissolve["first_tick_ms"]),
                    tick_ms=int(dissolve["tick_ms"]),
                    max_frame=int(dissolve["max_frame"]),
                ),
                theme=str(data["theme"]),
                color=bool(data["color"]) and "NO_COLOR" not in os.environ,
                palette=data["palette"],
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"invalid setting: {e}") from e


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _candidate_config_paths() -> List[Path]:
    env_path = os.environ.get("PRESENCE_CONFIG")
    paths = []
    if env_path:
        paths.append(Path(env_path))
    paths.extend([
        Path("presence.yaml"),
        Path.home() / ".config" / "presence" / "config.yaml",
    ])
    return paths


def load_config() -> AppConfig:
    config = dict(DEFAULT_CONFIG)
    for path in _candidate_config_paths():
        if not path.exists():
            continue
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not load config from %s: %s", path, e)
            break
        if isinstance(data, dict):
            config = _deep_merge(config, data)
            logger.info("Loaded config from %s", path)
        else:
            logger.warning("Ignoring config %s: expected a mapping", path)
        break
    try:
        return AppConfig.from_dict(config)
    except ValueError as e:
        logger.warning("Ignoring config: %s", e)
        return AppConfig.from_dict(DEFAULT_CONFIG)
