"""
Configuration loading from config.yaml.

Uses typed dataclasses throughout so the rest of the app gets IDE
completion and type-checker support without touching raw dicts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class LeagueDefaults:
    """Rules pre-filled for a newly created project."""

    double_round: bool = True
    relegation_count: int = 4


@dataclass
class StorageConfig:
    path: str = "./data/projects.json"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_dir: str = "./logs"


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class Config:
    league: LeagueDefaults = field(default_factory=LeagueDefaults)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @property
    def store_path(self) -> Path:
        return Path(self.storage.path)

    @property
    def log_dir_path(self) -> Path:
        return Path(self.logging.log_dir)

    @property
    def log_level(self) -> int:
        return logging.getLevelName(self.logging.level)


def load_config(path: str | Path = "config.yaml") -> Config:
    """
    Load and validate config.yaml.

    Raises:
        FileNotFoundError: config.yaml is missing.
        ValueError: required fields are absent or invalid.
    """
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {cfg_path.resolve()}\n"
            "Copy config.example.yaml to config.yaml and adjust it."
        )

    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    try:
        league_raw = raw.get("league") or {}
        storage_raw = raw.get("storage") or {}
        logging_raw = raw.get("logging") or {}
        server_raw = raw.get("server") or {}

        config = Config(
            league=LeagueDefaults(
                double_round=bool(league_raw.get("double_round", True)),
                relegation_count=int(league_raw.get("relegation_count", 4)),
            ),
            storage=StorageConfig(
                path=str(storage_raw.get("path", "./data/projects.json")),
            ),
            logging=LoggingConfig(
                level=str(logging_raw.get("level", "INFO")).upper(),
                log_dir=str(logging_raw.get("log_dir", "./logs")),
            ),
            server=ServerConfig(
                host=str(server_raw.get("host", "127.0.0.1")),
                port=int(server_raw.get("port", 8000)),
            ),
        )
        _validate(config)
        return config

    except (AttributeError, TypeError) as exc:
        raise ValueError(f"Invalid config.yaml structure: {exc}") from exc


def load_config_or_default(path: str | Path = "config.yaml") -> Config:
    """Like load_config(), but a missing file yields the built-in defaults."""
    if not Path(path).exists():
        return Config()
    return load_config(path)


def _validate(config: Config) -> None:
    if config.league.relegation_count < 0:
        raise ValueError("league.relegation_count must be >= 0")
    if config.logging.level not in _LOG_LEVELS:
        raise ValueError(
            f"logging.level must be one of {_LOG_LEVELS}, got '{config.logging.level}'"
        )
    if not 1 <= config.server.port <= 65535:
        raise ValueError(f"server.port must be between 1 and 65535, got {config.server.port}")
    if not config.storage.path.strip():
        raise ValueError("storage.path must not be empty")
