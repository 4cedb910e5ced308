#!/usr/bin/env python3
"""
sensorboard Server Configuration Management

Policy:
- PROD (test_mode: false)
    secret_key must be configured; else startup fails
- DEV  (test_mode: true)
    secret_key may be omitted; an ephemeral one is generated and logged

Database files are written by external daemons (sensor collector, logger,
script executor); the dashboard only reads them, except for the script table.
"""

import logging
import secrets
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger("sensorboard.server")


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    # Database files - explicit configuration
    sensor_db_path: str = "./data.db"
    log_db_path: str = "./log.db"
    script_db_path: str = "./script.db"
    # Session and credentials
    secret_key: Optional[str] = None
    users: Dict[str, str] = Field(default_factory=dict)   # username -> PBKDF2 hex hash
    password_salt: str = "sůl"
    password_iterations: int = 1000
    # Presentation
    timezone: str = "UTC"
    language: str = "en"
    log_page_size: int = 200
    script_log_page_size: int = 50
    default_log_level: int = 3
    graph_default_days: int = 1
    # Behavior controls
    test_mode: bool = False          # Only controls secret key fallback

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("language")
    @classmethod
    def _known_language(cls, value: str) -> str:
        if value not in ("en", "cs"):
            raise ValueError(f"unsupported language: {value}")
        return value


def load_config_from(path: str) -> ServerConfig:
    """Load server configuration from YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return ServerConfig(**data)


def resolve_paths(cfg: ServerConfig) -> Dict[str, Path]:
    """Return the three database paths keyed by store name."""
    return {
        "sensor": Path(cfg.sensor_db_path),
        "log": Path(cfg.log_db_path),
        "script": Path(cfg.script_db_path),
    }


def resolve_secret_key(cfg: ServerConfig) -> str:
    """
    Return the session signing key.

    In test mode a missing key is replaced by an ephemeral one, which
    invalidates all sessions on restart.
    """
    if cfg.secret_key:
        return cfg.secret_key
    if not cfg.test_mode:
        raise RuntimeError("secret_key must be set in the configuration")
    key = secrets.token_urlsafe(32)
    logger.warning("secret_key not configured, using ephemeral session key (test mode)")
    return key
