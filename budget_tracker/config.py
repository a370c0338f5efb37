"""Configuration utilities for Budget Tracker.

Settings come from defaults, then an optional JSON file, then
``BUDGET_TRACKER_*`` environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .data_loader import ERROR_POLICIES
from .periods import Granularity

ENV_PREFIX = "BUDGET_TRACKER_"

DEFAULT_DATABASE_URI = "sqlite:///budget_tracker.db"


def parse_log_level(value: str) -> str:
    level = str(value).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"log_level: unknown logging level {value!r}")
    return level


@dataclass
class AppConfig:
    default_frequency: Granularity = Granularity.MONTHLY
    error_policy: str = "raise"
    database_uri: str = DEFAULT_DATABASE_URI
    user_header: str = "X-User-Email"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        try:
            self.default_frequency = Granularity.parse(self.default_frequency)
        except ValueError as exc:
            raise ValueError(f"default_frequency: {exc}") from exc
        if self.error_policy not in ERROR_POLICIES:
            raise ValueError(
                f"error_policy: expected one of {', '.join(ERROR_POLICIES)}, got {self.error_policy!r}"
            )
        self.log_level = parse_log_level(self.log_level)

    @staticmethod
    def load(
        config_path: Optional[str | Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "AppConfig":
        """Load config from JSON if provided, then apply env overrides.

        JSON format:
        {
          "default_frequency": "weekly",
          "error_policy": "collect",
          "database_uri": "sqlite:///budget.db",
          "user_header": "X-User-Email",
          "log_level": "DEBUG"
        }
        """

        values = {}
        if config_path:
            p = Path(config_path)
            if p.exists():
                with p.open("r", encoding="utf-8") as f:
                    raw = json.load(f)
                if not isinstance(raw, dict):
                    raise ValueError(f"{p.name}: expected a JSON object at the top level")
                for key in ("default_frequency", "error_policy", "database_uri", "user_header", "log_level"):
                    if raw.get(key) is not None:
                        values[key] = str(raw[key])

        env = os.environ if environ is None else environ
        for key in ("default_frequency", "error_policy", "database_uri", "log_level"):
            value = env.get(ENV_PREFIX + key.upper())
            if value:
                values[key] = value
        return AppConfig(**values)
