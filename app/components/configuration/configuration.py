"""
YAML-backed configuration with environment variable overrides.

Values are looked up in the process environment first (after ``.env`` has been
loaded), then in ``<config_path>/<env>.yaml``.
"""

import os
from pathlib import Path
from typing import Any, TypeVar

import yaml

from app.components.configuration.configuration_interface import (
    ConfigurationInterface,
)

T = TypeVar("T")

_TRUE_VALUES = {"true", "1", "yes", "on"}


class Configuration(ConfigurationInterface):
    def __init__(self, env: str, config_path: str) -> None:
        self.env = env
        self.config_path = config_path
        self._values: dict[str, Any] = self._load_file()

    def _load_file(self) -> dict[str, Any]:
        file_path = Path(self.config_path) / f"{self.env}.yaml"
        if not file_path.exists():
            return {}

        with file_path.open(encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {file_path} must contain a mapping")
        return data

    def get_configuration(
        self, key: str, value_type: type[T], default: Any = None
    ) -> T:
        raw = os.getenv(key)
        if raw is None:
            raw = self._values.get(key)

        if raw is None or raw == "":
            if default is None:
                raise KeyError(f"Configuration key '{key}' is not set")
            return default

        return self._cast(raw, value_type)

    @staticmethod
    def _cast(raw: Any, value_type: type[T]) -> T:
        if value_type is bool and isinstance(raw, str):
            return raw.strip().lower() in _TRUE_VALUES  # type: ignore[return-value]
        if isinstance(raw, value_type):
            return raw
        return value_type(raw)  # type: ignore[call-arg]
