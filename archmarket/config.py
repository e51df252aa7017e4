"""
Config system - Layered configuration with merge precedence.

Precedence (lowest to highest):
    built-in defaults < YAML files < .env file < environment variables < overrides
"""

from __future__ import annotations

import copy
import json
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml
from dotenv import dotenv_values


DEFAULTS: Dict[str, Any] = {
    "server": {
        "host": "127.0.0.1",
        "port": 5000,
        "request_timeout": 30.0,
    },
    "database": {
        "url": "sqlite:///archmarket.db",
    },
    "orders": {
        "tax_rate": "0.085",
    },
    "auth": {
        "issuer": "archmarket",
        "audience": "archmarket-api",
        "access_token_ttl": 3600,
        "keys_file": None,
    },
    "logging": {
        "level": "INFO",
    },
}


class NestedNamespace:
    """
    Attribute access over nested config dicts.

    Enables syntax like: config.ns.orders.tax_rate
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data = data or {}

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            return object.__getattribute__(self, name)
        if name not in self._data:
            raise AttributeError(f"'NestedNamespace' object has no attribute '{name}'")
        value = self._data[name]
        if isinstance(value, dict):
            return NestedNamespace(value)
        return value

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def to_dict(self) -> dict:
        return self._data


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.

    Environment variables use the ``ARCHMARKET_`` prefix and a double
    underscore for nesting: ``ARCHMARKET_ORDERS__TAX_RATE=0.1``.
    """

    def __init__(self, env_prefix: str = "ARCHMARKET_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    @classmethod
    def load(
        cls,
        paths: Optional[Iterable[str]] = None,
        env_prefix: str = "ARCHMARKET_",
        env_file: Optional[str] = ".env",
        overrides: Optional[Dict[str, Any]] = None,
        use_environ: bool = True,
    ) -> "ConfigLoader":
        """
        Load configuration.

        Args:
            paths: YAML files to merge in order. Defaults to ``archmarket.yaml``
                in the working directory when it exists.
            env_prefix: Prefix for environment variables.
            env_file: ``.env`` file to read (missing file is ignored).
            overrides: Highest-precedence values (CLI flags, tests).
            use_environ: Read ``os.environ``; tests switch this off.
        """
        loader = cls(env_prefix=env_prefix)

        if paths is None:
            paths = ["archmarket.yaml"] if Path("archmarket.yaml").exists() else []

        for path in paths:
            loader._load_yaml_file(Path(path))

        if env_file:
            loader._load_env_file(env_file)

        if use_environ:
            loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        loader.validate()
        return loader

    def _load_yaml_file(self, path: Path):
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        with open(path) as f:
            data = yaml.safe_load(f)
        if data is None:
            return
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        self._merge_dict(self.config_data, data)

    def _load_env_file(self, path: str):
        if not Path(path).exists():
            return
        for key, value in dotenv_values(path).items():
            if key.startswith(self.env_prefix) and value is not None:
                self._set_nested(key, value)

    def _load_from_env(self):
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: str):
        """Convert ARCHMARKET_ORDERS__TAX_RATE to config_data['orders']['tax_rate']."""
        key = key[len(self.env_prefix):]
        parts = key.lower().split("__")

        current = self.config_data
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _merge_dict(self, target: dict, source: dict):
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def validate(self):
        self.tax_rate()
        port = self.get("server.port")
        if not isinstance(port, int) or not 0 < port < 65536:
            raise ConfigError(f"server.port must be an integer in 1..65535, got {port!r}")
        self.request_timeout()

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        current: Any = self.config_data
        for part in path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def tax_rate(self) -> Decimal:
        """``orders.tax_rate`` as a Decimal in [0, 1)."""
        raw = self.get("orders.tax_rate")
        try:
            rate = Decimal(str(raw))
        except (InvalidOperation, ValueError):
            raise ConfigError(f"orders.tax_rate is not a number: {raw!r}")
        if not rate.is_finite() or rate < 0 or rate >= 1:
            raise ConfigError(f"orders.tax_rate must be in [0, 1), got {raw!r}")
        return rate

    def request_timeout(self) -> Optional[float]:
        """``server.request_timeout`` in seconds; ``0`` or ``None`` disables it."""
        raw = self.get("server.request_timeout")
        if raw in (None, 0):
            return None
        if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
            raise ConfigError(f"server.request_timeout is not a number: {raw!r}")
        try:
            seconds = float(raw)
        except ValueError:
            raise ConfigError(f"server.request_timeout is not a number: {raw!r}")
        if not seconds > 0 or seconds == float("inf"):
            raise ConfigError(f"server.request_timeout must be positive, got {raw!r}")
        return seconds

    @property
    def ns(self) -> NestedNamespace:
        return NestedNamespace(self.config_data)

    def to_dict(self) -> dict:
        return copy.deepcopy(self.config_data)
