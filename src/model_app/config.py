# src/model_app/config.py
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml


class ConfigError(ValueError):
    """Raised when a setting cannot be parsed or is out of range."""


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8080
    num_labels: int = 3
    training_delay_seconds: float = 2.0
    seed: Optional[int] = None
    log_level: str = "INFO"
    service_name: str = "model-app"
    model_version: str = "dev"

    def __post_init__(self) -> None:
        if self.num_labels < 1:
            raise ConfigError(f"num_labels must be >= 1, got {self.num_labels}")
        if self.training_delay_seconds < 0:
            raise ConfigError(
                f"training_delay_seconds must be >= 0, got {self.training_delay_seconds}"
            )
        if not 0 < self.port < 65536:
            raise ConfigError(f"port must be in 1..65535, got {self.port}")


_CASTS = {
    "host": str,
    "port": int,
    "num_labels": int,
    "training_delay_seconds": float,
    "seed": int,
    "log_level": str,
    "service_name": str,
    "model_version": str,
}

# Env var names differ from field names only for the seed.
_ENV_NAMES = {name: name.upper() for name in _CASTS}
_ENV_NAMES["seed"] = "MODEL_SEED"


def load_config(config_path: str) -> Dict:
    """Load YAML configuration."""
    with open(config_path, "r") as f:
        config = yaml.safe_load(f)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")
    return config


def _cast(name: str, value: Any) -> Any:
    if value is None or value == "":
        return None
    try:
        return _CASTS[name](value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from exc


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from an optional YAML file (MODEL_APP_CONFIG) overlaid
    with environment variables. Unset keys keep their defaults.
    """
    env = os.environ if env is None else env

    raw: Dict[str, Any] = {}
    config_path = env.get("MODEL_APP_CONFIG")
    if config_path:
        if not Path(config_path).exists():
            raise ConfigError(f"Config file not found: {config_path}")
        file_cfg = load_config(config_path)
        unknown = sorted(set(file_cfg) - set(_CASTS))
        if unknown:
            raise ConfigError(f"Unknown config keys in {config_path}: {unknown}")
        raw.update(file_cfg)

    for name, env_name in _ENV_NAMES.items():
        if env_name in env:
            raw[name] = env[env_name]

    values = {}
    for name, value in raw.items():
        cast = _cast(name, value)
        if cast is not None:
            values[name] = cast
    return Settings(**values)
