"""Client configuration with JSON persistence and environment overrides."""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


CONFIG_PATH = Path("data") / "client.json"

ENV_OVERRIDES = {
    "base_url": "PHOTOBLAST_BASE_URL",
    "upload_path": "PHOTOBLAST_UPLOAD_PATH",
    "timeout": "PHOTOBLAST_TIMEOUT",
}


@dataclass
class ClientConfig:
    """Where and how uploads are sent."""
    base_url: str = "http://localhost:8080"
    upload_path: str = "/api/photos/upload"
    timeout: float = 30.0
    idempotency_header: str = "X-Idempotency-Key"

    @property
    def upload_url(self) -> str:
        return self.base_url.rstrip("/") + "/" + self.upload_path.lstrip("/")


def _coerce(name: str, value) -> object:
    """Convert a raw config value to the field's type."""
    if name == "timeout":
        try:
            timeout = float(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid timeout: {value!r}") from e
        if timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {timeout}")
        return timeout
    return str(value)


def load_config(path: Optional[Path] = None) -> ClientConfig:
    """Load configuration from disk, then apply environment overrides.

    A missing file yields defaults. A corrupt file is reported and ignored.

    Raises:
        ValueError: If an environment override has an invalid value.
    """
    path = Path(path) if path is not None else CONFIG_PATH
    config = _read_stored(path)

    for name, env_var in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value:
            setattr(config, name, _coerce(name, value))

    return config


def _read_stored(path: Path) -> ClientConfig:
    """Read the config file, falling back to defaults if it is missing or unusable."""
    config = ClientConfig()
    if not path.exists():
        return config

    known = {f.name for f in fields(ClientConfig)}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        for key, value in data.items():
            if key in known:
                setattr(config, key, _coerce(key, value))
            else:
                logger.warning(f"Ignoring unknown config key {key!r} in {path}")
    except (json.JSONDecodeError, OSError, ValueError) as e:
        logger.warning(f"Failed to load client config {path}: {e}")
        config = ClientConfig()
    return config


def save_config(config: ClientConfig, path: Optional[Path] = None) -> None:
    """Save configuration to disk."""
    path = Path(path) if path is not None else CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(asdict(config), f, indent=2)


def update_config(key: str, value: str, path: Optional[Path] = None) -> ClientConfig:
    """Set one key in the stored configuration.

    Raises:
        KeyError: If key is not a configuration field.
        ValueError: If value is invalid for key.
    """
    known = {f.name for f in fields(ClientConfig)}
    if key not in known:
        raise KeyError(key)

    path = Path(path) if path is not None else CONFIG_PATH
    config = _read_stored(path)

    setattr(config, key, _coerce(key, value))
    save_config(config, path)
    return config
