"""Process-wide configuration for the text generation function.

Sources, later wins:
1. YAML file (default: src/configs/aigen.yaml, or AIGEN_CONFIG)
2. Environment variables AIGEN_ENDPOINT / AIGEN_MODEL / AIGEN_API_KEY_SECRET /
   AIGEN_CONNECTION_TIMEOUT_S

aigen.yaml supports:
- ai_endpoint: https://api.openai.com/v1/chat/completions
- ai_model: gpt-4o-mini
- ai_api_key_secret: openai-api-key
- ai_connection_timeout_s: 10

Configuration is read once at startup and not reloaded while calls are served.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigError
from .logging_util import get_logger
from .types import DEFAULT_CONNECTION_TIMEOUT_S, AiConfig

logger = get_logger(__name__)

_ENV_KEYS = {
    "ai_endpoint": "AIGEN_ENDPOINT",
    "ai_model": "AIGEN_MODEL",
    "ai_api_key_secret": "AIGEN_API_KEY_SECRET",
    "ai_connection_timeout_s": "AIGEN_CONNECTION_TIMEOUT_S",
}

def default_config_path() -> Path:
    env = (os.environ.get("AIGEN_CONFIG") or "").strip()
    if env:
        return Path(env)
    # <root>/src/aigen/config.py -> parents[1] == <root>/src
    return Path(__file__).resolve().parents[1] / "configs" / "aigen.yaml"

def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.debug("Config file not found, using defaults: %s", path)
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config: {path} ({e})")
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping: {path}")
    return data

def _to_timeout(v: Any) -> int:
    if v is None or v == "":
        return DEFAULT_CONNECTION_TIMEOUT_S
    try:
        n = int(v)
    except (TypeError, ValueError):
        raise ConfigError(f"ai_connection_timeout_s must be an integer: {v!r}")
    if n <= 0:
        raise ConfigError(f"ai_connection_timeout_s must be positive: {n}")
    return n

def load_config(path: Optional[Union[str, Path]] = None) -> AiConfig:
    raw = _load_yaml(Path(path) if path else default_config_path())

    for key, env in _ENV_KEYS.items():
        v = (os.environ.get(env) or "").strip()
        if v:
            raw[key] = v

    return AiConfig(
        endpoint=str(raw.get("ai_endpoint") or "").strip(),
        model=str(raw.get("ai_model") or "").strip(),
        api_key_secret=str(raw.get("ai_api_key_secret") or "").strip(),
        connection_timeout_s=_to_timeout(raw.get("ai_connection_timeout_s")),
    )

class AiSettings:
    """Configuration plus the default api key, owned by one AiFunctions instance.

    The api key is installed by an administrative call (set_api_key) before
    requests are served and is only read on the request path.
    """

    def __init__(self, config: Optional[AiConfig] = None, api_key: str = ""):
        self.config = config or AiConfig()
        self._api_key = api_key

    @property
    def api_key(self) -> str:
        return self._api_key

    def set_api_key(self, api_key: str) -> None:
        self._api_key = api_key or ""
        logger.info("Default api key %s", "installed" if self._api_key else "cleared")

    def __repr__(self) -> str:
        return f"AiSettings(config={self.config!r}, api_key={'***' if self._api_key else ''!r})"
