"""Shared types and lightweight data containers.

We avoid heavy frameworks here. The goal is:
- keep the function core embeddable in any host engine
- keep typing clear but not over-abstract
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

DEFAULT_CONNECTION_TIMEOUT_S = 10

@dataclass(frozen=True)
class AiConfig:
    endpoint: str = ""
    model: str = ""
    # Name of the secret holding the default api key, never the key itself.
    api_key_secret: str = ""
    connection_timeout_s: int = DEFAULT_CONNECTION_TIMEOUT_S

@dataclass(frozen=True)
class GenerateTextParams:
    prompt: Optional[str]
    endpoint: Optional[str] = None
    model: Optional[str] = None
    api_key_secret: Optional[str] = None
    params: Optional[str] = None

@dataclass
class PreparedRequest:
    endpoint: str
    headers: Dict[str, str] = field(default_factory=dict)
    payload: str = ""
