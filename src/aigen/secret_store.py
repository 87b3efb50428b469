"""Secret store collaborators.

Callers pass a secret *name* (e.g. "openai-api-key"); the store turns it into
the credential value. Failures raise SecretResolutionError whose message is
returned to the caller verbatim, so keep messages free of secret material.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Union

import yaml

from .errors import SecretResolutionError
from .logging_util import get_logger

logger = get_logger(__name__)

def sanitize_api_key(raw: str) -> str:
    """Strip whitespace and stray quotes picked up by copy/paste."""
    k = (raw or "").strip()
    k = k.strip(' "\'`')
    k = k.strip("“”‘’")
    return k

class SecretResolver:
    def resolve(self, name: str) -> str:
        raise NotImplementedError

class EnvSecretResolver(SecretResolver):
    """Resolve a secret from the process environment.

    "openai-api-key" is looked up as-is first, then as OPENAI_API_KEY.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ if environ is not None else os.environ

    @staticmethod
    def _env_name(name: str) -> str:
        return name.upper().replace("-", "_").replace(".", "_")

    def resolve(self, name: str) -> str:
        for key in (name, self._env_name(name)):
            v = sanitize_api_key(self._environ.get(key) or "")
            if v:
                return v
        raise SecretResolutionError(f"Secret not found in environment: {name}")

class YamlKeystoreResolver(SecretResolver):
    """Resolve secrets from a YAML mapping of name -> value.

    The file is read on every lookup so rotated keys are picked up without a restart.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Dict[str, object]:
        if not self.path.exists():
            raise SecretResolutionError(f"Keystore not found: {self.path}")
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load keystore: %s (%s)", self.path, e)
            raise SecretResolutionError(f"Failed to load keystore: {self.path}")
        if not isinstance(data, dict):
            raise SecretResolutionError(f"Keystore must be a mapping: {self.path}")
        return data

    def resolve(self, name: str) -> str:
        data = self._load()
        if name not in data:
            raise SecretResolutionError(f"Secret '{name}' not found in keystore {self.path}")
        v = sanitize_api_key(str(data.get(name) or ""))
        if not v:
            raise SecretResolutionError(f"Secret '{name}' is empty in keystore {self.path}")
        return v

class ChainedSecretResolver(SecretResolver):
    def __init__(self, resolvers: Sequence[SecretResolver]):
        self.resolvers = list(resolvers)

    def resolve(self, name: str) -> str:
        last: Optional[SecretResolutionError] = None
        for r in self.resolvers:
            try:
                return r.resolve(name)
            except SecretResolutionError as e:
                last = e
        if last is None:
            raise SecretResolutionError(f"No secret store configured for: {name}")
        raise last
