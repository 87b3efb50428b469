"""Request assembly for the chat.completions call.

Rules, in order:
- A supplied endpoint must be https and an OpenAI host. The configured default is trusted.
- The bearer token comes from the named secret if one is given, else the default api key.
- The prompt must be non-empty. This is checked even when there are no overrides.
- Payload is {"model", "messages": [{"role": "user", "content": prompt}]}.
- Caller overrides (a JSON object) add or replace top-level fields, except "messages".
"""
from __future__ import annotations

import json
from typing import Any, Dict, Optional

from .config import AiSettings
from .endpoint import is_api_endpoint_supported, is_api_endpoint_valid
from .errors import (
    InvalidJsonError,
    InvalidPromptError,
    InvalidProtocolError,
    MessagesOverrideError,
    UnsupportedEndpointError,
)
from .logging_util import get_logger
from .secret_store import SecretResolver
from .types import GenerateTextParams, PreparedRequest

logger = get_logger(__name__)

OPEN_AI_REQUEST_FIELD_MESSAGES = "messages"
CONTENT_TYPE_JSON = "application/json"

def _present(v: Optional[str]) -> bool:
    return v is not None and len(v) != 0

def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")

def resolve_endpoint(endpoint: Optional[str], settings: AiSettings) -> str:
    if not _present(endpoint):
        return settings.config.endpoint
    if not is_api_endpoint_valid(endpoint):
        logger.debug("invalid protocol: %s", endpoint)
        raise InvalidProtocolError()
    if not is_api_endpoint_supported(endpoint):
        logger.debug("unsupported endpoint: %s", endpoint)
        raise UnsupportedEndpointError()
    return endpoint

def build_headers(api_key_secret: Optional[str], settings: AiSettings, secrets: SecretResolver) -> Dict[str, str]:
    if _present(api_key_secret):
        # SecretResolutionError propagates as-is; its message is the outcome.
        api_key = secrets.resolve(api_key_secret)
    else:
        api_key = settings.api_key

    return {
        "Content-Type": CONTENT_TYPE_JSON,
        "Authorization": f"Bearer {api_key}",
    }

def build_base_payload(prompt: str, model: Optional[str], settings: AiSettings) -> Dict[str, Any]:
    return {
        "model": model if _present(model) else settings.config.model,
        OPEN_AI_REQUEST_FIELD_MESSAGES: [{"role": "user", "content": prompt}],
    }

def parse_overrides(params: str) -> Dict[str, Any]:
    try:
        overrides = json.loads(params, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        logger.debug("Invalid Json in overrides: %s", e)
        raise InvalidJsonError()

    if not isinstance(overrides, dict):
        logger.debug("Invalid Json in overrides: expected an object, got %s", type(overrides).__name__)
        raise InvalidJsonError()
    return overrides

def merge_overrides(payload: Dict[str, Any], params: str) -> Dict[str, Any]:
    """Return a copy of payload with the override members applied in document order.

    The first "messages" member aborts the merge; the partial copy is dropped.
    """
    overrides = parse_overrides(params)

    merged = dict(payload)
    for name, value in overrides.items():
        if name == OPEN_AI_REQUEST_FIELD_MESSAGES:
            logger.debug("'messages' is constructed from 'prompt', cannot be overridden")
            raise MessagesOverrideError()
        merged[name] = value
    return merged

def serialize_payload(payload: Dict[str, Any]) -> str:
    """Compact JSON text that is valid JSON and encodable as UTF-8.

    Overflowing numbers (1e400 -> inf) and lone surrogates are rejected here.
    """
    try:
        text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
        text.encode("utf-8")
    except (ValueError, RecursionError) as e:
        logger.debug("payload cannot be serialized: %s", e)
        raise InvalidJsonError()
    return text

def prepare_request(params: GenerateTextParams, settings: AiSettings, secrets: SecretResolver) -> PreparedRequest:
    endpoint = resolve_endpoint(params.endpoint, settings)
    headers = build_headers(params.api_key_secret, settings, secrets)

    if not _present(params.prompt):
        logger.debug("prompt is null or empty")
        raise InvalidPromptError()

    payload = build_base_payload(params.prompt, params.model, settings)
    if _present(params.params):
        payload = merge_overrides(payload, params.params)

    return PreparedRequest(endpoint=endpoint, headers=headers, payload=serialize_payload(payload))

def render_dry_run(prepared: PreparedRequest) -> str:
    lines = [prepared.endpoint]
    lines.extend(f"{k}: {v}" for k, v in prepared.headers.items())
    lines.append(prepared.payload)
    return "\n".join(lines)
