"""Generated text extraction from a chat.completions response.

Only choices[0].message.content is read. Anything else about the envelope
(usage, finish_reason, extra choices) is ignored.
"""
from __future__ import annotations

import json
from typing import Any

from .errors import ResponseParseError
from .logging_util import get_logger

logger = get_logger(__name__)

OPEN_AI_RESPONSE_FIELD_CHOICES = "choices"
OPEN_AI_RESPONSE_FIELD_MESSAGE = "message"
OPEN_AI_RESPONSE_FIELD_CONTENT = "content"

def extract_content(document: Any) -> str:
    """Walk choices[0].message.content; any missing step or wrong type gives ""."""
    if not isinstance(document, dict):
        return ""

    choices = document.get(OPEN_AI_RESPONSE_FIELD_CHOICES)
    if not isinstance(choices, list) or not choices:
        return ""

    first = choices[0]
    if not isinstance(first, dict):
        return ""

    message = first.get(OPEN_AI_RESPONSE_FIELD_MESSAGE)
    if not isinstance(message, dict):
        return ""

    content = message.get(OPEN_AI_RESPONSE_FIELD_CONTENT)
    if not isinstance(content, str):
        return ""
    return content

def parse_response(body: bytes) -> str:
    try:
        document = json.loads(body)
    except (ValueError, RecursionError) as e:
        logger.debug("response is not JSON (%s): %r", e, body[:800])
        raise ResponseParseError()

    text = extract_content(document)
    if not text:
        logger.debug("no content in response: %r", body[:800])
        raise ResponseParseError()
    return text
