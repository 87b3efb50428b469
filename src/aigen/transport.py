"""HTTP transport for the chat.completions POST.

One attempt per call, bounded by the configured timeout. No retry.
"""
from __future__ import annotations

from typing import Mapping

import requests

from .errors import TransportError

class Transport:
    def post(self, url: str, body: str, headers: Mapping[str, str], timeout_s: int) -> bytes:
        raise NotImplementedError

class RequestsTransport(Transport):
    def __init__(self, error_body_limit: int = 800):
        self.error_body_limit = error_body_limit

    def post(self, url: str, body: str, headers: Mapping[str, str], timeout_s: int) -> bytes:
        try:
            r = requests.post(url, headers=dict(headers), data=body.encode("utf-8"), timeout=timeout_s)
        except requests.RequestException as e:
            raise TransportError(f"request failed: {e}")
        except UnicodeEncodeError as e:
            # http.client encodes header values as latin-1.
            raise TransportError(f"request failed: {e}")

        if not 200 <= r.status_code < 300:
            raise TransportError(f"http {r.status_code}: {r.text[: self.error_body_limit]}")

        return r.content
