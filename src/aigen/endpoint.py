"""Endpoint checks for the external text generation service.

Design:
- An explicitly supplied endpoint must use https.
- Only OpenAI hosts are supported, in both public and Azure hosted forms.
- Host matching is a case-insensitive substring test, not URL parsing.
  Tenant subdomains (e.g. "<resource>.openai.azure.com") pass as-is.
  This is a sanity check, not trust enforcement: "https://api.openai.com.example.net"
  is accepted too.
"""
from __future__ import annotations

from typing import Tuple

AI_API_ENDPOINT_PREFIX = "https://"

OPEN_AI_AZURE_ENDPOINT = "openai.azure.com"
OPEN_AI_PUBLIC_ENDPOINT = "api.openai.com"

SUPPORTED_HOST_FRAGMENTS: Tuple[str, ...] = (OPEN_AI_AZURE_ENDPOINT, OPEN_AI_PUBLIC_ENDPOINT)

def is_api_endpoint_valid(endpoint: str) -> bool:
    return endpoint[: len(AI_API_ENDPOINT_PREFIX)].lower() == AI_API_ENDPOINT_PREFIX

def is_api_endpoint_supported(endpoint: str) -> bool:
    s = endpoint.lower()
    return any(fragment in s for fragment in SUPPORTED_HOST_FRAGMENTS)
