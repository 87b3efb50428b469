"""Logging utilities.

Key goal:
- Each phase logs clearly so the caller can locate failures quickly.
- Keep logging config minimal; allow integration into the host engine's logging if needed.
- Never let a bearer token reach a log line.
"""
from __future__ import annotations

import logging
import os
from typing import Dict, Mapping

_DEFAULT_LEVEL = os.environ.get("AIGEN_LOG_LEVEL", "INFO").upper()

def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    # If already configured elsewhere, do not attach handlers again.
    if logger.handlers:
        return logger

    logger.setLevel(_DEFAULT_LEVEL)

    h = logging.StreamHandler()
    fmt = logging.Formatter("[%(levelname)s] %(name)s:%(lineno)d - %(message)s")
    h.setFormatter(fmt)
    logger.addHandler(h)

    return logger

def log_step(logger: logging.Logger, step: str, msg: str):
    logger.debug("[STEP %s] %s", step, msg)

def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for k, v in headers.items():
        if k.lower() == "authorization":
            scheme = v.split(" ", 1)[0] if v else ""
            out[k] = f"{scheme} ***" if scheme else "***"
        else:
            out[k] = v
    return out
