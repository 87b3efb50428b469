"""AiFunctions: the ai_generate_text scalar function.

Every entry point returns a string. Failures come back as their error text
(see errors.py) instead of raising, so a host engine can call this per row.
"""
from __future__ import annotations

import logging
import time
from typing import Optional

from .config import AiSettings
from .errors import AiFunctionError, ConfigError, SecretResolutionError
from .logging_util import get_logger, log_step, redact_headers
from .request_builder import prepare_request, render_dry_run
from .response import parse_response
from .secret_store import EnvSecretResolver, SecretResolver
from .transport import RequestsTransport, Transport
from .types import AiConfig, GenerateTextParams

logger = get_logger(__name__)

class AiFunctions:
    def __init__(
        self,
        settings: Optional[AiSettings] = None,
        secrets: Optional[SecretResolver] = None,
        transport: Optional[Transport] = None,
    ):
        self.settings = settings or AiSettings()
        self.secrets = secrets or EnvSecretResolver()
        self.transport = transport or RequestsTransport()

    @classmethod
    def from_config(
        cls,
        config: AiConfig,
        secrets: Optional[SecretResolver] = None,
        transport: Optional[Transport] = None,
    ) -> "AiFunctions":
        """Build the function for serving and install the default api key.

        The configured api_key_secret is resolved once, here. Failing to
        resolve it is a startup error.
        """
        fn = cls(AiSettings(config), secrets=secrets, transport=transport)
        if config.api_key_secret:
            try:
                fn.set_api_key(fn.secrets.resolve(config.api_key_secret))
            except SecretResolutionError as e:
                raise ConfigError(f"Failed to resolve default api key: {e.message}")
        return fn

    def set_api_key(self, api_key: str) -> None:
        self.settings.set_api_key(api_key)

    def generate_text(
        self,
        endpoint: Optional[str],
        prompt: Optional[str],
        model: Optional[str],
        api_key_secret: Optional[str],
        params: Optional[str],
    ) -> str:
        """Send 'prompt' to 'endpoint' using 'model', the named api key and JSON 'params' overrides."""
        return self._generate_text_internal(
            GenerateTextParams(
                prompt=prompt,
                endpoint=endpoint,
                model=model,
                api_key_secret=api_key_secret,
                params=params,
            ),
            dry_run=False,
        )

    def generate_text_default(self, prompt: Optional[str]) -> str:
        """Send 'prompt' using the configured endpoint, model and default api key."""
        return self._generate_text_internal(GenerateTextParams(prompt=prompt), dry_run=False)

    def generate_text_dummy(self, prompt: Optional[str]) -> str:
        # Same as generate_text_default; registered separately for isolated tests.
        return self._generate_text_internal(GenerateTextParams(prompt=prompt), dry_run=False)

    def run(self, params: GenerateTextParams, dry_run: bool = False) -> str:
        """Evaluate a prepared parameter set; used by the CLI."""
        return self._generate_text_internal(params, dry_run)

    def _generate_text_internal(self, params: GenerateTextParams, dry_run: bool) -> str:
        """If 'dry_run' is set, the would-be POST request is returned instead of sent."""
        t0 = time.time()
        try:
            log_step(logger, "1", "build request")
            prepared = prepare_request(params, self.settings, self.secrets)
            logger.debug(
                "AI Generate Text: endpoint=%s headers=%s payload=%s",
                prepared.endpoint,
                redact_headers(prepared.headers),
                prepared.payload,
            )

            if dry_run:
                return render_dry_run(prepared)

            log_step(logger, "2", "call endpoint")
            body = self.transport.post(
                prepared.endpoint,
                prepared.payload,
                prepared.headers,
                self.settings.config.connection_timeout_s,
            )
            logger.debug("AI Generate Text: raw response: %r", body)

            log_step(logger, "3", "extract text")
            text = parse_response(body)
            logger.debug(
                "AI Generate Text: response received in %d ms: %s",
                int((time.time() - t0) * 1000),
                text,
            )
            return text

        except AiFunctionError as e:
            level = logging.WARNING if e.caller_error else logging.ERROR
            logger.log(level, "AI Generate Text failed (%s): %s", type(e).__name__, e.message)
            return e.message
