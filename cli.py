"""Simple CLI for ai_generate_text.

Usage examples:
- Prompt only (configured endpoint/model/api key):
  python cli.py "Summarize: ..."

- Full parameters:
  python cli.py "hello" --endpoint https://api.openai.com/v1/chat/completions \
      --model gpt-4o-mini --api-key-secret openai-api-key --params "{\"temperature\":0.2}"

- Overrides from a file (prefix with @):
  python cli.py "hello" --params @overrides.json

- Show the request instead of sending it:
  python cli.py "hello" --dry-run

Notes:
- This CLI does not manage multi-turn or retries. It is strictly a single call executor.
- Secrets are looked up in --keystore (if given) and then in the environment.
"""
import argparse
import sys
from pathlib import Path
from typing import Optional

from src.aigen.config import load_config
from src.aigen.errors import ConfigError
from src.aigen.functions import AiFunctions
from src.aigen.logging_util import get_logger
from src.aigen.secret_store import ChainedSecretResolver, EnvSecretResolver, YamlKeystoreResolver
from src.aigen.types import GenerateTextParams

logger = get_logger(__name__)

def _load_params(value: Optional[str]) -> Optional[str]:
    if value and value.startswith("@"):
        return Path(value[1:]).read_text(encoding="utf-8")
    return value

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("prompt", help="Prompt text")
    ap.add_argument("--endpoint", default=None, help="https endpoint (default: configured)")
    ap.add_argument("--model", default=None, help="Model name (default: configured)")
    ap.add_argument("--api-key-secret", default=None, help="Secret name holding the api key")
    ap.add_argument("--params", default=None, help="JSON object overrides or @path/to/json")
    ap.add_argument("--config", default=None, help="Path to aigen.yaml")
    ap.add_argument("--keystore", default=None, help="Path to a YAML keystore")
    ap.add_argument("--dry-run", action="store_true", help="Print the request instead of sending it")
    args = ap.parse_args()

    resolvers = [EnvSecretResolver()]
    if args.keystore:
        resolvers.insert(0, YamlKeystoreResolver(args.keystore))

    try:
        params = _load_params(args.params)
        fn = AiFunctions.from_config(load_config(args.config), secrets=ChainedSecretResolver(resolvers))
    except (OSError, ConfigError) as e:
        logger.error("Startup failed: %s", e)
        sys.exit(2)

    req = GenerateTextParams(
        prompt=args.prompt,
        endpoint=args.endpoint,
        model=args.model,
        api_key_secret=args.api_key_secret,
        params=params,
    )
    print(fn.run(req, dry_run=args.dry_run))

if __name__ == "__main__":
    main()
