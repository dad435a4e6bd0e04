"""Run the gateway with uvicorn.

Usage:
    uv run python -m workers_gateway --config my_config.yaml
"""

from __future__ import annotations

import argparse

import uvicorn

from .config_loader import load_config
from .main import create_app
from .settings import GatewaySettings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="OpenAI-compatible gateway for Workers AI")
    parser.add_argument("--config", help="Path to the YAML config file")
    parser.add_argument("--env-file", help="Path to the .env file used for substitution")
    parser.add_argument("--host", help="Bind host (overrides config)")
    parser.add_argument("--port", type=int, help="Bind port (overrides config)")
    args = parser.parse_args(argv)

    config = load_config(args.config, env_path=args.env_file)
    settings = GatewaySettings.from_config(config)
    app = create_app(config)

    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
