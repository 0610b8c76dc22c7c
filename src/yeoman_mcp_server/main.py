"""Entry point for the Yeoman MCP server."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from yeoman_mcp_server.config import ServerConfig
from yeoman_mcp_server.fastmcp_adapter import build_fastmcp_app
from yeoman_mcp_server.services import build_services
from yeoman_mcp_server.tooling import build_catalog
from yeoman_mcp_server.tools import build_tools

logger = logging.getLogger(__name__)

TRANSPORTS = ("stdio", "http", "sse", "streamable-http")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the server."""
    parser = argparse.ArgumentParser(description="Yeoman MCP server")
    parser.add_argument(
        "--generator-dir",
        type=Path,
        default=None,
        help=(
            "Persistent directory for installed generators. Defaults to "
            "$YEOMAN_MCP_GENERATOR_DIR; a temporary directory per call if unset."
        ),
    )
    parser.add_argument("--transport", choices=TRANSPORTS, default="stdio")
    parser.add_argument("--host", default=None, help="Bind host for HTTP transports")
    parser.add_argument(
        "--port", type=int, default=None, help="Bind port for HTTP transports"
    )
    parser.add_argument("--path", default=None, help="URL path for HTTP transports")
    parser.add_argument(
        "--run-timeout",
        type=float,
        default=None,
        help="Seconds a generator may run before it is killed",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity (logs go to stderr)",
    )
    parser.add_argument("--catalog", action="store_true", help="Print the tool catalog")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and serve the Yeoman tools over MCP."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = ServerConfig.from_env(
        generator_dir=args.generator_dir, run_timeout=args.run_timeout
    )
    services = build_services(config)

    if args.catalog:
        print(json.dumps(build_catalog(build_tools(services)), indent=2))
        return 0

    app, _ = build_fastmcp_app(services)
    run_kwargs: dict[str, object] = {}
    if args.transport != "stdio":
        for key in ("host", "port", "path"):
            value = getattr(args, key)
            if value is not None:
                run_kwargs[key] = value
    if config.generator_dir is not None:
        logger.info("Using persistent generator directory %s", config.generator_dir)
    app.run(transport=args.transport, **run_kwargs)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
