"""Command-line entry point."""

import argparse
import asyncio
from typing import List

import structlog

from .config import get_settings
from .gateway import RAGGateway, build_gateway
from .log import configure_logging
from .mcp_transport import run_stdio


logger = structlog.get_logger("cli")

EXIT_OK = 0
EXIT_STARTUP_FAILURE = 1


async def _serve_stdio(gateway: RAGGateway) -> None:
    try:
        await run_stdio(gateway)
    finally:
        await gateway.aclose()


def _serve_http(gateway: RAGGateway, host: str, port: int, log_level: str) -> bool:
    import uvicorn

    from .main import create_app

    config = uvicorn.Config(create_app(gateway), host=host, port=port, log_level=log_level.lower())
    server = uvicorn.Server(config)
    # The app lifespan closes the gateway on shutdown
    server.run()
    return server.started


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    ap = argparse.ArgumentParser(
        prog="rag-gateway",
        description="Serve a retrieval pipeline as MCP tools and resources.",
    )
    ap.add_argument("--transport", choices=["stdio", "http"], default="stdio")
    ap.add_argument("--host", default=settings.HTTP_HOST)
    ap.add_argument("--port", type=int, default=settings.HTTP_PORT)
    ap.add_argument("--log-level", default=settings.MCP_LOG_LEVEL)
    ap.add_argument("--log-json", action="store_true", default=settings.LOG_JSON)
    return ap


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, json=args.log_json)

    try:
        gateway = build_gateway()
    except Exception as e:
        logger.error("server_start_failed", error=str(e), exc_info=True)
        return EXIT_STARTUP_FAILURE

    logger.info("server_started", transport=args.transport)
    try:
        if args.transport == "http":
            if not _serve_http(gateway, args.host, args.port, args.log_level):
                logger.error("server_start_failed", transport="http", host=args.host, port=args.port)
                return EXIT_STARTUP_FAILURE
        else:
            asyncio.run(_serve_stdio(gateway))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.error("server_failed", error=str(e), exc_info=True)
        return EXIT_STARTUP_FAILURE

    return EXIT_OK
