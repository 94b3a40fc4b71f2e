"""Newline-delimited JSON-RPC over stdin/stdout."""

import asyncio
import json
import sys
from typing import Any, Callable

import structlog

from rag_gateway.gateway import RAGGateway

from .schemas import MCPErrorCodes, MCPJSONRPCResponse
from .service import process_message


logger = structlog.get_logger("mcp_transport.stdio")

# Batch indexing requests carry whole documents on one line
MAX_MESSAGE_BYTES = 32 * 1024 * 1024


def _write_stdout(line: str) -> None:
    sys.stdout.write(line)
    sys.stdout.flush()


class StdioTransport:
    """Serves the protocol over a line-oriented stream pair.

    Each request runs in its own task, so a slow pipeline call does not hold
    up the requests behind it. Every response is written as one complete
    line.
    """

    def __init__(self, gateway: RAGGateway, write: Callable[[str], None] = _write_stdout):
        self.gateway = gateway
        self._write = write
        self._tasks: set[asyncio.Task] = set()

    def _send(self, message: dict[str, Any]) -> None:
        self._write(json.dumps(message) + "\n")

    def _send_parse_error(self, message: str = "Invalid JSON") -> None:
        self._send(MCPJSONRPCResponse(
            id=None,
            error={"code": MCPErrorCodes.PARSE_ERROR, "message": message},
        ).to_wire())

    async def _handle_line(self, line: str) -> None:
        try:
            body = json.loads(line)
        except json.JSONDecodeError:
            self._send_parse_error()
            return

        response = await process_message(self.gateway, body)
        if response is not None:
            self._send(response.to_wire())

    async def serve(self, reader: asyncio.StreamReader) -> None:
        """Read messages until EOF, then wait for in-flight requests."""
        while True:
            try:
                line = await reader.readline()
            except ValueError:
                # readline drops the oversized line before raising
                logger.warning("message_too_large")
                self._send_parse_error("Message too large")
                continue
            if not line:
                break  # stdin closed

            try:
                line_str = line.decode("utf-8").strip()
            except UnicodeDecodeError:
                self._send_parse_error("Message is not valid UTF-8")
                continue
            if not line_str:
                continue

            task = asyncio.create_task(self._handle_line(line_str))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        if self._tasks:
            await asyncio.gather(*self._tasks)
        logger.info("stdin_closed")


async def open_stdin_reader() -> asyncio.StreamReader:
    """Wrap the process stdin in an asyncio StreamReader."""
    reader = asyncio.StreamReader(limit=MAX_MESSAGE_BYTES)
    protocol = asyncio.StreamReaderProtocol(reader)
    await asyncio.get_running_loop().connect_read_pipe(lambda: protocol, sys.stdin)
    return reader


async def run_stdio(gateway: RAGGateway) -> None:
    """Serve the gateway on stdin/stdout until stdin closes."""
    reader = await open_stdin_reader()
    await StdioTransport(gateway).serve(reader)
