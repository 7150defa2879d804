"""Newline-delimited JSON-RPC over standard input and output."""

import json
import sys
from typing import Any

import anyio
import structlog

from .service import DispatchContext, parse_error_response


logger = structlog.get_logger(__name__)


async def _write_message(stdout: Any, message: dict[str, Any]) -> None:
    await stdout.write(json.dumps(message, separators=(",", ":")) + "\n")
    await stdout.flush()


async def serve_stdio(
    context: DispatchContext,
    stdin: Any = None,
    stdout: Any = None,
) -> None:
    """Serve one client over stdin/stdout until end of input.

    Each line is one JSON-RPC message. Messages are handled one at a time
    and responses are written in order. Stdout carries protocol frames only;
    logs go to stderr.

    Args:
        context: Protocol endpoint for the channel.
        stdin: Async text stream to read; defaults to the process stdin.
        stdout: Async text stream to write; defaults to the process stdout.
    """
    if stdin is None:
        stdin = anyio.wrap_file(sys.stdin)
    if stdout is None:
        stdout = anyio.wrap_file(sys.stdout)

    logger.info("stdio_transport_started")
    async for line in stdin:
        line = line.strip()
        if not line:
            continue

        try:
            message = json.loads(line)
        except json.JSONDecodeError:
            logger.warning("stdio_parse_error", length=len(line))
            await _write_message(stdout, parse_error_response())
            continue

        response = await context.handle_message(message)
        if response is not None:
            await _write_message(stdout, response)

    logger.info("stdio_transport_closed")
