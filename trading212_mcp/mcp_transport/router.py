"""Streamable HTTP transport for the MCP protocol."""

import asyncio
import json
from typing import Any

import structlog
from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse, StreamingResponse

from .schemas import MCPErrorCodes
from .service import DispatchContext, error_message
from .sessions import Session, SessionManager


logger = structlog.get_logger(__name__)

SESSION_HEADER = "mcp-session-id"
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": f"Content-Type, {SESSION_HEADER}",
    "Access-Control-Expose-Headers": SESSION_HEADER,
}
NO_SESSION_MESSAGE = "No valid session. Send a POST to initialize."
UNKNOWN_SESSION_MESSAGE = "No valid session. The session may have been closed; re-initialize."

STREAM_POLL_SECONDS = 1.0
STREAM_PING_SECONDS = 15.0


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=CORS_HEADERS)


def _message_response(message: dict[str, Any], session_id: str | None = None) -> JSONResponse:
    headers = dict(CORS_HEADERS)
    if session_id is not None:
        headers[SESSION_HEADER] = session_id
    return JSONResponse(status_code=200, content=message, headers=headers)


def _accepted(session_id: str | None = None) -> Response:
    headers = dict(CORS_HEADERS)
    if session_id is not None:
        headers[SESSION_HEADER] = session_id
    return Response(status_code=202, headers=headers)


def _session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


def _context_factory(request: Request):
    state = request.app.state

    def factory() -> DispatchContext:
        return DispatchContext(catalog=state.catalog, client=state.broker_client)

    return factory


def _lookup_session(request: Request) -> tuple[Session | None, JSONResponse | None]:
    """Resolve the session header to a live session or an error response."""
    session_id = request.headers.get(SESSION_HEADER)
    if not session_id:
        return None, _error_response(400, NO_SESSION_MESSAGE)
    session = _session_manager(request).get(session_id)
    if session is None:
        return None, _error_response(404, UNKNOWN_SESSION_MESSAGE)
    return session, None


async def _read_message(request: Request) -> tuple[Any, JSONResponse | None]:
    body = await request.body()
    try:
        return json.loads(body), None
    except (json.JSONDecodeError, UnicodeDecodeError):
        response = JSONResponse(
            status_code=400,
            content=error_message(None, MCPErrorCodes.PARSE_ERROR, "Parse error"),
            headers=CORS_HEADERS,
        )
        return None, response


def _is_initialize(message: Any) -> bool:
    return isinstance(message, dict) and message.get("method") == "initialize"


async def _initialize_session(request: Request, message: Any) -> Response:
    """Open a session for an initialize request that carries no session id."""
    sessions = _session_manager(request)
    session = sessions.create(_context_factory(request))
    response = await session.context.handle_message(message)

    if response is None:
        # initialize sent as a notification; nothing to bind the session to
        sessions.close(session.session_id)
        return _accepted()
    if "error" in response:
        sessions.close(session.session_id)
        return _message_response(response)
    return _message_response(response, session_id=session.session_id)


async def _stream_events(request: Request, session: Session):
    # Server-to-client stream; this server sends nothing but keepalives.
    yield ": connected\n\n"
    since_ping = 0.0
    try:
        while session.is_open:
            if await request.is_disconnected():
                break
            await asyncio.sleep(STREAM_POLL_SECONDS)
            since_ping += STREAM_POLL_SECONDS
            if since_ping >= STREAM_PING_SECONDS:
                since_ping = 0.0
                yield ": ping\n\n"
    except asyncio.CancelledError:
        pass
    logger.debug("mcp_stream_closed", session_id=session.session_id)


def build_router(path: str = "/mcp") -> APIRouter:
    """Build the MCP endpoint router mounted at ``path``."""
    router = APIRouter(prefix="", tags=["mcp"])

    @router.options(path, operation_id="mcp_options")
    async def mcp_options() -> Response:
        """CORS preflight."""
        return Response(status_code=204, headers=CORS_HEADERS)

    @router.post(path, operation_id="mcp_post")
    async def mcp_post(request: Request) -> Response:
        """Handle one JSON-RPC message."""
        session_id = request.headers.get(SESSION_HEADER)

        if not session_id:
            message, parse_error = await _read_message(request)
            if parse_error is not None:
                return parse_error
            if not _is_initialize(message):
                return _error_response(400, NO_SESSION_MESSAGE)
            return await _initialize_session(request, message)

        session, lookup_error = _lookup_session(request)
        if lookup_error is not None:
            return lookup_error

        message, parse_error = await _read_message(request)
        if parse_error is not None:
            return parse_error

        response = await session.context.handle_message(message)
        if response is None:
            return _accepted(session.session_id)
        return _message_response(response, session_id=session.session_id)

    @router.get(path, operation_id="mcp_get")
    async def mcp_get(request: Request) -> Response:
        """Open the server-to-client event stream for a session."""
        session, lookup_error = _lookup_session(request)
        if lookup_error is not None:
            return lookup_error

        headers = dict(CORS_HEADERS)
        headers.update({
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            SESSION_HEADER: session.session_id,
        })
        return StreamingResponse(
            _stream_events(request, session),
            media_type="text/event-stream",
            headers=headers,
        )

    @router.delete(path, operation_id="mcp_delete")
    async def mcp_delete(request: Request) -> Response:
        """Terminate a session."""
        session, lookup_error = _lookup_session(request)
        if lookup_error is not None:
            return lookup_error

        _session_manager(request).close(session.session_id)
        return Response(status_code=204, headers=CORS_HEADERS)

    return router
