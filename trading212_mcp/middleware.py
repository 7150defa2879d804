"""ASGI middleware for the HTTP transport."""

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send


TOO_LARGE_BODY = {"error": "Request body too large"}


class BodyTooLargeError(Exception):
    """Raised when a streamed request body passes the size limit."""


class MaxBodySizeMiddleware:
    """Reject requests whose body exceeds ``max_body_size`` bytes with 413.

    The declared Content-Length is checked first; bodies without one are
    counted while the application reads them. ``headers`` are added to the
    rejection so browser clients can read it.
    """

    def __init__(self, app: ASGIApp, max_body_size: int, headers: dict[str, str] | None = None) -> None:
        self.app = app
        self.max_body_size = max_body_size
        self.headers = headers or {}

    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        response = JSONResponse(status_code=413, content=TOO_LARGE_BODY, headers=self.headers)
        await response(scope, receive, send)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        for header, value in scope.get("headers", []):
            if header == b"content-length":
                try:
                    declared = int(value)
                except ValueError:
                    declared = self.max_body_size + 1
                if declared > self.max_body_size:
                    await self._reject(scope, receive, send)
                    return

        received = 0

        async def counting_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    raise BodyTooLargeError()
            return message

        try:
            await self.app(scope, counting_receive, send)
        except BodyTooLargeError:
            await self._reject(scope, receive, send)
