import sys
from contextlib import asynccontextmanager

import anyio
import httpx
import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .broker import Trading212Client
from .config import Settings, get_settings
from .exceptions import AuthError
from .logging_config import configure_logging
from .mcp_transport import CORS_HEADERS, DispatchContext, SessionManager, build_router, serve_stdio
from .middleware import MaxBodySizeMiddleware
from .registry import ToolCatalog, get_catalog


logger = structlog.get_logger(__name__)


def _build_client(settings: Settings, http_client: httpx.AsyncClient) -> Trading212Client:
    return Trading212Client(
        api_key=settings.TRADING212_API_KEY,
        http_client=http_client,
        environment=settings.TRADING212_ENVIRONMENT,
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
    )


def create_app(
    settings: Settings | None = None,
    client: Trading212Client | None = None,
    catalog: ToolCatalog | None = None,
) -> FastAPI:
    """Build the streamable HTTP application.

    Args:
        settings: Settings override, process settings if not provided.
        client: Pre-built Trading 212 client; one is created at startup
            around a pooled ``httpx.AsyncClient`` otherwise.
        catalog: Tool catalog override, the packaged catalog if not provided.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # timeout=None leaves timeouts to the per-request setting
        http_client: httpx.AsyncClient | None = None
        if app.state.broker_client is None:
            http_client = httpx.AsyncClient(timeout=None)
            app.state.broker_client = _build_client(settings, http_client)

        logger.info(
            "server_started",
            transport="streamable-http",
            environment=settings.TRADING212_ENVIRONMENT,
            version=__version__,
            path=settings.TRADING212_MCP_PATH,
        )

        yield

        app.state.sessions.close_all()
        if http_client is not None:
            await http_client.aclose()
        logger.info("server_stopped", transport="streamable-http")

    app = FastAPI(
        title=settings.APP_NAME,
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.sessions = SessionManager()
    app.state.catalog = catalog or get_catalog()
    app.state.broker_client = client

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content={"error": "Not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "transport": "streamable-http"}

    app.include_router(build_router(settings.TRADING212_MCP_PATH))
    app.add_middleware(
        MaxBodySizeMiddleware,
        max_body_size=settings.MAX_BODY_BYTES,
        headers=CORS_HEADERS,
    )

    return app


async def run_stdio(settings: Settings, catalog: ToolCatalog | None = None) -> None:
    """Serve a single client over stdin/stdout until end of input."""
    async with httpx.AsyncClient(timeout=None) as http_client:
        context = DispatchContext(
            catalog=catalog or get_catalog(),
            client=_build_client(settings, http_client),
        )
        logger.info(
            "server_started",
            transport="stdio",
            environment=settings.TRADING212_ENVIRONMENT,
            version=__version__,
        )
        await serve_stdio(context)


def main() -> None:
    """Console entry point."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    if not settings.TRADING212_API_KEY:
        logger.critical("startup_failed", error=AuthError.missing_api_key().message)
        sys.exit(1)

    try:
        if settings.TRADING212_TRANSPORT == "http":
            uvicorn.run(
                create_app(settings),
                host=settings.TRADING212_MCP_HOST,
                port=settings.TRADING212_MCP_PORT,
                log_config=None,
            )
        else:
            anyio.run(run_stdio, settings)
    except KeyboardInterrupt:
        logger.info("server_stopped", reason="interrupted")
    except Exception as e:
        logger.critical("transport_failed", transport=settings.TRADING212_TRANSPORT, error=str(e), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
