from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import get_settings
from .exceptions import RAGGatewayError
from .gateway import RAGGateway, build_gateway
from .mcp_transport.http import router as mcp_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: build the gateway unless one was injected (tests, CLI)
    owns_gateway = getattr(app.state, "gateway", None) is None
    if owns_gateway:
        app.state.gateway = build_gateway()

    yield

    # Shutdown: release the pipeline's connections
    await app.state.gateway.aclose()
    if owns_gateway:
        del app.state.gateway


def create_app(gateway: RAGGateway | None = None) -> FastAPI:
    """Build the HTTP application.

    Args:
        gateway: Pre-built gateway; when omitted the lifespan builds one
            from settings.
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        debug=settings.DEBUG
    )
    if gateway is not None:
        app.state.gateway = gateway

    # Global exception handlers
    @app.exception_handler(RAGGatewayError)
    async def gateway_exception_handler(request: Request, exc: RAGGatewayError):
        return JSONResponse(
            status_code=500,
            content={"error": exc.code, "message": exc.message}
        )

    @app.get("/health")
    async def health_check(request: Request):
        body = {"status": "ok", "app": settings.APP_NAME}
        gateway = getattr(request.app.state, "gateway", None)
        if gateway is not None:
            body["pipeline"] = gateway.gate.state.value
        return body

    # Include routers
    app.include_router(mcp_router)

    return app


app = create_app()
