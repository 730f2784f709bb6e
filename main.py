from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging

from config import Settings, get_settings, configure_logging
from core.registry import LobbyRegistry
from core.lobby_manager import LobbyManager
from core.reaper import LobbyReaper
from api import lobbies

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: 啟動過期大廳回收器
    app.state.reaper.start()
    yield
    # Shutdown: 停止回收器
    app.state.reaper.stop()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Lobby Rendezvous API",
        description="HTTP polling lobby server for up to 12 players per lobby",
        version="1.0.0",
        lifespan=lifespan
    )

    # 每個 app 各自擁有 registry，測試之間互不影響
    registry = LobbyRegistry()
    app.state.settings = settings
    app.state.registry = registry
    app.state.lobby_manager = LobbyManager(
        registry,
        capacity=settings.lobby_capacity,
        max_attempts=settings.max_generation_attempts,
        max_name_length=settings.max_name_length
    )
    app.state.reaper = LobbyReaper(
        registry,
        ttl_seconds=settings.lobby_ttl_seconds,
        interval_seconds=settings.sweep_interval_seconds
    )

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(RequestValidationError)
    async def bad_request_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Bad request on {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "Bad request"})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # 未知路徑或錯誤的 method 一律視為 404
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "Not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    app.include_router(lobbies.router)

    @app.options("/{path:path}", include_in_schema=False)
    def options_ok(path: str):
        # 沒帶 CORS preflight header 的 OPTIONS 也直接回 200
        return Response(status_code=200)

    @app.get("/")
    def root():
        return {"message": "Lobby Rendezvous API", "status": "ok"}

    @app.get("/health")
    def health():
        return {"status": "healthy", "lobbies": app.state.lobby_manager.lobby_count()}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    logger.info(f"Server running on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
