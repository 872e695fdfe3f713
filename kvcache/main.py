# kvcache/main.py

from contextlib import asynccontextmanager
import logging
import time
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from kvcache.config import ACCESS_LOG, HOST, LOG_LEVEL, PORT
from kvcache.routers import commands
from kvcache.routers.commands import MalformedBody
from kvcache.services.errors import CacheError
from kvcache.services.store import Store

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app(store: Optional[Store] = None) -> FastAPI:
    """
    Build the HTTP application around a store instance.
    The app owns the store's pending expirations: they are cancelled on shutdown.
    """
    store = store if store is not None else Store()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("kvcache starting (keys=%d)", len(store))
        try:
            yield
        finally:
            # Shutdown: drop timers that have not fired yet
            store.close()

    app = FastAPI(title="kvcache", lifespan=lifespan)
    app.state.store = store
    app.include_router(commands.router)

    @app.exception_handler(CacheError)
    async def cache_error_handler(request: Request, exc: CacheError):
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(MalformedBody)
    async def malformed_body_handler(request: Request, exc: MalformedBody):
        content = {"error": str(exc)}
        if exc.validation_errors:
            content["validationErrors"] = exc.validation_errors
        return JSONResponse(status_code=400, content=content)

    @app.exception_handler(Exception)
    async def recover(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "internal server error"})

    if ACCESS_LOG:
        @app.middleware("http")
        async def access_log(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            logger.info(
                "%s %s -> %d (%.1f ms)",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
            return response

    @app.get("/health")
    def health_check():
        return {"status": "ok", "keys": len(store)}

    return app


app = create_app()


def run() -> None:
    """Serve the default app (console script `kvcache`)."""
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
