from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .config import settings
from .errors import Conflict, ConnectionFailure, InvalidInput, NotFound
from .logging import RequestIdMiddleware, setup_logging
from .routes.cases import router as cases_router
from .routes.evidence import router as evidence_router
from .routes.geofiles import router as geofiles_router
from .routes.license_plates import router as license_plates_router
from .routes.ob_entries import router as ob_entries_router
from .routes.reports import router as reports_router
from .routes.users import router as users_router
from .routes.vehicles import router as vehicles_router
from .storage.factory import create_storage
from .storage.provider import RecordStorage

logger = structlog.get_logger(__name__)


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception):
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})
    return handler


def create_app(storage: Optional[RecordStorage] = None) -> FastAPI:
    """
    Build the API around a storage backend.
    When ``storage`` is not given the backend is chosen from settings
    (database with in-memory fallback).
    """
    setup_logging()
    app = FastAPI(title=settings.app_name)
    app.state.storage = storage or create_storage(settings)

    # Middlewares
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Storage errors
    app.add_exception_handler(NotFound, _error_handler(404))
    app.add_exception_handler(Conflict, _error_handler(409))
    app.add_exception_handler(InvalidInput, _error_handler(400))
    app.add_exception_handler(ConnectionFailure, _error_handler(503))

    # Routers
    app.include_router(users_router)
    app.include_router(cases_router)
    app.include_router(ob_entries_router)
    app.include_router(evidence_router)
    app.include_router(reports_router)
    app.include_router(license_plates_router)
    app.include_router(geofiles_router)
    app.include_router(vehicles_router)

    # Metrics
    Instrumentator().instrument(app).expose(app)

    @app.get("/health")
    def health():
        return {"status": "ok", "storage": app.state.storage.backend_name}

    @app.on_event("shutdown")
    def _shutdown():
        app.state.storage.close()
        logger.info("storage_closed", backend=app.state.storage.backend_name)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("rms.main:create_app", factory=True, host=settings.host, port=settings.port)
