# localfix/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from localfix.api.routes import admin as admin_router
from localfix.api.routes import auth as auth_router
from localfix.api.routes import bookings as bookings_router
from localfix.api.routes import categories as categories_router
from localfix.api.routes import providers as providers_router
from localfix.api.routes import reviews as reviews_router
from localfix.core.config import API_VERSION, CORS_ORIGINS, LOG_LEVEL, PROJECT_NAME, SEED_ON_STARTUP
from localfix.core.errors import AppError
from localfix.core.logging_config import setup_logging
from localfix.core.sessions import SessionStore
from localfix.db.base import SessionLocal, init_db
from localfix.db.seed import seed
from localfix.repositories.sql import SqlStorage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    init_db()
    db = SessionLocal()
    try:
        storage = SqlStorage(db)
        if SEED_ON_STARTUP:
            seed(storage)
        SessionStore(storage).purge_expired()
    finally:
        db.close()
    yield
    logger.info("Application shutting down...")


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Validation error for %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"message": "Validation failed", "details": jsonable_encoder(exc.errors())},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app() -> FastAPI:
    setup_logging(LOG_LEVEL)

    app = FastAPI(title=PROJECT_NAME, version=API_VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(auth_router.router)
    app.include_router(categories_router.router)
    app.include_router(providers_router.router)
    app.include_router(bookings_router.router)
    app.include_router(reviews_router.router)
    app.include_router(admin_router.router)

    return app


app = create_app()
