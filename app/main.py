import os
from contextlib import asynccontextmanager

import logfire
import sentry_sdk

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config.config import settings
from app.database.database import engine, get_db, get_db_context, init_models
from app.repositories.memory import InMemoryRepository
from app.repositories.seed import seed_demo_data
from app.repositories.sql import SqlRepository
from app.routes import (
    auth_routes,
    complaint_routes,
    credit_routes,
    report_routes,
    stats_routes,
    user_routes,
    worker_routes,
)
from app.schemas.status_schema import StorageBackend
from app.utils.limiter import limiter
from app.utils.logger_config import setup_logger
from app.utils.middleware import MaxRequestSizeMiddleware


logger = setup_logger()

os.makedirs(settings.UPLOAD_DIR, exist_ok=True)


@asynccontextmanager
async def lifespan(application: FastAPI):
    logger.info(f"Initializing application with {settings.BACKEND} backend...")

    if settings.BACKEND == StorageBackend.DATABASE.value:
        await init_models()
        logger.info("Database connection successful")
        if settings.SEED_DEMO_DATA:
            async with get_db_context() as db:
                await seed_demo_data(SqlRepository(db))
    else:
        repository = InMemoryRepository()
        if settings.SEED_DEMO_DATA:
            await seed_demo_data(repository)
        application.state.repository = repository

    logger.info(f"{settings.APP_NAME} ready on port {settings.PORT}")

    try:
        yield
    finally:
        logger.info("Cleaning up resources...")
        await engine.dispose()
        logger.info("Cleanup complete")


if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        send_default_pii=False,
        traces_sample_rate=1.0,
    )


app = FastAPI(
    title=settings.APP_NAME,
    lifespan=lifespan,
    debug=settings.DEBUG,
    summary="Municipal waste reporting: complaints, collectors, eco-credits and rewards.",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Something went wrong. Please try again later."},
    )


if settings.LOGFIRE_TOKEN:
    logfire.configure(service_name=settings.APP_NAME, token=settings.LOGFIRE_TOKEN)
    logfire.instrument_fastapi(app=app)
    logfire.instrument_sqlalchemy(engine=engine)


app.add_middleware(MaxRequestSizeMiddleware, max_size=settings.MAX_REQUEST_SIZE)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.get("/")
def read_root():
    return {"message": f"Welcome to {settings.APP_NAME} API"}


@app.get("/api/health", tags=["Health Status"])
def api_health_check() -> dict:
    """Check the status of the API"""
    return {"status": "OK", "message": "API up and running", "backend": settings.BACKEND}


@app.get("/api/db", tags=["Health Status"])
async def check_db_health(db: AsyncSession = Depends(get_db)):
    """Check database connectivity"""
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "database": "disconnected"}


app.include_router(auth_routes.router)
app.include_router(complaint_routes.router)
app.include_router(report_routes.router)
app.include_router(user_routes.router)
app.include_router(credit_routes.router)
app.include_router(worker_routes.router)
app.include_router(stats_routes.router)
