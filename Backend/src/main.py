# -*- coding: utf-8 -*-
"""
FastAPI entry point of the LearnHub exam service.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.v1.enrollment import router as enrollment_router
from src.api.v1.exams import router as exams_router
from src.api.v1.progress import router as progress_router
from src.clients.database_client import check_db_connection, init_db
from src.config.logger import configure_logger, get_system_logger
from src.config.settings import settings
from src.config.uvicorn_config import setup_uvicorn_logging
from src.service.cache_service import cache_service
from src.utils.exceptions import APIException

logger = configure_logger(__name__)
system_logger = get_system_logger()

app = FastAPI(
    title="LearnHub API",
    description="Exam attempts, course progress and enrollments of LearnHub",
    version="0.1.0",
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
    openapi_url="/api/v1/openapi.json",
    openapi_tags=[
        {"name": "Exams - Active attempt", "description": "Start or resume an exam"},
        {"name": "Exams - Submit", "description": "Grade and close an attempt"},
        {"name": "Exams - Status", "description": "Latest submitted attempt"},
        {"name": "Exams - History", "description": "Submitted attempts of the caller"},
        {
            "name": "Exams - Admin - History",
            "description": "Submitted attempts of every user",
        },
        {"name": "Progress", "description": "Completed lessons and exams"},
        {"name": "Enrollments", "description": "Joining and leaving courses"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.get_cors_methods(),
    allow_headers=settings.get_cors_headers(),
)


@app.middleware("http")
async def log_all_requests(request: Request, call_next):
    is_api = request.url.path.startswith("/api/")
    if is_api:
        logger.info(f"API request: {request.method} {request.url.path}")

    try:
        response = await call_next(request)
    except Exception as e:
        if is_api:
            error_msg = str(e)
            if len(error_msg) > 1000:
                error_msg = error_msg[:1000] + "... (truncated)"
            logger.exception(
                f"Unhandled error: {request.method} {request.url.path}: {error_msg}"
            )
        raise

    if is_api:
        if response.status_code >= 400:
            logger.warning(
                f"API error: {request.method} {request.url.path} → {response.status_code}"
            )
        else:
            logger.info(
                f"API response: {request.method} {request.url.path} → {response.status_code}"
            )
    return response


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code},
        headers=exc.headers,
    )


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    from fastapi.openapi.utils import get_openapi

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "Bearer": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "JWT in the form: Bearer <token>",
        }
    }
    openapi_schema["security"] = [{"Bearer": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

app.include_router(exams_router, prefix="/api/v1/exams")
app.include_router(progress_router, prefix="/api/v1/progress", tags=["Progress"])
app.include_router(
    enrollment_router, prefix="/api/v1/enrollments", tags=["Enrollments"]
)


@app.on_event("startup")
async def startup_event():
    setup_uvicorn_logging()
    system_logger.info(f"Starting LearnHub API ({settings.get_config_source()})")

    try:
        await check_db_connection()
        system_logger.info("Database connected")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        raise

    if settings.auto_create_tables:
        await init_db()
        system_logger.info("Database tables ensured")

    if cache_service.enabled:
        try:
            await cache_service.get_redis()
            system_logger.info("Redis connected")
        except Exception as e:
            logger.error(f"Redis connection failed: {e}")
            logger.warning("Continuing without Redis caching")


@app.on_event("shutdown")
async def shutdown_event():
    system_logger.info("Shutting down LearnHub API")
    await cache_service.close()


@app.get("/api/v1")
async def api_root():
    """API root."""
    return {"message": "LearnHub API is running", "version": app.version}


@app.get("/api/v1/health")
async def api_health():
    """Liveness probe."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    from src.config.uvicorn_config import get_uvicorn_config

    uvicorn.run(**get_uvicorn_config())
