# app/main.py

"""Blog Content Backend - categories, blog posts and their hosted images."""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.configs import settings
from app.errors import (
    BlogInputError,
    DatabaseError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UploadError,
    blog_exception_handler,
    database_exception_handler,
    unhandled_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from app.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from app.routes import blog_router
from app.schemas import HealthCheckResponse
from app.utils.helpers import today_str

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog content API: categories, posts, sections and hosted images",
    version="1.0.0",
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

routes = [blog_router]

_ = [app.include_router(router) for router in routes]

errors = [
    (BlogInputError, blog_exception_handler),
    (NotFoundError, blog_exception_handler),
    (ForbiddenError, blog_exception_handler),
    (InternalError, blog_exception_handler),
    (UploadError, upload_exception_handler),
    (DatabaseError, database_exception_handler),
    (RequestValidationError, validation_exception_handler),
    (Exception, unhandled_exception_handler),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

if settings.STORAGE_PROVIDER == "local":
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False),
        name="uploads",
    )


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "version": "1.0.0",
                        "status": "ok",
                        "timestamp": "2025-01-01 08:00:00",
                        "storage": "cloudinary",
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
async def health_check() -> HealthCheckResponse:
    """
    Liveness probe.

    Returns
    -------
    HealthCheckResponse
        Version, status, timestamp and the active storage backend.

    Examples
    --------
    Request
        GET /health
    Response
        200 OK
        {"version": "1.0.0", "status": "ok", "timestamp": "2025-01-01 08:00:00", "storage": "local"}
    """
    return HealthCheckResponse(
        version=app.version,
        status="ok",
        timestamp=today_str(),
        storage=settings.STORAGE_PROVIDER,
    )
