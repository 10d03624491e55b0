"""Blog Backend - posts, tags and role-based access over FastAPI."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from blogapi.configs import settings
from blogapi.errors import (
    AuthorizationError,
    DatabaseError,
    PasswordHashingError,
    UploadError,
    UserAuthenticationError,
    ValidationError,
    auth_exception_handler,
    database_exception_handler,
    field_error_handler,
    password_hashing_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from blogapi.managers import limiter, rate_limit_exceeded_handler
from blogapi.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from blogapi.routes import auth_router, blog_router
from blogapi.schemas import HealthCheckResponse
from blogapi.utils.helpers import today_str

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog Backend API",
    version="1.0.0",
    lifespan=lifespan,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

routes = [auth_router, blog_router]

_ = [app.include_router(router) for router in routes]

errors = [
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (PasswordHashingError, password_hashing_exception_handler),
    (DatabaseError, database_exception_handler),
    (UserAuthenticationError, auth_exception_handler),
    (AuthorizationError, auth_exception_handler),
    (UploadError, upload_exception_handler),
    (ValidationError, field_error_handler),
    (RequestValidationError, validation_exception_handler),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter
limiter: Limiter = app.state.limiter

# Stored cover images and profile pictures are served by blob name
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
                        "timestamp": "2025-01-01 10:00:00",
                        "environment": "development",
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> ORJSONResponse:
    """
    Health check endpoint.

    Parameters
    ----------
    request : Request
        Current request context.

    Returns
    -------
    ORJSONResponse
        Version, status and server time.
    """
    response_data = HealthCheckResponse(
        version=app.version,
        status="ok",
        timestamp=today_str(),
        environment=settings.ENVIRONMENT,
    )
    return ORJSONResponse(response_data.model_dump())

