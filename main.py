"""Main FastAPI application entry point."""

import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.dependencies import get_config, get_user_service
from app.api.routes import auth, devices
from app.exceptions import DashboardError
from app.utils.logger import setup_logger

# Load configuration
config = get_config()

# Setup logging
setup_logger(config)
logger = logging.getLogger("homelab")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan event handler."""
    # Startup
    logger.info(f"Starting {config.app.title} v{config.app.version} ({config.app.environment})")
    logger.info(f"Database: {config.paths.database}")

    # Fails fast with ConfigurationError when the signing secret is missing
    user_service = app.dependency_overrides.get(get_user_service, get_user_service)()
    user_service.create_default_user()

    yield

    # Shutdown
    logger.info(f"Shutting down {config.app.title}")


# Create FastAPI app
app = FastAPI(
    title=config.app.title,
    version=config.app.version,
    debug=config.app.is_development,
    description="""
    **HomeLab Dashboard API** - Wake-on-LAN and device management for the home network.

    ## Features
    - Single admin account with token authentication
    - Send Wake-on-LAN magic packets to any MAC address
    - Save devices for one-click wake

    ## Documentation
    - **Swagger UI**: `/docs`
    - **ReDoc**: `/redoc`
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Stack traces in error responses, development only
app.state.include_stack = config.app.is_development

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


def error_response(request: Request, status_code: int, message: str, exc: Exception) -> JSONResponse:
    """Build the fixed error envelope."""
    content = {"error": message}
    if request.app.state.include_stack:
        content["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError):
    """Map domain errors to their HTTP status."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(request, exc.status_code, exc.message, exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Wrap framework HTTP errors (unmatched routes, wrong methods) in the error envelope."""
    message = str(exc.detail)
    if exc.status_code == 404 and message == "Not Found":
        message = f"Not Found - {request.url.path}"
    return error_response(request, exc.status_code, message, exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400."""
    logger.debug(f"Request validation failed for {request.url.path}: {exc.errors()}")
    return error_response(request, 400, "Request validation failed", exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(request, 500, "Internal Server Error", exc)


# Include API routers
app.include_router(auth.router)
app.include_router(devices.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": config.app.version}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=config.app.host, port=config.app.port, reload=config.app.is_development)
