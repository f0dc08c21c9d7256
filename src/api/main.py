"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import events_router, health_router
from core.config import API_DEBUG, API_VERSION, LOG_LEVEL
from core.database import close_mongo_clients

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    yield

    # Shutdown: release database connections
    close_mongo_clients()


app = FastAPI(
    title="School Events API",
    description="REST API for querying school events by month with pagination",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for development)
if API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Return dict details as the response body itself."""
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = ErrorResponse(
            message=str(exc.detail),
            errorType=ErrorCodes.UNKNOWN_ERROR,
        ).model_dump(exclude_none=True)
    return JSONResponse(
        status_code=exc.status_code, content=content, headers=exc.headers
    )


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            message="Internal server error",
            errorType=ErrorCodes.UNKNOWN_ERROR,
            details=repr(exc),
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(events_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
