import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import api_router
from api.user.schemas import describe_errors
from config.settings import API_HOST, API_PORT, CORS_ORIGINS
from core.exceptions import AppError, InternalError
from database.connection import create_db_and_tables
from utils.logger import get_logger

# Initialize logger
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - runs on startup and shutdown"""
    logger.info("Starting application...")
    create_db_and_tables()
    logger.info("Database tables created/verified")
    yield
    logger.info("Shutting down application...")


# Create FastAPI app with lifespan
app = FastAPI(
    title="Agency Ops",
    version="1.0.0",
    description="Agency Ops Backend API",
    lifespan=lifespan
)

# Include API routes
app.include_router(api_router, prefix="/api")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, InternalError):
        logger.error(f"Internal error on {request.method} {request.url.path}: {exc.log_details}")
    return JSONResponse(content=exc.to_dict(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # loc[0] is "body" / "query" / "path"
    body = {"error": "Validation failed", "details": describe_errors(exc.errors(), skip=1)}
    return JSONResponse(content=body, status_code=400)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(content={"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


# Catch all unhandled exceptions
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(content=InternalError().to_dict(), status_code=500)


if __name__ == "__main__":
    uvicorn.run(app, host=API_HOST, port=API_PORT)
