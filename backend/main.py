from dotenv import load_dotenv
load_dotenv()

import asyncio
import logging
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import get_db

# ENV
from config.env import (
    ENV,
    CORS_ALLOWED_ORIGINS,
    JWT_SECRET,
    JWT_ALGORITHM,
    ACCESS_TOKEN_DAYS,
    validate_production_env,
)
from config.log import configure_logging

# ROUTES
from routes.auth import router as auth_router
from routes.items import router as items_router
from routes.reviews import router as reviews_router
from routes.sellers import router as sellers_router

# UTILS
from utils.errors import StorageFailure
from utils.indexes import ensure_indexes
from utils.jwt import TokenManager

# WORKERS
from workers.rating_reconcile_worker import rating_reconcile_worker

configure_logging()
validate_production_env()

logger = logging.getLogger(__name__)
logger.info("ENV: %s", ENV)

app = FastAPI(
    title="Rentals API",
    version="1.0.0",
    docs_url=None if ENV == "production" else "/docs",
    redoc_url=None if ENV == "production" else "/redoc",
    openapi_url=None if ENV == "production" else "/openapi.json",
)

# Signing secret is fixed for the life of the process
app.state.token_manager = TokenManager(
    JWT_SECRET,
    algorithm=JWT_ALGORITHM,
    ttl=timedelta(days=ACCESS_TOKEN_DAYS),
)

# -----------------------------
# CORS
# -----------------------------

allowed_origins = [origin.strip() for origin in CORS_ALLOWED_ORIGINS if origin.strip()]
if not allowed_origins:
    allowed_origins = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://127.0.0.1:5000",
    ]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------------
# ERROR RESPONSES
# -----------------------------

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    content = {"success": False, "message": str(exc.detail)}
    content.update(getattr(exc, "extra", {}) or {})
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)

    return JSONResponse(
        status_code=400,
        content={"success": False, "message": message},
    )


@app.exception_handler(PyMongoError)
async def storage_error_handler(request: Request, exc: PyMongoError):
    logger.exception("STORAGE_ERROR path=%s", request.url.path)
    return JSONResponse(
        status_code=StorageFailure.status_code,
        content={"success": False, "message": StorageFailure.message},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("UNHANDLED_ERROR path=%s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )

# -----------------------------
# ROUTES
# -----------------------------

app.include_router(auth_router, prefix="/api")
app.include_router(items_router, prefix="/api")
app.include_router(reviews_router, prefix="/api")
app.include_router(sellers_router, prefix="/api")

# -----------------------------
# HEALTH CHECKS
# -----------------------------

@app.get("/api/health")
async def health():

    return {"success": True, "message": "Backend is running!"}

@app.get("/api/health/db")
async def health_db():
    db = get_db()
    await db.command("ping")
    return {"success": True, "message": "mongodb connected"}

# -----------------------------
# STARTUP
# -----------------------------

@app.on_event("startup")
async def startup():
    await ensure_indexes(get_db())
    asyncio.create_task(rating_reconcile_worker())
