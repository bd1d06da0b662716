# app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.api import api_router
from app.api.v1.endpoints import health
from app.core.config import settings
from app.db.session import engine
from app.middleware import (
    AppError,
    app_error_handler,
    database_error_handler,
    http_error_handler,
    unexpected_error_handler,
    validation_error_handler,
)
from app.models import Base

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info("Starting Merchant Console Service (env=%s)...", settings.ENV)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables checked and created if necessary.")
    yield
    logger.info("Merchant Console Service shutting down...")


app = FastAPI(
    title="Merchant Console Service",
    version="1.0.0",
    description="""
        Back end for the merchant console.

        ## Features

        * **Registration**: Business profile drafts and KYC submission
        * **Catalogue**: Flash-sale catalogue listings with image uploads
        * **Events**: Events with ticketing, sponsors and media
        * **Flash Sale**: The currently running flash sale campaign

        ## Authentication

        Every endpoint under `/api/v1` requires a bearer token in the
        `Authorization` header.
        """,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Register exception handlers
app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(StarletteHTTPException, http_error_handler)
app.add_exception_handler(SQLAlchemyError, database_error_handler)
app.add_exception_handler(Exception, unexpected_error_handler)

app.include_router(health.router)
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"ok": True, "status": "Merchant Console Service is running"}
