"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.logging_config import setup_logging
from config import (
    CORS_ALLOWED_ORIGINS,
    API_HOST,
    API_PORT,
)
from core.database import get_db
from core.exceptions import FlashcardError, StoreError
from api.routes import auth, cards, class_route

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="Flashcards API",
    description="Backend API service for flashcard learning with teacher classes.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(auth.router)
app.include_router(cards.router)
app.include_router(class_route.router)


def _error_response(exc: FlashcardError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"category": exc.category, "message": exc.message}},
        headers=headers,
    )


@app.exception_handler(FlashcardError)
def handle_flashcard_error(request: Request, exc: FlashcardError) -> JSONResponse:
    if isinstance(exc, StoreError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.__cause__)
    return _error_response(exc)


@app.exception_handler(SQLAlchemyError)
def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Read paths reach here; writes are already wrapped by core.database.atomic
    logger.exception("%s %s failed", request.method, request.url.path)
    return _error_response(StoreError())


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """API root, returning API information and documentation links.

    Returns:
        Dictionary with API information and documentation links.
    """
    return {
        "name": "Flashcards API",
        "version": "1.0.0",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/health",
    }


@app.get("/health", summary="Health check", tags=["Health"])
def health(db: Session = Depends(get_db)) -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok" once the database answers.
    """
    db.execute(text("SELECT 1"))
    return {"status": "ok", "db": "connected"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    logger.info("API running on http://%s:%s", API_HOST, API_PORT)
    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
