#!/usr/bin/env python3
"""
Main FastAPI application for the Bookly support backend.
"""

import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session

from .config import Config
from ..api import analytics, knowledge, orders, query
from ..api.deps import get_knowledge_index
from ..data.database import SessionLocal, create_tables, get_db, ping
from ..data.knowledge_index import KnowledgeIndex
from ..data.models import KnowledgeArticle
from ..schemas.io_models import ErrorResponse
from ..utils.errors import ConfigurationError, SupportError
from ..utils.logger import get_logger

logger = get_logger(__name__)


def rebuild_knowledge_index(db: Session, index=None) -> int:
    """Index every stored article. Returns the number indexed."""
    index = index or get_knowledge_index()
    return index.rebuild(db.query(KnowledgeArticle).all())


@asynccontextmanager
async def lifespan(app: FastAPI):
    Config.debug_print()
    create_tables()
    db = SessionLocal()
    try:
        rebuild_knowledge_index(db)
    except Exception as e:
        # queries keep working through the substring fallback
        logger.error(f"Knowledge index rebuild failed, relevance search degraded: {e}")
    finally:
        db.close()
    logger.info(f"Server ready on http://{Config.HOST}:{Config.PORT} ({Config.ENVIRONMENT})")
    yield


# Initialize FastAPI app
app = FastAPI(
    title="Bookly Support API",
    description="Order lookup, knowledge base and LLM-backed customer support",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"{datetime.now(timezone.utc).isoformat()} - {request.method} {request.url.path}")
    return await call_next(request)


def _error_body(error: str, details: str = None) -> dict:
    return ErrorResponse(error=error, details=details or None).model_dump(exclude_none=True)


@app.exception_handler(SupportError)
async def support_error_handler(request: Request, exc: SupportError):
    if isinstance(exc, ConfigurationError):
        logger.error(f"Configuration error: {exc}")
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.public_message))
    if exc.status_code >= 500:
        logger.error(f"Error during {request.method} {request.url.path}: {exc} ({exc.details})")
        details = f"{exc}: {exc.details}" if exc.details else str(exc)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.public_message, details))
    return JSONResponse(status_code=exc.status_code, content=_error_body(str(exc), exc.details))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content=_error_body("Invalid request", str(exc.errors())))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error during {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=_error_body("Internal server error", str(exc)))


app.include_router(orders.router)
app.include_router(knowledge.router)
app.include_router(query.router)
app.include_router(analytics.router)


@app.get("/api/health")
def health_check(db: Session = Depends(get_db), index: KnowledgeIndex = Depends(get_knowledge_index)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected" if ping(db) else "disconnected",
        "knowledgeIndex": "available" if index.available else "degraded",
    }


# Serve the static chat client
if os.path.isdir(Config.STATIC_DIR):
    app.mount("/", StaticFiles(directory=Config.STATIC_DIR, html=True), name="static")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=Config.HOST, port=Config.PORT)
