"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from flashdeck_core.errors import CorruptDocumentError, ProcessingError

from app.db.session import init_db
from app.routers import documents, flashcards, health
from app.services.processing import CORRUPT_DOCUMENT_MESSAGE
from app.services.storage import init_storage
from app.settings import settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize services on startup."""
    await init_db()
    await init_storage()
    yield


app = FastAPI(
    title="flashdeck API",
    description="API for turning PDF study documents into flashcards",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware - allow all origins in dev, restrict in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.cors_allow_all else settings.cors_origins,
    allow_credentials=not settings.cors_allow_all,  # credentials require specific origins
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ProcessingError)
async def processing_error_handler(
    request: Request, exc: ProcessingError
) -> JSONResponse:
    return JSONResponse(status_code=exc.status, content={"error": exc.message})


@app.exception_handler(CorruptDocumentError)
async def corrupt_document_handler(
    request: Request, exc: CorruptDocumentError
) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": CORRUPT_DOCUMENT_MESSAGE})


# Include routers
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(documents.router, prefix="/api/v1", tags=["documents"])
app.include_router(flashcards.router, prefix="/api/v1", tags=["flashcards"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
