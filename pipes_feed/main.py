from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pipes_feed.catalog import close_catalog, init_catalog
from pipes_feed.config import setup_logging
from pipes_feed.errors import CatalogNotLoadedError, CollectionNotFoundError
from pipes_feed.schemas import ErrorDetail, StandardErrorResponse

from pipes_feed.routers import main_router


setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("Starting Pipes Feed Service...")

    try:
        logger.info("Loading catalog...")
        await init_catalog()
        logger.info("Pipes Feed Service started successfully")
    except Exception as e:
        logger.error(f"Failed to start Pipes Feed Service: {e}", exc_info=True)
        raise

    yield

    logger.info("Shutting down Pipes Feed Service...")
    close_catalog()
    logger.info("Pipes Feed Service stopped")


app = FastAPI(
    title="Pipes Feed Service",
    version="0.1.0",
    lifespan=lifespan
)

app.include_router(main_router)


def error_response(status_code: int, code: str, message: str, context: dict | None = None) -> JSONResponse:
    body = StandardErrorResponse(
        timestamp=datetime.now(timezone.utc).isoformat(),
        error=ErrorDetail(code=code, message=message, context=context),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(CollectionNotFoundError)
async def collection_not_found_handler(request: Request, exc: CollectionNotFoundError):
    """Unknown collection names are a 404, not an empty feed"""
    logger.warning(f"Collection not found for {request.method} {request.url.path}: {exc.name}")
    return error_response(404, "COLLECTION_NOT_FOUND", str(exc), {"collection": exc.name})


@app.exception_handler(CatalogNotLoadedError)
async def catalog_not_loaded_handler(request: Request, exc: CatalogNotLoadedError):
    logger.error(f"Request {request.method} {request.url.path} before catalog was loaded")
    return error_response(503, "CATALOG_UNAVAILABLE", str(exc))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors with details"""
    logger.error(f"Validation error for {request.method} {request.url.path}")
    logger.error(f"Validation details: {exc.errors()}")

    # Create a properly serializable error response
    errors = []
    for error in exc.errors():
        error_dict = {
            "type": error.get("type"),
            "loc": error.get("loc"),
            "msg": error.get("msg"),
            "input": str(error.get("input", ""))[:100]
        }
        errors.append(error_dict)

    return JSONResponse(
        status_code=422,
        content={
            "detail": errors
        }
    )


def run() -> None:
    """Serve the app with uvicorn (HOST/PORT from the environment)"""
    import os

    import uvicorn

    uvicorn.run(
        "pipes_feed.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3000")),
    )
