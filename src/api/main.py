"""FastAPI application main module.

This module defines the FastAPI application for serving MovieRec predictions.
It provides health and status endpoints, maps MovieRec exceptions onto JSON
error responses, and serves as the entry point for the API server.
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src import __version__
from src.api.logging_config import RequestLoggingMiddleware
from src.api.metrics import metrics_service
from src.api.routes import predict
from src.recommender.exceptions import MovieRecException
from src.recommender.utils import known_ids

# Configure module logger
logger = logging.getLogger(__name__)

# Create FastAPI application instance
app = FastAPI(
    title="MovieRec API",
    description="Movie recommendation classifier service",
    version=__version__,
)

app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(predict.router)


@app.exception_handler(MovieRecException)
async def movierec_exception_handler(
    request: Request, exc: MovieRecException
) -> JSONResponse:
    """Render MovieRec errors as ``{"error", "message", "details"}``."""
    logger.warning(
        "Request raised MovieRec error",
        extra={
            "path": str(request.url.path),
            "error_type": type(exc).__name__,
            "status_code": exc.status_code,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": type(exc).__name__,
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.get("/ping")
def ping() -> Dict[str, str]:
    """Health check endpoint.

    Example:
        >>> response = client.get("/ping")
        >>> assert response.json() == {"status": "ok"}
    """
    return {"status": "ok"}


@app.get("/status")
def model_status(model_dir: str = predict.DEFAULT_MODEL_DIR) -> Dict[str, Any]:
    """Report whether a model is loaded, plus prediction metrics.

    Does not trigger a model load.
    """
    cached = predict.cached_model_status(model_dir)

    num_users = 0
    num_movies = 0
    if cached is not None:
        user_ids, movie_ids = known_ids(cached["model"])
        num_users, num_movies = len(user_ids), len(movie_ids)

    return {
        "model_loaded": cached is not None,
        "timestamp_last_loaded": cached["loaded_at"] if cached else None,
        "num_users": num_users,
        "num_movies": num_movies,
        "metrics": metrics_service.get_metrics(),
    }


if __name__ == "__main__":
    import uvicorn

    from src.api.logging_config import setup_logging

    setup_logging()
    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
