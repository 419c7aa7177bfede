"""Prediction endpoints for the MovieRec API.

This module provides API endpoints that score (user, movie) pairs with the
persisted rating classifier.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from src.api.metrics import metrics_service
from src.recommender.exceptions import ModelLoadError, ModelNotFoundError
from src.recommender.infer import predict_rating
from src.recommender.utils import check_model_exists, load_model_artifacts

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/predict",
    tags=["predictions"],
)

# Default model directory
DEFAULT_MODEL_DIR = "models"

# Loaded model artifacts, keyed by model directory
_model_cache: Dict[str, Dict[str, Any]] = {}


class PredictionResponse(BaseModel):
    """Response model for prediction requests."""

    user_id: str = Field(..., description="User ID that was scored")
    movie_id: str = Field(..., description="Movie ID that was scored")
    score: float = Field(..., description="Recommendation score between 0 and 100")
    predicted_label: bool = Field(
        ..., description="True if the user is predicted to like the movie"
    )
    known_user: bool = Field(..., description="User was present in training data")
    known_movie: bool = Field(..., description="Movie was present in training data")


def load_model_if_needed(model_dir: str = DEFAULT_MODEL_DIR) -> Dict[str, Any]:
    """Load model artifacts from disk if not already cached.

    Returns:
        Dictionary with ``model``, ``metadata`` and ``loaded_at`` keys.

    Raises:
        ModelNotFoundError: If model files are not found.
        ModelLoadError: If the files exist but cannot be loaded.
    """
    cached = _model_cache.get(model_dir)
    if cached is not None:
        logger.debug("Using cached model")
        return cached

    if not check_model_exists(model_dir):
        logger.error(f"Model not found in {model_dir}")
        raise ModelNotFoundError(model_dir)

    try:
        logger.info(f"Loading model from {model_dir}")
        model, metadata = load_model_artifacts(model_dir)
    except Exception as e:
        logger.error(f"Failed to load model: {e}", exc_info=True)
        raise ModelLoadError(model_dir, e) from e

    _model_cache[model_dir] = {
        "model": model,
        "metadata": metadata,
        "loaded_at": datetime.now(timezone.utc).isoformat(),
    }
    logger.info("Model loaded successfully")
    return _model_cache[model_dir]


def cached_model_status(model_dir: str = DEFAULT_MODEL_DIR) -> Optional[Dict[str, Any]]:
    """Return the cache entry for ``model_dir`` without loading anything."""
    return _model_cache.get(model_dir)


@router.get("/{user_id}/{movie_id}", response_model=PredictionResponse)
def get_prediction(
    user_id: str,
    movie_id: str,
    model_dir: str = DEFAULT_MODEL_DIR,
) -> PredictionResponse:
    """Predict whether a user would recommend a movie.

    Example:
        GET /predict/6/10
        Returns the score and label for user 6 and movie 10.
    """
    logger.info(f"Predicting rating for user {user_id}, movie {movie_id}")
    start_time = time.time()

    artifacts = load_model_if_needed(model_dir)
    prediction = predict_rating(
        artifacts["model"],
        user_id,
        movie_id,
        metadata=artifacts["metadata"],
    )

    metrics_service.record_prediction(
        latency_ms=(time.time() - start_time) * 1000,
        predicted_label=prediction.predicted_label,
    )

    return PredictionResponse(**prediction.to_dict())


@router.post("/reload-model")
def reload_model(model_dir: str = DEFAULT_MODEL_DIR) -> Dict[str, str]:
    """Reload the model from disk.

    Drops the cached entry so a newly trained model is picked up without
    restarting the server.
    """
    logger.info("Reloading model...")
    _model_cache.pop(model_dir, None)

    load_model_if_needed(model_dir)
    return {"status": "Model reloaded successfully"}
