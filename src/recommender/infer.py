"""Module for predicting whether a user will like a movie.

Uses the trained pipeline to score single (user, movie) pairs.
"""

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd
from sklearn.pipeline import Pipeline

from src.recommender.exceptions import PredictionError
from src.recommender.utils import MOVIE_COL, USER_COL, known_ids, load_model_artifacts

# Configure module logger
logger = logging.getLogger(__name__)

# Default parameters
DEFAULT_MODEL_DIR = "models"


def sigmoid_percent(raw_score: float) -> float:
    """Map a raw classifier margin onto a 0-100 score."""
    return float(100.0 / (1.0 + np.exp(-raw_score)))


@dataclass
class RatingPrediction:
    """Prediction for one user and movie."""

    user_id: str
    movie_id: str
    score: float
    predicted_label: bool
    known_user: bool = True
    known_movie: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def predict_rating(
    model: Pipeline,
    user_id: str,
    movie_id: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> RatingPrediction:
    """Predict whether ``user_id`` would recommend ``movie_id``.

    Ids the model never saw during training are encoded as all-zero features,
    so the prediction for them falls back to the classifier's intercept.

    Args:
        model: Fitted scikit-learn pipeline.
        user_id: User identifier, as it appears in the ratings file.
        movie_id: Movie identifier, as it appears in the ratings file.
        metadata: Optional model metadata with ``user_ids`` / ``movie_ids``
            lists. When omitted the ids are read from the fitted encoder.

    Returns:
        RatingPrediction with a 0-100 score and the predicted label.

    Raises:
        PredictionError: If the pipeline fails to score the pair.
    """
    user_id = str(user_id)
    movie_id = str(movie_id)
    start_time = time.time()

    if metadata and "user_ids" in metadata and "movie_ids" in metadata:
        user_ids, movie_ids = metadata["user_ids"], metadata["movie_ids"]
    else:
        user_ids, movie_ids = known_ids(model)

    known_user = user_id in set(user_ids)
    known_movie = movie_id in set(movie_ids)
    if not (known_user and known_movie):
        logger.warning(
            "Id not in training data, prediction uses intercept only for it",
            extra={
                "user_id": user_id,
                "movie_id": movie_id,
                "known_user": known_user,
                "known_movie": known_movie,
            },
        )

    features = pd.DataFrame({USER_COL: [user_id], MOVIE_COL: [movie_id]})
    try:
        raw_score = float(model.decision_function(features)[0])
        predicted_label = bool(model.predict(features)[0])
    except Exception as e:
        logger.error(
            "Prediction failed",
            extra={"user_id": user_id, "movie_id": movie_id, "error": str(e)},
        )
        raise PredictionError(user_id, movie_id, e) from e

    prediction = RatingPrediction(
        user_id=user_id,
        movie_id=movie_id,
        score=sigmoid_percent(raw_score),
        predicted_label=predicted_label,
        known_user=known_user,
        known_movie=known_movie,
    )

    logger.info(
        "Prediction generated",
        extra={
            "user_id": user_id,
            "movie_id": movie_id,
            "score": round(prediction.score, 2),
            "predicted_label": predicted_label,
            "total_time_ms": round((time.time() - start_time) * 1000, 2),
        },
    )

    return prediction


def predict_from_model_dir(
    user_id: str,
    movie_id: str,
    model_dir: str = DEFAULT_MODEL_DIR,
) -> RatingPrediction:
    """Load the persisted model from ``model_dir`` and score one pair.

    Raises:
        FileNotFoundError: If model files are not found in ``model_dir``.
        PredictionError: If the pipeline fails to score the pair.
    """
    model, metadata = load_model_artifacts(model_dir)
    return predict_rating(model, user_id, movie_id, metadata=metadata)
