"""Binary rating classifier training module.

This module wires the prepared rating splits into a scikit-learn pipeline:
the two id columns are one-hot encoded and concatenated into a single feature
matrix, and a logistic regression classifier learns whether a user would
recommend a movie. The full workflow (prepare, train, evaluate, predict,
save, reload) is available through :func:`train_with_config`.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder

from src.recommender.dataprep import PrepConfig, prepare
from src.recommender.evaluate import evaluate_model
from src.recommender.infer import RatingPrediction, predict_rating
from src.recommender.utils import (
    FEATURE_COLUMNS,
    LABEL_COL,
    known_ids,
    load_model_artifacts,
    load_rating_split,
    save_model_artifacts,
)

# Configure module logger
logger = logging.getLogger(__name__)

# Model configuration constants
DEFAULT_C = 1.0
DEFAULT_MAX_ITER = 1000
DEFAULT_RANDOM_STATE = 42

# Sample pair scored after training
DEFAULT_SAMPLE_USER = "6"
DEFAULT_SAMPLE_MOVIE = "10"


@dataclass
class TrainingConfig:
    """Configuration for the end-to-end training workflow.

    Attributes:
        train_path: Prepared training split.
        test_path: Prepared test split.
        output_dir: Directory where model artifacts are saved.
        ratings_path: Raw ratings file. When set and ``prepare`` is True the
            splits are regenerated from it before training.
        prepare: Run dataset preparation first.
        C: Inverse regularization strength of the classifier.
        max_iter: Maximum solver iterations.
        random_state: Random seed for reproducibility.
        sample_user: User id for the post-training sample prediction.
        sample_movie: Movie id for the post-training sample prediction.
    """

    train_path: Path = field(default_factory=lambda: Path("data/ratings_train.csv"))
    test_path: Path = field(default_factory=lambda: Path("data/ratings_test.csv"))
    output_dir: Path = field(default_factory=lambda: Path("models"))
    ratings_path: Optional[Path] = None
    prepare: bool = False
    C: float = DEFAULT_C
    max_iter: int = DEFAULT_MAX_ITER
    random_state: int = DEFAULT_RANDOM_STATE
    sample_user: str = DEFAULT_SAMPLE_USER
    sample_movie: str = DEFAULT_SAMPLE_MOVIE


@dataclass
class TrainingResult:
    """Outputs of :func:`train_with_config`."""

    model: Pipeline
    metrics: Dict[str, Any]
    sample_prediction: RatingPrediction
    model_path: Path
    metadata: Dict[str, Any]


def build_pipeline(
    C: float = DEFAULT_C,
    max_iter: int = DEFAULT_MAX_ITER,
    random_state: int = DEFAULT_RANDOM_STATE,
) -> Pipeline:
    """Create the untrained featurize + classify pipeline."""
    features = ColumnTransformer(
        transformers=[
            ("ids", OneHotEncoder(handle_unknown="ignore"), FEATURE_COLUMNS),
        ]
    )
    classifier = LogisticRegression(
        C=C,
        max_iter=max_iter,
        random_state=random_state,
    )
    return Pipeline(steps=[("features", features), ("classifier", classifier)])


def train_model(
    train_df: pd.DataFrame,
    C: float = DEFAULT_C,
    max_iter: int = DEFAULT_MAX_ITER,
    random_state: int = DEFAULT_RANDOM_STATE,
) -> Pipeline:
    """Fit the rating classifier on a labelled training split.

    Args:
        train_df: DataFrame as returned by ``load_rating_split``.
        C: Inverse regularization strength.
        max_iter: Maximum solver iterations.
        random_state: Random seed for reproducibility.

    Returns:
        Fitted scikit-learn pipeline.

    Raises:
        ValueError: If the split is empty or holds a single label class.
    """
    if train_df.empty:
        raise ValueError("Cannot train on an empty training split")

    n_classes = train_df[LABEL_COL].nunique()
    if n_classes < 2:
        raise ValueError(
            "Training split contains a single label class, "
            "both recommended and not-recommended ratings are required"
        )

    logger.info(f"Training classifier on {len(train_df)} ratings")
    logger.info(f"C: {C}, Iterations: {max_iter}, Random state: {random_state}")

    model = build_pipeline(C=C, max_iter=max_iter, random_state=random_state)
    model.fit(train_df[FEATURE_COLUMNS], train_df[LABEL_COL])

    user_ids, movie_ids = known_ids(model)
    logger.info("Model training completed")
    logger.info(f"Known users: {len(user_ids)}, known movies: {len(movie_ids)}")

    return model


def train_with_config(config: TrainingConfig) -> TrainingResult:
    """Run the full workflow described by ``config``.

    Steps: optional dataset preparation, load splits, fit, evaluate, score the
    sample pair, save artifacts and reload them from disk.

    Raises:
        FileNotFoundError: If an input file does not exist.
        ValueError: If data is invalid (including ``ParseError``).
        OSError: If unable to write prepared splits or model artifacts.
    """
    logger.info("=" * 60)
    logger.info("Starting rating classifier training")
    logger.info("=" * 60)

    try:
        # Step 1: Prepare splits from raw ratings
        if config.prepare:
            if config.ratings_path is None:
                raise ValueError("ratings_path is required when prepare is enabled")
            prepare(
                PrepConfig(
                    input_path=config.ratings_path,
                    train_path=config.train_path,
                    test_path=config.test_path,
                )
            )

        # Step 2: Load data
        train_df = load_rating_split(str(config.train_path))
        test_df = load_rating_split(str(config.test_path))

        # Step 3: Train
        model = train_model(
            train_df,
            C=config.C,
            max_iter=config.max_iter,
            random_state=config.random_state,
        )

        # Step 4: Evaluate
        metrics = evaluate_model(model, test_df)

        # Step 5: Single prediction
        sample = predict_rating(model, config.sample_user, config.sample_movie)
        logger.info(
            f"UserId: {sample.user_id} with movieId: {sample.movie_id} "
            f"Score: {sample.score:.2f} and Label {sample.predicted_label}"
        )

        # Step 6: Save
        user_ids, movie_ids = known_ids(model)
        metadata = {
            "trained_at": datetime.now(timezone.utc).isoformat(),
            "metrics": metrics,
            "num_train_rows": int(len(train_df)),
            "num_test_rows": int(len(test_df)),
            "user_ids": user_ids,
            "movie_ids": movie_ids,
        }
        model_path, _ = save_model_artifacts(model, metadata, str(config.output_dir))

        # Step 7: Reload
        model, metadata = load_model_artifacts(str(config.output_dir))

        logger.info("=" * 60)
        logger.info("Training completed successfully!")
        logger.info("=" * 60)

        return TrainingResult(
            model=model,
            metrics=metrics,
            sample_prediction=sample,
            model_path=model_path,
            metadata=metadata,
        )

    except Exception as e:
        logger.error(f"Training failed: {e}", exc_info=True)
        raise


def main() -> None:
    """Main entry point for command-line execution."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = TrainingConfig(ratings_path=Path("data/ratings.csv"), prepare=True)

    try:
        train_with_config(config)
    except Exception as e:
        logger.error(f"Failed to train model: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
