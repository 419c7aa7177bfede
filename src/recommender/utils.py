"""Utility functions for the movie recommendation model.

This module provides helper functions for loading prepared rating splits,
model artifact management, and common operations used throughout MovieRec.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

import joblib
import pandas as pd
from sklearn.pipeline import Pipeline

# Configure module logger
logger = logging.getLogger(__name__)

# Column names used by the ML pipeline
USER_COL = "userId"
MOVIE_COL = "movieId"
LABEL_COL = "Label"
FEATURE_COLUMNS = [USER_COL, MOVIE_COL]

# Model artifact filenames
MODEL_FILENAME = "movierec_model.joblib"
METADATA_FILENAME = "model_metadata.joblib"


def load_rating_split(csv_path: str) -> pd.DataFrame:
    """Load a prepared ratings split for training or evaluation.

    Only the first three columns are read, positionally, as user id, movie id
    and binary label. The file must have a header row, as written by
    :func:`src.recommender.dataprep.prepare`.

    Args:
        csv_path: Path to a prepared CSV file.

    Returns:
        DataFrame with string ``userId`` and ``movieId`` columns and a boolean
        ``Label`` column.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        ValueError: If the file has fewer than three columns, no rows, or a
            label other than 0 or 1.

    Example:
        >>> train_df = load_rating_split("data/ratings_train.csv")
        >>> print(train_df[LABEL_COL].mean())
    """
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    logger.info(f"Loading rating split from {csv_path}")
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)

    if len(df.columns) < 3:
        raise ValueError(
            f"CSV must have at least 3 columns (user, movie, label), "
            f"found {len(df.columns)}"
        )

    if df.empty:
        raise ValueError(f"Cannot use empty rating split: {csv_path}")

    df = df.iloc[:, :3].copy()
    df.columns = [USER_COL, MOVIE_COL, LABEL_COL]

    invalid = ~df[LABEL_COL].isin(["0", "1"])
    if invalid.any():
        bad_value = df.loc[invalid, LABEL_COL].iloc[0]
        raise ValueError(f"Label column must contain only 0 or 1, found {bad_value!r}")

    df[LABEL_COL] = df[LABEL_COL] == "1"

    logger.info(f"Loaded {len(df)} labelled ratings")
    logger.info(f"Positive rate: {df[LABEL_COL].mean():.4f}")

    return df


def known_ids(model: Pipeline) -> Tuple[List[str], List[str]]:
    """Return the user and movie ids the fitted encoder has seen."""
    encoder = model.named_steps["features"].named_transformers_["ids"]
    user_ids, movie_ids = encoder.categories_
    return list(user_ids), list(movie_ids)


def save_model_artifacts(
    model: Pipeline,
    metadata: Dict[str, Any],
    output_dir: str,
    model_filename: str = MODEL_FILENAME,
    metadata_filename: str = METADATA_FILENAME,
) -> Tuple[Path, Path]:
    """Save the fitted pipeline and its metadata to disk.

    Creates the directory if it doesn't exist.

    Args:
        model: Fitted scikit-learn pipeline.
        metadata: Training metadata (metrics, row counts, timestamp).
        output_dir: Directory path where artifacts will be saved.
        model_filename: Filename for the model.
        metadata_filename: Filename for the metadata.

    Returns:
        Paths of the saved model and metadata files.

    Raises:
        OSError: If unable to create output directory or save files.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    logger.info(f"Saving model artifacts to {output_dir}")

    model_path = output_path / model_filename
    joblib.dump(model, model_path)
    logger.info(f"Saved model to {model_path}")

    metadata_path = output_path / metadata_filename
    joblib.dump(metadata, metadata_path)
    logger.info(f"Saved metadata to {metadata_path}")

    return model_path, metadata_path


def load_model_artifacts(
    model_dir: str,
    model_filename: str = MODEL_FILENAME,
    metadata_filename: str = METADATA_FILENAME,
) -> Tuple[Pipeline, Dict[str, Any]]:
    """Load the fitted pipeline and its metadata from disk.

    Args:
        model_dir: Directory path where artifacts are stored.
        model_filename: Filename for the model.
        metadata_filename: Filename for the metadata.

    Returns:
        A tuple of (fitted pipeline, metadata dictionary).

    Raises:
        FileNotFoundError: If the directory or any artifact file is missing.

    Example:
        >>> model, metadata = load_model_artifacts("models")
        >>> print(metadata["metrics"]["accuracy"])
    """
    model_path = Path(model_dir)

    if not model_path.exists():
        raise FileNotFoundError(f"Model directory does not exist: {model_dir}")

    logger.info(f"Loading model artifacts from {model_dir}")

    model_file = model_path / model_filename
    if not model_file.exists():
        raise FileNotFoundError(f"Model file not found: {model_file}")
    model = joblib.load(model_file)
    logger.info(f"Loaded model from {model_file}")

    metadata_file = model_path / metadata_filename
    if not metadata_file.exists():
        raise FileNotFoundError(f"Metadata file not found: {metadata_file}")
    metadata = joblib.load(metadata_file)
    logger.info(f"Loaded metadata from {metadata_file}")

    return model, metadata


def check_model_exists(model_dir: str) -> bool:
    """Check if all required model artifacts exist.

    Args:
        model_dir: Directory path where artifacts should be stored.

    Returns:
        True if all model files exist, False otherwise.
    """
    model_path = Path(model_dir)
    return (model_path / MODEL_FILENAME).exists() and (
        model_path / METADATA_FILENAME
    ).exists()
