"""Evaluation metrics for the binary rating classifier.

Computes accuracy and ROC AUC on a prepared test split. AUC is undefined when
the split holds only one label class; in that case it is reported as None.
"""

import logging
from typing import Any, Dict

import numpy as np
import pandas as pd
from sklearn.metrics import accuracy_score, roc_auc_score
from sklearn.pipeline import Pipeline

from src.recommender.utils import FEATURE_COLUMNS, LABEL_COL

# Configure module logger
logger = logging.getLogger(__name__)


def evaluate_model(model: Pipeline, test_df: pd.DataFrame) -> Dict[str, Any]:
    """Evaluate a fitted pipeline on a labelled test split.

    Args:
        model: Fitted scikit-learn pipeline.
        test_df: DataFrame as returned by ``load_rating_split``.

    Returns:
        Dictionary with ``accuracy``, ``auc`` (None for a single-class split),
        ``num_rows`` and ``positive_rate``.

    Raises:
        ValueError: If the test split is empty.
    """
    if test_df.empty:
        raise ValueError("Cannot evaluate on an empty test split")

    labels = test_df[LABEL_COL].to_numpy(dtype=bool)
    features = test_df[FEATURE_COLUMNS]

    predicted = model.predict(features)
    accuracy = float(accuracy_score(labels, predicted))

    auc = None
    if len(np.unique(labels)) < 2:
        logger.warning(
            f"Test split has a single label class ({bool(labels[0])}), "
            "AUC is undefined"
        )
    else:
        positive_idx = list(model.classes_).index(True)
        scores = model.predict_proba(features)[:, positive_idx]
        auc = float(roc_auc_score(labels, scores))

    metrics = {
        "accuracy": accuracy,
        "auc": auc,
        "num_rows": int(len(test_df)),
        "positive_rate": float(labels.mean()),
    }

    auc_text = f"{auc:.2f}" if auc is not None else "n/a"
    logger.info(f"Evaluation Metrics: acc: {accuracy:.2f} auc: {auc_text}")

    return metrics
