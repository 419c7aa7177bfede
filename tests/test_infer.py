"""Tests for the inference module."""

from pathlib import Path

import pandas as pd
import pytest

from src.recommender.exceptions import PredictionError
from src.recommender.infer import (
    RatingPrediction,
    predict_from_model_dir,
    predict_rating,
    sigmoid_percent,
)
from src.recommender.train import train_model
from src.recommender.utils import LABEL_COL, save_model_artifacts


@pytest.fixture
def polarized_model():
    """Model trained where user 1 likes everything and user 2 likes nothing."""
    rows = []
    for movie in range(1, 21):
        rows.append({"userId": "1", "movieId": str(movie), LABEL_COL: True})
        rows.append({"userId": "2", "movieId": str(movie), LABEL_COL: False})
    return train_model(pd.DataFrame(rows))


def test_sigmoid_percent() -> None:
    assert sigmoid_percent(0.0) == pytest.approx(50.0)
    assert sigmoid_percent(10.0) > 99.0
    assert sigmoid_percent(-10.0) < 1.0


def test_predict_rating_follows_user_preference(polarized_model) -> None:
    fan = predict_rating(polarized_model, "1", "5")
    critic = predict_rating(polarized_model, "2", "5")

    assert isinstance(fan, RatingPrediction)
    assert fan.predicted_label is True
    assert critic.predicted_label is False
    assert fan.score > 50.0 > critic.score
    assert fan.known_user and fan.known_movie


def test_predict_rating_accepts_integer_ids(polarized_model) -> None:
    prediction = predict_rating(polarized_model, 1, 5)

    assert prediction.user_id == "1"
    assert prediction.movie_id == "5"
    assert prediction.known_user


def test_predict_rating_unknown_ids(polarized_model) -> None:
    prediction = predict_rating(polarized_model, "999", "888")

    assert not prediction.known_user
    assert not prediction.known_movie
    assert 0.0 <= prediction.score <= 100.0


def test_predict_rating_uses_metadata_ids(polarized_model) -> None:
    prediction = predict_rating(
        polarized_model,
        "1",
        "5",
        metadata={"user_ids": ["2"], "movie_ids": ["5"]},
    )

    assert not prediction.known_user
    assert prediction.known_movie


def test_predict_rating_wraps_model_errors() -> None:
    class BrokenModel:
        def decision_function(self, features):
            raise RuntimeError("boom")

    with pytest.raises(PredictionError) as exc_info:
        predict_rating(BrokenModel(), "1", "2", metadata={"user_ids": [], "movie_ids": []})

    assert exc_info.value.status_code == 500
    assert exc_info.value.details["error_type"] == "RuntimeError"


def test_predict_from_model_dir(polarized_model, tmp_path: Path) -> None:
    save_model_artifacts(
        polarized_model,
        {"user_ids": ["1", "2"], "movie_ids": [str(m) for m in range(1, 21)]},
        str(tmp_path),
    )

    prediction = predict_from_model_dir("1", "3", model_dir=str(tmp_path))

    assert prediction.predicted_label is True
    assert prediction.to_dict()["user_id"] == "1"


def test_predict_from_model_dir_missing_model(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        predict_from_model_dir("1", "1", model_dir=str(tmp_path / "absent"))
