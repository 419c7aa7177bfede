"""Tests for the rating classifier training module.

This module contains unit tests for the training pipeline, including
split loading, model training, evaluation and artifact saving.
"""

from pathlib import Path

import pandas as pd
import pytest
from sklearn.pipeline import Pipeline

from src.recommender.dataprep import PrepConfig, prepare
from src.recommender.evaluate import evaluate_model
from src.recommender.train import TrainingConfig, build_pipeline, train_model, train_with_config
from src.recommender.utils import (
    LABEL_COL,
    METADATA_FILENAME,
    MODEL_FILENAME,
    check_model_exists,
    known_ids,
    load_model_artifacts,
    load_rating_split,
)

RATING_CYCLE = [1, 2, 3, 4, 5, 4.5, 3.5, 2.5]


def write_fake_ratings(csv_path: Path, n_rows: int = 200) -> Path:
    """Write deterministic MovieLens-style ratings with shuffled timestamps."""
    lines = ["userId,movieId,rating,timestamp"]
    for i in range(n_rows):
        user_id = i % 10 + 1
        movie_id = (i * 7) % 30 + 1
        rating = RATING_CYCLE[i % len(RATING_CYCLE)]
        timestamp = 1000 + (i * 37) % n_rows
        lines.append(f"{user_id},{movie_id},{rating},{timestamp}")
    csv_path.write_text("\n".join(lines) + "\n")
    return csv_path


@pytest.fixture
def prepared_splits(tmp_path: Path) -> PrepConfig:
    """Raw ratings prepared into training and test splits."""
    config = PrepConfig.for_input(write_fake_ratings(tmp_path / "ratings.csv"))
    prepare(config)
    return config


def test_load_rating_split_columns_and_types(prepared_splits: PrepConfig) -> None:
    df = load_rating_split(str(prepared_splits.train_path))

    assert list(df.columns) == ["userId", "movieId", "Label"]
    assert len(df) == 180
    assert df["userId"].map(type).eq(str).all()
    assert df[LABEL_COL].dtype == bool
    assert set(df[LABEL_COL].unique()) == {True, False}


def test_load_rating_split_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_rating_split(str(tmp_path / "missing.csv"))


def test_load_rating_split_rejects_unbinarized_labels(tmp_path: Path) -> None:
    raw = tmp_path / "raw.csv"
    raw.write_text("userId,movieId,rating,timestamp\n1,1,4.5,10\n")

    with pytest.raises(ValueError, match="only 0 or 1"):
        load_rating_split(str(raw))


def test_load_rating_split_rejects_empty_split(tmp_path: Path) -> None:
    empty = tmp_path / "empty.csv"
    empty.write_text("userId,movieId,rating,timestamp\n")

    with pytest.raises(ValueError, match="empty"):
        load_rating_split(str(empty))


def test_load_rating_split_rejects_too_few_columns(tmp_path: Path) -> None:
    narrow = tmp_path / "narrow.csv"
    narrow.write_text("userId,movieId\n1,2\n")

    with pytest.raises(ValueError, match="at least 3 columns"):
        load_rating_split(str(narrow))


def test_build_pipeline_steps() -> None:
    pipeline = build_pipeline(C=0.5, random_state=7)

    assert isinstance(pipeline, Pipeline)
    assert list(pipeline.named_steps) == ["features", "classifier"]
    assert pipeline.named_steps["classifier"].C == 0.5
    assert pipeline.named_steps["classifier"].random_state == 7


def test_train_model_learns_known_ids(prepared_splits: PrepConfig) -> None:
    train_df = load_rating_split(str(prepared_splits.train_path))

    model = train_model(train_df)

    user_ids, movie_ids = known_ids(model)
    assert set(user_ids) == set(train_df["userId"])
    assert set(movie_ids) == set(train_df["movieId"])


def test_train_model_single_class_raises() -> None:
    train_df = pd.DataFrame(
        {"userId": ["1", "2"], "movieId": ["1", "2"], LABEL_COL: [True, True]}
    )

    with pytest.raises(ValueError, match="single label class"):
        train_model(train_df)


def test_evaluate_model_reports_metrics(prepared_splits: PrepConfig) -> None:
    model = train_model(load_rating_split(str(prepared_splits.train_path)))
    test_df = load_rating_split(str(prepared_splits.test_path))

    metrics = evaluate_model(model, test_df)

    assert metrics["num_rows"] == 20
    assert 0.0 <= metrics["accuracy"] <= 1.0
    assert metrics["auc"] is not None
    assert 0.0 <= metrics["auc"] <= 1.0
    assert 0.0 < metrics["positive_rate"] < 1.0


def test_evaluate_model_single_class_has_no_auc(prepared_splits: PrepConfig) -> None:
    model = train_model(load_rating_split(str(prepared_splits.train_path)))
    test_df = pd.DataFrame(
        {"userId": ["1", "2"], "movieId": ["1", "2"], LABEL_COL: [False, False]}
    )

    metrics = evaluate_model(model, test_df)

    assert metrics["auc"] is None
    assert metrics["positive_rate"] == 0.0


def test_evaluate_model_empty_split_raises(prepared_splits: PrepConfig) -> None:
    model = train_model(load_rating_split(str(prepared_splits.train_path)))
    empty = pd.DataFrame({"userId": [], "movieId": [], LABEL_COL: []})

    with pytest.raises(ValueError, match="empty"):
        evaluate_model(model, empty)


def test_train_with_config_runs_full_workflow(tmp_path: Path) -> None:
    ratings = write_fake_ratings(tmp_path / "ratings.csv")
    config = TrainingConfig(
        ratings_path=ratings,
        prepare=True,
        train_path=tmp_path / "ratings_train.csv",
        test_path=tmp_path / "ratings_test.csv",
        output_dir=tmp_path / "model",
    )

    result = train_with_config(config)

    assert config.train_path.exists()
    assert config.test_path.exists()
    assert (tmp_path / "model" / MODEL_FILENAME).exists()
    assert (tmp_path / "model" / METADATA_FILENAME).exists()
    assert check_model_exists(str(tmp_path / "model"))

    assert result.metadata["num_train_rows"] == 180
    assert result.metadata["num_test_rows"] == 20
    assert result.metrics == result.metadata["metrics"]
    assert result.sample_prediction.user_id == "6"
    assert result.sample_prediction.movie_id == "10"
    assert 0.0 <= result.sample_prediction.score <= 100.0


def test_saved_model_reloads_with_same_predictions(tmp_path: Path) -> None:
    ratings = write_fake_ratings(tmp_path / "ratings.csv")
    config = TrainingConfig(
        ratings_path=ratings,
        prepare=True,
        train_path=tmp_path / "ratings_train.csv",
        test_path=tmp_path / "ratings_test.csv",
        output_dir=tmp_path / "model",
    )
    result = train_with_config(config)

    reloaded, metadata = load_model_artifacts(str(tmp_path / "model"))
    test_df = load_rating_split(str(config.test_path))

    features = test_df[["userId", "movieId"]]
    assert list(reloaded.predict(features)) == list(result.model.predict(features))
    assert metadata["user_ids"] == known_ids(reloaded)[0]


def test_train_with_config_prepare_requires_ratings_path(tmp_path: Path) -> None:
    config = TrainingConfig(prepare=True, output_dir=tmp_path / "model")

    with pytest.raises(ValueError, match="ratings_path"):
        train_with_config(config)


def test_train_with_config_missing_splits(tmp_path: Path) -> None:
    config = TrainingConfig(
        train_path=tmp_path / "nope_train.csv",
        test_path=tmp_path / "nope_test.csv",
        output_dir=tmp_path / "model",
    )

    with pytest.raises(FileNotFoundError):
        train_with_config(config)
    assert not check_model_exists(str(tmp_path / "model"))


def test_load_model_artifacts_missing_dir(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_model_artifacts(str(tmp_path / "missing"))
