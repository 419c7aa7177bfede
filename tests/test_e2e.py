"""End-to-end tests for MovieRec.

Generates fake ratings, prepares the splits, trains and persists the model,
then serves predictions from it through the API.
"""

import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from scripts.generate_fake_data import generate_fake_ratings
from src.api.main import app
from src.recommender.train import TrainingConfig, train_with_config

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)

# Create test client
client = TestClient(app)


@pytest.fixture(scope="module")
def trained_workdir(tmp_path_factory) -> Path:
    """Generate data and train a model once for the module."""
    workdir = tmp_path_factory.mktemp("e2e")
    ratings = generate_fake_ratings(num_users=30, num_movies=40, num_ratings=600, seed=7)
    ratings.to_csv(workdir / "ratings.csv", index=False)

    train_with_config(
        TrainingConfig(
            ratings_path=workdir / "ratings.csv",
            prepare=True,
            train_path=workdir / "ratings_train.csv",
            test_path=workdir / "ratings_test.csv",
            output_dir=workdir / "model",
        )
    )
    return workdir


def test_generated_ratings_layout():
    df = generate_fake_ratings(num_users=5, num_movies=5, num_ratings=50, seed=1)

    assert list(df.columns) == ["userId", "movieId", "rating", "timestamp"]
    assert len(df) == 50
    assert df["rating"].between(0.5, 5.0).all()
    assert (df["rating"] * 2).eq((df["rating"] * 2).round()).all()


def test_generated_ratings_are_reproducible():
    first = generate_fake_ratings(num_ratings=20, seed=3)
    second = generate_fake_ratings(num_ratings=20, seed=3)

    assert first[["userId", "movieId", "rating"]].equals(second[["userId", "movieId", "rating"]])


def test_generate_fake_ratings_rejects_bad_counts():
    with pytest.raises(ValueError):
        generate_fake_ratings(num_ratings=0)


def test_prepared_splits_have_expected_sizes(trained_workdir: Path):
    train_lines = (trained_workdir / "ratings_train.csv").read_text().splitlines()
    test_lines = (trained_workdir / "ratings_test.csv").read_text().splitlines()

    assert train_lines[0] == "userId,movieId,rating,timestamp"
    assert len(train_lines) - 1 == 540
    assert len(test_lines) - 1 == 60

    train_stamps = [int(line.split(",")[3]) for line in train_lines[1:]]
    test_stamps = [int(line.split(",")[3]) for line in test_lines[1:]]
    assert train_stamps == sorted(train_stamps)
    assert max(train_stamps) <= min(test_stamps)
    assert {line.split(",")[2] for line in train_lines[1:]} <= {"0", "1"}


def test_full_flow_prediction_through_api(trained_workdir: Path):
    model_dir = trained_workdir / "model"

    response = client.get(f"/predict/1/1?model_dir={model_dir}")

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "1"
    assert 0.0 <= data["score"] <= 100.0

    status = client.get(f"/status?model_dir={model_dir}").json()
    assert status["model_loaded"] is True
    assert status["num_users"] > 0
