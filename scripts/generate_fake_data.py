"""Generate fake movie ratings for testing and development.

Creates a CSV in the MovieLens ``ratings.csv`` layout
(``userId,movieId,rating,timestamp``) with half-star ratings between 0.5 and 5
and Unix timestamps, ready for ``scripts/prepare_data.py``.

Example:
    Run the script directly to generate default data:
        $ python scripts/generate_fake_data.py

    Or import and use programmatically:
        from scripts.generate_fake_data import generate_fake_ratings
        df = generate_fake_ratings(num_users=100, num_movies=200)
"""

import random
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import pandas as pd

# Default configuration constants
DEFAULT_NUM_USERS = 50
DEFAULT_NUM_MOVIES = 100
DEFAULT_NUM_RATINGS = 1000
DEFAULT_DAYS_BACK = 365
DEFAULT_SEED = 42
RATING_VALUES = [0.5 * step for step in range(1, 11)]


def generate_fake_ratings(
    num_users: int = DEFAULT_NUM_USERS,
    num_movies: int = DEFAULT_NUM_MOVIES,
    num_ratings: int = DEFAULT_NUM_RATINGS,
    end_date: Optional[datetime] = None,
    seed: Optional[int] = DEFAULT_SEED,
) -> pd.DataFrame:
    """Generate synthetic ratings.

    Each user gets a hidden taste offset so that ratings are not pure noise
    and a classifier has something to learn.

    Args:
        num_users: Number of unique users. Must be positive.
        num_movies: Number of unique movies. Must be positive.
        num_ratings: Number of rating rows. Must be positive.
        end_date: Latest possible timestamp. Defaults to now.
        seed: Random seed; None for non-deterministic output.

    Returns:
        DataFrame with ``userId``, ``movieId``, ``rating`` and ``timestamp``
        columns, in generation order (not sorted by timestamp).

    Raises:
        ValueError: If any count is non-positive.
    """
    if num_users <= 0 or num_movies <= 0 or num_ratings <= 0:
        raise ValueError("num_users, num_movies, and num_ratings must be positive")

    rng = random.Random(seed)
    if end_date is None:
        end_date = datetime.now()
    start_ts = int((end_date - timedelta(days=DEFAULT_DAYS_BACK)).timestamp())
    end_ts = int(end_date.timestamp())

    user_bias = {user: rng.uniform(-1.5, 1.5) for user in range(1, num_users + 1)}
    movie_bias = {movie: rng.uniform(-1.0, 1.0) for movie in range(1, num_movies + 1)}

    rows = []
    for _ in range(num_ratings):
        user_id = rng.randint(1, num_users)
        movie_id = rng.randint(1, num_movies)
        raw = 3.0 + user_bias[user_id] + movie_bias[movie_id] + rng.gauss(0, 0.75)
        rating = min(RATING_VALUES, key=lambda value: abs(value - raw))
        rows.append({
            "userId": user_id,
            "movieId": movie_id,
            "rating": rating,
            "timestamp": rng.randint(start_ts, end_ts),
        })

    return pd.DataFrame(rows, columns=["userId", "movieId", "rating", "timestamp"])


def main() -> None:
    """Generate default data and save it to data/ratings.csv."""
    print(f"Generating {DEFAULT_NUM_RATINGS} fake ratings...")
    print(f"Users: {DEFAULT_NUM_USERS}, Movies: {DEFAULT_NUM_MOVIES}")

    df = generate_fake_ratings()

    data_dir = Path(__file__).parent.parent / "data"
    data_dir.mkdir(exist_ok=True)

    output_path = data_dir / "ratings.csv"
    df.to_csv(output_path, index=False)

    print("\nData generated successfully!")
    print(f"Saved to: {output_path}")
    print("\nData preview:")
    print(df.head(10))
    print("\nData summary:")
    print(f"  Total ratings: {len(df)}")
    print(f"  Unique users: {df['userId'].nunique()}")
    print(f"  Unique movies: {df['movieId'].nunique()}")
    print(f"  Ratings above 3: {(df['rating'] > 3).mean():.1%}")


if __name__ == "__main__":
    main()
