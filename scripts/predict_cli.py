"""CLI script for scoring a single user/movie pair.

Loads the persisted model and prints the recommendation score and label.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.recommender.exceptions import PredictionError
from src.recommender.infer import DEFAULT_MODEL_DIR, predict_from_model_dir

# Setup logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s"
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Main CLI function."""
    parser = argparse.ArgumentParser(
        description="Predict whether a user would recommend a movie",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/predict_cli.py 6 10
  python scripts/predict_cli.py 6 10 --model-dir models/production
        """
    )
    parser.add_argument("user_id", type=str, help="User ID to score")
    parser.add_argument("movie_id", type=str, help="Movie ID to score")
    parser.add_argument(
        "--model-dir",
        type=str,
        default=DEFAULT_MODEL_DIR,
        help=f"Directory containing model files (default: {DEFAULT_MODEL_DIR})"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    try:
        prediction = predict_from_model_dir(
            args.user_id, args.movie_id, model_dir=args.model_dir
        )
    except FileNotFoundError as e:
        print(f"Error: Model not found in {args.model_dir}", file=sys.stderr)
        print(f"  {e}", file=sys.stderr)
        sys.exit(1)
    except PredictionError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"Error: could not load model from {args.model_dir}: {e}", file=sys.stderr)
        sys.exit(1)

    print(
        f"\nUserId: {prediction.user_id} with movieId: {prediction.movie_id} "
        f"Score: {prediction.score:.2f} and Label {prediction.predicted_label}"
    )
    if not prediction.known_user:
        print(f"  Note: user {prediction.user_id} was not in the training data")
    if not prediction.known_movie:
        print(f"  Note: movie {prediction.movie_id} was not in the training data")
    print()


if __name__ == "__main__":
    main()
