"""Command-line interface for preparing rating splits.

Binarizes a MovieLens-style ratings CSV (rating > 3 becomes 1, otherwise 0),
sorts it by timestamp and writes the training and test splits.

Example:
    $ python scripts/prepare_data.py data/ratings.csv

    $ python scripts/prepare_data.py data/ratings.csv \\
        --train-path data/ratings_train.csv \\
        --test-path data/ratings_test.csv
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.recommender.dataprep import (
    DEFAULT_TEST_FRACTION,
    DEFAULT_THRESHOLD,
    DEFAULT_TRAIN_FRACTION,
    PrepConfig,
    prepare,
)
from src.recommender.exceptions import ParseError


def parse_arguments() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Binarize ratings and split them into training and test files.",
    )
    parser.add_argument("ratings_path", type=str, help="Raw ratings CSV file")
    parser.add_argument(
        "--train-path",
        type=str,
        default=None,
        help="Training split output (default: ratings_train.csv next to the input)",
    )
    parser.add_argument(
        "--test-path",
        type=str,
        default=None,
        help="Test split output (default: ratings_test.csv next to the input)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_THRESHOLD,
        help=f"Ratings above this become 1 (default: {DEFAULT_THRESHOLD})",
    )
    parser.add_argument(
        "--train-fraction",
        type=float,
        default=DEFAULT_TRAIN_FRACTION,
        help=f"Fraction of rows for training (default: {DEFAULT_TRAIN_FRACTION})",
    )
    parser.add_argument(
        "--test-fraction",
        type=float,
        default=DEFAULT_TEST_FRACTION,
        help=f"Fraction of rows for testing (default: {DEFAULT_TEST_FRACTION})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )
    return parser.parse_args()


def main() -> int:
    """Main entry point.

    Returns:
        Exit code: 0 on success, 1 on error.
    """
    args = parse_arguments()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger = logging.getLogger(__name__)

    overrides = {
        "threshold": args.threshold,
        "train_fraction": args.train_fraction,
        "test_fraction": args.test_fraction,
    }
    if args.train_path:
        overrides["train_path"] = Path(args.train_path)
    if args.test_path:
        overrides["test_path"] = Path(args.test_path)

    try:
        config = PrepConfig.for_input(args.ratings_path, **overrides)
        train_path, test_path = prepare(config)
    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        return 1
    except ParseError as e:
        logger.error(f"Malformed ratings file: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Validation error: {e}")
        return 1
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Preparation interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1

    logger.info(f"Training split: {train_path.absolute()}")
    logger.info(f"Test split:     {test_path.absolute()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
