"""Command-line interface for training the rating classifier.

Runs the whole workflow: (optionally) prepare the splits from raw ratings,
train, evaluate, score one sample pair, save the model and reload it.

Example:
    Prepare splits and train in one go:
        $ python scripts/train_model.py --ratings data/ratings.csv

    Train on existing splits with custom parameters:
        $ python scripts/train_model.py \\
            --train-path data/ratings_train.csv \\
            --test-path data/ratings_test.csv \\
            --output-dir models/production \\
            --C 0.5
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.recommender.train import (
    DEFAULT_C,
    DEFAULT_MAX_ITER,
    DEFAULT_RANDOM_STATE,
    DEFAULT_SAMPLE_MOVIE,
    DEFAULT_SAMPLE_USER,
    TrainingConfig,
    train_with_config,
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the script.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise, use INFO.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_arguments() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Namespace object containing parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Train the binary movie rating classifier.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Prepare splits from raw ratings, then train
  python scripts/train_model.py --ratings data/ratings.csv

  # Train on already prepared splits
  python scripts/train_model.py --train-path data/ratings_train.csv --test-path data/ratings_test.csv

  # Train with verbose logging
  python scripts/train_model.py --ratings data/ratings.csv --verbose
        """,
    )

    parser.add_argument(
        "--ratings",
        type=str,
        default=None,
        help="Raw ratings CSV. When given, the splits are regenerated from it first.",
    )
    parser.add_argument(
        "--train-path",
        type=str,
        default=None,
        help="Prepared training split (default: data/ratings_train.csv, "
        "or next to --ratings)",
    )
    parser.add_argument(
        "--test-path",
        type=str,
        default=None,
        help="Prepared test split (default: data/ratings_test.csv, "
        "or next to --ratings)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="models",
        help="Directory where model artifacts will be saved (default: models)",
    )
    parser.add_argument(
        "--C",
        type=float,
        default=DEFAULT_C,
        help=f"Inverse regularization strength (default: {DEFAULT_C})",
    )
    parser.add_argument(
        "--max-iter",
        type=int,
        default=DEFAULT_MAX_ITER,
        help=f"Maximum solver iterations (default: {DEFAULT_MAX_ITER})",
    )
    parser.add_argument(
        "--random-state",
        type=int,
        default=DEFAULT_RANDOM_STATE,
        help=f"Random seed for reproducibility (default: {DEFAULT_RANDOM_STATE})",
    )
    parser.add_argument(
        "--sample-user",
        type=str,
        default=DEFAULT_SAMPLE_USER,
        help=f"User id for the sample prediction (default: {DEFAULT_SAMPLE_USER})",
    )
    parser.add_argument(
        "--sample-movie",
        type=str,
        default=DEFAULT_SAMPLE_MOVIE,
        help=f"Movie id for the sample prediction (default: {DEFAULT_SAMPLE_MOVIE})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    return parser.parse_args()


def build_config(args: argparse.Namespace) -> TrainingConfig:
    """Translate parsed arguments into a TrainingConfig."""
    config = TrainingConfig(
        output_dir=Path(args.output_dir),
        C=args.C,
        max_iter=args.max_iter,
        random_state=args.random_state,
        sample_user=args.sample_user,
        sample_movie=args.sample_movie,
    )

    if args.ratings:
        ratings_path = Path(args.ratings)
        config.ratings_path = ratings_path
        config.prepare = True
        config.train_path = ratings_path.parent / "ratings_train.csv"
        config.test_path = ratings_path.parent / "ratings_test.csv"

    if args.train_path:
        config.train_path = Path(args.train_path)
    if args.test_path:
        config.test_path = Path(args.test_path)

    return config


def main() -> int:
    """Main entry point for the training script.

    Returns:
        Exit code: 0 on success, 1 on error.
    """
    try:
        args = parse_arguments()
        setup_logging(verbose=args.verbose)
        logger = logging.getLogger(__name__)

        config = build_config(args)

        logger.info("=" * 70)
        logger.info("Training Configuration")
        logger.info("=" * 70)
        logger.info(f"Ratings:          {config.ratings_path or '(splits already prepared)'}")
        logger.info(f"Training split:   {config.train_path}")
        logger.info(f"Test split:       {config.test_path}")
        logger.info(f"Output directory: {config.output_dir}")
        logger.info(f"C:                {config.C}")
        logger.info(f"Max iterations:   {config.max_iter}")
        logger.info(f"Random state:     {config.random_state}")
        logger.info("=" * 70)

        result = train_with_config(config)

        auc = result.metrics["auc"]
        logger.info("=" * 70)
        logger.info("Training Summary")
        logger.info("=" * 70)
        logger.info(f"Training rows:  {result.metadata['num_train_rows']}")
        logger.info(f"Test rows:      {result.metadata['num_test_rows']}")
        logger.info(f"Accuracy:       {result.metrics['accuracy']:.2f}")
        logger.info(f"AUC:            {auc:.2f}" if auc is not None else "AUC:            n/a")
        logger.info(f"Model saved to: {result.model_path.absolute()}")
        logger.info("=" * 70)

        return 0

    except FileNotFoundError as e:
        logging.error(f"File error: {e}")
        return 1
    except ValueError as e:
        logging.error(f"Validation error: {e}")
        return 1
    except KeyboardInterrupt:
        logging.warning("Training interrupted by user")
        return 130
    except Exception as e:
        logging.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
