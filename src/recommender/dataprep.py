"""Ratings dataset preparation for binary-classification training.

The classifier learns whether a user would recommend a movie, so the raw
ratings are first turned into binary labels and then split into training and
test files:

1. Every rating above a threshold (3 by default) becomes ``1`` and every other
   rating becomes ``0``.
2. Body records are stably sorted by the integer sort key in column 3
   (the rating timestamp in MovieLens data).
3. The first ``floor(train_fraction * n)`` sorted records form the training
   split and the last ``floor(test_fraction * n)`` records form the test split.
   The two cuts are truncated independently, so for body sizes that are not a
   multiple of ten the default 90/10 split skips a record between them.

Both output files keep the input header line verbatim.
"""

import logging
import math
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, NamedTuple, Sequence, Tuple, Union

from src.recommender.exceptions import ParseError

# Configure module logger
logger = logging.getLogger(__name__)

# Column positions within a ratings record
USER_COLUMN = 0
MOVIE_COLUMN = 1
RATING_COLUMN = 2
SORT_KEY_COLUMN = 3
MIN_COLUMNS = 4

SEPARATOR = ","

# Preparation defaults
DEFAULT_THRESHOLD = 3.0
DEFAULT_TRAIN_FRACTION = 0.9
DEFAULT_TEST_FRACTION = 0.1
TRAIN_FILENAME = "ratings_train.csv"
TEST_FILENAME = "ratings_test.csv"

PathLike = Union[str, Path]


@dataclass
class PrepConfig:
    """Configuration for :func:`prepare`.

    Attributes:
        input_path: Raw ratings CSV (header + ``userId,movieId,rating,sortKey,...``).
        train_path: Where the training split is written.
        test_path: Where the test split is written.
        threshold: Ratings strictly above this value are labelled ``1``.
        train_fraction: Fraction of the sorted body taken from the front.
        test_fraction: Fraction of the sorted body taken from the back.
    """

    input_path: Path
    train_path: Path
    test_path: Path
    threshold: float = DEFAULT_THRESHOLD
    train_fraction: float = DEFAULT_TRAIN_FRACTION
    test_fraction: float = DEFAULT_TEST_FRACTION

    def __post_init__(self) -> None:
        self.input_path = Path(self.input_path)
        self.train_path = Path(self.train_path)
        self.test_path = Path(self.test_path)

        for name in ("train_fraction", "test_fraction"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")

    @classmethod
    def for_input(cls, input_path: PathLike, **overrides) -> "PrepConfig":
        """Build a config whose outputs sit next to ``input_path``.

        Example:
            >>> config = PrepConfig.for_input("data/ratings.csv")
            >>> config.train_path
            PosixPath('data/ratings_train.csv')
        """
        input_path = Path(input_path)
        overrides.setdefault("train_path", input_path.parent / TRAIN_FILENAME)
        overrides.setdefault("test_path", input_path.parent / TEST_FILENAME)
        return cls(input_path=input_path, **overrides)


class RatingRecord(NamedTuple):
    """One binarized body row of the ratings dataset."""

    row_index: int
    sort_key: int
    fields: Tuple[str, ...]

    def to_line(self) -> str:
        return SEPARATOR.join(self.fields)


def read_dataset(input_path: PathLike) -> Tuple[str, List[str]]:
    """Read a ratings file and return its header and body lines.

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
        ParseError: If the file is empty or is not valid UTF-8.
    """
    path = Path(input_path)
    if not path.exists():
        raise FileNotFoundError(f"Ratings file not found: {input_path}")

    logger.info(f"Reading ratings from {input_path}")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(
            f"input is not valid UTF-8 (byte offset {e.start})", value=str(input_path)
        ) from e

    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    if not lines:
        raise ParseError("ratings file is empty, expected a header line")

    return lines[0], lines[1:]


def parse_record(
    line: str, row_index: int, threshold: float = DEFAULT_THRESHOLD
) -> RatingRecord:
    """Binarize the rating of one body line and extract its sort key.

    Raises:
        ParseError: If the line has fewer than four columns, the rating is not
            numeric or the sort key is not an integer.
    """
    fields = line.split(SEPARATOR)
    if len(fields) < MIN_COLUMNS:
        raise ParseError(
            f"expected at least {MIN_COLUMNS} columns, found {len(fields)}",
            row_index=row_index,
            value=line,
        )

    raw_rating = fields[RATING_COLUMN]
    try:
        rating = float(raw_rating)
    except ValueError:
        raise ParseError(
            f"rating {raw_rating!r} is not numeric",
            row_index=row_index,
            column=RATING_COLUMN,
            value=raw_rating,
        ) from None

    raw_key = fields[SORT_KEY_COLUMN]
    try:
        sort_key = int(raw_key)
    except ValueError:
        raise ParseError(
            f"sort key {raw_key!r} is not an integer",
            row_index=row_index,
            column=SORT_KEY_COLUMN,
            value=raw_key,
        ) from None

    fields[RATING_COLUMN] = "1" if rating > threshold else "0"
    return RatingRecord(row_index=row_index, sort_key=sort_key, fields=tuple(fields))


def split_records(
    records: Sequence[RatingRecord],
    train_fraction: float = DEFAULT_TRAIN_FRACTION,
    test_fraction: float = DEFAULT_TEST_FRACTION,
) -> Tuple[List[RatingRecord], List[RatingRecord]]:
    """Stably sort records by key and cut the training prefix and test suffix."""
    ordered = sorted(records, key=lambda record: record.sort_key)
    total = len(ordered)

    n_train = math.floor(train_fraction * total)
    n_test = math.floor(test_fraction * total)

    train = ordered[:n_train]
    test = ordered[total - n_test:]

    skipped = total - n_train - n_test
    if skipped > 0:
        logger.debug(f"{skipped} record(s) fall between the train and test cuts")
    elif skipped < 0:
        logger.debug(f"{-skipped} record(s) appear in both train and test")

    return train, test


def _write_temp(target: Path, header: str, records: Sequence[RatingRecord]) -> Path:
    """Write header and records to a temporary file beside ``target``."""
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(header + "\n")
            for record in records:
                handle.write(record.to_line() + "\n")
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return tmp_path


def write_splits(
    header: str,
    train: Sequence[RatingRecord],
    test: Sequence[RatingRecord],
    train_path: Path,
    test_path: Path,
) -> None:
    """Write both splits, replacing the targets only once both are on disk.

    If the test split cannot be moved into place, the previous training file
    is restored so that the two outputs never come from different runs.
    """
    for target in (train_path, test_path):
        if target.is_dir():
            raise IsADirectoryError(f"Output path is a directory: {target}")

    pending: List[Path] = []
    try:
        pending.append(_write_temp(train_path, header, train))
        pending.append(_write_temp(test_path, header, test))

        backup = None
        if train_path.exists():
            backup = _reserve_temp(train_path, suffix=".bak")
            pending.append(backup)
            os.replace(train_path, backup)

        os.replace(pending[0], train_path)
        try:
            os.replace(pending[1], test_path)
        except OSError:
            if backup is not None:
                os.replace(backup, train_path)
            else:
                train_path.unlink(missing_ok=True)
            raise
    finally:
        for tmp_path in pending:
            tmp_path.unlink(missing_ok=True)


def _reserve_temp(target: Path, suffix: str) -> Path:
    """Create an empty, uniquely named file beside ``target``."""
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=suffix, dir=target.parent
    )
    os.close(fd)
    return Path(tmp_name)


def prepare(config: PrepConfig) -> Tuple[Path, Path]:
    """Binarize a ratings dataset and write its training and test splits.

    Nothing is written until the whole input has been parsed, so a malformed
    row leaves any existing output files untouched.

    Args:
        config: Paths, threshold and split fractions.

    Returns:
        Tuple of (training file path, test file path).

    Raises:
        FileNotFoundError: If the input file does not exist.
        OSError: If the input cannot be read or an output cannot be written.
        ParseError: If any body row is malformed.

    Example:
        >>> train_path, test_path = prepare(PrepConfig.for_input("data/ratings.csv"))
    """
    header, lines = read_dataset(config.input_path)

    records = [
        parse_record(line, row_index, config.threshold)
        for row_index, line in enumerate(lines)
    ]
    logger.info(f"Parsed {len(records)} rating records")

    train, test = split_records(records, config.train_fraction, config.test_fraction)
    logger.info(f"Training records: {len(train)}, test records: {len(test)}")

    write_splits(header, train, test, config.train_path, config.test_path)
    logger.info(f"Wrote training split to {config.train_path}")
    logger.info(f"Wrote test split to {config.test_path}")

    return config.train_path, config.test_path
