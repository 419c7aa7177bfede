"""Custom exceptions for MovieRec.

Defines specific exception types for data preparation, model loading and
prediction so that callers (CLI scripts and the API) can report them cleanly.
"""

from typing import Any, Dict, Optional


class MovieRecException(Exception):
    """Base exception for MovieRec errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for API responses
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class ParseError(MovieRecException, ValueError):
    """Raised when a ratings row cannot be parsed.

    ``row_index`` is the 0-based position of the record in the dataset body
    (the header is not counted), or None when the header itself is missing.
    """

    def __init__(
        self,
        message: str,
        row_index: Optional[int] = None,
        column: Optional[int] = None,
        value: Optional[str] = None,
    ):
        if row_index is not None:
            message = f"Row {row_index}: {message}"
        super().__init__(
            message=message,
            status_code=400,
            details={"row_index": row_index, "column": column, "value": value},
        )
        self.row_index = row_index
        self.column = column
        self.value = value


class ModelNotFoundError(MovieRecException):
    """Raised when model files cannot be found."""

    def __init__(self, model_path: str, details: Optional[Dict[str, Any]] = None):
        message = f"Model not found at '{model_path}'. Please train a model first."
        super().__init__(
            message=message,
            status_code=503,
            details=details or {"model_path": model_path},
        )


class ModelLoadError(MovieRecException):
    """Raised when model fails to load."""

    def __init__(self, model_path: str, error: Exception):
        message = f"Failed to load model from '{model_path}': {error}"
        super().__init__(
            message=message,
            status_code=500,
            details={
                "model_path": model_path,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )


class PredictionError(MovieRecException):
    """Raised when a rating prediction fails."""

    def __init__(self, user_id: str, movie_id: str, error: Exception):
        message = (
            f"Failed to predict rating for user {user_id} "
            f"and movie {movie_id}: {error}"
        )
        super().__init__(
            message=message,
            status_code=500,
            details={
                "user_id": user_id,
                "movie_id": movie_id,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )
