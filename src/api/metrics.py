"""Prediction metrics for the MovieRec API.

Singleton service counting served predictions, their labels and latency.
"""

import threading
from typing import Dict


class PredictionMetrics:
    """Singleton, thread-safe prediction counters."""

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        """Create singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._counter_lock = threading.Lock()
        self.reset()
        self._initialized = True

    def record_prediction(self, latency_ms: float, predicted_label: bool) -> None:
        """Record one served prediction.

        Args:
            latency_ms: Request latency in milliseconds
            predicted_label: Label returned to the caller
        """
        with self._counter_lock:
            self._prediction_count += 1
            if predicted_label:
                self._positive_count += 1
            self._total_latency_ms += latency_ms
            self._max_latency_ms = max(self._max_latency_ms, latency_ms)

    def get_metrics(self) -> Dict:
        """Get a snapshot of the counters.

        Returns:
            Dictionary with ``prediction_count``, ``positive_count``,
            ``positive_rate``, ``average_latency_ms`` and ``max_latency_ms``.
        """
        with self._counter_lock:
            count = self._prediction_count
            return {
                "prediction_count": count,
                "positive_count": self._positive_count,
                "positive_rate": round(self._positive_count / count, 4) if count else 0.0,
                "average_latency_ms": (
                    round(self._total_latency_ms / count, 2) if count else 0.0
                ),
                "max_latency_ms": round(self._max_latency_ms, 2),
            }

    def reset(self) -> None:
        """Reset all counters (useful for testing)."""
        with self._counter_lock:
            self._prediction_count = 0
            self._positive_count = 0
            self._total_latency_ms = 0.0
            self._max_latency_ms = 0.0


# Global singleton instance
metrics_service = PredictionMetrics()
