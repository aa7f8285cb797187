"""
Base Service Class.
Provides common utility methods for all services.
"""
import time


class BaseService:
    """
    Abstract base class for all services.
    """

    @staticmethod
    def timer() -> float:
        """Monotonic start mark for elapsed_ms()."""
        return time.perf_counter()

    @staticmethod
    def elapsed_ms(started: float) -> float:
        """Milliseconds since a timer() mark, rounded for logs and payloads."""
        return round((time.perf_counter() - started) * 1000, 2)
