"""
Error handling utilities for the Deal Feed system.

Failures are classified by category and severity and kept in an
in-memory tracker whose statistics the ``/health`` endpoint reports.
Nothing here retries: a failed upstream fetch is reported, not repeated.
"""

import asyncio
import functools
import traceback
from collections import Counter, deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Deque, Dict, Optional

from .logging import get_logger


class ErrorSeverity(Enum):
    """How badly a failure affects the feed."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Where a failure came from."""

    NETWORK = "network"
    CONFIGURATION = "configuration"
    PARSING = "parsing"
    DATA_VALIDATION = "data_validation"
    SYSTEM = "system"
    EXTERNAL_SERVICE = "external_service"


@dataclass
class ErrorInfo:
    """A single recorded failure."""

    component: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    exception_type: str = "Unknown"
    traceback: str = ""
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def key(self) -> str:
        """Counter key, e.g. ``feed.server.external_service.high``."""
        return f"{self.component}.{self.category.value}.{self.severity.value}"


class ErrorTracker:
    """
    Keeps the most recent failures and running counts per component.

    Counts survive after old entries fall out of the bounded history.
    """

    def __init__(self, max_errors: int = 1000):
        """
        Args:
            max_errors: Number of recent failures kept in memory
        """
        self.max_errors = max_errors
        self.errors: Deque[ErrorInfo] = deque(maxlen=max_errors)
        self.error_counts: Counter = Counter()
        self.logger = get_logger("error_tracker")

    def record_error(
        self,
        component: str,
        category: ErrorCategory,
        severity: ErrorSeverity,
        message: str,
        exception: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> ErrorInfo:
        """
        Record a failure and log it.

        Args:
            component: Component that failed, e.g. ``feed.server``
            category: Error category
            severity: Error severity
            message: Human readable description
            exception: The exception raised, if any
            context: Extra details stored with the entry

        Returns:
            The stored ErrorInfo
        """
        info = ErrorInfo(
            component=component,
            category=category,
            severity=severity,
            message=message,
            context=context or {},
        )
        if exception is not None:
            info.exception_type = type(exception).__name__
            info.traceback = traceback.format_exc()

        self.errors.append(info)
        self.error_counts[info.key] += 1

        self.logger.error(
            f"Error recorded: {message}",
            extra={
                "source": component,
                "category": category.value,
                "severity": severity.value,
                "exception_type": info.exception_type,
                "context": info.context,
            },
        )
        return info

    def get_error_stats(self) -> Dict[str, Any]:
        """Summary used by the health endpoint."""
        cutoff = datetime.now() - timedelta(hours=1)
        by_category = Counter(info.category for info in self.errors)

        return {
            "total_errors": len(self.errors),
            "errors_last_hour": sum(1 for info in self.errors if info.timestamp >= cutoff),
            "error_counts": dict(self.error_counts),
            "category_breakdown": {
                category.value: by_category[category] for category in ErrorCategory
            },
        }

    def clear(self) -> None:
        """Forget all recorded failures."""
        self.errors.clear()
        self.error_counts.clear()


_error_tracker: Optional[ErrorTracker] = None


def get_error_tracker() -> ErrorTracker:
    """Process-wide error tracker."""
    global _error_tracker
    if _error_tracker is None:
        _error_tracker = ErrorTracker()
    return _error_tracker


def with_error_handling(
    component: str,
    category: ErrorCategory,
    severity: ErrorSeverity = ErrorSeverity.MEDIUM,
    fallback_value: Any = None,
    suppress_exceptions: bool = False,
):
    """
    Record any exception raised by the wrapped function.

    The exception is re-raised unless suppress_exceptions is set, in which
    case fallback_value is returned. Works for plain and async functions.

    Args:
        component: Component name stored with the error
        category: Error category
        severity: Error severity
        fallback_value: Value returned when an exception is suppressed
        suppress_exceptions: Whether to swallow the exception after recording
    """

    def decorator(func: Callable) -> Callable:
        name = func.__name__

        def on_failure(e: Exception) -> Any:
            get_error_tracker().record_error(
                component=component,
                category=category,
                severity=severity,
                message=f"Error in {name}: {e}",
                exception=e,
                context={"function": name},
            )
            if not suppress_exceptions:
                raise e

            get_logger(component).warning(f"Suppressed failure in {name}: {e}")
            return fallback_value

        if asyncio.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    return on_failure(e)

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                return on_failure(e)

        return sync_wrapper

    return decorator
