"""
Central error handling for the dashboard.

Failures the dashboard survives (storage outages) and failures it passes
on to the caller (quote provider outages) are both reported here once, so
they are classified, logged with context and kept in a bounded history.
"""

from collections import Counter, deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Deque, Dict, Optional, Tuple, Type

from ..config.logging_config import get_logger
from ..exceptions import (
    ConfigurationError,
    DataFetchError,
    PersistenceUnavailable,
    RateLimitError,
    ResolverUnavailable,
    ValidationError,
)

logger = get_logger(__name__)


class ErrorSeverity(Enum):
    """How badly an error affects the dashboard."""
    CRITICAL = "critical"    # Process cannot go on
    HIGH = "high"            # Operation aborted
    MEDIUM = "medium"        # Operation done, something degraded
    LOW = "low"
    INFO = "info"


class ErrorCategory(Enum):
    """Where an error came from."""
    DATA_ACCESS = "data_access"            # Quote provider
    PERSISTENCE = "persistence"            # Key-value store
    VALIDATION = "validation"              # Bad user or renderer input
    CONFIGURATION = "configuration"        # Settings files
    EXTERNAL_SERVICE = "external_service"  # Unclassified network trouble
    SYSTEM = "system"


# First match wins
_CLASSIFICATION: Tuple[Tuple[Tuple[Type[BaseException], ...], ErrorSeverity, ErrorCategory], ...] = (
    ((MemoryError, SystemError), ErrorSeverity.CRITICAL, ErrorCategory.SYSTEM),
    ((ResolverUnavailable, DataFetchError, RateLimitError), ErrorSeverity.HIGH, ErrorCategory.DATA_ACCESS),
    ((PersistenceUnavailable,), ErrorSeverity.MEDIUM, ErrorCategory.PERSISTENCE),
    ((ValidationError,), ErrorSeverity.MEDIUM, ErrorCategory.VALIDATION),
    ((ConfigurationError,), ErrorSeverity.HIGH, ErrorCategory.CONFIGURATION),
)

_RETRYABLE = (ResolverUnavailable, DataFetchError, RateLimitError, ConnectionError, TimeoutError)

_LOG_LEVELS = {
    ErrorSeverity.CRITICAL: "critical",
    ErrorSeverity.HIGH: "error",
    ErrorSeverity.MEDIUM: "warning",
    ErrorSeverity.LOW: "info",
    ErrorSeverity.INFO: "info",
}


@dataclass
class ErrorContext:
    """Where an error happened."""
    symbol: Optional[str] = None
    widget_id: Optional[str] = None
    function_name: Optional[str] = None
    user_input: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ErrorInfo:
    """A handled error with its classification and messages."""
    error_id: str
    exception: Exception
    severity: ErrorSeverity
    category: ErrorCategory
    user_message: str
    technical_message: str
    context: ErrorContext
    retry_possible: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_id": self.error_id,
            "type": type(self.exception).__name__,
            "message": str(self.exception),
            "severity": self.severity.value,
            "category": self.category.value,
            "user_message": self.user_message,
            "retry_possible": self.retry_possible,
            "symbol": self.context.symbol,
            "widget_id": self.context.widget_id,
            "function": self.context.function_name,
            "timestamp": self.context.timestamp.isoformat(),
        }


def classify(exception: Exception) -> Tuple[ErrorSeverity, ErrorCategory]:
    """Severity and category for an exception."""
    for types, severity, category in _CLASSIFICATION:
        if isinstance(exception, types):
            return severity, category
    text = str(exception).lower()
    if "network" in text or "connection" in text:
        return ErrorSeverity.MEDIUM, ErrorCategory.EXTERNAL_SERVICE
    return ErrorSeverity.MEDIUM, ErrorCategory.SYSTEM


def user_message_for(exception: Exception, context: ErrorContext) -> str:
    """Short explanation suitable for the dashboard UI or CLI."""
    if isinstance(exception, RateLimitError):
        return "The quote service is rate limiting requests. Wait a moment and try again."
    if isinstance(exception, (ResolverUnavailable, DataFetchError)):
        symbol = context.symbol or getattr(exception, "symbol", None)
        target = f"Ticker {symbol} was not added" if symbol else "No quote was fetched"
        return f"{target}: the quote service could not be reached."
    if isinstance(exception, PersistenceUnavailable):
        return "Dashboard changes could not be saved and will be lost on restart."
    if isinstance(exception, ValidationError):
        return f"Invalid input: {exception.reason}"
    return f"Unexpected error: {str(exception)[:100]}"


class ErrorHandler:
    """Classifies, logs and remembers errors."""

    def __init__(self, max_history_size: int = 1000):
        self.error_count = 0
        self.max_history_size = max_history_size
        self.error_history: Deque[ErrorInfo] = deque(maxlen=max_history_size)

    def handle_error(
        self,
        exception: Exception,
        context: Optional[ErrorContext] = None,
        custom_message: Optional[str] = None,
    ) -> ErrorInfo:
        """
        Report an error.

        Args:
            exception: What went wrong
            context: Symbol, widget and function involved
            custom_message: Replaces the generated user message

        Returns:
            The ErrorInfo that was logged and stored
        """
        context = context or ErrorContext()
        self.error_count += 1
        severity, category = classify(exception)

        info = ErrorInfo(
            error_id=f"ERR_{self.error_count:06d}_{int(context.timestamp.timestamp())}",
            exception=exception,
            severity=severity,
            category=category,
            user_message=custom_message or user_message_for(exception, context),
            technical_message=self._technical_message(exception, context),
            context=context,
            retry_possible=isinstance(exception, _RETRYABLE),
        )

        log = getattr(logger, _LOG_LEVELS[severity])
        log(info.technical_message, extra={"error": info.to_dict()})
        self.error_history.append(info)
        return info

    @staticmethod
    def _technical_message(exception: Exception, context: ErrorContext) -> str:
        parts = [
            f"{label}: {value}"
            for label, value in (
                ("Symbol", context.symbol),
                ("Widget", context.widget_id),
                ("Function", context.function_name),
            )
            if value
        ]
        parts.append(f"Exception: {type(exception).__name__}")
        parts.append(f"Message: {exception}")
        return " | ".join(parts)

    def get_error_summary(self, hours: int = 24) -> Dict[str, Any]:
        """Counts of recent errors by severity, category and symbol."""
        cutoff = datetime.now() - timedelta(hours=hours)
        recent = [info for info in self.error_history if info.context.timestamp > cutoff]
        symbols = Counter(info.context.symbol for info in recent if info.context.symbol)

        return {
            "time_period_hours": hours,
            "total_errors": len(recent),
            "by_severity": dict(Counter(info.severity.value for info in recent)),
            "by_category": dict(Counter(info.category.value for info in recent)),
            "top_problematic_symbols": dict(symbols.most_common(10)),
            "most_recent_errors": [info.to_dict() for info in recent[-5:]],
        }

    def clear_history(self):
        self.error_history.clear()
        self.error_count = 0
        logger.debug("Error history cleared")


# Shared handler used by the dashboard and the storage layer
error_handler = ErrorHandler()


class ErrorHandlingContext:
    """
    Report any exception raised inside the block.

    With reraise=False the exception is swallowed after reporting and the
    ErrorInfo is available as .error_info.
    """

    def __init__(self, context: ErrorContext, reraise: bool = True):
        self.context = context
        self.reraise = reraise
        self.error_info: Optional[ErrorInfo] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or not issubclass(exc_type, Exception):
            return False
        self.error_info = error_handler.handle_error(exc_val, context=self.context)
        return not self.reraise


def handle_error(exception: Exception, **kwargs) -> ErrorInfo:
    """Report through the shared handler."""
    return error_handler.handle_error(exception, **kwargs)


def get_error_summary(hours: int = 24) -> Dict[str, Any]:
    return error_handler.get_error_summary(hours)


def create_error_context(symbol: str = None, widget_id: str = None, **kwargs) -> ErrorContext:
    return ErrorContext(symbol=symbol, widget_id=widget_id, **kwargs)
