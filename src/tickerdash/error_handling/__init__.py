"""
Error handling for the dashboard.

Usage:
    from tickerdash.error_handling import handle_error, create_error_context

    try:
        store.set(key, value)
    except PersistenceUnavailable as e:
        info = handle_error(e, context=create_error_context(function_name="save"))
        print(info.user_message)

    # Or as a context manager
    from tickerdash.error_handling import ErrorHandlingContext

    with ErrorHandlingContext(create_error_context(symbol="AAPL"), reraise=False) as ctx:
        risky_operation()
    if ctx.error_info:
        print(ctx.error_info.user_message)
"""

from .error_manager import (
    ErrorCategory,
    ErrorContext,
    ErrorHandler,
    ErrorHandlingContext,
    ErrorInfo,
    ErrorSeverity,
    create_error_context,
    error_handler,
    get_error_summary,
    handle_error,
)

__all__ = [
    'ErrorHandler', 'ErrorInfo', 'ErrorContext', 'ErrorSeverity', 'ErrorCategory',
    'error_handler',
    'handle_error', 'get_error_summary', 'create_error_context',
    'ErrorHandlingContext',
]
