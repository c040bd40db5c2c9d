import logging
from functools import wraps
from typing import Any, Callable

logger = logging.getLogger(__name__)

def safe_map_call(operation: str, func: Callable[..., Any], *args, default: Any = None, **kwargs) -> Any:
    """
    Run a single map-library call, logging and skipping it on failure.
    
    Rendering is best effort: a failed marker or layer mutation must never
    propagate into the rest of the dashboard.
    
    Args:
        operation: Short name of the operation (for logging)
        func: Map handle method to invoke
        default: Value returned when the call fails
    
    Returns:
        The call's result, or ``default`` if it raised
    """
    try:
        return func(*args, **kwargs)
    except Exception as e:
        logger.error(f"Map operation '{operation}' failed: {str(e)}")
        return default

def handle_map_exceptions(default: Any = None):
    """
    Decorator version of safe_map_call for whole map-facing methods.
    
    Usage:
        @handle_map_exceptions(default=False)
        def fit_to_perimeter(self, fire):
            # Map calls that may raise
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.error(f"{func.__qualname__} failed: {str(e)}")
                return default
        return wrapper
    return decorator
