"""AI client management for the workout coach."""
from .client_factory import AIClientFactory
from .retry import create_retry_decorator, is_retryable_error

__all__ = [
    "AIClientFactory",
    "create_retry_decorator",
    "is_retryable_error",
]
