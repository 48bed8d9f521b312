"""Retry strategies using Strategy Pattern."""
from .retry_strategy import RetryStrategy, BudgetRetryStrategy

__all__ = [
    'RetryStrategy',
    'BudgetRetryStrategy',
]
