"""Retry strategies using Strategy Pattern."""
import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from ..config import RetryConfig


class RetryStrategy(ABC):
    """Abstract retry strategy."""
    
    @abstractmethod
    def should_retry(self, session) -> bool:
        """Decides whether the failed step may run again, consuming budget."""
        pass
    
    @abstractmethod
    async def wait_async(self, attempt: int):
        """Waits before retry."""
        pass


class BudgetRetryStrategy(RetryStrategy):
    """
    Retry decision driven by the session's signed retry budget.
    
    - budget > 0: decrement and retry
    - budget <= -1: decrement and retry (never reaches a blocking value)
    - budget == 0: give up
    
    The budget lives on the session, so initiation and chunk sends
    draw from the same counter.
    """
    
    def __init__(self, config: Optional[RetryConfig] = None):
        self._config = config or RetryConfig()
    
    def should_retry(self, session) -> bool:
        if session.retry_budget > 0 or session.retry_budget <= -1:
            session.retry_budget -= 1
            return True
        return False
    
    async def wait_async(self, attempt: int):
        """Waits with exponential backoff; immediate when base_delay is 0."""
        delay = self._config.calculate_delay(attempt)
        if delay > 0:
            await asyncio.sleep(delay)
