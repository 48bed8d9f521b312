"""
Shared failure handling for upload steps.

Initiation, chunk sends and status queries all recover the same way:
one token refresh on the first authorization failure, and the session's
retry budget for everything else.
"""
from typing import Awaitable, Callable, Optional, TypeVar

from ...api.retry import RetryStrategy, BudgetRetryStrategy
from ...exceptions import AuthorizationError, TransportError
from ...logging import get_logger

T = TypeVar('T')


class RecoveryHandler:
    """
    Runs an upload step until it succeeds or fails terminally.

    The step is re-invoked from a loop, so unlimited retry budgets never
    grow the call stack. Each invocation must rebuild its request from the
    session, picking up refreshed tokens and the latest confirmed offset.
    """

    def __init__(self, token_service, observer, retry_strategy: Optional[RetryStrategy] = None):
        """
        Initialize recovery handler.

        Args:
            token_service: Service performing the refresh-token exchange
            observer: Receives progress and error notifications
            retry_strategy: Retry decision (budget based by default)
        """
        self._tokens = token_service
        self._observer = observer
        self._retry = retry_strategy or BudgetRetryStrategy()
        self._logger = get_logger('resumapy.upload.recovery')

    async def run(self, session, operation: Callable[[], Awaitable[T]], step: str) -> T:
        """
        Execute ``operation`` with refresh and retry handling.

        Args:
            session: Upload session (token, budget and refresh flag)
            operation: Zero-argument coroutine function performing one attempt
            step: Step name for logs

        Returns:
            Result of the first successful attempt

        Raises:
            AuthorizationError: On 401 when a refresh was already attempted
                or is not possible
            TransportError: From the last attempt once retries are exhausted
            UploadError: Any other failure, unchanged
        """
        attempt = 0
        while True:
            try:
                return await operation()
            except AuthorizationError:
                if session.refresh_attempted or not session.credentials.can_refresh:
                    self._logger.error(f"{step}: authorization denied, no refresh available")
                    raise
                session.refresh_attempted = True
                self._logger.warning(f"{step}: authorization denied, refreshing access token")
                await self._tokens.refresh(session, self._observer)
            except TransportError as e:
                if not self._retry.should_retry(session):
                    self._logger.error(f"{step} failed with no retries left: {e}")
                    raise
                self._logger.warning(
                    f"{step} failed ({e}), retrying (budget left: {session.retry_budget})"
                )
                self._observer.on_progress('Retrying')
                await self._retry.wait_async(attempt)
                attempt += 1
