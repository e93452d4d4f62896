"""Retrying transport wrapper for outbound HTTP clients."""
import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

DEFAULT_STATUS_FORCELIST = (408, 429, 500, 502, 503, 504)
IDEMPOTENT_METHODS = ("GET", "HEAD", "OPTIONS")


def _last_outcome(retry_state: RetryCallState):
    # Exhausted: hand back the last response, or re-raise the last error
    return retry_state.outcome.result()


class ResilientTransport(httpx.AsyncBaseTransport):
    """Retries transient failures of idempotent requests with exponential backoff.

    Transport errors and responses whose status is in ``status_forcelist`` are
    retried up to ``max_retries`` times, waiting ``backoff_factor * 2**attempt``
    seconds in between (0.5, 1.0, 2.0, ... with the defaults). When the retries
    are exhausted the last response is returned, or the last error re-raised.
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        status_forcelist: Iterable[int] = DEFAULT_STATUS_FORCELIST,
        allowed_methods: Iterable[str] = IDEMPOTENT_METHODS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0 (got {max_retries})")
        self._transport = transport or httpx.AsyncHTTPTransport()
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.status_forcelist = frozenset(status_forcelist)
        self.allowed_methods = frozenset(m.upper() for m in allowed_methods)
        self._sleep = sleep

    def _retrying(self, request: httpx.Request) -> AsyncRetrying:
        def log_retry(retry_state: RetryCallState) -> None:
            outcome = retry_state.outcome
            if outcome.failed:
                reason = f"failed ({type(outcome.exception()).__name__})"
            else:
                reason = f"returned {outcome.result().status_code}"
            logger.warning(
                f"HTTP {request.method} {request.url} {reason}, "
                f"retry {retry_state.attempt_number}/{self.max_retries}"
            )

        return AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.backoff_factor),
            retry=(
                retry_if_exception_type(httpx.TransportError)
                | retry_if_result(lambda response: response.status_code in self.status_forcelist)
            ),
            before_sleep=log_retry,
            retry_error_callback=_last_outcome,
            reraise=True,
            sleep=self._sleep,
        )

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if request.method.upper() not in self.allowed_methods:
            return await self._transport.handle_async_request(request)

        response: Optional[httpx.Response] = None
        async for attempt in self._retrying(request):
            if response is not None:
                # Discarded retryable response
                await response.aclose()
                response = None
            with attempt:
                response = await self._transport.handle_async_request(request)
            if not attempt.retry_state.outcome.failed:
                attempt.retry_state.set_result(response)
        return response

    async def aclose(self) -> None:
        await self._transport.aclose()
