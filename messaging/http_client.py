from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx
from circuitbreaker import CircuitBreaker
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from config.settings import CircuitBreakerConfiguration, RetryConfiguration

log = logging.getLogger("ownsms.http")


class HttpTransport(Protocol):
    def send(self, request: httpx.Request) -> httpx.Response: ...


class FaultTolerantHttpClient:
    """httpx client wrapped in a tenacity retry and a circuit breaker.

    Retries only cover transport-level errors (connect failures, timeouts);
    any HTTP status is returned as-is. When the breaker is open, ``send``
    raises ``circuitbreaker.CircuitBreakerError`` without touching the network.
    The breaker holds no lock across the call itself.
    """

    def __init__(
        self,
        name: str,
        circuit_breaker: CircuitBreakerConfiguration,
        retry: RetryConfiguration,
        connect_timeout: float = 10.0,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.name = name
        self.retry = retry
        self.breaker = CircuitBreaker(
            failure_threshold=circuit_breaker.failure_threshold,
            recovery_timeout=circuit_breaker.reset_timeout_seconds,
            expected_exception=Exception,
            name=name,
        )
        self.client = httpx.Client(
            http2=True,
            follow_redirects=False,
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            transport=transport,
        )

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.retry.max_attempts),
            wait=wait_exponential(
                multiplier=self.retry.wait_duration_ms / 1000.0,
                max=self.retry.max_wait_duration_ms / 1000.0,
            ),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=self._log_retry,
            reraise=True,
        )

    def _log_retry(self, state) -> None:
        exc = state.outcome.exception() if state.outcome else None
        log.info(
            "http_retry",
            extra={
                "extra": {
                    "event": "http_retry",
                    "client": self.name,
                    "attempt": state.attempt_number,
                    "error_type": type(exc).__name__ if exc else "",
                }
            },
        )

    def _send_with_retry(self, request: httpx.Request) -> httpx.Response:
        return self._retrying()(self.client.send, request)

    def send(self, request: httpx.Request) -> httpx.Response:
        return self.breaker.call(self._send_with_retry, request)

    def close(self) -> None:
        self.client.close()
