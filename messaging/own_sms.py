from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Optional

import httpx

from config.settings import OwnSmsSenderConfiguration, Settings
from messaging.errors import EncodingError, UnsupportedOperationError
from messaging.http_client import FaultTolerantHttpClient, HttpTransport
from messaging.rendering import DeliveryRequest, RenderedRequest, render_request
from messaging.responses import (
    DeliveryOutcome,
    Failure,
    Success,
    TransportFailure,
    parse_response,
    price_units,
)
from messaging.sms import Transmitter
from ops.executors import BoundedExecutor, new_fixed_thread_bounded_queue_executor
from ops.metrics import InMemoryMetrics, MetricsSink, Timer

log = logging.getLogger("ownsms.sender")

SENDER_NAME = "own_sms_sender"


def _dest_hint(v: str, keep: int = 4) -> str:
    v = (v or "").strip()
    if not v:
        return ""
    if len(v) <= keep:
        return v
    return f"...{v[-keep:]}"


def _resolved(value: Optional[bool] = None, exc: Optional[BaseException] = None) -> "Future[bool]":
    fut: Future = Future()
    if exc is not None:
        fut.set_exception(exc)
    else:
        fut.set_result(bool(value))
    return fut


class OwnSmsSender(Transmitter):
    """Sends verification codes through the own bulk SMS HTTP gateway.

    Deliveries run on a bounded worker pool and resolve to ``True`` only when
    the gateway answers 2xx. Gateway errors, transport errors and malformed
    replies all resolve to ``False``; nothing raises once a delivery has been
    accepted by the pool.
    """

    def __init__(
        self,
        config: OwnSmsSenderConfiguration,
        transport: Optional[HttpTransport] = None,
        metrics: Optional[MetricsSink] = None,
        executor: Optional[BoundedExecutor] = None,
    ):
        self.config = config
        self._owns_executor = executor is None
        self.executor = executor or new_fixed_thread_bounded_queue_executor(config.workers, config.queue_size, name=SENDER_NAME)
        self._owns_transport = transport is None
        self.transport: HttpTransport = transport or FaultTolerantHttpClient(
            name=SENDER_NAME,
            circuit_breaker=config.circuit_breaker,
            retry=config.retry,
            connect_timeout=config.connect_timeout_seconds,
            timeout=config.request_timeout_seconds,
        )

        metrics = metrics or InMemoryMetrics()
        self.sms_meter = metrics.meter("sms.delivered")
        self.vox_meter = metrics.meter("vox.delivered")
        self.price_meter = metrics.meter("price")

    @classmethod
    def from_settings(cls, s: Optional[Settings] = None, **kwargs) -> "OwnSmsSender":
        return cls(OwnSmsSenderConfiguration.from_settings(s), **kwargs)

    def deliver_sms_verification(self, destination: str, client_type: Optional[str], verification_code: str) -> "Future[bool]":
        req = DeliveryRequest(destination=destination, verification_code=verification_code, client_type=client_type)
        try:
            rendered = render_request(self.config, req)
        except EncodingError as e:
            log.warning(
                "own_sms_request_not_encodable",
                extra={"extra": {"event": "own_sms_request_not_encodable", "dest": _dest_hint(destination), "param": e.param}},
            )
            self.sms_meter.mark()
            return _resolved(False)

        fut = self.executor.submit(self._deliver, rendered, destination)
        self.sms_meter.mark()
        return fut

    def deliver_vox_verification(self, destination: str, verification_code: str, locale: Optional[str] = None) -> "Future[bool]":
        log.info(
            "own_sms_vox_not_implemented",
            extra={"extra": {"event": "own_sms_vox_not_implemented", "dest": _dest_hint(destination), "locale": locale or ""}},
        )
        return _resolved(exc=UnsupportedOperationError("voice verification is not supported by the own SMS gateway"))

    def _deliver(self, rendered: RenderedRequest, destination: str) -> bool:
        t = Timer()
        outcome: Optional[DeliveryOutcome]
        try:
            response = self.transport.send(httpx.Request("GET", rendered.url))
            outcome = parse_response(response) if response is not None else None
        except Exception as e:
            outcome = TransportFailure(cause=e)
        return self._process_outcome(outcome, destination, t)

    def _process_outcome(self, outcome: Optional[DeliveryOutcome], destination: str, t: Timer) -> bool:
        dest = _dest_hint(destination)
        if isinstance(outcome, Success):
            self.price_meter.mark(price_units(outcome.price))
            log.info(
                "own_sms_send_result",
                extra={"extra": {"event": "own_sms_send_result", "dest": dest, "ok": True, "price": str(outcome.price), "latency_ms": t.ms()}},
            )
            return True

        if isinstance(outcome, Failure):
            log.info(
                "own_sms_request_failed: %s, %s",
                outcome.status,
                outcome.message,
                extra={
                    "extra": {
                        "event": "own_sms_request_failed",
                        "dest": dest,
                        "status": outcome.status,
                        "vendor_message": outcome.message,
                        "latency_ms": t.ms(),
                    }
                },
            )
            return False

        if isinstance(outcome, TransportFailure):
            log.info(
                "own_sms_request_exception",
                extra={
                    "extra": {
                        "event": "own_sms_request_exception",
                        "dest": dest,
                        "error_type": type(outcome.cause).__name__,
                        "error": str(outcome.cause),
                        "latency_ms": t.ms(),
                    }
                },
                exc_info=outcome.cause,
            )
            return False

        log.warning("own_sms_no_response", extra={"extra": {"event": "own_sms_no_response", "dest": dest, "latency_ms": t.ms()}})
        return False

    def close(self) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=True)
        if self._owns_transport and isinstance(self.transport, FaultTolerantHttpClient):
            self.transport.close()

    def __enter__(self) -> "OwnSmsSender":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
