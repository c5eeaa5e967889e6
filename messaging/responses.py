from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, Field, ValidationError

from messaging.errors import ProtocolError

log = logging.getLogger("ownsms.responses")

JSON_CONTENT_TYPE = "application/json"


class SuccessBody(BaseModel):
    price: float = Field(default=0.0, strict=True, allow_inf_nan=False)


class FailureBody(BaseModel):
    status: int = 0
    message: str = ""


@dataclass(frozen=True)
class Success:
    price: Decimal = Decimal(0)
    kind: Literal["success"] = "success"


@dataclass(frozen=True)
class Failure:
    status: int = 0
    message: str = ""
    kind: Literal["failure"] = "failure"


@dataclass(frozen=True)
class TransportFailure:
    cause: BaseException
    kind: Literal["transport_error"] = "transport_error"


DeliveryOutcome = Union[Success, Failure, TransportFailure]

_B = TypeVar("_B", bound=BaseModel)


def is_json(response: httpx.Response) -> bool:
    ctype = response.headers.get("content-type") or ""
    return ctype.split(";", 1)[0].strip().lower() == JSON_CONTENT_TYPE


def decode_body(model: Type[_B], body: str) -> _B:
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        raise ProtocolError(f"unexpected {model.__name__} body: {e.error_count()} error(s)") from e


def _decode_or_default(model: Type[_B], response: httpx.Response) -> _B:
    if not is_json(response):
        return model()
    try:
        return decode_body(model, response.text)
    except ProtocolError as e:
        log.warning(
            "own_sms_response_unparseable",
            extra={"extra": {"event": "own_sms_response_unparseable", "status_code": response.status_code, "error": str(e)}},
        )
        return model()


def parse_response(response: httpx.Response) -> Union[Success, Failure]:
    """Interpret a gateway response as exactly one of Success or Failure.

    2xx responses are successes regardless of body; an unparseable or non-JSON
    body degrades to the default payload of the matching variant.
    """
    if 200 <= response.status_code < 300:
        ok = _decode_or_default(SuccessBody, response)
        return Success(price=Decimal(str(ok.price)))

    err = _decode_or_default(FailureBody, response)
    return Failure(status=err.status, message=err.message)


def price_units(price: Decimal) -> int:
    # Thousandths of the currency unit, truncated toward zero
    return int(price * 1000)
