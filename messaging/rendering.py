from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import quote_plus

from config.settings import OwnSmsSenderConfiguration
from messaging.errors import EncodingError, InvalidDeliveryRequest
from messaging.templates import verification_text

log = logging.getLogger("ownsms.rendering")


@dataclass(frozen=True)
class DeliveryRequest:
    destination: str
    verification_code: str
    client_type: Optional[str] = None

    def __post_init__(self) -> None:
        if not (self.destination or "").strip():
            raise InvalidDeliveryRequest("destination is required")
        if not (self.verification_code or "").strip():
            raise InvalidDeliveryRequest("verification_code is required")


@dataclass(frozen=True)
class RenderedRequest:
    url: str
    params: Tuple[Tuple[str, str], ...]


def encode_value(name: str, value: str, strict: bool = False) -> str:
    """Form-encode a single query value as UTF-8.

    Values UTF-8 cannot represent (lone surrogates) become an empty string
    unless ``strict`` is set, in which case ``EncodingError`` is raised.
    """
    try:
        return quote_plus(value, safe="", encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        err = EncodingError(name, e)
        if strict:
            raise err from e
        log.info("own_sms_encoding_failed", extra={"extra": {"event": "own_sms_encoding_failed", "param": name, "error": str(err)}})
        return ""


def request_params(account: OwnSmsSenderConfiguration, req: DeliveryRequest) -> List[Tuple[str, str]]:
    return [
        ("name", account.account_name),
        ("password", account.account_password),
        ("to", req.destination),
        ("from", account.account_from),
        ("text", verification_text(req.client_type, req.verification_code)),
    ]


def render_request(account: OwnSmsSenderConfiguration, req: DeliveryRequest) -> RenderedRequest:
    params = request_params(account, req)
    query = "&".join(f"{k}={encode_value(k, v, strict=account.strict_encoding)}" for k, v in params)
    return RenderedRequest(url=f"{account.base_url}?{query}", params=tuple(params))
