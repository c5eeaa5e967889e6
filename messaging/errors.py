from __future__ import annotations


class OwnSmsError(Exception):
    """Base exception for the own SMS sender."""


class ConfigurationError(OwnSmsError):
    pass


class InvalidDeliveryRequest(OwnSmsError, ValueError):
    pass


class EncodingError(OwnSmsError):
    """A request parameter could not be percent-encoded."""

    def __init__(self, param: str, cause: Exception):
        self.param = param
        self.cause = cause
        super().__init__(f"cannot encode parameter {param!r}: {cause}")


class ProtocolError(OwnSmsError):
    """Vendor response body did not match the expected shape."""


class DeliveryRejectedError(OwnSmsError):
    """Worker pool and pending queue are full."""


class UnsupportedOperationError(OwnSmsError, NotImplementedError):
    pass
