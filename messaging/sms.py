from __future__ import annotations

# Verification transmitters are swappable behind this interface.
# Each delivery resolves to True only when the gateway accepted it.

from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Optional


class Transmitter(ABC):
    @abstractmethod
    def deliver_sms_verification(self, destination: str, client_type: Optional[str], verification_code: str) -> "Future[bool]":
        raise NotImplementedError

    @abstractmethod
    def deliver_vox_verification(self, destination: str, verification_code: str, locale: Optional[str] = None) -> "Future[bool]":
        raise NotImplementedError
