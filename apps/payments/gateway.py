"""
Payment gateway abstraction.

The booking core only needs two things from a gateway: a fresh reference
to hand out with a new booking, and a way to authenticate incoming
notifications. The concrete class is chosen by the PAYMENT_GATEWAY setting.
"""

from __future__ import annotations

import hashlib
import hmac
import time
from abc import ABC, abstractmethod
from uuid import UUID

from django.conf import settings  # type: ignore
from django.utils.module_loading import import_string  # type: ignore

SIGNATURE_PREFIX = "sha256="


class PaymentGateway(ABC):
    name = "abstract"

    @abstractmethod
    def new_reference(self, booking_id: UUID) -> str:
        """Unique, externally visible token for the booking's payment."""

    @abstractmethod
    def verify_signature(self, body: bytes, signature: str | None) -> bool:
        """Authenticate a raw notification body."""


class StubPaymentGateway(PaymentGateway):
    """
    Local gateway used in development and tests.

    References look like ``PAY_<booking uuid>_<epoch ms>``. Signatures are
    HMAC-SHA256 over the raw body keyed with PAYMENT_WEBHOOK_SECRET; with no
    secret configured every notification is accepted.
    """

    name = "stub"

    def __init__(self, secret: str | None = None):
        self.secret = settings.PAYMENT_WEBHOOK_SECRET if secret is None else secret

    def new_reference(self, booking_id: UUID) -> str:
        return f"PAY_{booking_id}_{int(time.time() * 1000)}"

    def sign(self, body: bytes) -> str:
        digest = hmac.new(self.secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
        return f"{SIGNATURE_PREFIX}{digest}"

    def verify_signature(self, body: bytes, signature: str | None) -> bool:
        if not self.secret:
            return True
        if not signature:
            return False
        return hmac.compare_digest(self.sign(body), signature.strip())


def get_payment_gateway() -> PaymentGateway:
    return import_string(settings.PAYMENT_GATEWAY)()
