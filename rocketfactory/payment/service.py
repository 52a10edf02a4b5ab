"""Payment processing: every payment succeeds with a fresh transaction UUID."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum

from rocketfactory.logger import get_logger


class PaymentMethod(str, Enum):
    UNSPECIFIED = "UNSPECIFIED"
    UNKNOWN = "UNKNOWN"
    CARD = "CARD"
    SBP = "SBP"
    CREDIT_CARD = "CREDIT_CARD"
    INVESTOR_MONEY = "INVESTOR_MONEY"


@dataclass(frozen=True)
class PayOrderRequest:
    order_uuid: str
    user_uuid: str
    payment_method: PaymentMethod


@dataclass(frozen=True)
class PayOrderResponse:
    transaction_uuid: str


class PaymentService:
    """Accepts payments for orders."""

    def pay(self, request: PayOrderRequest) -> PayOrderResponse:
        """Record a successful payment and return its transaction UUID."""
        transaction_uuid = str(uuid.uuid4())
        log = get_logger()
        if log is not None:
            log.info("Payment success", transaction_uuid=transaction_uuid)
        return PayOrderResponse(transaction_uuid=transaction_uuid)