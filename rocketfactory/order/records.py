"""Conversion between orders and the rows they are stored as."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from rocketfactory.order.model import Order, OrderStatus, PaymentMethod

_METHOD_TO_RECORD = {
    PaymentMethod.CARD: "CARD",
    PaymentMethod.SBP: "SBP",
    PaymentMethod.CREDIT_CARD: "CREDIT_CARD",
    PaymentMethod.INVESTOR_MONEY: "INVESTOR_MONEY",
}
_METHOD_FROM_RECORD = {text: method for method, text in _METHOD_TO_RECORD.items()}

_STATUS_TO_RECORD = {
    OrderStatus.PENDING_PAYMENT: "PENDING_PAYMENT",
    OrderStatus.PAID: "PAID",
}
_STATUS_FROM_RECORD = {text: status for status, text in _STATUS_TO_RECORD.items()}


@dataclass
class OrderRecord:
    """An order as it is stored; enumerations are kept as plain text."""

    order_uuid: str
    user_uuid: str
    part_uuids: list[str] = field(default_factory=list)
    total_price: float = 0.0
    transaction_uuid: str | None = None
    payment_method: str | None = None
    status: str = "CANCELLED"
    created_at: datetime | None = None
    updated_at: datetime | None = None


def payment_method_to_record(method: PaymentMethod | str) -> str:
    """Stored name of a payment method; anything unrecognised is UNKNOWN."""
    return _METHOD_TO_RECORD.get(method, "UNKNOWN")


def payment_method_from_record(value: str) -> PaymentMethod:
    """Payment method for a stored name; anything unrecognised is UNKNOWN."""
    return _METHOD_FROM_RECORD.get(value, PaymentMethod.UNKNOWN)


def status_to_record(status: OrderStatus | str) -> str:
    """Stored name of a status; anything unrecognised is CANCELLED."""
    return _STATUS_TO_RECORD.get(status, "CANCELLED")


def status_from_record(value: str) -> OrderStatus:
    """Status for a stored name; anything unrecognised is CANCELLED."""
    return _STATUS_FROM_RECORD.get(value, OrderStatus.CANCELLED)


def order_to_record(order: Order) -> OrderRecord:
    method = order.payment_method
    return OrderRecord(
        order_uuid=order.order_uuid,
        user_uuid=order.user_uuid,
        part_uuids=list(order.part_uuids),
        total_price=order.total_price,
        transaction_uuid=order.transaction_uuid,
        payment_method=None if method is None else payment_method_to_record(method),
        status=status_to_record(order.status),
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def order_from_record(record: OrderRecord) -> Order:
    """Order from its stored form; timestamps are not carried over."""
    method = record.payment_method
    return Order(
        order_uuid=record.order_uuid,
        user_uuid=record.user_uuid,
        part_uuids=list(record.part_uuids),
        total_price=record.total_price,
        transaction_uuid=record.transaction_uuid,
        payment_method=None if method is None else payment_method_from_record(method),
        status=status_from_record(record.status),
    )