"""Domain model of the order service: orders, the parts they hold and errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

__all__ = [
    "Category",
    "ConflictError",
    "CreateOrderRequest",
    "Dimensions",
    "Manufacturer",
    "NotFoundError",
    "Order",
    "OrderStatus",
    "Part",
    "PartFilters",
    "PayParams",
    "PaymentMethod",
    "Value",
]


class PaymentMethod(str, Enum):
    UNKNOWN = "UNKNOWN"
    CARD = "CARD"
    SBP = "SBP"
    CREDIT_CARD = "CREDIT_CARD"
    INVESTOR_MONEY = "INVESTOR_MONEY"


class OrderStatus(str, Enum):
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


@dataclass
class Order:
    order_uuid: str
    user_uuid: str
    part_uuids: list[str] = field(default_factory=list)
    total_price: float = 0.0
    transaction_uuid: str | None = None
    payment_method: PaymentMethod | None = None
    status: OrderStatus = OrderStatus.PENDING_PAYMENT
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class PayParams:
    order_uuid: str
    payment_method: PaymentMethod


class Category(str, Enum):
    UNSPECIFIED = "UNSPECIFIED"
    UNKNOWN = "UNKNOWN"
    ENGINE = "ENGINE"
    FUEL = "FUEL"
    PORTHOLE = "PORTHOLE"
    WING = "WING"


@dataclass
class PartFilters:
    uuids: list[str] = field(default_factory=list)
    names: list[str] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    manufacturer_countries: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass
class Dimensions:
    length: float = 0.0
    width: float = 0.0
    height: float = 0.0
    weight: float = 0.0


@dataclass
class Manufacturer:
    name: str = ""
    country: str = ""
    website: str = ""


@dataclass
class Value:
    """A metadata value; at most one of the fields is set."""

    string: str | None = None
    int64: int | None = None
    double: float | None = None
    boolean: bool | None = None


@dataclass
class Part:
    uuid: str = ""
    name: str = ""
    description: str = ""
    price: float = 0.0
    stock_quantity: int = 0
    category: Category = Category.UNSPECIFIED
    dimensions: Dimensions | None = None
    manufacturer: Manufacturer | None = None
    tags: list[str] = field(default_factory=list)
    metadata: dict[str, Value | None] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class CreateOrderRequest:
    user_uuid: str
    part_uuids: list[str] = field(default_factory=list)


class NotFoundError(LookupError):
    """The requested order or its parts do not exist."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)


class ConflictError(Exception):
    """The order is in a state that does not allow the operation."""

    def __init__(self, message: str = "conflict error") -> None:
        super().__init__(message)