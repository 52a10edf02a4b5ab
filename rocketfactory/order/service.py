"""Business operations on orders: creating, reading, paying and cancelling."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Protocol

from rocketfactory.order.model import (
    ConflictError,
    CreateOrderRequest,
    NotFoundError,
    Order,
    OrderStatus,
    Part,
    PartFilters,
    PaymentMethod,
)

__all__ = [
    "InventoryClient",
    "OrderService",
    "OrderServiceError",
    "OrderStore",
    "PaymentClient",
]

_CLOSED = frozenset({OrderStatus.PAID, OrderStatus.CANCELLED})


class OrderStore(Protocol):
    def create(self, order: Order) -> None: ...

    def get(self, uuid: str) -> Order: ...

    def update(self, order: Order) -> None: ...


class InventoryClient(Protocol):
    def list_parts(self, filters: PartFilters) -> list[Part]: ...


class PaymentClient(Protocol):
    def pay_order(self, order_uuid: str, user_uuid: str, payment_method: PaymentMethod) -> str: ...


class OrderServiceError(Exception):
    """The order store failed for a reason the service does not handle."""


class OrderService:
    """Coordinates the order store with the inventory and payment services."""

    def __init__(
        self,
        repository: OrderStore,
        inventory_client: InventoryClient,
        payment_client: PaymentClient,
    ) -> None:
        self._repository = repository
        self._inventory = inventory_client
        self._payment = payment_client

    def _load(self, uuid_: str) -> Order:
        try:
            return self._repository.get(uuid_)
        except NotFoundError:
            raise
        except Exception as exc:
            raise OrderServiceError(f"failed to get order with OrderUUID: {uuid_}, {exc}") from exc

    def _store(self, order: Order, action: str) -> None:
        try:
            self._repository.update(order)
        except NotFoundError:
            raise
        except Exception as exc:
            raise OrderServiceError(
                f"failed to {action} order with OrderUUID: {order.order_uuid}, {exc}"
            ) from exc

    def create(self, request: CreateOrderRequest) -> Order:
        """Create a pending order for parts that must all exist in the inventory."""
        parts = self._inventory.list_parts(PartFilters(uuids=list(request.part_uuids)))
        if len(parts) != len(request.part_uuids):
            raise NotFoundError()

        order = Order(
            order_uuid=str(uuid.uuid4()),
            user_uuid=request.user_uuid,
            part_uuids=list(request.part_uuids),
            total_price=sum(part.price for part in parts),
            status=OrderStatus.PENDING_PAYMENT,
            created_at=datetime.now(timezone.utc),
        )
        try:
            self._repository.create(order)
        except ConflictError:
            raise
        except Exception as exc:
            raise OrderServiceError(f"failed to create order: {exc}") from exc
        return order

    def get(self, uuid: str) -> Order:
        """Return the order or raise NotFoundError."""
        return self._load(uuid)

    def pay(self, order_uuid: str, payment_method: PaymentMethod) -> str:
        """Pay a pending order and return the transaction UUID."""
        order = self._load(order_uuid)
        if order.status in _CLOSED:
            raise ConflictError()

        transaction_uuid = self._payment.pay_order(order_uuid, order.user_uuid, payment_method)

        paid = Order(
            order_uuid=order.order_uuid,
            user_uuid=order.user_uuid,
            part_uuids=list(order.part_uuids),
            total_price=order.total_price,
            transaction_uuid=transaction_uuid,
            payment_method=payment_method,
            status=OrderStatus.PAID,
        )
        self._store(paid, "pay")
        return transaction_uuid

    def cancel(self, uuid: str) -> None:
        """Cancel a pending order; paid or cancelled orders raise ConflictError."""
        order = self._load(uuid)
        if order.status in _CLOSED:
            raise ConflictError()

        cancelled = Order(
            order_uuid=order.order_uuid,
            user_uuid=order.user_uuid,
            part_uuids=list(order.part_uuids),
            total_price=order.total_price,
            status=OrderStatus.CANCELLED,
        )
        self._store(cancelled, "cancel")