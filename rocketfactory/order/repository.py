"""SQL-backed storage of orders on a DB-API connection."""

from __future__ import annotations

import contextlib
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Protocol

from rocketfactory.migrator import Migrator
from rocketfactory.order.model import NotFoundError, Order
from rocketfactory.order.records import (
    order_to_record,
    payment_method_from_record,
    status_from_record,
)

_MARKERS: dict[str, Callable[[int], str]] = {
    "format": lambda _: "%s",
    "pyformat": lambda _: "%s",
    "qmark": lambda _: "?",
    "numeric": lambda index: f":{index}",
}


class OrderStore(Protocol):
    def create(self, order: Order) -> None: ...

    def get(self, uuid: str) -> Order: ...

    def update(self, order: Order) -> None: ...


class RepositoryError(Exception):
    """The order store could not be reached, migrated, queried or written."""


class OrderRepository:
    """Stores orders in the ``orders`` table, migrating the schema on start."""

    def __init__(
        self,
        connection: Any,
        migrations_dir: str | Path,
        paramstyle: str = "format",
    ) -> None:
        try:
            marker = _MARKERS[paramstyle]
        except KeyError:
            raise ValueError(f"unsupported parameter style: {paramstyle!r}") from None
        self._connection = connection

        def slots(count: int) -> list[str]:
            return [marker(index) for index in range(1, count + 1)]

        insert = slots(6)
        self._insert_sql = (
            "INSERT INTO orders (order_uuid, user_uuid, part_uuids, total_price, status, created_at) "
            f"VALUES ({', '.join(insert)})"
        )
        self._select_sql = (
            "SELECT order_uuid, user_uuid, part_uuids, total_price, transaction_uuid, "
            f"payment_method, status, created_at FROM orders WHERE order_uuid = {marker(1)}"
        )
        update = slots(8)
        self._update_sql = (
            f"UPDATE orders SET user_uuid = {update[0]}, part_uuids = {update[1]}, "
            f"total_price = {update[2]}, transaction_uuid = {update[3]}, "
            f"payment_method = {update[4]}, status = {update[5]}, updated_at = {update[6]} "
            f"WHERE order_uuid = {update[7]}"
        )

        self._ping()
        try:
            Migrator(connection, migrations_dir).up()
        except Exception as exc:
            raise RepositoryError(f"db migration error: {exc}") from exc

    def _ping(self) -> None:
        try:
            with closing(self._connection.cursor()) as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchall()
        except Exception as exc:
            raise RepositoryError(f"failed to ping database: {exc}") from exc

    def _rollback(self) -> None:
        with contextlib.suppress(Exception):
            self._connection.rollback()

    def create(self, order: Order) -> None:
        """Insert a new order."""
        record = order_to_record(order)
        params = (
            record.order_uuid,
            record.user_uuid,
            list(record.part_uuids),
            record.total_price,
            record.status,
            record.created_at,
        )
        try:
            with closing(self._connection.cursor()) as cursor:
                cursor.execute(self._insert_sql, params)
            self._connection.commit()
        except Exception as exc:
            self._rollback()
            raise RepositoryError(f"failed to create order: {exc}") from exc

    def get(self, uuid: str) -> Order:
        """Return the order with the given UUID or raise NotFoundError."""
        try:
            with closing(self._connection.cursor()) as cursor:
                cursor.execute(self._select_sql, (uuid,))
                row = cursor.fetchone()
        except Exception as exc:
            raise RepositoryError(f"failed to scan: {exc}") from exc
        if row is None:
            raise NotFoundError()

        (order_uuid, user_uuid, part_uuids, total_price,
         transaction_uuid, payment_method, status, created_at) = row
        return Order(
            order_uuid=order_uuid,
            user_uuid=user_uuid,
            part_uuids=list(part_uuids or []),
            total_price=float(total_price),
            transaction_uuid=transaction_uuid,
            payment_method=None if payment_method is None else payment_method_from_record(payment_method),
            status=status_from_record(status),
            created_at=created_at,
        )

    def update(self, order: Order) -> None:
        """Overwrite a stored order; raise NotFoundError if it does not exist."""
        record = order_to_record(order)
        params = (
            record.user_uuid,
            list(record.part_uuids),
            record.total_price,
            record.transaction_uuid,
            record.payment_method,
            record.status,
            datetime.now(timezone.utc),
            record.order_uuid,
        )
        try:
            with closing(self._connection.cursor()) as cursor:
                cursor.execute(self._update_sql, params)
                affected = cursor.rowcount
            self._connection.commit()
        except Exception as exc:
            self._rollback()
            raise RepositoryError(f"failed to update order status: {exc}") from exc
        if affected == 0:
            raise NotFoundError()

    def close(self) -> None:
        self._connection.close()