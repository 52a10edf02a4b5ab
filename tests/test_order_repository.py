import json
import sqlite3
from datetime import datetime, timezone

import pytest

from rocketfactory.order.model import NotFoundError, Order, OrderStatus, PaymentMethod
from rocketfactory.order.repository import OrderRepository, RepositoryError


def _adapt_datetime(value):
    return value.isoformat()


def _convert_timestamp(raw):
    return datetime.fromisoformat(raw.decode())


sqlite3.register_adapter(list, json.dumps)
sqlite3.register_converter("UUIDLIST", json.loads)
sqlite3.register_adapter(datetime, _adapt_datetime)
sqlite3.register_converter("TIMESTAMP", _convert_timestamp)

MIGRATION = """-- +goose Up
CREATE TABLE orders (
    order_uuid TEXT PRIMARY KEY,
    user_uuid TEXT NOT NULL,
    part_uuids UUIDLIST NOT NULL,
    total_price REAL NOT NULL,
    transaction_uuid TEXT,
    payment_method TEXT,
    status TEXT NOT NULL,
    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP
);
-- +goose Down
DROP TABLE orders;
"""

CREATED = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def migrations(tmp_path):
    directory = tmp_path / "migrations"
    directory.mkdir()
    (directory / "00001_create_orders.sql").write_text(MIGRATION, encoding="utf-8")
    return directory


@pytest.fixture
def connection(tmp_path):
    conn = sqlite3.connect(tmp_path / "orders.db", detect_types=sqlite3.PARSE_DECLTYPES)
    yield conn
    conn.close()


@pytest.fixture
def repo(connection, migrations):
    return OrderRepository(connection, migrations, paramstyle="qmark")


def _order(uuid="order-1"):
    return Order(
        order_uuid=uuid,
        user_uuid="user-1",
        part_uuids=["part-1", "part-2"],
        total_price=12.5,
        status=OrderStatus.PENDING_PAYMENT,
        created_at=CREATED,
    )


def test_create_then_get(repo):
    repo.create(_order())
    stored = repo.get("order-1")
    assert stored == _order()


def test_get_missing_raises_not_found(repo):
    with pytest.raises(NotFoundError):
        repo.get("missing")


def test_create_duplicate_raises(repo):
    repo.create(_order())
    with pytest.raises(RepositoryError, match="failed to create order"):
        repo.create(_order())


def test_create_ignores_payment_fields(repo):
    order = _order()
    order.transaction_uuid = "tx"
    order.payment_method = PaymentMethod.CARD
    repo.create(order)
    stored = repo.get(order.order_uuid)
    assert stored.transaction_uuid is None
    assert stored.payment_method is None


def test_update_changes_stored_order(repo, connection):
    repo.create(_order())
    paid = _order()
    paid.transaction_uuid = "tx-1"
    paid.payment_method = PaymentMethod.SBP
    paid.status = OrderStatus.PAID
    repo.update(paid)

    stored = repo.get("order-1")
    assert stored.status is OrderStatus.PAID
    assert stored.payment_method is PaymentMethod.SBP
    assert stored.transaction_uuid == "tx-1"
    assert stored.created_at == CREATED

    (updated_at,) = connection.execute(
        "SELECT updated_at FROM orders WHERE order_uuid = ?", ("order-1",)
    ).fetchone()
    assert updated_at is not None and updated_at >= CREATED


def test_update_missing_raises_not_found(repo):
    with pytest.raises(NotFoundError):
        repo.update(_order("ghost"))


def test_data_survives_second_repository(repo, connection, migrations):
    repo.create(_order())
    again = OrderRepository(connection, migrations, paramstyle="qmark")
    assert again.get("order-1").part_uuids == ["part-1", "part-2"]


def test_missing_migrations_directory(connection, tmp_path):
    with pytest.raises(RepositoryError, match="db migration error"):
        OrderRepository(connection, tmp_path / "absent", paramstyle="qmark")


def test_unknown_paramstyle_rejected(connection, migrations):
    with pytest.raises(ValueError):
        OrderRepository(connection, migrations, paramstyle="named")


def test_closed_connection_fails_to_ping(connection, migrations):
    connection.close()
    with pytest.raises(RepositoryError, match="failed to ping database"):
        OrderRepository(connection, migrations, paramstyle="qmark")


def test_get_after_close_raises(repo):
    repo.close()
    with pytest.raises(RepositoryError, match="failed to scan"):
        repo.get("order-1")