# rocketfactory

Building blocks for three cooperating services of a rocket parts factory:

- **inventory** keeps a catalogue of parts (engines, fuel systems,
  portholes, wings) in MongoDB and looks them up by UUID or by filters on
  UUID, name, category, manufacturer country and tags.
- **order** creates orders from a list of part UUIDs, totals their price,
  takes payment through a payment client and lets pending orders be
  cancelled. Paid or cancelled orders cannot be paid or cancelled again.
- **payment** accepts a payment for an order and hands back a fresh
  transaction UUID.

Shared modules at the top of the package:

| Module                    | Purpose                                                          |
|---------------------------|------------------------------------------------------------------|
| `rocketfactory.logger`    | Process-wide logger with trace and user IDs taken from context   |
| `rocketfactory.closer`    | Once-only graceful shutdown of registered resources              |
| `rocketfactory.migrator`  | Applies numbered SQL migration files to a DB-API connection      |
| `rocketfactory.settings`  | Loading `.env` files and parsing required environment variables  |

Each service has its own sub-package:

| Sub-package               | Modules                                                     |
|---------------------------|-------------------------------------------------------------|
| `rocketfactory.inventory` | `config`, `model`, `documents`, `repository`, `service`     |
| `rocketfactory.order`     | `config`, `model`, `records`, `repository`, `service`       |
| `rocketfactory.payment`   | `config`, `service`                                         |

## Installation

```
pip install .
pip install ".[test]"   # with pytest, for the test suite
```

## Logging

```python
from rocketfactory import logger

logger.init("info", False)

with logger.context_scope("trace-123", "user-456"):
    logger.info("payment accepted", transaction_uuid="9b1f0c4e-0000-4000-8000-000000000000")
```

`init(level, as_json)` sets up the global logger once; later calls are
ignored. Entries go to standard output, either as tab-separated text or, with
`as_json=True`, as one JSON object per line with `level`, `timestamp`,
`caller`, `message` and the extra fields.

Levels are `debug`, `info`, `warn` (or `warning`) and `error`; any other
string means `info` (`parse_level`). `set_level` changes the level of the
logger created by `init`. Inside `context_scope(trace_id, user_id)` every
entry carries the non-empty `trace_id` and `user_id` fields.

- `with_fields(**kwargs)` returns a `ContextLogger` that adds the given
  fields to every entry; `with_context()` binds the current context fields.
- `set_nop_logger()` and `init_for_benchmark()` install a logger that
  writes nothing; `NoopLogger` is a logger object that discards everything.
- `debug`, `info`, `warn`, `error` and `fatal` log through the global
  logger and raise `RuntimeError` if none is installed. `fatal` (module
  function or method) logs and then raises `SystemExit(1)`.
- `get_logger()` returns the global logger or `None`; `sync()` flushes it.

## Graceful shutdown

```python
from rocketfactory import closer

closer.add_named("database", connection.close)
closer.add(lambda: print("bye"))

closer.close_all(timeout=5.0)
```

`add` registers clean-up callables taking no arguments; `add_named` wraps
one so that its start, success or failure are logged with the time taken.
`close_all(timeout)` runs every registered callable concurrently, each in
its own thread, started in reverse order of registration. It returns when
all have finished, raises the first exception one of them raised, or raises
`TimeoutError` once the timeout runs out. Only the first call does any work;
later calls wait for it to finish and return.

`configure(*signals)` makes the global closer run `close_all` with a
five-second timeout when one of the signals arrives (it installs Python
signal handlers, so call it from the main thread). `set_logger` chooses the
logger the global closer reports to. The `Closer` class offers the same
methods for a closer of your own.

## Migrations

`Migrator(connection, migrations_dir).up()` applies the migration files of
a directory to a DB-API connection. Files are named
`<version>_<description>.sql` with a version of 1 or more. The statements of
a file are those after a `-- +goose Up` line and before `-- +goose Down`;
statements end with `;`, or are enclosed between `-- +goose StatementBegin`
and `-- +goose StatementEnd`. Applied versions are recorded in the
`goose_db_version` table (the `table` argument names another), which is
created when missing; only versions newer than the highest recorded one are
applied, each in its own transaction. Problems raise `MigrationError`.

## Configuration

Each service reads its settings from the environment with its
`config.load(*paths)`. The given `.env` files (or `.env` when none is given)
are loaded first, without overriding variables that are already set;
loading stops quietly at the first file that does not exist. A missing
required variable, or a malformed boolean or duration, raises
`rocketfactory.settings.EnvError`. `load` returns the settings as frozen
dataclasses, and `config.app_config()` returns them afterwards.

Variables shared by all three services:

- `LOGGER_LEVEL`, `LOGGER_AS_JSON` (`1`, `t`, `true`, `0`, `f`, `false` and
  their capitalised forms)

Inventory (`rocketfactory.inventory.config`):

- `GRPC_HOST`, `GRPC_PORT` (`inventory_grpc.address`)
- `MONGO_HOST`, `EXTERNAL_MONGO_PORT`, `MONGO_DATABASE`, `MONGO_AUTH_DB`,
  `MONGO_INITDB_ROOT_USERNAME`, `MONGO_INITDB_ROOT_PASSWORD`
  (`mongo.uri`, `mongo.database_name`)

Order (`rocketfactory.order.config`):

- `HTTP_HOST`, `HTTP_PORT`, `HTTP_READ_TIMEOUT`, `ORDER_SHUT_DOWN_TIMEOUT`
  (timeouts are durations such as `300ms`, `5s` or `1m30s`, read into
  `timedelta` values)
- `POSTGRES_HOST`, `EXTERNAL_POSTGRES_PORT`, `POSTGRES_USER`,
  `POSTGRES_PASSWORD`, `POSTGRES_DB`, `POSTGRES_SSL_MODE`,
  `MIGRATION_DIRECTORY` (`postgres.address` is a `key=value` connection
  string)
- `INVENTORY_GRPC_HOST`, `INVENTORY_GRPC_PORT`
- `PAYMENT_GRPC_HOST`, `PAYMENT_GRPC_PORT`

Payment (`rocketfactory.payment.config`):

- `GRPC_HOST`, `GRPC_PORT`

`rocketfactory.settings` also offers the helpers the loaders use:
`require`, `parse_bool`, `parse_duration` and `join_host_port` (which
brackets hosts containing a colon).

## Inventory

`PartRepository(database)` takes a pymongo database, uses its `parts`
collection, creates indexes on `uuid` (unique), `name`, `category`,
`manufacturer.country` and `tags`, and inserts three sample parts
(`sample_parts`, `seed_test_parts`). `get(uuid)` returns a `Part`;
`get_list(filters)` returns the parts matching a `PartFilters`, where tags
must all be present and every other list matches any of its members. Both
raise `rocketfactory.inventory.model.NotFoundError` when nothing matches.

`PartService(repository)` wraps any object with those two methods, passing
`NotFoundError` through and wrapping other failures in `PartServiceError`.
`rocketfactory.inventory.documents` converts parts to and from their stored
documents and builds the query for a filter.

## Orders

`OrderRepository(connection, migrations_dir, paramstyle="format")` takes a
DB-API connection to a database with an `orders` table, checks the
connection and applies the migrations of `migrations_dir`. `paramstyle` is
`format`, `pyformat`, `qmark` or `numeric`, to suit the driver. It offers
`create`, `get`, `update` and `close`; `get` and `update` raise
`NotFoundError` for unknown orders, other failures raise `RepositoryError`.
`rocketfactory.order.records` maps orders to and from `OrderRecord` rows.

`OrderService(repository, inventory_client, payment_client)` needs an
inventory client with `list_parts(filters)` and a payment client with
`pay_order(order_uuid, user_uuid, payment_method)`:

- `create(CreateOrderRequest(user_uuid, part_uuids))` fetches the parts,
  raises `NotFoundError` unless every one exists, and stores a
  `PENDING_PAYMENT` order whose total is the sum of the part prices.
- `get(uuid)` returns the stored order.
- `pay(order_uuid, payment_method)` pays a pending order, marks it `PAID`
  and returns the transaction UUID.
- `cancel(uuid)` marks a pending order `CANCELLED`.

Paying or cancelling an order that is already paid or cancelled raises
`rocketfactory.order.model.ConflictError`. Other storage failures raise
`OrderServiceError`.

## Payments

`PaymentService().pay(PayOrderRequest(order_uuid, user_uuid, method))`
always succeeds and returns a `PayOrderResponse` with a new transaction
UUID, logging it when a global logger is installed.

## What this package does not do

It has no network front ends and no commands: there is no gRPC server for
the inventory or payment service, no HTTP API for orders, and no gRPC
clients connecting the order service to the others. `InventoryClient` and
`PaymentClient` in `rocketfactory.order.service` only describe the methods
such clients must have; you supply the objects. The order repository does
not ship a PostgreSQL driver or the migration files for the `orders`
table; bring a DB-API connection and your own migrations directory.

## Tests

The test suite uses pytest and is installed with the `test` extra.