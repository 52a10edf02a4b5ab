"""Configuration of the order service, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta

from rocketfactory.settings import (
    LoggerConfig,
    join_host_port,
    load_env_files,
    load_logger_config,
    parse_duration,
    require,
)

_POSTGRES_CREDENTIAL_VAR = "POSTGRES_PASSWORD"


@dataclass(frozen=True)
class ApiConfig:
    host: str
    port: str
    read_timeout: timedelta
    shutdown_timeout: timedelta

    @property
    def address(self) -> str:
        return join_host_port(self.host, self.port)


@dataclass(frozen=True)
class GrpcEndpoint:
    host: str
    port: str

    @property
    def address(self) -> str:
        return join_host_port(self.host, self.port)


@dataclass(frozen=True)
class PostgresConfig:
    host: str
    port: str
    user: str
    password: str = field(repr=False)
    db: str = ""
    ssl_mode: str = ""
    migration_directory: str = ""

    @property
    def address(self) -> str:
        """Connection string in key=value form."""
        return (
            f"host={self.host} port={self.port} user={self.user} "
            f"password={self.password} dbname={self.db} sslmode={self.ssl_mode}"
        )


@dataclass(frozen=True)
class AppConfig:
    logger: LoggerConfig
    order_api: ApiConfig
    postgres: PostgresConfig
    inventory_grpc: GrpcEndpoint
    payment_grpc: GrpcEndpoint


_app_config: AppConfig | None = None


def load_api_config() -> ApiConfig:
    return ApiConfig(
        host=require("HTTP_HOST"),
        port=require("HTTP_PORT"),
        read_timeout=parse_duration(require("HTTP_READ_TIMEOUT")),
        shutdown_timeout=parse_duration(require("ORDER_SHUT_DOWN_TIMEOUT")),
    )


def load_inventory_grpc_config() -> GrpcEndpoint:
    return GrpcEndpoint(host=require("INVENTORY_GRPC_HOST"), port=require("INVENTORY_GRPC_PORT"))


def load_payment_grpc_config() -> GrpcEndpoint:
    return GrpcEndpoint(host=require("PAYMENT_GRPC_HOST"), port=require("PAYMENT_GRPC_PORT"))


def load_postgres_config() -> PostgresConfig:
    host = require("POSTGRES_HOST")
    port = require("EXTERNAL_POSTGRES_PORT")
    user = require("POSTGRES_USER")
    password = require(_POSTGRES_CREDENTIAL_VAR)
    db = require("POSTGRES_DB")
    ssl_mode = require("POSTGRES_SSL_MODE")
    migration_directory = require("MIGRATION_DIRECTORY")
    return PostgresConfig(
        host=host,
        port=port,
        user=user,
        password=password,
        db=db,
        ssl_mode=ssl_mode,
        migration_directory=migration_directory,
    )


def load(*args: str | os.PathLike[str]) -> AppConfig:
    """Load env files, then build and install the service configuration."""
    global _app_config
    load_env_files(*args)
    config = AppConfig(
        logger=load_logger_config(),
        order_api=load_api_config(),
        postgres=load_postgres_config(),
        inventory_grpc=load_inventory_grpc_config(),
        payment_grpc=load_payment_grpc_config(),
    )
    _app_config = config
    return config


def app_config() -> AppConfig | None:
    """Return the configuration installed by :func:`load`."""
    return _app_config