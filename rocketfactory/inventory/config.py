"""Configuration of the inventory service, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from rocketfactory.settings import (
    LoggerConfig,
    join_host_port,
    load_env_files,
    load_logger_config,
    require,
)

_MONGO_ROOT_CREDENTIAL_VAR = "MONGO_INITDB_ROOT_PASSWORD"


@dataclass(frozen=True)
class GrpcConfig:
    host: str
    port: str

    @property
    def address(self) -> str:
        return join_host_port(self.host, self.port)


@dataclass(frozen=True)
class MongoConfig:
    host: str
    port: str
    database: str
    auth_db: str
    user: str
    password: str = field(repr=False)

    @property
    def uri(self) -> str:
        return (
            f"mongodb://{self.user}:{self.password}@{self.host}:{self.port}"
            f"/{self.database}?authSource={self.auth_db}"
        )

    @property
    def database_name(self) -> str:
        return self.database


@dataclass(frozen=True)
class AppConfig:
    logger: LoggerConfig
    inventory_grpc: GrpcConfig
    mongo: MongoConfig


_app_config: AppConfig | None = None


def load_grpc_config() -> GrpcConfig:
    return GrpcConfig(host=require("GRPC_HOST"), port=require("GRPC_PORT"))


def load_mongo_config() -> MongoConfig:
    host = require("MONGO_HOST")
    port = require("EXTERNAL_MONGO_PORT")
    database = require("MONGO_DATABASE")
    auth_db = require("MONGO_AUTH_DB")
    user = require("MONGO_INITDB_ROOT_USERNAME")
    password = require(_MONGO_ROOT_CREDENTIAL_VAR)
    return MongoConfig(
        host=host,
        port=port,
        database=database,
        auth_db=auth_db,
        user=user,
        password=password,
    )


def load(*args: str | os.PathLike[str]) -> AppConfig:
    """Load env files, then build and install the service configuration."""
    global _app_config
    load_env_files(*args)
    config = AppConfig(
        logger=load_logger_config(),
        inventory_grpc=load_grpc_config(),
        mongo=load_mongo_config(),
    )
    _app_config = config
    return config


def app_config() -> AppConfig | None:
    """Return the configuration installed by :func:`load`."""
    return _app_config