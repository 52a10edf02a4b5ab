"""Configuration of the payment service, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from rocketfactory.settings import (
    LoggerConfig,
    join_host_port,
    load_env_files,
    load_logger_config,
    require,
)


@dataclass(frozen=True)
class GrpcConfig:
    host: str
    port: str

    @property
    def address(self) -> str:
        return join_host_port(self.host, self.port)


@dataclass(frozen=True)
class AppConfig:
    logger: LoggerConfig
    payment_grpc: GrpcConfig


_app_config: AppConfig | None = None


def load_grpc_config() -> GrpcConfig:
    return GrpcConfig(host=require("GRPC_HOST"), port=require("GRPC_PORT"))


def load(*args: str | os.PathLike[str]) -> AppConfig:
    """Load env files, then build and install the service configuration."""
    global _app_config
    load_env_files(*args)
    config = AppConfig(logger=load_logger_config(), payment_grpc=load_grpc_config())
    _app_config = config
    return config


def app_config() -> AppConfig | None:
    """Return the configuration installed by :func:`load`."""
    return _app_config