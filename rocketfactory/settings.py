"""Environment-variable parsing shared by every service's configuration."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from pathlib import Path

from dotenv import load_dotenv

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_NANOS_PER_UNIT = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|\u00b5s|\u03bcs|ms|s|m|h)")


class EnvError(ValueError):
    """A required environment variable is missing or malformed."""


@dataclass(frozen=True)
class LoggerConfig:
    level: str
    as_json: bool


def load_env_files(*args: str | os.PathLike[str]) -> None:
    """Load dotenv files into the environment without overriding set variables.

    With no arguments ``.env`` is loaded. Loading stops quietly at the first
    file that does not exist.
    """
    paths = args or (".env",)
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            return
        if not path.is_file():
            raise EnvError(f"cannot read env file {path}: not a regular file")
        try:
            load_dotenv(path, override=False)
        except OSError as exc:
            raise EnvError(f"cannot read env file {path}: {exc}") from exc


def require(name: str) -> str:
    """Return the value of a variable that must be set (it may be empty)."""
    value = os.environ.get(name)
    if value is None:
        raise EnvError(f'required environment variable "{name}" is not set')
    return value


def parse_bool(text: str) -> bool:
    """Parse the boolean spellings accepted by the configuration."""
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise EnvError(f"invalid boolean value {text!r}")


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``300ms``, ``1.5h`` or ``2h45m``."""
    rest = text
    sign = 1
    if rest and rest[0] in "+-":
        sign = -1 if rest[0] == "-" else 1
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise EnvError(f"invalid duration {text!r}")

    total = Decimal(0)
    pos = 0
    while pos < len(rest):
        match = _DURATION_PART.match(rest, pos)
        if match is None:
            raise EnvError(f"invalid duration {text!r}")
        number, unit = match.groups()
        try:
            total += Decimal(number) * _NANOS_PER_UNIT[unit]
        except InvalidOperation as exc:
            raise EnvError(f"invalid duration {text!r}") from exc
        pos = match.end()

    micros = int((total / 1000).to_integral_value())
    try:
        return timedelta(microseconds=sign * micros)
    except OverflowError as exc:
        raise EnvError(f"invalid duration {text!r}: out of range") from exc


def join_host_port(host: str, port: str) -> str:
    """Combine host and port, bracketing hosts that contain a colon."""
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def load_logger_config() -> LoggerConfig:
    """Read LOGGER_LEVEL and LOGGER_AS_JSON."""
    return LoggerConfig(
        level=require("LOGGER_LEVEL"),
        as_json=parse_bool(require("LOGGER_AS_JSON")),
    )