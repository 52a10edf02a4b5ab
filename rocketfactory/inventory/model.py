"""Domain model of the inventory service: parts, their filters and errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Category(str, Enum):
    UNSPECIFIED = "UNSPECIFIED"
    UNKNOWN = "UNKNOWN"
    ENGINE = "ENGINE"
    FUEL = "FUEL"
    PORTHOLE = "PORTHOLE"
    WING = "WING"


@dataclass
class PartFilters:
    """Criteria for listing parts; empty lists place no restriction."""

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
    """A metadata value holding at most one of its kinds."""

    string: str | None = None
    int64: int | None = None
    double: float | None = None
    boolean: bool | None = None


@dataclass
class Part:
    uuid: str
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


class NotFoundError(LookupError):
    """The requested part or parts do not exist."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)