"""MongoDB-backed storage of inventory parts."""

from __future__ import annotations

import contextlib
from datetime import datetime, timezone
from typing import Any

import pymongo
from pymongo import ASCENDING, IndexModel
from pymongo.errors import PyMongoError

from rocketfactory.inventory.documents import (
    filters_to_query,
    part_from_document,
    part_to_document,
)
from rocketfactory.inventory.model import (
    Category,
    Dimensions,
    Manufacturer,
    NotFoundError,
    Part,
    PartFilters,
)

COLLECTION_NAME = "parts"
_SETUP_TIMEOUT = 10.0
_INDEXES = (
    ("uuid", True),
    ("name", False),
    ("category", False),
    ("manufacturer.country", False),
    ("tags", False),
)


class RepositoryError(Exception):
    """The part store could not be set up, queried or written."""


class PartRepository:
    """Reads parts from the ``parts`` collection of a database."""

    def __init__(self, database: Any) -> None:
        collection = database.get_collection(COLLECTION_NAME)
        models = [IndexModel([(key, ASCENDING)], unique=unique) for key, unique in _INDEXES]
        with pymongo.timeout(_SETUP_TIMEOUT):
            try:
                collection.create_indexes(models)
            except PyMongoError as exc:
                raise RepositoryError(f"failed to create database indexes: {exc}") from exc
            # Seeding fails harmlessly once the sample parts already exist.
            with contextlib.suppress(RepositoryError):
                seed_test_parts(collection)
        self._collection = collection

    def get(self, uuid: str) -> Part:
        """Return the part with the given UUID or raise NotFoundError."""
        document = self._collection.find_one({"uuid": uuid})
        if document is None:
            raise NotFoundError()
        return part_from_document(document)

    def get_list(self, filters: PartFilters | None = None) -> list[Part]:
        """Return the parts matching the filters; raise NotFoundError if none do."""
        try:
            cursor = self._collection.find(filters_to_query(filters))
        except PyMongoError as exc:
            raise RepositoryError(f"failed to fetch parts: {exc}") from exc
        with contextlib.closing(cursor):
            try:
                parts = [part_from_document(document) for document in cursor]
            except (PyMongoError, KeyError, TypeError, ValueError, AttributeError) as exc:
                raise RepositoryError(f"failed to decode parts: {exc}") from exc
        if not parts:
            raise NotFoundError()
        return parts


def sample_parts(now: datetime) -> list[Part]:
    """The sample parts stored at start-up, stamped with ``now``."""
    return [
        Part(
            uuid="c2a4e5cd-8aa1-4dd8-ab19-5cdf25af047d",
            name="Turbo Engine X1",
            description="High-performance turbo engine",
            price=12999.99,
            stock_quantity=10,
            category=Category.ENGINE,
            dimensions=Dimensions(length=120, width=80, height=70, weight=350),
            manufacturer=Manufacturer(
                name="AeroTech", country="USA", website="https://aerotech.example.com"
            ),
            tags=["engine", "turbo", "performance"],
            metadata={},
            created_at=now,
            updated_at=now,
        ),
        Part(
            uuid="42d9bd89-6023-4d95-af31-c1d86bb39b43",
            name="Fuel Filter S9",
            description="Advanced fuel filtration system",
            price=349.50,
            stock_quantity=120,
            category=Category.FUEL,
            dimensions=Dimensions(length=20, width=15, height=15, weight=3),
            manufacturer=Manufacturer(
                name="FuelMaster", country="Germany", website="https://fuelmaster.example.com"
            ),
            tags=["fuel", "filter"],
            metadata={},
            created_at=now,
            updated_at=now,
        ),
        Part(
            uuid="19b5cae8-54d3-4fc8-97fa-bab9d0718d80",
            name="Wing Panel A7",
            description="Reinforced composite wing panel",
            price=5599.00,
            stock_quantity=25,
            category=Category.WING,
            dimensions=Dimensions(length=450, width=200, height=15, weight=220),
            manufacturer=Manufacturer(
                name="SkyParts", country="Japan", website="https://skyparts.example.com"
            ),
            tags=["wing", "panel", "composite"],
            metadata={},
            created_at=now,
            updated_at=now,
        ),
    ]


def seed_test_parts(collection: Any) -> None:
    """Insert the sample parts, stopping at the first that cannot be stored."""
    now = datetime.now(timezone.utc)
    for part in sample_parts(now):
        try:
            collection.insert_one(part_to_document(part))
        except PyMongoError as exc:
            raise RepositoryError(f"failed to insert part {part.uuid}: {exc}") from exc