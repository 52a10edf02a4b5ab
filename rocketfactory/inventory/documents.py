"""Conversion between inventory parts and their stored document form."""

from __future__ import annotations

from typing import Any, Mapping

from rocketfactory.inventory.model import (
    Category,
    Dimensions,
    Manufacturer,
    Part,
    PartFilters,
    Value,
)


def category_to_document(category: Category | str) -> str:
    """Stored name of a category; anything unrecognised is UNSPECIFIED."""
    return category_from_document(category).value


def category_from_document(value: Any) -> Category:
    """Category for a stored name; anything unrecognised is UNSPECIFIED."""
    try:
        return Category(value)
    except ValueError:
        return Category.UNSPECIFIED


def value_to_document(value: Value | None) -> dict[str, Any] | None:
    """Stored form of a metadata value, leaving out kinds that are unset."""
    if value is None:
        return None
    pairs = (
        ("string", value.string),
        ("int64", value.int64),
        ("double", value.double),
        ("bool", value.boolean),
    )
    return {key: item for key, item in pairs if item is not None}


def value_from_document(document: Mapping[str, Any] | None) -> Value | None:
    if document is None:
        return None
    return Value(
        string=document.get("string"),
        int64=document.get("int64"),
        double=document.get("double"),
        boolean=document.get("bool"),
    )


def part_to_document(part: Part) -> dict[str, Any]:
    """Stored form of a part; empty optional fields are left out."""
    document: dict[str, Any] = {
        "uuid": part.uuid,
        "name": part.name,
        "description": part.description,
        "price": part.price,
        "stock_quantity": part.stock_quantity,
        "category": category_to_document(part.category),
    }
    if part.dimensions is not None:
        document["dimensions"] = {
            "length": part.dimensions.length,
            "width": part.dimensions.width,
            "height": part.dimensions.height,
            "weight": part.dimensions.weight,
        }
    if part.manufacturer is not None:
        document["manufacturer"] = {
            "name": part.manufacturer.name,
            "country": part.manufacturer.country,
            "website": part.manufacturer.website,
        }
    if part.tags:
        document["tags"] = list(part.tags)
    if part.metadata:
        document["metadata"] = {key: value_to_document(item) for key, item in part.metadata.items()}
    if part.created_at is not None:
        document["created_at"] = part.created_at
    if part.updated_at is not None:
        document["updated_at"] = part.updated_at
    return document


def part_from_document(document: Mapping[str, Any]) -> Part:
    """Part from its stored form; missing fields take their zero values."""
    raw_dimensions = document.get("dimensions")
    dimensions = None
    if raw_dimensions is not None:
        dimensions = Dimensions(
            length=float(raw_dimensions.get("length", 0.0)),
            width=float(raw_dimensions.get("width", 0.0)),
            height=float(raw_dimensions.get("height", 0.0)),
            weight=float(raw_dimensions.get("weight", 0.0)),
        )

    raw_manufacturer = document.get("manufacturer")
    manufacturer = None
    if raw_manufacturer is not None:
        manufacturer = Manufacturer(
            name=raw_manufacturer.get("name", ""),
            country=raw_manufacturer.get("country", ""),
            website=raw_manufacturer.get("website", ""),
        )

    metadata = {key: value_from_document(item) for key, item in (document.get("metadata") or {}).items()}

    return Part(
        uuid=document.get("uuid", ""),
        name=document.get("name", ""),
        description=document.get("description", ""),
        price=float(document.get("price", 0.0)),
        stock_quantity=int(document.get("stock_quantity", 0)),
        category=category_from_document(document.get("category")),
        dimensions=dimensions,
        manufacturer=manufacturer,
        tags=list(document.get("tags") or []),
        metadata=metadata,
        created_at=document.get("created_at"),
        updated_at=document.get("updated_at"),
    )


def filters_to_query(filters: PartFilters | None) -> dict[str, Any]:
    """Query selecting parts that match every non-empty filter.

    Tags must all be present on a part; every other list matches any member.
    """
    query: dict[str, Any] = {}
    if filters is None:
        return query
    if filters.uuids:
        query["uuid"] = {"$in": list(filters.uuids)}
    if filters.categories:
        query["category"] = {"$in": [category_to_document(c) for c in filters.categories]}
    if filters.manufacturer_countries:
        query["manufacturer.country"] = {"$in": list(filters.manufacturer_countries)}
    if filters.names:
        query["name"] = {"$in": list(filters.names)}
    if filters.tags:
        query["tags"] = {"$all": list(filters.tags)}
    return query