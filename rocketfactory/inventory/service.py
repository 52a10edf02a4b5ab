"""Business operations on inventory parts."""

from __future__ import annotations

from typing import Protocol

from rocketfactory.inventory.model import NotFoundError, Part, PartFilters


class PartStore(Protocol):
    def get(self, uuid: str) -> Part: ...

    def get_list(self, filters: PartFilters | None) -> list[Part]: ...


class PartServiceError(Exception):
    """The part store failed for a reason other than a missing part."""


class PartService:
    """Looks parts up in a store, passing NotFoundError through unchanged."""

    def __init__(self, repository: PartStore) -> None:
        self._repository = repository

    def get(self, uuid: str) -> Part:
        try:
            return self._repository.get(uuid)
        except NotFoundError:
            raise
        except Exception as exc:
            raise PartServiceError(f"failed to get part: {exc}") from exc

    def get_list(self, filters: PartFilters | None = None) -> list[Part]:
        try:
            return self._repository.get_list(filters)
        except NotFoundError:
            raise
        except Exception as exc:
            raise PartServiceError(f"failed to get list part: {exc}") from exc