"""Row store port.

Repositories talk to the hosted data service through this interface so that
the domain and application layers never import the HTTP adapter.
"""

from collections.abc import Sequence
from typing import Any, Protocol

Filter = tuple[str, str, Any]


def eq(column: str, value: Any) -> Filter:
    return (column, "eq", value)


def neq(column: str, value: Any) -> Filter:
    return (column, "neq", value)


def in_(column: str, values: Sequence[Any]) -> Filter:
    return (column, "in", list(values))


def not_null(column: str) -> Filter:
    return (column, "not.is", None)


def any_of(*filters: Filter) -> Filter:
    """Match rows satisfying at least one of ``filters``."""
    return ("or", "or", list(filters))


class RowStore(Protocol):
    """Table access bound to a single credential."""

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: tuple[str, bool] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]: ...

    async def select_one(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: tuple[str, bool] | None = None,
    ) -> dict[str, Any] | None: ...

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]: ...

    async def update(
        self,
        table: str,
        values: dict[str, Any],
        filters: Sequence[Filter],
    ) -> list[dict[str, Any]]: ...

    async def delete(
        self,
        table: str,
        filters: Sequence[Filter],
    ) -> list[dict[str, Any]]: ...
