"""Base mapper for row-entity conversion."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from src.core.infrastructure.data_service.errors import DataServiceError

E = TypeVar("E")  # Entity type


class RowMapper(ABC, Generic[E]):
    """Base mapper for converting between data service rows and domain entities."""

    @abstractmethod
    def to_domain(self, row: dict[str, Any]) -> E:
        """Convert a data service row to a domain entity."""
        pass

    @abstractmethod
    def to_row(self, entity: E) -> dict[str, Any]:
        """Convert a domain entity to a writable row."""
        pass

    def to_domain_list(self, rows: list[dict[str, Any]]) -> list[E]:
        """Convert list of rows to list of entities."""
        return [self.to_domain(row) for row in rows]

    @staticmethod
    def validate(entity_type: type[E], row: dict[str, Any]) -> E:
        """Validate a row at the boundary; a malformed row is an upstream failure."""
        try:
            return entity_type.model_validate(row)
        except ValidationError as exc:
            raise DataServiceError(
                f"malformed {entity_type.__name__} row ({exc.error_count()} errors)"
            ) from exc
