"""Accumulates the supplied fields of a patch into one UPDATE statement."""

from enum import Enum
from typing import Any, Iterable
from uuid import UUID

from pydantic import BaseModel


def supplied_fields(request: BaseModel, columns: Iterable[str]) -> list[str]:
    """Return the given columns that were present in the request body.

    A field sent as null counts as supplied; a field left out does not.
    """
    return [name for name in columns if name in request.model_fields_set]


class UpdateBuilder:
    """Builds a parameterized `UPDATE <table> SET ... WHERE id = $n`.

    Table and column names come from code, never from request data.
    """

    def __init__(self, table: str):
        self.table = table
        self._assignments: list[tuple[str, Any]] = []

    def set(self, column: str, value: Any) -> "UpdateBuilder":
        """Assign a value to a column."""
        if isinstance(value, Enum):
            value = value.value
        self._assignments.append((column, value))
        return self

    def set_supplied(self, request: BaseModel, columns: Iterable[str]) -> "UpdateBuilder":
        """Assign every listed column that the request supplied."""
        for name in supplied_fields(request, columns):
            self.set(name, getattr(request, name))
        return self

    @property
    def columns(self) -> list[str]:
        return [column for column, _ in self._assignments]

    @property
    def changed(self) -> bool:
        """Whether any column has been assigned."""
        return bool(self._assignments)

    def build(self, entity_id: UUID) -> tuple[str, list[Any]]:
        """Render the statement and its parameters.

        Raises:
            ValueError: If nothing was assigned
        """
        if not self._assignments:
            raise ValueError("No columns to update")

        set_clauses = [
            f"{column} = ${idx}" for idx, (column, _) in enumerate(self._assignments, start=1)
        ]
        params = [value for _, value in self._assignments]
        params.append(entity_id)

        query = f"UPDATE {self.table} SET {', '.join(set_clauses)} WHERE id = ${len(params)}"
        return query, params
