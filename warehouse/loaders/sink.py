"""
Sink interface: full replacement of a table's content
"""

from abc import ABC, abstractmethod
from typing import Dict, Sequence, Tuple
from pydantic import BaseModel
import logging

from core.exceptions import SchemaMismatchError

logger = logging.getLogger(__name__)


class Sink(ABC):
    """
    A tabular store with truncate-and-insert semantics.

    ``replace_all`` must be atomic per table: readers see either the
    previous content or the new content, never a mix, and a failed
    replacement leaves the previous content in place.
    """

    @abstractmethod
    async def replace_all(self, table_name: str, rows: Sequence[BaseModel]) -> int:
        """
        Replace the whole content of ``table_name`` with ``rows``.

        Returns:
            Number of rows written
        """
        pass


class InMemorySink(Sink):
    """
    Keeps each table as an immutable tuple snapshot.

    Replacement swaps the snapshot in a single assignment. When
    ``table_names`` is given, writes to any other table are rejected the
    way a database without that table would reject them.
    """

    def __init__(self, table_names: Sequence[str] = ()):
        self.table_names = set(table_names)
        self.tables: Dict[str, Tuple[BaseModel, ...]] = {}
        self.write_count: Dict[str, int] = {}

    async def replace_all(self, table_name: str, rows: Sequence[BaseModel]) -> int:
        if self.table_names and table_name not in self.table_names:
            raise SchemaMismatchError(
                f"Unknown table {table_name}",
                context={"table_name": table_name}
            )
        snapshot = tuple(rows)
        self.tables[table_name] = snapshot
        self.write_count[table_name] = self.write_count.get(table_name, 0) + 1
        logger.debug(f"Replaced {table_name} with {len(snapshot)} rows")
        return len(snapshot)

    def rows(self, table_name: str) -> Tuple[BaseModel, ...]:
        return self.tables.get(table_name, ())
