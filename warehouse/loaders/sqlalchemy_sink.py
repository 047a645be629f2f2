"""
Replace warehouse tables through SQLAlchemy (truncate-and-insert in one transaction)
"""

from typing import Any, Dict, List, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete, insert, Table
from pydantic import BaseModel
import logging

from core.config import settings
from core.exceptions import DatabaseError, SchemaMismatchError
from models.base import Base
from models.etl_run import ETLRun
from schemas.run import PipelineRunReport
from warehouse.loaders.sink import Sink

logger = logging.getLogger(__name__)


class SQLAlchemySink(Sink):
    """
    Load stage snapshots into the warehouse database.

    Ensures:
    - Identical content on repeated runs (full replacement, no upserts)
    - Delete and inserts of one table commit together or not at all
    - Other tables are untouched by a failed replacement
    """

    def __init__(self, db_session: AsyncSession, batch_size: int = settings.INSERT_BATCH_SIZE):
        self.db = db_session
        self.batch_size = batch_size

    def table_for(self, table_name: str) -> Table:
        table = Base.metadata.tables.get(table_name)
        if table is None:
            raise SchemaMismatchError(
                f"No table named {table_name} in the warehouse schema",
                context={"table_name": table_name}
            )
        return table

    def _payload(self, table: Table, rows: Sequence[BaseModel]) -> List[Dict[str, Any]]:
        columns = set(table.columns.keys())
        payload = []
        for row in rows:
            values = row.model_dump()
            unknown = set(values) - columns
            if unknown:
                raise SchemaMismatchError(
                    f"Rows for {table.name} carry columns the table does not have",
                    context={"table_name": table.name, "columns": sorted(unknown)}
                )
            payload.append(values)
        return payload

    async def replace_all(self, table_name: str, rows: Sequence[BaseModel]) -> int:
        """
        Replace table content: DELETE then batched INSERT, one commit.

        Args:
            table_name: Name of a table in the warehouse schema
            rows: Validated row models whose fields match the table columns

        Returns:
            Number of rows written
        """
        table = self.table_for(table_name)
        payload = self._payload(table, rows)

        try:
            await self.db.execute(delete(table))

            for i in range(0, len(payload), self.batch_size):
                batch = payload[i:i + self.batch_size]
                await self.db.execute(insert(table), batch)
                logger.debug(f"{table_name} batch {i // self.batch_size + 1}: {len(batch)} rows")

            await self.db.commit()

        except Exception as e:
            logger.error(f"Replacing {table_name} failed: {str(e)}")
            await self.db.rollback()
            raise DatabaseError(
                f"Failed to replace {table_name}",
                context={
                    "operation": "REPLACE",
                    "table_name": table_name,
                    "rows": len(payload)
                },
                original_exception=e
            )

        logger.info(f"Replaced {table_name} with {len(payload)} rows")
        return len(payload)

    async def record_run(self, report: PipelineRunReport) -> ETLRun:
        """Append a pipeline_runs row for a finished run"""
        etl_run = ETLRun(
            run_id=report.run_id,
            status=report.status,
            as_of=report.as_of,
            started_at=report.started_at,
            completed_at=report.completed_at,
            duration_seconds=report.duration_seconds,
            stages_completed=len(report.stages),
            violations_found=len(report.violations),
            failed_stage=report.failed_stage,
            error_message=report.error_message,
            stage_metrics=[stage.model_dump() for stage in report.stages],
        )
        try:
            self.db.add(etl_run)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            raise DatabaseError(
                "Failed to record pipeline run",
                context={"operation": "INSERT", "table_name": ETLRun.__tablename__},
                original_exception=e
            )
        return etl_run
