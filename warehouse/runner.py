# ============================================================================
# File: warehouse/runner.py
# Description: Stage-ordered orchestration of the full-refresh warehouse run
# ============================================================================
"""
Pipeline Runner - cleanses every source batch, conforms the star schema and
audits the result.

This module provides:
- A strict stage order; a stage starts only after the previous stage's
  table replacement has completed
- Run-scoped state carried in a RunContext instead of module globals
- Immutable stage snapshots handed from stage to stage
- Abort on the first failing stage with a StageFailedError naming it
"""

from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Tuple
import logging
import time

from pydantic import BaseModel, ValidationError

from core.config import settings
from core.exceptions import StageFailedError, TransformationError
from models.base import ETLStatus
from schemas.run import PipelineRunReport, StageResult
from warehouse.conformers.dimensions import conform_customers, conform_products
from warehouse.conformers.facts import conform_facts
from warehouse.loaders.sink import Sink
from warehouse.quality.verifier import verify_gold, verify_silver
from warehouse.sources.base import (
    IngestionSource,
    CRM_CUSTOMERS,
    CRM_PRODUCTS,
    CRM_SALES,
    ERP_CUSTOMERS,
    ERP_LOCATIONS,
    ERP_CATEGORIES,
)
from warehouse.transformers.cleansing import (
    clean_customers,
    clean_erp_categories,
    clean_erp_customers,
    clean_erp_locations,
    clean_products,
)
from warehouse.transformers.reconciler import reconcile_sales

logger = logging.getLogger(__name__)

# Target tables, in execution order
SILVER_CUSTOMERS = "silver_crm_cust_info"
SILVER_PRODUCTS = "silver_crm_prd_info"
SILVER_SALES = "silver_crm_sales_details"
SILVER_ERP_CUSTOMERS = "silver_erp_cust_az12"
SILVER_ERP_LOCATIONS = "silver_erp_loc_a101"
SILVER_ERP_CATEGORIES = "silver_erp_px_cat_g1v2"
GOLD_CUSTOMERS = "gold_dim_customers"
GOLD_PRODUCTS = "gold_dim_products"
GOLD_SALES = "gold_fact_sales"
QUALITY_REPORT = "quality_violations"

STAGE_ORDER = (
    SILVER_CUSTOMERS,
    SILVER_PRODUCTS,
    SILVER_SALES,
    SILVER_ERP_CUSTOMERS,
    SILVER_ERP_LOCATIONS,
    SILVER_ERP_CATEGORIES,
    GOLD_CUSTOMERS,
    GOLD_PRODUCTS,
    GOLD_SALES,
    QUALITY_REPORT,
)

Snapshot = Tuple[BaseModel, ...]
StageBuilder = Callable[["RunContext"], Awaitable[Sequence[BaseModel]]]


class RunContext:
    """
    State of one run, passed explicitly to every stage.

    ``outputs`` maps each completed stage to the snapshot it wrote, which is
    what downstream stages read.
    """

    def __init__(self, source: IngestionSource, as_of: date, min_birthdate: date):
        self.source = source
        self.as_of = as_of
        self.min_birthdate = min_birthdate
        self.outputs: Dict[str, Snapshot] = {}
        self.started = time.perf_counter()

    def output(self, stage: str) -> Snapshot:
        return self.outputs[stage]

    def elapsed(self) -> float:
        return time.perf_counter() - self.started


# ============================================================================
# Stage builders
# ============================================================================

async def build_silver_customers(context: RunContext) -> Sequence[BaseModel]:
    return clean_customers(await context.source.fetch(CRM_CUSTOMERS))


async def build_silver_products(context: RunContext) -> Sequence[BaseModel]:
    return clean_products(await context.source.fetch(CRM_PRODUCTS))


async def build_silver_sales(context: RunContext) -> Sequence[BaseModel]:
    return reconcile_sales(await context.source.fetch(CRM_SALES))


async def build_silver_erp_customers(context: RunContext) -> Sequence[BaseModel]:
    return clean_erp_customers(await context.source.fetch(ERP_CUSTOMERS), as_of=context.as_of)


async def build_silver_erp_locations(context: RunContext) -> Sequence[BaseModel]:
    return clean_erp_locations(await context.source.fetch(ERP_LOCATIONS))


async def build_silver_erp_categories(context: RunContext) -> Sequence[BaseModel]:
    return clean_erp_categories(await context.source.fetch(ERP_CATEGORIES))


async def build_gold_customers(context: RunContext) -> Sequence[BaseModel]:
    return conform_customers(
        context.output(SILVER_CUSTOMERS),
        context.output(SILVER_ERP_CUSTOMERS),
        context.output(SILVER_ERP_LOCATIONS),
    )


async def build_gold_products(context: RunContext) -> Sequence[BaseModel]:
    return conform_products(context.output(SILVER_PRODUCTS), context.output(SILVER_ERP_CATEGORIES))


async def build_gold_sales(context: RunContext) -> Sequence[BaseModel]:
    return conform_facts(
        context.output(SILVER_SALES),
        context.output(GOLD_CUSTOMERS),
        context.output(GOLD_PRODUCTS),
    )


async def build_quality_report(context: RunContext) -> Sequence[BaseModel]:
    return verify_silver(
        customers=context.output(SILVER_CUSTOMERS),
        products=context.output(SILVER_PRODUCTS),
        sales=context.output(SILVER_SALES),
        erp_customers=context.output(SILVER_ERP_CUSTOMERS),
        erp_categories=context.output(SILVER_ERP_CATEGORIES),
        as_of=context.as_of,
        min_birthdate=context.min_birthdate,
    ) + verify_gold(
        context.output(GOLD_CUSTOMERS),
        context.output(GOLD_PRODUCTS),
        context.output(GOLD_SALES),
    )


STAGE_BUILDERS: Dict[str, StageBuilder] = {
    SILVER_CUSTOMERS: build_silver_customers,
    SILVER_PRODUCTS: build_silver_products,
    SILVER_SALES: build_silver_sales,
    SILVER_ERP_CUSTOMERS: build_silver_erp_customers,
    SILVER_ERP_LOCATIONS: build_silver_erp_locations,
    SILVER_ERP_CATEGORIES: build_silver_erp_categories,
    GOLD_CUSTOMERS: build_gold_customers,
    GOLD_PRODUCTS: build_gold_products,
    GOLD_SALES: build_gold_sales,
    QUALITY_REPORT: build_quality_report,
}


class PipelineRunner:
    """
    Full-refresh warehouse orchestrator

    Responsibilities:
    - Run every stage in STAGE_ORDER, one at a time
    - Replace each stage's table before the next stage starts
    - Stop at the first failure, leaving completed tables in place
    - Report per stage row counts and durations
    """

    def __init__(
        self,
        source: IngestionSource,
        sink: Sink,
        as_of: Optional[date] = None,
        min_birthdate: date = settings.MIN_BIRTHDATE,
        run_recorder: Optional[Callable[[PipelineRunReport], Awaitable[Any]]] = None,
    ):
        self.source = source
        self.sink = sink
        self.as_of = as_of
        self.min_birthdate = min_birthdate
        self.run_recorder = run_recorder

    async def run(self) -> PipelineRunReport:
        """
        Run the pipeline once.

        Returns:
            PipelineRunReport with status "success", per stage results and
            the quality violations found

        Raises:
            StageFailedError: If any stage fails; carries the failing stage,
            the stages completed before it and the elapsed run time
        """
        started_at = datetime.now(timezone.utc)
        as_of = self.as_of or started_at.date()
        context = RunContext(self.source, as_of=as_of, min_birthdate=self.min_birthdate)
        report = PipelineRunReport(as_of=as_of, started_at=started_at)

        logger.info(f"Starting pipeline run {report.run_id} (as of {as_of})")

        for stage in STAGE_ORDER:
            stage_started = time.perf_counter()
            try:
                rows = await self._build(stage, context)
                written = await self.sink.replace_all(stage, rows)

            except Exception as e:
                error = StageFailedError(
                    f"Stage {stage} failed: {e}",
                    stage=stage,
                    elapsed_seconds=context.elapsed(),
                    completed_stages=[result.stage for result in report.stages],
                    original_exception=e
                )
                logger.error(
                    f"Pipeline run {report.run_id} aborted at {stage}",
                    extra={"error_context": error.to_dict()}
                )
                self._finish(report, context, ETLStatus.FAILED)
                report.failed_stage = stage
                report.error_message = str(e)
                await self._record(report)
                raise error

            context.outputs[stage] = rows
            duration = time.perf_counter() - stage_started
            report.stages.append(StageResult(
                stage=stage,
                table_name=stage,
                rows_written=written,
                duration_seconds=duration,
            ))
            logger.info(f"Stage {stage}: {written} rows in {duration:.3f}s")

        report.violations = list(context.output(QUALITY_REPORT))
        self._finish(report, context, ETLStatus.SUCCESS)

        if report.violations:
            logger.warning(f"Pipeline run {report.run_id} completed with {len(report.violations)} quality violations")
        logger.info(f"Pipeline run {report.run_id} completed in {report.duration_seconds:.3f}s")

        await self._record(report)
        return report

    @staticmethod
    async def _build(stage: str, context: RunContext) -> Snapshot:
        logger.info(f"Stage {stage}: starting")
        try:
            return tuple(await STAGE_BUILDERS[stage](context))
        except ValidationError as e:
            raise TransformationError(
                f"Rows built for {stage} failed validation",
                context={"stage": stage, "error_count": e.error_count()},
                original_exception=e
            )

    @staticmethod
    def _finish(report: PipelineRunReport, context: RunContext, status: ETLStatus):
        report.status = status
        report.completed_at = datetime.now(timezone.utc)
        report.duration_seconds = context.elapsed()

    async def _record(self, report: PipelineRunReport):
        if self.run_recorder is None:
            return
        try:
            await self.run_recorder(report)
        except Exception as e:
            # The warehouse tables are already written; losing the audit row must not hide that
            logger.error(f"Failed to record pipeline run {report.run_id}: {str(e)}")
