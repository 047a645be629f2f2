"""
End-to-end pipeline runs over in-memory and CSV sources
"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

from models import Base
from models.base import ETLStatus
from warehouse.loaders.sink import InMemorySink
from warehouse.runner import (
    GOLD_CUSTOMERS,
    GOLD_PRODUCTS,
    GOLD_SALES,
    QUALITY_REPORT,
    SILVER_CUSTOMERS,
    SILVER_ERP_LOCATIONS,
    SILVER_PRODUCTS,
    SILVER_SALES,
    STAGE_ORDER,
    PipelineRunner,
)
from warehouse.sources.base import ERP_CATEGORIES, ERP_CUSTOMERS, ERP_LOCATIONS, InMemorySource
from warehouse.sources.csv_source import DEFAULT_FILES, CSVSource


class RecordingSink(InMemorySink):
    """Remembers the order tables were replaced in"""

    def __init__(self, table_names=()):
        super().__init__(table_names)
        self.order = []

    async def replace_all(self, table_name, rows):
        written = await super().replace_all(table_name, rows)
        self.order.append(table_name)
        return written


@pytest.fixture
def sink():
    return RecordingSink(table_names=Base.metadata.tables.keys())


@pytest.mark.asyncio
async def test_full_run(source_batches, sink, as_of):
    runner = PipelineRunner(InMemorySource(source_batches), sink, as_of=as_of)

    report = await runner.run()

    assert report.status == ETLStatus.SUCCESS
    assert report.as_of == as_of
    assert report.completed_at is not None
    assert [stage.stage for stage in report.stages] == list(STAGE_ORDER)
    assert sink.order == list(STAGE_ORDER)

    counts = {stage.table_name: stage.rows_written for stage in report.stages}
    assert counts[SILVER_CUSTOMERS] == 3
    assert counts[SILVER_PRODUCTS] == 5
    assert counts[SILVER_SALES] == 4
    assert counts[GOLD_CUSTOMERS] == 3
    assert counts[GOLD_PRODUCTS] == 3
    assert counts[GOLD_SALES] == 4


@pytest.mark.asyncio
async def test_customer_dimension(source_batches, sink, as_of):
    await PipelineRunner(InMemorySource(source_batches), sink, as_of=as_of).run()

    customers = {row.customer_id: row for row in sink.rows(GOLD_CUSTOMERS)}

    jon = customers[11000]
    assert jon.customer_key == 1
    assert jon.customer_number == "AW00011000"
    assert (jon.first_name, jon.last_name) == ("Jon", "Yang")
    assert jon.marital_status == "Married"
    assert jon.gender == "Male"
    assert jon.birthdate == date(1971, 10, 6)
    assert jon.country == "Australia"

    eugene = customers[11001]
    assert eugene.customer_key == 2
    # CRM gender unknown, ERP says male
    assert eugene.gender == "Male"
    # Future ERP birthdate was discarded
    assert eugene.birthdate is None
    assert eugene.country == "Germany"

    lauren = customers[29449]
    assert lauren.customer_key == 3
    assert lauren.first_name == "Lauren"
    assert lauren.gender == "Female"
    assert lauren.country == "n/a"


@pytest.mark.asyncio
async def test_long_country_name_passes_through(source_batches, sink, as_of):
    long_name = "The United Kingdom of Great Britain and Northern Ireland"
    source_batches[ERP_LOCATIONS] = [
        {"cid": "AW-00011000", "cntry": f" {long_name} "},
        {"cid": "AW-99999", "cntry": long_name},
    ]

    report = await PipelineRunner(InMemorySource(source_batches), sink, as_of=as_of).run()

    assert report.status == ETLStatus.SUCCESS
    assert [loc.cntry for loc in sink.rows(SILVER_ERP_LOCATIONS)] == [long_name, long_name]
    customers = {row.customer_id: row for row in sink.rows(GOLD_CUSTOMERS)}
    assert customers[11000].country == long_name
    assert customers[11001].country is None


@pytest.mark.asyncio
async def test_product_dimension(source_batches, sink, as_of):
    await PipelineRunner(InMemorySource(source_batches), sink, as_of=as_of).run()

    products = {row.product_number: row for row in sink.rows(GOLD_PRODUCTS)}

    assert sorted(products) == ["BK-R93R-62", "FR-R92B-58", "HL-U509-R"]

    frame = products["FR-R92B-58"]
    assert frame.product_key == 1
    assert frame.cost == 0
    assert frame.category == "Components"
    assert frame.product_line == "Road"

    bike = products["BK-R93R-62"]
    assert bike.product_key == 2
    assert bike.cost == 2171

    helmet = products["HL-U509-R"]
    assert helmet.product_key == 3
    assert helmet.product_id == 214
    assert helmet.subcategory == "Helmets"
    assert helmet.product_line == "Other Sales"
    assert helmet.start_date == date(2013, 7, 1)


@pytest.mark.asyncio
async def test_sales_fact(source_batches, sink, as_of):
    await PipelineRunner(InMemorySource(source_batches), sink, as_of=as_of).run()

    facts = {row.order_number: row for row in sink.rows(GOLD_SALES)}

    assert (facts["SO43697"].customer_key, facts["SO43697"].product_key) == (1, 2)

    repaired = facts["SO43698"]
    assert repaired.order_date is None
    assert repaired.sales_amount == Decimal("70")
    assert repaired.price == Decimal("35.00")
    assert (repaired.customer_key, repaired.product_key) == (2, 3)

    derived = facts["SO43699"]
    assert derived.price == Decimal("50.00")
    assert (derived.customer_key, derived.product_key) == (3, 1)

    orphan = facts["SO43700"]
    assert (orphan.customer_key, orphan.product_key) == (None, None)


@pytest.mark.asyncio
async def test_quality_report(source_batches, sink, as_of):
    report = await PipelineRunner(InMemorySource(source_batches), sink, as_of=as_of).run()

    assert [(v.check_name, v.offending_key) for v in report.violations] == [
        ("fact_sales_referential_integrity", "SO43700"),
    ]
    assert list(sink.rows(QUALITY_REPORT)) == report.violations
    assert not report.passed_quality_checks


@pytest.mark.asyncio
async def test_clean_data_passes_every_check(source_batches, sink, as_of):
    source_batches["crm_sales_details"] = source_batches["crm_sales_details"][:3]

    report = await PipelineRunner(InMemorySource(source_batches), sink, as_of=as_of).run()

    assert report.violations == []
    assert report.passed_quality_checks
    assert sink.rows(QUALITY_REPORT) == ()


@pytest.mark.asyncio
async def test_repeated_runs_are_identical(source_batches, sink, as_of):
    runner = PipelineRunner(InMemorySource(source_batches), sink, as_of=as_of)

    await runner.run()
    first = dict(sink.tables)
    await runner.run()

    assert sink.tables == first
    assert all(count == 2 for count in sink.write_count.values())


@pytest.mark.asyncio
async def test_star_schema_properties(source_batches, sink, as_of):
    await PipelineRunner(InMemorySource(source_batches), sink, as_of=as_of).run()

    customers = sink.rows(GOLD_CUSTOMERS)
    products = sink.rows(GOLD_PRODUCTS)
    facts = sink.rows(GOLD_SALES)

    # Dense surrogate keys starting at 1
    assert sorted(row.customer_key for row in customers) == list(range(1, len(customers) + 1))
    assert sorted(row.product_key for row in products) == list(range(1, len(products) + 1))
    # One fact per sales line
    assert len(facts) == len(sink.rows(SILVER_SALES))
    # One current version per product number
    current = [p.prd_key for p in sink.rows(SILVER_PRODUCTS) if p.prd_start_dt and p.prd_end_dt is None]
    assert len(current) == len(set(current)) == len(products)
    for fact in facts:
        if fact.order_date is not None:
            assert fact.shipping_date is None or fact.order_date <= fact.shipping_date
            assert fact.due_date is None or fact.order_date <= fact.due_date
        if fact.sales_amount and fact.quantity and fact.price:
            assert fact.sales_amount == fact.quantity * fact.price


@pytest.mark.asyncio
async def test_run_is_recorded(source_batches, sink, as_of):
    recorder = AsyncMock()
    runner = PipelineRunner(InMemorySource(source_batches), sink, as_of=as_of, run_recorder=recorder)

    report = await runner.run()

    recorder.assert_awaited_once_with(report)


@pytest.mark.asyncio
async def test_as_of_defaults_to_run_date(source_batches, sink):
    report = await PipelineRunner(InMemorySource(source_batches), sink).run()

    assert report.as_of == report.started_at.date()


@pytest.mark.asyncio
async def test_csv_run_matches_in_memory_run(tmp_path, write_csv, source_batches, as_of):
    for batch_id, rows in source_batches.items():
        header = None
        # The ERP exports use upper-case headers
        if batch_id in (ERP_CUSTOMERS, ERP_LOCATIONS, ERP_CATEGORIES):
            header = [column.upper() for column in rows[0]]
        write_csv(tmp_path / DEFAULT_FILES[batch_id], rows, header=header)

    csv_sink = InMemorySink()
    memory_sink = InMemorySink()

    await PipelineRunner(CSVSource(str(tmp_path)), csv_sink, as_of=as_of).run()
    await PipelineRunner(InMemorySource(source_batches), memory_sink, as_of=as_of).run()

    assert csv_sink.tables == memory_sink.tables
