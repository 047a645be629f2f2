"""
Sales warehouse pipeline: cleanse CRM and ERP exports into silver tables,
conform them into a star schema and audit the result.

Modules:
    runner: Stage-ordered orchestrator (PipelineRunner, RunContext)
    scheduler: APScheduler integration for periodic full refreshes

Subpackages:
    sources: Source batch readers (CSV exports, in-memory batches)
    transformers: Normalizers, deduplication, validity windows, sales reconciliation
    conformers: Customer and product dimensions, sales fact
    quality: Read-only checks producing the quality report
    loaders: Sinks with truncate-and-insert semantics

Architecture:
    Every run is a full refresh, executed strictly in this order:

    1. Silver - cleanse each of the six source batches into its own table
    2. Gold - build dim_customers, dim_products, then fact_sales
    3. Quality - audit silver and gold, write the violations

    A stage reads only the snapshots written by earlier stages. The first
    failing stage aborts the run; tables already replaced keep their new
    content and later tables keep their previous content.

Usage:
    from warehouse.runner import PipelineRunner
    from warehouse.sources.csv_source import CSVSource
    from warehouse.loaders.sqlalchemy_sink import SQLAlchemySink

Example:
    sink = SQLAlchemySink(session)
    runner = PipelineRunner(CSVSource("datasets"), sink, run_recorder=sink.record_run)
    report = await runner.run()

    print(f"{len(report.violations)} quality violations")
"""

__all__ = [
    "PipelineRunner",
    "RunContext",
    "PipelineScheduler",
    "CSVSource",
    "InMemorySource",
    "InMemorySink",
    "SQLAlchemySink",
]
