"""
Script to run one full refresh of the sales warehouse
"""

import argparse
import asyncio
import sys
import os
import logging
from datetime import date

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import async_session_maker, engine
from core.exceptions import StageFailedError
from core.logging import setup_logging
from warehouse.loaders.sqlalchemy_sink import SQLAlchemySink
from warehouse.runner import PipelineRunner
from warehouse.sources.csv_source import CSVSource

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Rebuild the silver and gold warehouse tables")
    parser.add_argument(
        "--data-dir",
        default=settings.SOURCE_DATA_DIR,
        help="Directory holding source_crm/ and source_erp/",
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Run date (YYYY-MM-DD) used for future-date checks; defaults to today",
    )
    return parser.parse_args(argv)


async def run_pipeline(data_dir: str, as_of=None) -> int:
    """Run the pipeline and return a process exit code"""

    try:
        async with async_session_maker() as session:
            sink = SQLAlchemySink(session)
            runner = PipelineRunner(
                source=CSVSource(data_dir),
                sink=sink,
                as_of=as_of,
                run_recorder=sink.record_run,
            )

            report = await runner.run()

            for stage in report.stages:
                logger.info(f"{stage.table_name}: {stage.rows_written} rows ({stage.duration_seconds:.3f}s)")

            for violation in report.violations:
                logger.warning(f"[{violation.check_name}] {violation.offending_key}: {violation.detail}")

            logger.info(
                f"Pipeline completed: {len(report.stages)} stages, "
                f"{len(report.violations)} quality violations"
            )
            return 0

    except StageFailedError as e:
        logger.error(
            f"Pipeline failed at {e.stage} after {e.elapsed_seconds:.3f}s; "
            f"completed stages: {', '.join(e.completed_stages) or 'none'}"
        )
        return 1
    finally:
        await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    args = parse_args()
    sys.exit(asyncio.run(run_pipeline(args.data_dir, args.as_of)))
