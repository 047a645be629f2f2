import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from core.config import settings
from core.database import create_engine, create_session_maker
from core.exceptions import StageFailedError
from warehouse.loaders.sqlalchemy_sink import SQLAlchemySink
from warehouse.runner import PipelineRunner
from warehouse.sources.csv_source import CSVSource

logger = logging.getLogger(__name__)


class PipelineScheduler:
    def __init__(self, interval_minutes: int = settings.SCHEDULE_INTERVAL_MINUTES):
        self.interval_minutes = interval_minutes
        self.scheduler = AsyncIOScheduler()
        self.engine = create_engine()
        self.SessionLocal = create_session_maker(self.engine)

    async def run_pipeline_job(self):
        """Job to run one full refresh of the warehouse"""
        logger.info("Scheduler: Starting pipeline job")
        async with self.SessionLocal() as session:
            sink = SQLAlchemySink(session)
            runner = PipelineRunner(
                source=CSVSource(settings.SOURCE_DATA_DIR),
                sink=sink,
                run_recorder=sink.record_run,
            )
            try:
                report = await runner.run()
                logger.info(
                    f"Scheduler: Pipeline job finished with {len(report.violations)} quality violations"
                )
            except StageFailedError as e:
                # The next interval re-runs the whole pipeline; nothing to resume
                logger.error(f"Scheduler: Pipeline job failed at {e.stage} - {e.message}")

    def start(self):
        """Start the scheduler"""
        self.scheduler.add_job(
            self.run_pipeline_job,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id="warehouse_refresh",
            replace_existing=True,
            max_instances=1,
        )
        self.scheduler.start()
        logger.info(f"Pipeline scheduler started (every {self.interval_minutes} minutes)")

    def stop(self):
        self.scheduler.shutdown()
        logger.info("Pipeline scheduler stopped")
