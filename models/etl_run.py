from sqlalchemy import Column, BigInteger, String, Enum, Date, DateTime, Float, Integer, Text, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
import uuid
from models.base import Base, ETLStatus


class ETLRun(Base):
    """
    Tracks metadata for each pipeline execution.

    Purpose:
    - Audit trail of all runs
    - Stage level row counts and durations
    - Which stage aborted a failed run
    """
    __tablename__ = "pipeline_runs"

    id = Column(BigInteger, primary_key=True, autoincrement=True)
    run_id = Column(UUID(as_uuid=True), default=uuid.uuid4, unique=True, nullable=False, index=True)

    # Run metadata
    status = Column(Enum(ETLStatus), default=ETLStatus.RUNNING, nullable=False, index=True)
    as_of = Column(Date, nullable=True)

    # Timestamps
    started_at = Column(DateTime(timezone=True), nullable=False, index=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    duration_seconds = Column(Float, nullable=True)

    # Statistics
    stages_completed = Column(Integer, default=0)
    violations_found = Column(Integer, default=0)

    # Error tracking
    failed_stage = Column(String(100), nullable=True)
    error_message = Column(Text, nullable=True)

    # Per stage rows written and durations
    stage_metrics = Column(JSONB, nullable=True)

    __table_args__ = (
        Index("idx_pipeline_run_status", "status", "started_at"),
    )
