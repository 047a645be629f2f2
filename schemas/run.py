"""
Pydantic schemas for pipeline run reports
"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from models.base import ETLStatus
from schemas.quality import QualityViolation


class StageResult(BaseModel):
    """Outcome of one completed stage"""
    stage: str
    table_name: str
    rows_written: int = Field(..., ge=0)
    duration_seconds: float = Field(..., ge=0)


class PipelineRunReport(BaseModel):
    """Summary of a pipeline run, returned to the caller and stored in pipeline_runs"""
    run_id: UUID = Field(default_factory=uuid4)
    status: ETLStatus = ETLStatus.RUNNING
    as_of: date
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None
    stages: List[StageResult] = Field(default_factory=list)
    violations: List[QualityViolation] = Field(default_factory=list)
    failed_stage: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def passed_quality_checks(self) -> bool:
        return self.status == ETLStatus.SUCCESS and not self.violations
