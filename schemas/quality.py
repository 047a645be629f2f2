"""
Quality report schema
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class QualityViolation(BaseModel):
    """One finding of a quality check. An empty report means every check passed."""

    model_config = ConfigDict(frozen=True)

    check_name: str = Field(..., min_length=1, max_length=100)
    offending_key: Optional[str] = Field(None, max_length=255)
    detail: Optional[str] = None
