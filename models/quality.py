from sqlalchemy import Column, BigInteger, String, Text, Index
from models.base import Base


class QualityViolationRecord(Base):
    """
    Latest quality report, replaced on every run.

    An empty table after a successful run means every check passed.
    """
    __tablename__ = "quality_violations"

    row_id = Column(BigInteger, primary_key=True, autoincrement=True)

    check_name = Column(String(100), nullable=False, index=True)
    offending_key = Column(String(255), nullable=True)
    detail = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_quality_check_key", "check_name", "offending_key"),
    )
