from sqlalchemy.orm import declarative_base
import enum

Base = declarative_base()


UNKNOWN_LABEL = "n/a"


# ============================================================================
# ENUMS
# ============================================================================

class MaritalStatus(str, enum.Enum):
    """Standardized customer marital status"""
    SINGLE = "Single"
    MARRIED = "Married"
    UNKNOWN = UNKNOWN_LABEL


class Gender(str, enum.Enum):
    """Standardized customer gender"""
    FEMALE = "Female"
    MALE = "Male"
    UNKNOWN = UNKNOWN_LABEL


class ProductLine(str, enum.Enum):
    """Standardized product line"""
    MOUNTAIN = "Mountain"
    ROAD = "Road"
    OTHER_SALES = "Other Sales"
    TOURING = "Touring"
    UNKNOWN = UNKNOWN_LABEL


class ETLStatus(str, enum.Enum):
    """Pipeline run status"""
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
