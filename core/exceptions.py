"""
Custom exceptions for the warehouse pipeline with structured error context.

Malformed field values never reach this module: they are replaced by
null/unknown sentinels during cleansing. Exceptions here describe failures
that abort a run (a source that cannot be read, a sink that cannot be
written) and carry enough context to tell which stage failed.

Exception Hierarchy:
    ETLException (base)
    ├── ExtractionError
    │   ├── SourceUnavailableError
    │   └── CSVExtractionError
    ├── TransformationError
    ├── LoadError
    │   ├── DatabaseError
    │   └── SchemaMismatchError
    └── StageFailedError
"""

from typing import Optional, Dict, Any, List
from datetime import datetime, timezone


class ETLException(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (stage, table, batch, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        # Add timestamp to context
        self.context["error_timestamp"] = self.timestamp.isoformat()

        # Chain original exception if provided
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(ETLException):
    """Base exception for source read failures."""
    pass


class SourceUnavailableError(ExtractionError):
    """
    Exception raised when a source batch cannot be retrieved at all.

    Context should include:
        - batch_id: Identifier of the requested source batch
    """
    pass


class CSVExtractionError(ExtractionError):
    """
    Exception raised when a source CSV file cannot be parsed.

    Context should include:
        - file_path: Path to the CSV file
        - batch_id: Identifier of the source batch
    """
    pass


# ============================================================================
# Transformation Errors
# ============================================================================

class TransformationError(ETLException):
    """Base exception for transformation failures."""
    pass


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(ETLException):
    """Base exception for sink write failures."""
    pass


class DatabaseError(LoadError):
    """
    Exception raised when database operations fail.

    Context should include:
        - operation: Type of database operation (REPLACE, INSERT)
        - table_name: Name of the table
    """
    pass


class SchemaMismatchError(LoadError):
    """
    Exception raised when a sink has no table for the rows it was given.

    Context should include:
        - table_name: Name of the requested table
    """
    pass


# ============================================================================
# Run Errors
# ============================================================================

class StageFailedError(ETLException):
    """
    Exception raised when a pipeline stage fails and the run is aborted.

    Tables written by the stages listed in ``completed_stages`` keep their
    new content; every later table keeps its previous snapshot.
    """

    def __init__(
        self,
        message: str,
        stage: str,
        elapsed_seconds: float,
        completed_stages: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        context = dict(context or {})
        context["stage"] = stage
        context["elapsed_seconds"] = round(elapsed_seconds, 3)
        super().__init__(message, context, original_exception)
        self.stage = stage
        self.elapsed_seconds = elapsed_seconds
        self.completed_stages = list(completed_stages or [])

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["stage"] = self.stage
        payload["elapsed_seconds"] = self.elapsed_seconds
        payload["completed_stages"] = self.completed_stages
        return payload
