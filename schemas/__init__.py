"""
Pydantic schemas for row validation and serialization.

This package defines the row models that flow between pipeline stages:

Schemas:
    raw: Source records with lenient type coercion (bronze)
    normalized: Cleansed per-source records (silver)
    gold: Star schema dimension and fact rows
    quality: Quality report violations
    run: Stage results and pipeline run reports

Features:
    - Lenient parsing of raw values (bad cells become None)
    - Closed enumerations for coded attributes
    - Immutable rows, dumped straight into their tables

Usage:
    from schemas.raw import RawCustomer
    from schemas.normalized import CustomerRecord
    from schemas.gold import CustomerDimensionRow, SalesFactRow

Example:
    raw = RawCustomer.model_validate({"cst_id": "17", "cst_gndr": " f "})
    assert raw.cst_id == 17
"""

__all__ = [
    "RawCustomer",
    "RawProduct",
    "RawSale",
    "RawERPCustomer",
    "RawERPLocation",
    "RawERPCategory",
    "CustomerRecord",
    "ProductRecord",
    "SalesRecord",
    "ERPCustomerRecord",
    "ERPLocationRecord",
    "ERPCategoryRecord",
    "CustomerDimensionRow",
    "ProductDimensionRow",
    "SalesFactRow",
    "QualityViolation",
    "StageResult",
    "PipelineRunReport",
]
