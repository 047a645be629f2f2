"""
SQLAlchemy ORM models for database tables.

This package defines the warehouse schema using SQLAlchemy ORM models:

Models:
    base: Base declarative class and shared enums (MaritalStatus, Gender, ProductLine, ETLStatus)
    silver: Cleansed CRM and ERP tables, one per source batch
    gold: Star schema (customer and product dimensions, sales fact)
    quality: Latest quality report
    etl_run: Pipeline run audit trail

Database Schema:
    Silver and gold tables are full-refresh snapshots: every run replaces
    their content inside a single transaction per table. Only pipeline_runs
    is append-only.

Usage:
    from models.gold import DimCustomer, DimProduct, FactSale
    from models.base import Base, Gender

Example:
    # Look up the table a stage writes to
    table = Base.metadata.tables["gold_dim_customers"]

Relationships:
    - FactSale.customer_key -> DimCustomer.customer_key (nullable, not enforced)
    - FactSale.product_key -> DimProduct.product_key (nullable, not enforced)
"""

from models.base import Base, ETLStatus, Gender, MaritalStatus, ProductLine, UNKNOWN_LABEL
from models.silver import CRMCustomer, CRMProduct, CRMSale, ERPCustomer, ERPLocation, ERPCategory
from models.gold import DimCustomer, DimProduct, FactSale
from models.quality import QualityViolationRecord
from models.etl_run import ETLRun

__all__ = [
    "Base",
    "UNKNOWN_LABEL",
    "ETLStatus",
    "Gender",
    "MaritalStatus",
    "ProductLine",
    "CRMCustomer",
    "CRMProduct",
    "CRMSale",
    "ERPCustomer",
    "ERPLocation",
    "ERPCategory",
    "DimCustomer",
    "DimProduct",
    "FactSale",
    "QualityViolationRecord",
    "ETLRun",
]
