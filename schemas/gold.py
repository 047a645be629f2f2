"""
Pydantic schemas for star schema rows
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.base import Gender, MaritalStatus, ProductLine


class StarSchemaRow(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True)


class CustomerDimensionRow(StarSchemaRow):
    """gold_dim_customers"""

    customer_key: int = Field(..., ge=1)
    customer_id: int
    customer_number: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    country: Optional[str] = None
    marital_status: MaritalStatus = MaritalStatus.UNKNOWN
    gender: Gender = Gender.UNKNOWN
    birthdate: Optional[date] = None
    create_date: Optional[date] = None


class ProductDimensionRow(StarSchemaRow):
    """gold_dim_products"""

    product_key: int = Field(..., ge=1)
    product_id: Optional[int] = None
    product_number: str
    product_name: Optional[str] = None
    category_id: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    maintenance: Optional[str] = None
    cost: int = 0
    product_line: ProductLine = ProductLine.UNKNOWN
    start_date: date


class SalesFactRow(StarSchemaRow):
    """
    gold_fact_sales

    ``product_key`` and ``customer_key`` are null for orphan lines.
    """

    order_number: Optional[str] = None
    product_key: Optional[int] = None
    customer_key: Optional[int] = None
    order_date: Optional[date] = None
    shipping_date: Optional[date] = None
    due_date: Optional[date] = None
    sales_amount: Optional[Decimal] = None
    quantity: Optional[int] = None
    price: Optional[Decimal] = None
