"""
Pydantic schemas for cleansed (silver) records with validation
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.base import Gender, MaritalStatus, ProductLine, UNKNOWN_LABEL


class NormalizedRecord(BaseModel):
    """
    Base for cleansed rows.

    Rows are immutable snapshots: a stage builds new rows instead of
    editing the rows handed to it. Enumerations are stored by value so a
    row dumps straight into its table.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True)


class CustomerRecord(NormalizedRecord):
    """silver_crm_cust_info"""

    cst_id: int
    cst_key: Optional[str] = None
    cst_firstname: Optional[str] = None
    cst_lastname: Optional[str] = None
    cst_marital_status: MaritalStatus = MaritalStatus.UNKNOWN
    cst_gndr: Gender = Gender.UNKNOWN
    cst_create_date: Optional[date] = None


class ProductRecord(NormalizedRecord):
    """
    silver_crm_prd_info

    ``prd_key`` is the product number without its category prefix;
    ``cat_id`` is that prefix in the ERP category format (``CO_RF``).
    """

    prd_id: Optional[int] = None
    cat_id: Optional[str] = None
    prd_key: Optional[str] = None
    prd_nm: Optional[str] = None
    prd_cost: int = 0
    prd_line: ProductLine = ProductLine.UNKNOWN
    prd_start_dt: Optional[date] = None
    prd_end_dt: Optional[date] = None


class SalesRecord(NormalizedRecord):
    """silver_crm_sales_details"""

    sls_ord_num: Optional[str] = None
    sls_prd_key: Optional[str] = None
    sls_cust_id: Optional[int] = None
    sls_order_dt: Optional[date] = None
    sls_ship_dt: Optional[date] = None
    sls_due_dt: Optional[date] = None
    sls_sales: Optional[Decimal] = None
    sls_quantity: Optional[int] = None
    sls_price: Optional[Decimal] = None


class ERPCustomerRecord(NormalizedRecord):
    """silver_erp_cust_az12"""

    cid: Optional[str] = None
    bdate: Optional[date] = None
    gen: Gender = Gender.UNKNOWN


class ERPLocationRecord(NormalizedRecord):
    """silver_erp_loc_a101"""

    cid: Optional[str] = None
    cntry: str = Field(UNKNOWN_LABEL, min_length=1)


class ERPCategoryRecord(NormalizedRecord):
    """silver_erp_px_cat_g1v2"""

    id: Optional[str] = None
    cat: Optional[str] = None
    subcat: Optional[str] = None
    maintenance: Optional[str] = None
