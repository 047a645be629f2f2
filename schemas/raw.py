"""
Pydantic schemas for raw source records.

Raw records arrive exactly as the source systems produced them. Every field
is optional and coercion is lenient: a value that cannot be read as the
declared type becomes ``None`` instead of failing validation, so a single
bad cell never aborts a run.
"""

import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def parse_int(value: Any) -> Optional[int]:
    """Safely parse int value"""
    if _is_missing(value):
        return None
    if isinstance(value, bool):
        return None
    try:
        return int(float(value))  # Handle "10.0" strings
    except (ValueError, TypeError, OverflowError):
        return None


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Safely parse decimal value"""
    if _is_missing(value):
        return None
    if isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return parsed if parsed.is_finite() else None


def parse_date(value: Any) -> Optional[date]:
    """Safely parse date value (dates, datetimes and ISO strings)"""
    if _is_missing(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value).strip()).date()
    except ValueError:
        return None


def parse_text(value: Any) -> Optional[str]:
    """Keep text as-is; trimming belongs to cleansing"""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return str(value)


LenientInt = Annotated[Optional[int], BeforeValidator(parse_int)]
LenientDecimal = Annotated[Optional[Decimal], BeforeValidator(parse_decimal)]
LenientDate = Annotated[Optional[date], BeforeValidator(parse_date)]
LenientText = Annotated[Optional[str], BeforeValidator(parse_text)]


class RawRecord(BaseModel):
    """Base for raw rows; unknown source columns are ignored"""

    model_config = ConfigDict(frozen=True, extra="ignore")


class RawCustomer(RawRecord):
    """crm_cust_info"""

    cst_id: LenientInt = None
    cst_key: LenientText = None
    cst_firstname: LenientText = None
    cst_lastname: LenientText = None
    cst_marital_status: LenientText = None
    cst_gndr: LenientText = None
    cst_create_date: LenientDate = None


class RawProduct(RawRecord):
    """crm_prd_info"""

    prd_id: LenientInt = None
    prd_key: LenientText = None
    prd_nm: LenientText = None
    prd_cost: LenientInt = None
    prd_line: LenientText = None
    prd_start_dt: LenientDate = None
    prd_end_dt: LenientDate = None


class RawSale(RawRecord):
    """
    crm_sales_details

    Order, ship and due dates stay compact ``yyyymmdd`` integers here;
    reconciliation turns them into dates.
    """

    sls_ord_num: LenientText = None
    sls_prd_key: LenientText = None
    sls_cust_id: LenientInt = None
    sls_order_dt: LenientInt = None
    sls_ship_dt: LenientInt = None
    sls_due_dt: LenientInt = None
    sls_sales: LenientDecimal = None
    sls_quantity: LenientInt = None
    sls_price: LenientDecimal = None


class RawERPCustomer(RawRecord):
    """erp_cust_az12"""

    cid: LenientText = None
    bdate: LenientDate = None
    gen: LenientText = None


class RawERPLocation(RawRecord):
    """erp_loc_a101"""

    cid: LenientText = None
    cntry: LenientText = None


class RawERPCategory(RawRecord):
    """erp_px_cat_g1v2"""

    id: LenientText = None
    cat: LenientText = None
    subcat: LenientText = None
    maintenance: LenientText = None
