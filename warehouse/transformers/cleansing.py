"""
Per-source cleansing rules turning raw batches into silver records.

Each function takes the raw rows of one source batch and returns a new list
of validated records. Raw rows are parsed leniently first, so malformed
cells arrive here as None and end up as null or unknown values.
"""

import logging
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

from schemas.normalized import (
    CustomerRecord,
    ERPCategoryRecord,
    ERPCustomerRecord,
    ERPLocationRecord,
    ProductRecord,
)
from schemas.raw import RawCustomer, RawERPCategory, RawERPCustomer, RawERPLocation, RawProduct
from warehouse.transformers.deduplicator import resolve_latest
from warehouse.transformers.normalizers import (
    COUNTRY_CODES,
    CRM_GENDER_CODES,
    ERP_GENDER_CODES,
    MARITAL_STATUS_CODES,
    PRODUCT_LINE_CODES,
    normalize,
)
from warehouse.transformers.validity import resolve_validity_windows

logger = logging.getLogger(__name__)

CUSTOMER_RULES = {
    "cst_marital_status": MARITAL_STATUS_CODES,
    "cst_gndr": CRM_GENDER_CODES,
}
PRODUCT_RULES = {"prd_line": PRODUCT_LINE_CODES}
ERP_CUSTOMER_RULES = {"gen": ERP_GENDER_CODES}
ERP_LOCATION_RULES = {"cntry": COUNTRY_CODES}

# Product keys look like "CO-RF-FR-R92B-58": a 5 character category prefix,
# a separator, then the product number used by sales lines.
CATEGORY_PREFIX_LENGTH = 5
ERP_CUSTOMER_PREFIX = "NAS"


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value or None


# ============================================================================
# CRM
# ============================================================================

def clean_customers(rows: Iterable[Mapping[str, Any]]) -> List[CustomerRecord]:
    """
    Trim names, standardize marital status and gender, and keep only the
    most recently created record of each customer id.
    """
    normalized = [
        normalize(RawCustomer.model_validate(row).model_dump(), CUSTOMER_RULES)
        for row in rows
    ]
    latest = resolve_latest(
        normalized,
        key_fn=lambda record: record["cst_id"],
        order_fn=lambda record: record["cst_create_date"],
    )
    customers = [CustomerRecord(**record) for record in latest]
    logger.info(f"Cleansed {len(normalized)} CRM customers into {len(customers)} unique customers")
    return customers


def split_product_key(raw_key: Optional[str]):
    """Split a CRM product key into (category id, product number)"""
    if not raw_key:
        return None, None
    cat_id = raw_key[:CATEGORY_PREFIX_LENGTH].replace("-", "_")
    product_number = raw_key[CATEGORY_PREFIX_LENGTH + 1:]
    return _blank_to_none(cat_id), _blank_to_none(product_number)


def clean_products(rows: Iterable[Mapping[str, Any]]) -> List[ProductRecord]:
    """
    Derive category id and product number, default missing cost to 0,
    standardize the product line and rebuild validity windows.

    Recorded end dates are ignored; every window is derived from the start
    dates of the versions sharing a product number.
    """
    staged = []
    for row in rows:
        record = normalize(RawProduct.model_validate(row).model_dump(), PRODUCT_RULES)
        cat_id, product_number = split_product_key(record["prd_key"])
        staged.append({
            "prd_id": record["prd_id"],
            "cat_id": cat_id,
            "prd_key": product_number,
            "prd_nm": record["prd_nm"],
            "prd_cost": record["prd_cost"] if record["prd_cost"] is not None else 0,
            "prd_line": record["prd_line"],
            "prd_start_dt": record["prd_start_dt"],
        })

    windows = resolve_validity_windows(
        staged,
        key_fn=lambda record: record["prd_key"],
        start_fn=lambda record: record["prd_start_dt"],
    )
    products = [
        ProductRecord(**record, prd_end_dt=window.end)
        for record, window in zip(staged, windows)
    ]
    current = sum(1 for window in windows if window.is_current)
    logger.info(f"Cleansed {len(products)} CRM product versions ({current} current)")
    return products


# ============================================================================
# ERP
# ============================================================================

def clean_erp_customers(rows: Iterable[Mapping[str, Any]], as_of: date) -> List[ERPCustomerRecord]:
    """
    Strip the ERP "NAS" prefix from customer ids, drop birthdates after
    ``as_of`` and standardize gender.
    """
    customers = []
    for row in rows:
        record = normalize(RawERPCustomer.model_validate(row).model_dump(), ERP_CUSTOMER_RULES)
        cid = record["cid"]
        if cid and cid.upper().startswith(ERP_CUSTOMER_PREFIX):
            cid = cid[len(ERP_CUSTOMER_PREFIX):]
        bdate = record["bdate"]
        if bdate is not None and bdate > as_of:
            bdate = None
        customers.append(ERPCustomerRecord(cid=_blank_to_none(cid), bdate=bdate, gen=record["gen"]))
    logger.info(f"Cleansed {len(customers)} ERP customers")
    return customers


def clean_erp_locations(rows: Iterable[Mapping[str, Any]]) -> List[ERPLocationRecord]:
    """Remove hyphens from customer ids and standardize country names"""
    locations = []
    for row in rows:
        record = normalize(RawERPLocation.model_validate(row).model_dump(), ERP_LOCATION_RULES)
        cid = record["cid"].replace("-", "") if record["cid"] else record["cid"]
        locations.append(ERPLocationRecord(cid=_blank_to_none(cid), cntry=record["cntry"]))
    logger.info(f"Cleansed {len(locations)} ERP locations")
    return locations


def clean_erp_categories(rows: Iterable[Mapping[str, Any]]) -> List[ERPCategoryRecord]:
    """Categories only need trimming"""
    categories = [
        ERPCategoryRecord(**normalize(RawERPCategory.model_validate(row).model_dump(), {}))
        for row in rows
    ]
    logger.info(f"Cleansed {len(categories)} ERP categories")
    return categories
