"""
Conform cleansed CRM and ERP records into star schema dimensions.

The CRM is the anchor for both dimensions: every CRM customer and every
current CRM product yields exactly one dimension row, enriched from the ERP
where a matching record exists. Surrogate keys are dense, start at 1 and
follow a deterministic sort of natural keys, so unchanged inputs always get
the same keys.
"""

import logging
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence, TypeVar

from models.base import Gender
from schemas.gold import CustomerDimensionRow, ProductDimensionRow
from schemas.normalized import (
    CustomerRecord,
    ERPCategoryRecord,
    ERPCustomerRecord,
    ERPLocationRecord,
    ProductRecord,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def index_by(records: Iterable[T], key_fn: Callable[[T], Optional[Hashable]]) -> Dict[Hashable, T]:
    """
    Lookup table for an enrichment source.

    When a key repeats, the last record wins, so a left join against the
    index never multiplies anchor rows. Records without a key are skipped.
    """
    index: Dict[Hashable, T] = {}
    for record in records:
        key = key_fn(record)
        if key is not None:
            index[key] = record
    return index


def resolve_gender(crm_gender: str, erp_record: Optional[ERPCustomerRecord]) -> Gender:
    """CRM gender wins unless unknown; then the ERP value, then unknown"""
    if crm_gender != Gender.UNKNOWN:
        return Gender(crm_gender)
    if erp_record is not None:
        return Gender(erp_record.gen)
    return Gender.UNKNOWN


def conform_customers(
    crm_rows: Sequence[CustomerRecord],
    erp_demographics: Sequence[ERPCustomerRecord],
    erp_locations: Sequence[ERPLocationRecord],
) -> List[CustomerDimensionRow]:
    """
    Build the customer dimension.

    ERP rows are matched on the CRM customer number. Birthdate and country
    come only from the ERP and stay null without a match. Keys are assigned
    in ascending customer id order.
    """
    demographics = index_by(erp_demographics, lambda record: record.cid)
    locations = index_by(erp_locations, lambda record: record.cid)

    rows = []
    for customer_key, customer in enumerate(sorted(crm_rows, key=lambda c: c.cst_id), start=1):
        demographic = demographics.get(customer.cst_key) if customer.cst_key else None
        location = locations.get(customer.cst_key) if customer.cst_key else None

        rows.append(CustomerDimensionRow(
            customer_key=customer_key,
            customer_id=customer.cst_id,
            customer_number=customer.cst_key,
            first_name=customer.cst_firstname,
            last_name=customer.cst_lastname,
            country=location.cntry if location else None,
            marital_status=customer.cst_marital_status,
            gender=resolve_gender(customer.cst_gndr, demographic),
            birthdate=demographic.bdate if demographic else None,
            create_date=customer.cst_create_date,
        ))

    enriched = sum(1 for row in rows if row.birthdate is not None or row.country is not None)
    logger.info(f"Conformed {len(rows)} customers ({enriched} enriched from ERP)")
    return rows


def is_current_version(product: ProductRecord) -> bool:
    return product.prd_start_dt is not None and product.prd_end_dt is None


def conform_products(
    crm_rows: Sequence[ProductRecord],
    erp_categories: Sequence[ERPCategoryRecord],
) -> List[ProductDimensionRow]:
    """
    Build the product dimension from current product versions.

    Historical versions and versions without a product number are left out.
    Categories are matched on category id. Keys are assigned by
    (start date, product number).
    """
    categories = index_by(erp_categories, lambda record: record.id)
    current = [
        product for product in crm_rows
        if is_current_version(product) and product.prd_key is not None
    ]
    current.sort(key=lambda p: (p.prd_start_dt, p.prd_key))

    rows = []
    for product_key, product in enumerate(current, start=1):
        category = categories.get(product.cat_id) if product.cat_id else None
        rows.append(ProductDimensionRow(
            product_key=product_key,
            product_id=product.prd_id,
            product_number=product.prd_key,
            product_name=product.prd_nm,
            category_id=product.cat_id,
            category=category.cat if category else None,
            subcategory=category.subcat if category else None,
            maintenance=category.maintenance if category else None,
            cost=product.prd_cost,
            product_line=product.prd_line,
            start_date=product.prd_start_dt,
        ))

    logger.info(f"Conformed {len(rows)} current products out of {len(crm_rows)} versions")
    return rows
