"""
Read-only quality checks over cleansed and conformed tables.

Every check returns a list of violations; an empty list means the check
passed. Checks report problems but never repair them.
"""

import logging
from collections import Counter
from datetime import date
from typing import Any, Callable, Iterable, List, Optional, Sequence

from schemas.gold import CustomerDimensionRow, ProductDimensionRow, SalesFactRow
from schemas.normalized import (
    CustomerRecord,
    ERPCategoryRecord,
    ERPCustomerRecord,
    ProductRecord,
    SalesRecord,
)
from schemas.quality import QualityViolation

logger = logging.getLogger(__name__)


def _key(value: Any) -> Optional[str]:
    return None if value is None else str(value)


# ============================================================================
# Gold checks
# ============================================================================

def check_unique_surrogate_keys(rows: Iterable[Any], key_field: str, check_name: str) -> List[QualityViolation]:
    """Group dimension rows by surrogate key; any group larger than one is a violation"""
    counts = Counter(getattr(row, key_field) for row in rows)
    return [
        QualityViolation(
            check_name=check_name,
            offending_key=_key(key),
            detail=f"{key_field} shared by {count} rows",
        )
        for key, count in sorted(counts.items(), key=lambda item: (item[0] is None, item[0] or 0))
        if count > 1
    ]


def check_referential_integrity(
    facts: Iterable[SalesFactRow],
    dim_customers: Iterable[CustomerDimensionRow],
    dim_products: Iterable[ProductDimensionRow],
) -> List[QualityViolation]:
    """Every fact row must reference an existing customer and product row"""
    customer_keys = {row.customer_key for row in dim_customers}
    product_keys = {row.product_key for row in dim_products}

    violations = []
    for fact in facts:
        problems = []
        if fact.customer_key is None:
            problems.append("customer_key is null")
        elif fact.customer_key not in customer_keys:
            problems.append(f"customer_key {fact.customer_key} not in dim_customers")
        if fact.product_key is None:
            problems.append("product_key is null")
        elif fact.product_key not in product_keys:
            problems.append(f"product_key {fact.product_key} not in dim_products")
        if problems:
            violations.append(QualityViolation(
                check_name="fact_sales_referential_integrity",
                offending_key=fact.order_number,
                detail="; ".join(problems),
            ))
    return violations


def verify_gold(
    dim_customers: Sequence[CustomerDimensionRow],
    dim_products: Sequence[ProductDimensionRow],
    facts: Sequence[SalesFactRow],
) -> List[QualityViolation]:
    violations = (
        check_unique_surrogate_keys(dim_customers, "customer_key", "dim_customers_unique_key")
        + check_unique_surrogate_keys(dim_products, "product_key", "dim_products_unique_key")
        + check_referential_integrity(facts, dim_customers, dim_products)
    )
    logger.info(f"Gold checks found {len(violations)} violations")
    return violations


# ============================================================================
# Silver checks
# ============================================================================

def check_natural_keys(records: Iterable[Any], key_fn: Callable[[Any], Any], check_name: str) -> List[QualityViolation]:
    """Natural keys must be present and unique"""
    keys = [key_fn(record) for record in records]
    violations = []
    missing = sum(1 for key in keys if key is None)
    if missing:
        violations.append(QualityViolation(check_name=check_name, detail=f"{missing} rows without a key"))
    counts = Counter(key for key in keys if key is not None)
    for key, count in counts.items():
        if count > 1:
            violations.append(QualityViolation(
                check_name=check_name,
                offending_key=_key(key),
                detail=f"key appears {count} times",
            ))
    return violations


def check_unwanted_spaces(
    records: Iterable[Any],
    fields: Sequence[str],
    key_fn: Callable[[Any], Any],
    check_name: str,
) -> List[QualityViolation]:
    violations = []
    for record in records:
        for field in fields:
            value = getattr(record, field)
            if isinstance(value, str) and value != value.strip():
                violations.append(QualityViolation(
                    check_name=check_name,
                    offending_key=_key(key_fn(record)),
                    detail=f"{field} has leading or trailing spaces",
                ))
    return violations


def check_product_cost(products: Iterable[ProductRecord]) -> List[QualityViolation]:
    return [
        QualityViolation(
            check_name="crm_prd_info_cost",
            offending_key=_key(product.prd_id),
            detail=f"prd_cost is {product.prd_cost}",
        )
        for product in products
        if product.prd_cost is None or product.prd_cost < 0
    ]


def check_validity_order(products: Iterable[ProductRecord]) -> List[QualityViolation]:
    return [
        QualityViolation(
            check_name="crm_prd_info_validity_order",
            offending_key=_key(product.prd_id),
            detail=f"prd_end_dt {product.prd_end_dt} before prd_start_dt {product.prd_start_dt}",
        )
        for product in products
        if product.prd_start_dt is not None
        and product.prd_end_dt is not None
        and product.prd_end_dt < product.prd_start_dt
    ]


def check_sales_date_order(sales: Iterable[SalesRecord]) -> List[QualityViolation]:
    violations = []
    for sale in sales:
        if sale.sls_order_dt is None:
            continue
        if (sale.sls_ship_dt is not None and sale.sls_order_dt > sale.sls_ship_dt) or (
            sale.sls_due_dt is not None and sale.sls_order_dt > sale.sls_due_dt
        ):
            violations.append(QualityViolation(
                check_name="crm_sales_details_date_order",
                offending_key=sale.sls_ord_num,
                detail=(
                    f"order {sale.sls_order_dt}, ship {sale.sls_ship_dt}, due {sale.sls_due_dt}"
                ),
            ))
    return violations


def check_sales_arithmetic(sales: Iterable[SalesRecord]) -> List[QualityViolation]:
    """sales must equal quantity * price, with all three present and positive"""
    violations = []
    for sale in sales:
        values = (sale.sls_sales, sale.sls_quantity, sale.sls_price)
        if any(value is None for value in values):
            reason = "missing measure"
        elif any(value <= 0 for value in values):
            reason = "non-positive measure"
        elif sale.sls_sales != sale.sls_quantity * sale.sls_price:
            reason = "sales != quantity * price"
        else:
            continue
        violations.append(QualityViolation(
            check_name="crm_sales_details_arithmetic",
            offending_key=sale.sls_ord_num,
            detail=(
                f"{reason}: sales={sale.sls_sales}, quantity={sale.sls_quantity}, price={sale.sls_price}"
            ),
        ))
    return violations


def check_birthdate_range(
    customers: Iterable[ERPCustomerRecord],
    min_birthdate: date,
    as_of: date,
) -> List[QualityViolation]:
    return [
        QualityViolation(
            check_name="erp_cust_az12_birthdate_range",
            offending_key=customer.cid,
            detail=f"bdate {customer.bdate} outside {min_birthdate}..{as_of}",
        )
        for customer in customers
        if customer.bdate is not None and (customer.bdate < min_birthdate or customer.bdate > as_of)
    ]


def verify_silver(
    customers: Sequence[CustomerRecord],
    products: Sequence[ProductRecord],
    sales: Sequence[SalesRecord],
    erp_customers: Sequence[ERPCustomerRecord],
    erp_categories: Sequence[ERPCategoryRecord],
    as_of: date,
    min_birthdate: date,
) -> List[QualityViolation]:
    violations = (
        check_natural_keys(customers, lambda c: c.cst_id, "crm_cust_info_natural_key")
        + check_unwanted_spaces(
            customers, ["cst_key", "cst_firstname", "cst_lastname"],
            lambda c: c.cst_id, "crm_cust_info_unwanted_spaces",
        )
        + check_natural_keys(products, lambda p: p.prd_id, "crm_prd_info_natural_key")
        + check_unwanted_spaces(products, ["prd_nm"], lambda p: p.prd_id, "crm_prd_info_unwanted_spaces")
        + check_product_cost(products)
        + check_validity_order(products)
        + check_sales_date_order(sales)
        + check_sales_arithmetic(sales)
        + check_birthdate_range(erp_customers, min_birthdate, as_of)
        + check_unwanted_spaces(
            erp_categories, ["cat", "subcat", "maintenance"],
            lambda c: c.id, "erp_px_cat_g1v2_unwanted_spaces",
        )
    )
    logger.info(f"Silver checks found {len(violations)} violations")
    return violations
