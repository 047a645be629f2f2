"""
Resolve sales lines to dimension surrogate keys
"""

import logging
from typing import List, Sequence

from schemas.gold import CustomerDimensionRow, ProductDimensionRow, SalesFactRow
from schemas.normalized import SalesRecord
from warehouse.conformers.dimensions import index_by

logger = logging.getLogger(__name__)


def conform_facts(
    reconciled_sales: Sequence[SalesRecord],
    dim_customers: Sequence[CustomerDimensionRow],
    dim_products: Sequence[ProductDimensionRow],
) -> List[SalesFactRow]:
    """
    Left join sales lines to both dimensions by natural key.

    Lines whose customer id or product number has no dimension row are kept
    with a null surrogate key, so orphans stay visible to quality checks.
    """
    customer_keys = {
        key: row.customer_key
        for key, row in index_by(dim_customers, lambda row: row.customer_id).items()
    }
    product_keys = {
        key: row.product_key
        for key, row in index_by(dim_products, lambda row: row.product_number).items()
    }

    facts = []
    orphans = 0
    for sale in reconciled_sales:
        customer_key = customer_keys.get(sale.sls_cust_id)
        product_key = product_keys.get(sale.sls_prd_key)
        if customer_key is None or product_key is None:
            orphans += 1

        facts.append(SalesFactRow(
            order_number=sale.sls_ord_num,
            product_key=product_key,
            customer_key=customer_key,
            order_date=sale.sls_order_dt,
            shipping_date=sale.sls_ship_dt,
            due_date=sale.sls_due_dt,
            sales_amount=sale.sls_sales,
            quantity=sale.sls_quantity,
            price=sale.sls_price,
        ))

    if orphans:
        logger.warning(f"{orphans} of {len(facts)} sales lines did not resolve to both dimensions")
    logger.info(f"Conformed {len(facts)} sales facts")
    return facts
