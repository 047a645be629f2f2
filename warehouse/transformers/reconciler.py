"""
Reconcile sales order lines: compact dates and the sales/quantity/price triple.

Measures are corrected in a fixed order. The sales amount is settled first
from quantity and the absolute unit price; the unit price is then derived
from the settled sales amount when the recorded price is missing or not
positive.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from schemas.normalized import SalesRecord
from schemas.raw import RawSale
from warehouse.transformers.normalizers import clean_string, parse_compact_date

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _is_positive(value: Optional[Decimal]) -> bool:
    return value is not None and value > 0


def reconcile_amounts(
    sales: Optional[Decimal],
    quantity: Optional[int],
    price: Optional[Decimal],
) -> Tuple[Optional[Decimal], Optional[Decimal]]:
    """
    Return corrected ``(sales, price)``.

    Sales is recomputed as ``quantity * |price|`` when it is missing, not
    positive, or disagrees with that product.
    Price is kept when positive, otherwise derived as ``sales / quantity``
    (None when quantity is missing or zero).
    """
    expected = None
    if quantity is not None and price is not None:
        expected = Decimal(quantity) * abs(price)

    if not _is_positive(sales) or (expected is not None and sales != expected):
        sales = expected

    if not _is_positive(price):
        if sales is None or not quantity:
            price = None
        else:
            price = (sales / Decimal(quantity)).quantize(CENT, rounding=ROUND_HALF_UP)

    return sales, price


def reconcile_sale(raw: RawSale) -> SalesRecord:
    order_date = parse_compact_date(raw.sls_order_dt)
    ship_date = parse_compact_date(raw.sls_ship_dt)
    due_date = parse_compact_date(raw.sls_due_dt)

    # An order placed after it shipped or fell due is a bad order date
    if order_date is not None and (
        (ship_date is not None and order_date > ship_date)
        or (due_date is not None and order_date > due_date)
    ):
        order_date = None

    sales, price = reconcile_amounts(raw.sls_sales, raw.sls_quantity, raw.sls_price)

    return SalesRecord(
        sls_ord_num=clean_string(raw.sls_ord_num),
        sls_prd_key=clean_string(raw.sls_prd_key),
        sls_cust_id=raw.sls_cust_id,
        sls_order_dt=order_date,
        sls_ship_dt=ship_date,
        sls_due_dt=due_date,
        sls_sales=sales,
        sls_quantity=raw.sls_quantity,
        sls_price=price,
    )


def reconcile_sales(rows: Iterable[Mapping[str, Any]]) -> List[SalesRecord]:
    """Reconcile every raw sales row; output is one-to-one with input"""
    reconciled = [reconcile_sale(RawSale.model_validate(row)) for row in rows]
    logger.info(f"Reconciled {len(reconciled)} sales lines")
    return reconciled
