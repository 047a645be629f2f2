"""
Unit tests for quality checks
"""

from datetime import date
from decimal import Decimal

from schemas.gold import CustomerDimensionRow, ProductDimensionRow, SalesFactRow
from schemas.normalized import (
    CustomerRecord,
    ERPCategoryRecord,
    ERPCustomerRecord,
    ProductRecord,
    SalesRecord,
)
from warehouse.quality.verifier import (
    check_birthdate_range,
    check_natural_keys,
    check_product_cost,
    check_referential_integrity,
    check_sales_arithmetic,
    check_sales_date_order,
    check_unique_surrogate_keys,
    check_unwanted_spaces,
    check_validity_order,
    verify_gold,
    verify_silver,
)

MIN_BIRTHDATE = date(1924, 1, 1)
AS_OF = date(2026, 1, 31)


class TestGoldChecks:
    """Test star schema checks"""

    def test_duplicate_surrogate_key(self):
        rows = [
            CustomerDimensionRow(customer_key=1, customer_id=10),
            CustomerDimensionRow(customer_key=1, customer_id=20),
            CustomerDimensionRow(customer_key=2, customer_id=30),
        ]

        violations = check_unique_surrogate_keys(rows, "customer_key", "dim_customers_unique_key")

        assert len(violations) == 1
        assert violations[0].check_name == "dim_customers_unique_key"
        assert violations[0].offending_key == "1"

    def test_referential_integrity(self):
        customers = [CustomerDimensionRow(customer_key=1, customer_id=10)]
        products = [ProductDimensionRow(product_key=1, product_number="A", start_date=date(2013, 1, 1))]
        facts = [
            SalesFactRow(order_number="SO1", customer_key=1, product_key=1),
            SalesFactRow(order_number="SO2", customer_key=None, product_key=1),
            SalesFactRow(order_number="SO3", customer_key=1, product_key=9),
        ]

        violations = check_referential_integrity(facts, customers, products)

        assert [v.offending_key for v in violations] == ["SO2", "SO3"]
        assert all(v.check_name == "fact_sales_referential_integrity" for v in violations)
        assert "customer_key is null" in violations[0].detail
        assert "product_key 9" in violations[1].detail

    def test_clean_star_schema_passes(self):
        customers = [CustomerDimensionRow(customer_key=1, customer_id=10)]
        products = [ProductDimensionRow(product_key=1, product_number="A", start_date=date(2013, 1, 1))]
        facts = [SalesFactRow(order_number="SO1", customer_key=1, product_key=1)]

        assert verify_gold(customers, products, facts) == []

    def test_empty_tables_pass(self):
        assert verify_gold([], [], []) == []


class TestSilverChecks:
    """Test cleansed table checks"""

    def test_natural_keys(self):
        records = [CustomerRecord(cst_id=1), CustomerRecord(cst_id=1), CustomerRecord(cst_id=2)]

        violations = check_natural_keys(records, lambda c: c.cst_id, "crm_cust_info_natural_key")

        assert [v.offending_key for v in violations] == ["1"]

    def test_missing_natural_keys_are_reported(self):
        violations = check_natural_keys([ProductRecord(prd_id=None)], lambda p: p.prd_id, "crm_prd_info_natural_key")

        assert len(violations) == 1
        assert violations[0].offending_key is None

    def test_unwanted_spaces(self):
        records = [CustomerRecord(cst_id=1, cst_firstname=" Jon"), CustomerRecord(cst_id=2, cst_firstname="Ann")]

        violations = check_unwanted_spaces(records, ["cst_firstname"], lambda c: c.cst_id, "spaces")

        assert [v.offending_key for v in violations] == ["1"]

    def test_product_cost(self):
        products = [ProductRecord(prd_id=1, prd_cost=-5), ProductRecord(prd_id=2, prd_cost=0)]

        violations = check_product_cost(products)

        assert [v.offending_key for v in violations] == ["1"]

    def test_validity_order(self):
        products = [
            ProductRecord(prd_id=1, prd_start_dt=date(2012, 1, 1), prd_end_dt=date(2011, 1, 1)),
            ProductRecord(prd_id=2, prd_start_dt=date(2012, 1, 1), prd_end_dt=date(2012, 1, 1)),
            ProductRecord(prd_id=3, prd_start_dt=date(2012, 1, 1)),
        ]

        assert [v.offending_key for v in check_validity_order(products)] == ["1"]

    def test_sales_date_order(self):
        sales = [
            SalesRecord(sls_ord_num="SO1", sls_order_dt=date(2011, 1, 10), sls_ship_dt=date(2011, 1, 5)),
            SalesRecord(sls_ord_num="SO2", sls_order_dt=date(2011, 1, 1), sls_due_dt=date(2011, 1, 5)),
            SalesRecord(sls_ord_num="SO3", sls_ship_dt=date(2011, 1, 5)),
        ]

        assert [v.offending_key for v in check_sales_date_order(sales)] == ["SO1"]

    def test_sales_arithmetic(self):
        sales = [
            SalesRecord(sls_ord_num="OK", sls_sales=Decimal("70"), sls_quantity=2, sls_price=Decimal("35.00")),
            SalesRecord(sls_ord_num="MISSING", sls_sales=None, sls_quantity=2, sls_price=Decimal("35")),
            SalesRecord(sls_ord_num="NEGATIVE", sls_sales=Decimal("-70"), sls_quantity=2, sls_price=Decimal("-35")),
            SalesRecord(sls_ord_num="WRONG", sls_sales=Decimal("10"), sls_quantity=3, sls_price=Decimal("3.33")),
        ]

        violations = check_sales_arithmetic(sales)

        assert [v.offending_key for v in violations] == ["MISSING", "NEGATIVE", "WRONG"]
        assert all(v.check_name == "crm_sales_details_arithmetic" for v in violations)

    def test_birthdate_range(self):
        customers = [
            ERPCustomerRecord(cid="OLD", bdate=date(1900, 1, 1)),
            ERPCustomerRecord(cid="OK", bdate=date(1970, 1, 1)),
            ERPCustomerRecord(cid="FUTURE", bdate=date(2030, 1, 1)),
            ERPCustomerRecord(cid="NONE"),
        ]

        violations = check_birthdate_range(customers, MIN_BIRTHDATE, AS_OF)

        assert [v.offending_key for v in violations] == ["OLD", "FUTURE"]

    def test_verify_silver_collects_every_check(self):
        violations = verify_silver(
            customers=[CustomerRecord(cst_id=1, cst_lastname="Yang ")],
            products=[ProductRecord(prd_id=1, prd_cost=-1)],
            sales=[SalesRecord(sls_ord_num="SO1")],
            erp_customers=[ERPCustomerRecord(cid="AW1", bdate=date(1900, 1, 1))],
            erp_categories=[ERPCategoryRecord(id="AC_HE", cat=" Accessories")],
            as_of=AS_OF,
            min_birthdate=MIN_BIRTHDATE,
        )

        assert sorted(v.check_name for v in violations) == [
            "crm_cust_info_unwanted_spaces",
            "crm_prd_info_cost",
            "crm_sales_details_arithmetic",
            "erp_cust_az12_birthdate_range",
            "erp_px_cat_g1v2_unwanted_spaces",
        ]
