"""
Pytest configuration and fixtures
"""

import csv
from datetime import date

import pytest

from warehouse.sources.base import (
    CRM_CUSTOMERS,
    CRM_PRODUCTS,
    CRM_SALES,
    ERP_CUSTOMERS,
    ERP_LOCATIONS,
    ERP_CATEGORIES,
)

AS_OF = date(2026, 1, 31)


@pytest.fixture
def as_of():
    """Fixed run date so future-date checks are reproducible"""
    return AS_OF


@pytest.fixture
def crm_customer_rows():
    """CRM customers: untrimmed names, coded values, one duplicated id, one row without id"""
    return [
        {
            "cst_id": "11000",
            "cst_key": "AW00011000",
            "cst_firstname": " Jon",
            "cst_lastname": "Yang ",
            "cst_marital_status": "M",
            "cst_gndr": "M",
            "cst_create_date": "2025-10-06",
        },
        {
            "cst_id": "11001",
            "cst_key": "AW00011001",
            "cst_firstname": "Eugene",
            "cst_lastname": "Huang",
            "cst_marital_status": " s ",
            "cst_gndr": None,
            "cst_create_date": "2025-10-06",
        },
        {
            "cst_id": "29449",
            "cst_key": "AW00029449",
            "cst_firstname": "Lauren",
            "cst_lastname": "Walker",
            "cst_marital_status": "M",
            "cst_gndr": "F",
            "cst_create_date": "2026-01-27",
        },
        {
            "cst_id": "29449",
            "cst_key": "AW00029449",
            "cst_firstname": "Lauren (old)",
            "cst_lastname": "Walker",
            "cst_marital_status": "S",
            "cst_gndr": None,
            "cst_create_date": "2026-01-25",
        },
        {
            "cst_id": None,
            "cst_key": "PO25",
            "cst_firstname": None,
            "cst_lastname": None,
            "cst_marital_status": None,
            "cst_gndr": None,
            "cst_create_date": None,
        },
    ]


@pytest.fixture
def crm_product_rows():
    """CRM product versions: one product with three versions and bogus recorded end dates"""
    return [
        {
            "prd_id": "210",
            "prd_key": "CO-RF-FR-R92B-58",
            "prd_nm": "HL Road Frame - Black- 58",
            "prd_cost": None,
            "prd_line": "R ",
            "prd_start_dt": "2003-07-01",
            "prd_end_dt": None,
        },
        {
            "prd_id": "212",
            "prd_key": "AC-HE-HL-U509-R",
            "prd_nm": "Sport-100 Helmet- Red",
            "prd_cost": "12",
            "prd_line": "S",
            "prd_start_dt": "2011-07-01",
            "prd_end_dt": "2007-12-28",
        },
        {
            "prd_id": "213",
            "prd_key": "AC-HE-HL-U509-R",
            "prd_nm": "Sport-100 Helmet- Red",
            "prd_cost": "14",
            "prd_line": "S",
            "prd_start_dt": "2012-07-01",
            "prd_end_dt": "2008-12-27",
        },
        {
            "prd_id": "214",
            "prd_key": "AC-HE-HL-U509-R",
            "prd_nm": "Sport-100 Helmet- Red",
            "prd_cost": "13",
            "prd_line": "S",
            "prd_start_dt": "2013-07-01",
            "prd_end_dt": None,
        },
        {
            "prd_id": "300",
            "prd_key": "BI-RB-BK-R93R-62",
            "prd_nm": "Road-150 Red- 62",
            "prd_cost": "2171",
            "prd_line": "r",
            "prd_start_dt": "2013-07-01",
            "prd_end_dt": None,
        },
    ]


@pytest.fixture
def crm_sales_rows():
    """Sales lines: one clean, one with zero order date and negative price, one missing price, one orphan"""
    return [
        {
            "sls_ord_num": "SO43697",
            "sls_prd_key": "BK-R93R-62",
            "sls_cust_id": "11000",
            "sls_order_dt": "20101229",
            "sls_ship_dt": "20110105",
            "sls_due_dt": "20110110",
            "sls_sales": "3578",
            "sls_quantity": "1",
            "sls_price": "3578",
        },
        {
            "sls_ord_num": "SO43698",
            "sls_prd_key": "HL-U509-R",
            "sls_cust_id": "11001",
            "sls_order_dt": "0",
            "sls_ship_dt": "20110105",
            "sls_due_dt": "20110110",
            "sls_sales": None,
            "sls_quantity": "2",
            "sls_price": "-35",
        },
        {
            "sls_ord_num": "SO43699",
            "sls_prd_key": "FR-R92B-58",
            "sls_cust_id": "29449",
            "sls_order_dt": "20110101",
            "sls_ship_dt": "20110108",
            "sls_due_dt": "20110113",
            "sls_sales": "100",
            "sls_quantity": "2",
            "sls_price": None,
        },
        {
            "sls_ord_num": "SO43700",
            "sls_prd_key": "XX-0000",
            "sls_cust_id": "99999",
            "sls_order_dt": "20110102",
            "sls_ship_dt": "20110109",
            "sls_due_dt": "20110114",
            "sls_sales": "10",
            "sls_quantity": "1",
            "sls_price": "10",
        },
    ]


@pytest.fixture
def erp_customer_rows():
    return [
        {"cid": "NASAW00011000", "bdate": "1971-10-06", "gen": "Male"},
        {"cid": "AW00011001", "bdate": "2099-01-01", "gen": "M"},
        {"cid": "NASAW00029449", "bdate": "1976-04-08", "gen": " F"},
    ]


@pytest.fixture
def erp_location_rows():
    return [
        {"cid": "AW-00011000", "cntry": "Australia"},
        {"cid": "AW-00011001", "cntry": "DE"},
        {"cid": "AW-00029449", "cntry": " "},
    ]


@pytest.fixture
def erp_category_rows():
    return [
        {"id": "CO_RF", "cat": "Components", "subcat": "Road Frames", "maintenance": "Yes"},
        {"id": "AC_HE", "cat": "Accessories", "subcat": "Helmets ", "maintenance": "No"},
        {"id": "BI_RB", "cat": "Bikes", "subcat": "Road Bikes", "maintenance": "Yes"},
    ]


@pytest.fixture
def source_batches(
    crm_customer_rows,
    crm_product_rows,
    crm_sales_rows,
    erp_customer_rows,
    erp_location_rows,
    erp_category_rows,
):
    """Every source batch, keyed by batch id"""
    return {
        CRM_CUSTOMERS: crm_customer_rows,
        CRM_PRODUCTS: crm_product_rows,
        CRM_SALES: crm_sales_rows,
        ERP_CUSTOMERS: erp_customer_rows,
        ERP_LOCATIONS: erp_location_rows,
        ERP_CATEGORIES: erp_category_rows,
    }


@pytest.fixture
def write_csv():
    """Write rows to a CSV file; ``header`` overrides the column names written"""

    def _write(path, rows, header=None):
        path.parent.mkdir(parents=True, exist_ok=True)
        columns = list(rows[0].keys())
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(header or columns)
            for row in rows:
                writer.writerow(["" if row[column] is None else row[column] for column in columns])
        return path

    return _write
