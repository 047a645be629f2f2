from sqlalchemy import Column, BigInteger, Integer, String, Text, Date, Numeric, Index
from models.base import Base


class CRMCustomer(Base):
    """
    Cleansed CRM customers, one row per customer id.

    Names are trimmed, marital status and gender carry standardized labels,
    and only the most recently created record of each customer survives.
    """
    __tablename__ = "silver_crm_cust_info"

    row_id = Column(BigInteger, primary_key=True, autoincrement=True)

    cst_id = Column(Integer, nullable=False, index=True)
    cst_key = Column(String(50), nullable=True, index=True)
    cst_firstname = Column(String(50), nullable=True)
    cst_lastname = Column(String(50), nullable=True)
    cst_marital_status = Column(String(50), nullable=False)
    cst_gndr = Column(String(50), nullable=False)
    cst_create_date = Column(Date, nullable=True)


class CRMProduct(Base):
    """
    Cleansed CRM product versions with derived validity windows.

    A null ``prd_end_dt`` on a dated row marks the current version of a product.
    """
    __tablename__ = "silver_crm_prd_info"

    row_id = Column(BigInteger, primary_key=True, autoincrement=True)

    prd_id = Column(Integer, nullable=True, index=True)
    cat_id = Column(String(50), nullable=True, index=True)
    prd_key = Column(String(50), nullable=True, index=True)
    prd_nm = Column(String(50), nullable=True)
    prd_cost = Column(Integer, nullable=False)
    prd_line = Column(String(50), nullable=False)
    prd_start_dt = Column(Date, nullable=True)
    prd_end_dt = Column(Date, nullable=True)

    __table_args__ = (
        Index("idx_silver_prd_key_start", "prd_key", "prd_start_dt"),
    )


class CRMSale(Base):
    """Reconciled sales order lines"""
    __tablename__ = "silver_crm_sales_details"

    row_id = Column(BigInteger, primary_key=True, autoincrement=True)

    sls_ord_num = Column(String(50), nullable=True, index=True)
    sls_prd_key = Column(String(50), nullable=True, index=True)
    sls_cust_id = Column(Integer, nullable=True, index=True)
    sls_order_dt = Column(Date, nullable=True)
    sls_ship_dt = Column(Date, nullable=True)
    sls_due_dt = Column(Date, nullable=True)
    sls_sales = Column(Numeric(18, 2), nullable=True)
    sls_quantity = Column(Integer, nullable=True)
    sls_price = Column(Numeric(18, 2), nullable=True)


class ERPCustomer(Base):
    """ERP customer demographics keyed by the CRM customer number"""
    __tablename__ = "silver_erp_cust_az12"

    row_id = Column(BigInteger, primary_key=True, autoincrement=True)

    cid = Column(String(50), nullable=True, index=True)
    bdate = Column(Date, nullable=True)
    gen = Column(String(50), nullable=False)


class ERPLocation(Base):
    """ERP customer locations keyed by the CRM customer number"""
    __tablename__ = "silver_erp_loc_a101"

    row_id = Column(BigInteger, primary_key=True, autoincrement=True)

    cid = Column(String(50), nullable=True, index=True)
    cntry = Column(Text, nullable=False)


class ERPCategory(Base):
    """ERP product categories"""
    __tablename__ = "silver_erp_px_cat_g1v2"

    row_id = Column(BigInteger, primary_key=True, autoincrement=True)

    id = Column(String(50), nullable=True, index=True)
    cat = Column(String(50), nullable=True)
    subcat = Column(String(50), nullable=True)
    maintenance = Column(String(50), nullable=True)
