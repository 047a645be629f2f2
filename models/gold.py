from sqlalchemy import Column, BigInteger, Integer, String, Text, Date, Numeric, Index
from models.base import Base


class DimCustomer(Base):
    """
    Conformed customer dimension.

    Field Mapping Strategy:
    - crm cst_id -> customer_id (natural key)
    - crm cst_key -> customer_number (join key into the ERP tables)
    - crm names, marital status, create date -> same attributes
    - crm gender, falling back to erp gen when the CRM value is unknown
    - erp bdate -> birthdate
    - erp cntry -> country
    """
    __tablename__ = "gold_dim_customers"

    customer_key = Column(Integer, primary_key=True, autoincrement=False)

    customer_id = Column(Integer, nullable=False, unique=True, index=True)
    customer_number = Column(String(50), nullable=True, index=True)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    country = Column(Text, nullable=True)
    marital_status = Column(String(50), nullable=False)
    gender = Column(String(50), nullable=False)
    birthdate = Column(Date, nullable=True)
    create_date = Column(Date, nullable=True)


class DimProduct(Base):
    """
    Conformed product dimension holding current product versions only.

    Category, subcategory and maintenance come from the ERP category table;
    every other attribute comes from the CRM product table.
    """
    __tablename__ = "gold_dim_products"

    product_key = Column(Integer, primary_key=True, autoincrement=False)

    product_id = Column(Integer, nullable=True, index=True)
    product_number = Column(String(50), nullable=False, unique=True, index=True)
    product_name = Column(String(50), nullable=True)
    category_id = Column(String(50), nullable=True)
    category = Column(String(50), nullable=True)
    subcategory = Column(String(50), nullable=True)
    maintenance = Column(String(50), nullable=True)
    cost = Column(Integer, nullable=False)
    product_line = Column(String(50), nullable=False)
    start_date = Column(Date, nullable=False)


class FactSale(Base):
    """
    Sales fact at order line grain.

    Surrogate keys are nullable: a line whose customer or product has no
    current dimension row is kept as an orphan. No foreign key constraints,
    because each dimension is replaced independently of the fact table.
    """
    __tablename__ = "gold_fact_sales"

    row_id = Column(BigInteger, primary_key=True, autoincrement=True)

    order_number = Column(String(50), nullable=True, index=True)
    product_key = Column(Integer, nullable=True)
    customer_key = Column(Integer, nullable=True)
    order_date = Column(Date, nullable=True)
    shipping_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)
    sales_amount = Column(Numeric(18, 2), nullable=True)
    quantity = Column(Integer, nullable=True)
    price = Column(Numeric(18, 2), nullable=True)

    __table_args__ = (
        Index("idx_fact_sales_customer", "customer_key"),
        Index("idx_fact_sales_product", "product_key"),
        Index("idx_fact_sales_order_date", "order_date"),
    )
