# product_api/models.py

"""
SQLAlchemy database models for the Product API.
These classes define the structure of tables in the database.
"""

from sqlalchemy import Column, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.sql import func

from .db import Base


class Product(Base):
    """
    SQLAlchemy model for the 'products' table.
    Rows are soft deleted: `deleted_at` is NULL while the product is active.
    """

    __tablename__ = "products"

    # Primary Key: auto-incrementing, never reused.
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")

    # Unique among active rows only, see the partial index below.
    sku = Column(String(128), nullable=False)

    # Product price: numeric with 10 total digits and 2 decimal places.
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    category = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    __table_args__ = (
        Index(
            "ux_products_sku_active",
            sku,
            unique=True,
            postgresql_where=deleted_at.is_(None),
            sqlite_where=deleted_at.is_(None),
        ),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, sku='{self.sku}', name='{self.name}')>"
