# product_api/store.py

"""
Persistence layer for products.
`ProductStore` is the contract ProductService relies on; `SqlAlchemyProductStore`
implements it on top of a request scoped SQLAlchemy session.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .models import Product

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION_CODE = "23505"

# Largest value a signed 64-bit database integer can hold
MAX_DB_INTEGER = 2**63 - 1


def fits_db_integer(value: int) -> bool:
    return -MAX_DB_INTEGER - 1 <= value <= MAX_DB_INTEGER


class StorageError(Exception):
    """The store could not complete an operation."""


class UniqueViolation(StorageError):
    """A write collided with the unique SKU index."""


class ProductStore(ABC):
    """Storage contract for products. Only active rows are ever visible."""

    @abstractmethod
    def insert(self, product: Product) -> Product:
        """Persist a new product and return it with id and timestamps."""

    @abstractmethod
    def fetch_by_id(self, product_id: int) -> Optional[Product]:
        """Return the active product with this id, or None."""

    @abstractmethod
    def count_active(self) -> int:
        """Number of active products."""

    @abstractmethod
    def fetch_range(self, offset: int, limit: int) -> List[Product]:
        """Active products ordered by ascending id, skipping `offset` rows."""

    @abstractmethod
    def save(self, product: Product) -> Product:
        """Persist changes made to an already stored product."""

    @abstractmethod
    def soft_delete(self, product_id: int) -> int:
        """Mark the product deleted; returns the number of rows affected."""


def is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code is not None:
        return code == UNIQUE_VIOLATION_CODE
    return "UNIQUE constraint failed" in str(orig)


class SqlAlchemyProductStore(ProductStore):
    def __init__(self, db: Session) -> None:
        self._db = db

    def _active(self):
        return select(Product).where(Product.deleted_at.is_(None))

    def _commit(self, operation: str, product: Optional[Product] = None) -> None:
        try:
            self._db.commit()
        except IntegrityError as e:
            self._db.rollback()
            if is_unique_violation(e):
                raise UniqueViolation(f"{operation}: unique constraint violated") from e
            raise StorageError(f"{operation}: integrity error") from e
        except SQLAlchemyError as e:
            self._db.rollback()
            raise StorageError(f"{operation}: {e.__class__.__name__}") from e
        if product is not None:
            self._db.refresh(product)

    def insert(self, product: Product) -> Product:
        self._db.add(product)
        self._commit("insert", product)
        return product

    def fetch_by_id(self, product_id: int) -> Optional[Product]:
        if not fits_db_integer(product_id):
            return None
        try:
            return self._db.scalar(self._active().where(Product.id == product_id))
        except SQLAlchemyError as e:
            raise StorageError("fetch_by_id") from e

    def count_active(self) -> int:
        try:
            count_query = select(func.count(Product.id)).where(
                Product.deleted_at.is_(None)
            )
            return self._db.scalar(count_query) or 0
        except SQLAlchemyError as e:
            raise StorageError("count_active") from e

    def fetch_range(self, offset: int, limit: int) -> List[Product]:
        # No row can sit past the largest offset the database accepts
        if offset > MAX_DB_INTEGER:
            return []
        limit = min(limit, MAX_DB_INTEGER)
        try:
            query = self._active().order_by(Product.id.asc()).offset(offset).limit(limit)
            return list(self._db.scalars(query).all())
        except SQLAlchemyError as e:
            raise StorageError("fetch_range") from e

    def save(self, product: Product) -> Product:
        self._db.add(product)
        self._commit("save", product)
        return product

    def soft_delete(self, product_id: int) -> int:
        if not fits_db_integer(product_id):
            return 0
        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.deleted_at.is_(None))
            .values(deleted_at=datetime.now(timezone.utc))
        )
        try:
            result = self._db.execute(stmt)
        except SQLAlchemyError as e:
            self._db.rollback()
            raise StorageError("soft_delete") from e
        self._commit("soft_delete")
        return result.rowcount
