# product_api/service.py

"""
Business rules for products, independent of HTTP.
ProductService turns store outcomes into the errors defined in errors.py and
owns the listing policy: an empty page of a non-empty collection is an
out-of-range request, while an empty collection is a valid empty listing.
"""
import logging
from typing import Optional

from .errors import DuplicateKey, NotFound, OutOfRange, StorageFailure
from .models import Product
from .pagination import compute_page_window, compute_total_pages
from .schemas import ProductCreate, ProductListResponse, ProductResponse, ProductUpdate
from .store import ProductStore, StorageError, UniqueViolation


class ProductService:
    def __init__(
        self, store: ProductStore, logger: Optional[logging.Logger] = None
    ) -> None:
        self._store = store
        self._logger = logger or logging.getLogger(__name__)

    def create_product(self, request: ProductCreate) -> Product:
        product = Product(**request.model_dump())
        try:
            return self._store.insert(product)
        except UniqueViolation as e:
            raise DuplicateKey(request.sku) from e
        except StorageError as e:
            self._logger.error(f"Failed to insert product with SKU {request.sku}: {e}")
            raise StorageFailure("create_product") from e

    def get_product(self, product_id: int) -> Product:
        try:
            product = self._store.fetch_by_id(product_id)
        except StorageError as e:
            self._logger.error(f"Failed to fetch product {product_id}: {e}")
            raise StorageFailure("get_product") from e
        if product is None:
            raise NotFound(product_id)
        return product

    def list_products(
        self, page: Optional[int] = None, size: Optional[int] = None
    ) -> ProductListResponse:
        """
        Returns one page of active products ordered by id.

        Raises OutOfRange when there are products but the requested page
        holds none of them.
        """
        try:
            total = self._store.count_active()
            limit, offset, effective_page = compute_page_window(page, size)
            products = self._store.fetch_range(offset, limit)
        except StorageError as e:
            self._logger.error(f"Failed to list products (page={page}, size={size}): {e}")
            raise StorageFailure("list_products") from e

        if total > 0 and not products:
            raise OutOfRange(effective_page, limit)

        return ProductListResponse(
            products=[ProductResponse.model_validate(p) for p in products],
            page=effective_page,
            size=limit,
            total_pages=compute_total_pages(total, limit),
            total_count=total,
        )

    def update_product(self, product_id: int, request: ProductUpdate) -> Product:
        product = self.get_product(product_id)

        changes = request.changes()
        for field, value in changes.items():
            setattr(product, field, value)
        sku = product.sku

        try:
            return self._store.save(product)
        except UniqueViolation as e:
            raise DuplicateKey(sku) from e
        except StorageError as e:
            self._logger.error(f"Failed to save product {product_id}: {e}")
            raise StorageFailure("update_product") from e

    def delete_product(self, product_id: int) -> None:
        try:
            affected = self._store.soft_delete(product_id)
        except StorageError as e:
            self._logger.error(f"Failed to delete product {product_id}: {e}")
            raise StorageFailure("delete_product") from e
        if affected == 0:
            raise NotFound(product_id)
