# product_api/errors.py

"""
Product service exceptions.
Raised by ProductService when a request cannot be fulfilled; the routes in
main.py translate each one into its own HTTP status code.
"""


class ProductServiceError(Exception):
    """Base class for every failure surfaced by ProductService."""


class NotFound(ProductServiceError):
    """No active product with the given id."""

    def __init__(self, product_id: int):
        super().__init__("product not found")
        self.product_id = product_id


class DuplicateKey(ProductServiceError):
    """Another active product already holds the SKU."""

    def __init__(self, sku: str):
        super().__init__(f"product with this SKU already exists: {sku}")
        self.sku = sku


class OutOfRange(ProductServiceError):
    """The requested page lies past the last page of a non-empty listing."""

    def __init__(self, page: int, size: int):
        super().__init__("page number out of range")
        self.page = page
        self.size = size


class StorageFailure(ProductServiceError):
    """
    Any other persistence error.
    The driver error is chained as __cause__ for logging; the message only
    names the operation, so nothing engine specific reaches clients.
    """

    def __init__(self, operation: str):
        super().__init__(f"storage failure during {operation}")
        self.operation = operation
