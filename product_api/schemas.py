# product_api/schemas.py

"""
Pydantic schemas for the Product API.
These define the data structures for incoming requests and outgoing responses,
ensuring data validation and clear API contracts.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Schema for creating a new product.
# Used in POST /api/v1/products.
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Name of the product.")
    description: str = Field("", description="Free text description, may be empty.")
    sku: str = Field(..., min_length=1, max_length=128, description="Stock keeping unit, unique among active products.")
    price: float = Field(..., gt=0, description="Price of the product. Must be greater than 0.")
    quantity: int = Field(0, ge=0, description="Units in stock. Must be non-negative.")
    category: str = Field("", description="Free text category, may be empty.")


# Schema for partially updating an existing product.
# Only fields present (and not null) in the payload are applied.
# Used in PATCH /api/v1/products/{product_id}.
class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, description="New name of the product.")
    description: Optional[str] = Field(None, description="New description of the product.")
    sku: Optional[str] = Field(None, min_length=1, max_length=128, description="New SKU of the product.")
    price: Optional[float] = Field(None, gt=0, description="New price. Must be greater than 0.")
    quantity: Optional[int] = Field(None, ge=0, description="New stock quantity. Must be non-negative.")
    category: Optional[str] = Field(None, description="New category of the product.")

    def changes(self) -> dict:
        """Fields explicitly provided with a value, keyed by attribute name."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


# Schema for representing a product in API responses.
class ProductResponse(ProductCreate):
    id: int = Field(..., description="Unique identifier of the product.")
    created_at: Optional[datetime] = Field(None, description="Timestamp when the product was created.")
    updated_at: Optional[datetime] = Field(None, description="Timestamp when the product was last updated.")
    deleted_at: Optional[datetime] = Field(None, description="Timestamp when the product was deleted.")

    model_config = ConfigDict(from_attributes=True)


# One page of products, as returned by GET /api/v1/products.
class ProductListResponse(BaseModel):
    products: List[ProductResponse]
    page: int
    size: int
    total_pages: int
    total_count: int
