# product_api/main.py

"""
FastAPI Product API.
Exposes create, retrieve, partial update, soft delete and paginated listing
of products. Routes only parse input and map ProductService outcomes to
HTTP status codes; the rules themselves live in service.py.
"""
import logging
import sys
import time
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Path, Query, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from .config import CORS_ORIGINS, HOST, LOG_LEVEL, PORT
from .db import Base, engine, get_db
from .errors import DuplicateKey, NotFound, OutOfRange, StorageFailure
from .schemas import ProductCreate, ProductListResponse, ProductResponse, ProductUpdate
from .service import ProductService
from .store import MAX_DB_INTEGER, SqlAlchemyProductStore

# -----------------------------
# Configure Logging
# -----------------------------
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Suppress noisy logs from third-party libraries for cleaner output
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)

UNEXPECTED_ERROR = "unexpected error occurred"


# -----------------------------
# FastAPI App Initialization
# -----------------------------
app = FastAPI(
    title="Product API",
    description="CRUD and paginated listing of products",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- FastAPI Event Handlers ---
@app.on_event("startup")
async def startup_event():
    """
    Ensures database tables exist before serving requests.
    Retries the connection so the API can start before the database is ready.
    """
    max_retries = 10
    retry_delay_seconds = 5
    for i in range(max_retries):
        try:
            logger.info(
                f"Attempting to connect to the database and create tables (attempt {i+1}/{max_retries})..."
            )
            Base.metadata.create_all(bind=engine)
            logger.info("Database connection initialized successfully.")
            break
        except OperationalError as e:
            logger.warning(f"Failed to connect to the database: {e}")
            if i < max_retries - 1:
                logger.info(f"Retrying in {retry_delay_seconds} seconds...")
                time.sleep(retry_delay_seconds)
            else:
                logger.critical(
                    f"Failed to connect to the database after {max_retries} attempts. Exiting application."
                )
                sys.exit(1)


# Request validation failures are client errors (400); 422 is kept for
# out-of-range pages.
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Request to {request.url.path} failed validation: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    """Builds a service around the request's database session."""
    return ProductService(
        SqlAlchemyProductStore(db), logger=logging.getLogger("product_api.service")
    )


# --- Root Endpoint ---
@app.get("/", status_code=status.HTTP_200_OK, summary="Root endpoint")
async def read_root():
    """Returns a welcome message for the Product API."""
    return {"message": "Welcome to the Product API!"}


# --- Health Check Endpoint ---
@app.get("/health", status_code=status.HTTP_200_OK, summary="Health check endpoint")
async def health_check():
    """Returns 200 OK while the process is alive."""
    return {"status": "ok", "service": "product-service"}


# -----------------------------
# CRUD Endpoints
# -----------------------------


@app.post(
    "/api/v1/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
)
def create_product(
    product: ProductCreate, service: ProductService = Depends(get_product_service)
):
    """
    Creates a new product.

    - Returns the stored product with its generated `id` and timestamps.
    - Responds 409 when an active product already uses the SKU.
    """
    logger.info(f"Create product with SKU {product.sku}")
    try:
        created = service.create_product(product)
    except DuplicateKey as e:
        logger.info(f"Failed to create product: {e}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except StorageFailure as e:
        logger.error(f"Failed to create product: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=UNEXPECTED_ERROR
        )
    logger.info(f"Product created successfully (ID: {created.id}).")
    return created


@app.get(
    "/api/v1/products",
    response_model=ProductListResponse,
    summary="List products page by page",
)
def list_products(
    page: Optional[int] = Query(None, gt=0, le=MAX_DB_INTEGER, description="Page number, 1-indexed. Requires `size`."),
    size: Optional[int] = Query(None, gt=0, le=MAX_DB_INTEGER, description="Products per page (default 10)."),
    service: ProductService = Depends(get_product_service),
):
    """
    Lists active products ordered by id.

    - Without parameters the first 10 products are returned.
    - Responds 422 when `page` lies past the last page of a non-empty catalogue.
    """
    logger.info(f"Get products with page={page}, size={size}")
    if page is not None and size is None:
        logger.info("Failed to get products because page was specified but size wasn't")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="must specify size if page is included",
        )
    try:
        return service.list_products(page, size)
    except OutOfRange as e:
        logger.info(f"Failed to get products: {e} (page={e.page}, size={e.size})")
        raise HTTPException(status_code=422, detail=str(e))
    except StorageFailure as e:
        logger.error(f"Failed to get products: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=UNEXPECTED_ERROR
        )


@app.get(
    "/api/v1/products/{product_id}",
    response_model=ProductResponse,
    summary="Retrieve a product by ID",
)
def get_product(
    product_id: int = Path(..., le=MAX_DB_INTEGER),
    service: ProductService = Depends(get_product_service),
):
    """
    Retrieves a single active product by its ID.

    - Responds 404 when the product does not exist or has been deleted.
    """
    logger.info(f"Fetching product with ID: {product_id}")
    try:
        product = service.get_product(product_id)
    except NotFound:
        logger.info(f"Product with ID: {product_id} not found.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="product not found")
    except StorageFailure as e:
        logger.error(f"Failed to retrieve product {product_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to retrieve product",
        )
    return product


@app.patch(
    "/api/v1/products/{product_id}",
    response_model=ProductResponse,
    summary="Partially update a product",
)
def update_product(
    updated: ProductUpdate,
    product_id: int = Path(..., le=MAX_DB_INTEGER),
    service: ProductService = Depends(get_product_service),
):
    """
    Applies only the fields present in the body; everything else is kept.

    - Responds 404 for unknown or deleted products and 409 on an SKU clash.
    """
    logger.info(
        f"Updating product with ID: {product_id} with data: {updated.changes()}"
    )
    try:
        product = service.update_product(product_id, updated)
    except NotFound:
        logger.info(f"Product with ID: {product_id} not found for update.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="product not found")
    except DuplicateKey as e:
        logger.info(f"Failed to update product {product_id}: {e}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except StorageFailure as e:
        logger.error(f"Failed to update product {product_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=UNEXPECTED_ERROR
        )
    logger.info(f"Product (ID: {product_id}) updated successfully.")
    return product


@app.delete(
    "/api/v1/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Soft delete a product by ID",
)
def delete_product(
    product_id: int = Path(..., le=MAX_DB_INTEGER),
    service: ProductService = Depends(get_product_service),
):
    """
    Marks the product deleted. Its SKU becomes available again and it no
    longer shows up anywhere in the API.
    """
    logger.info(f"Attempting to delete product with ID: {product_id}")
    try:
        service.delete_product(product_id)
    except NotFound:
        logger.info(f"Product with ID: {product_id} not found for deletion.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="product not found")
    except StorageFailure as e:
        logger.error(f"Failed to delete product {product_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=UNEXPECTED_ERROR
        )
    logger.info(f"Product (ID: {product_id}) deleted successfully.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def run():
    """Entry point for the `product-api` console script."""
    uvicorn.run("product_api.main:app", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
