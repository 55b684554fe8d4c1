import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ..config.database import get_database
from ..schemas.product import (
    CreateProductRequest,
    ProductQueryParams,
    ProductResponse,
    ProductSearchHit,
    ProductsListResponse,
    RateProductRequest,
    UpdateProductRequest,
)
from ..services import catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])


@router.post("", status_code=201, response_model=ProductResponse)
async def create_product(product: CreateProductRequest, db=Depends(get_database)):
    """Create a new product"""
    try:
        return await catalog.create_product(db, product)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create product: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to create product: {str(e)}")


@router.get("", response_model=ProductsListResponse)
async def list_products(
    name: Optional[str] = Query(None, description="Filter by product name (supports partial matching)"),
    category: Optional[str] = Query(None, description="Filter by category"),
    brand: Optional[str] = Query(None, description="Filter by brand"),
    size: Optional[str] = Query(None, description="Filter by size attribute"),
    min_price: Optional[float] = Query(None, ge=0, description="Minimum price filter"),
    max_price: Optional[float] = Query(None, gt=0, description="Maximum price filter"),
    in_stock: Optional[bool] = Query(None, description="Filter products in stock"),
    tags: Optional[List[str]] = Query(None, description="Products carrying all of these tags"),
    limit: int = Query(10, ge=1, le=100, description="Number of products to return"),
    offset: int = Query(0, ge=0, description="Number of products to skip"),
    db=Depends(get_database),
):
    """Filtered catalog listing, newest first"""
    params = ProductQueryParams(
        name=name, category=category, brand=brand, size=size,
        min_price=min_price, max_price=max_price, in_stock=in_stock, tags=tags,
        limit=limit, offset=offset,
    )
    try:
        return await catalog.list_products(db, params)
    except Exception as e:
        logger.error(f"Failed to fetch products: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch products: {str(e)}")


@router.get("/search", response_model=List[ProductSearchHit])
async def search_products(
    q: str = Query(..., min_length=1, description="Text to search in name and description"),
    limit: int = Query(10, ge=1, le=100),
    db=Depends(get_database),
):
    """Full-text product search"""
    try:
        return await catalog.search_products(db, q, limit)
    except Exception as e:
        logger.error(f"Product search failed for {q!r}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to search products: {str(e)}")


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, db=Depends(get_database)):
    try:
        return await catalog.get_product(db, product_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch product {product_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch product: {str(e)}")


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, product_update: UpdateProductRequest, db=Depends(get_database)):
    """Partial update; omitted fields are left untouched"""
    try:
        return await catalog.update_product(db, product_id, product_update)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update product {product_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to update product: {str(e)}")


@router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: str, db=Depends(get_database)):
    try:
        await catalog.delete_product(db, product_id)
        return Response(status_code=204)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to delete product {product_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to delete product: {str(e)}")


@router.post("/{product_id}/ratings", response_model=ProductResponse)
async def rate_product(product_id: str, request: RateProductRequest, db=Depends(get_database)):
    """Add a 1-5 star rating to a product"""
    try:
        return await catalog.rate_product(db, product_id, request.rating)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to rate product {product_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to rate product: {str(e)}")
