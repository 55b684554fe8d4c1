import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config.database import get_database
from ..schemas.report import CatalogOverview, CategoryStats, MonthlySales, PriceBucket, TagCount, TopCustomer
from ..services import reports

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/products/by-category", response_model=List[CategoryStats])
async def products_by_category(db=Depends(get_database)):
    try:
        return await reports.category_stats(db)
    except Exception as e:
        logger.error(f"Category report failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to build report: {str(e)}")


@router.get("/products/price-buckets", response_model=List[PriceBucket])
async def price_buckets(db=Depends(get_database)):
    try:
        return await reports.price_buckets(db)
    except Exception as e:
        logger.error(f"Price bucket report failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to build report: {str(e)}")


@router.get("/products/overview", response_model=CatalogOverview)
async def catalog_overview(db=Depends(get_database)):
    try:
        return await reports.catalog_overview(db)
    except Exception as e:
        logger.error(f"Catalog overview failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to build report: {str(e)}")


@router.get("/products/tags", response_model=List[TagCount])
async def tag_counts(limit: int = Query(20, ge=1, le=100), db=Depends(get_database)):
    try:
        return await reports.tag_counts(db, limit)
    except Exception as e:
        logger.error(f"Tag report failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to build report: {str(e)}")


@router.get("/sales/monthly", response_model=List[MonthlySales])
async def monthly_sales(year: Optional[int] = Query(None, ge=1970, le=9999), db=Depends(get_database)):
    try:
        return await reports.monthly_sales(db, year)
    except Exception as e:
        logger.error(f"Monthly sales report failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to build report: {str(e)}")


@router.get("/customers/top", response_model=List[TopCustomer])
async def top_customers(limit: int = Query(10, ge=1, le=100), db=Depends(get_database)):
    try:
        return await reports.top_customers(db, limit)
    except Exception as e:
        logger.error(f"Top customers report failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to build report: {str(e)}")
