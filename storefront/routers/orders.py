import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config.database import get_database
from ..schemas.order import CreateOrderRequest, OrderResponse, OrdersListResponse, UpdateOrderStatusRequest
from ..services import orders

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", status_code=201, response_model=OrderResponse)
async def create_order(order: CreateOrderRequest, db=Depends(get_database)):
    """Place an order from an explicit item list"""
    try:
        return await orders.create_order(db, order)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create order: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to create order: {str(e)}")


@router.get("/detail/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, db=Depends(get_database)):
    try:
        return await orders.get_order(db, order_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch order {order_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch order: {str(e)}")


@router.get("/{user_id}", response_model=OrdersListResponse)
async def get_user_orders(
    user_id: str,
    status: Optional[str] = Query(None, description="Filter by order status"),
    limit: int = Query(10, ge=1, le=100, description="Number of orders to return"),
    offset: int = Query(0, ge=0, description="Number of orders to skip"),
    db=Depends(get_database),
):
    """A user's orders, newest first"""
    try:
        return await orders.list_user_orders(db, user_id, status, limit, offset)
    except Exception as e:
        logger.error(f"Failed to fetch orders for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch orders: {str(e)}")


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, status_update: UpdateOrderStatusRequest, db=Depends(get_database)):
    """Move an order to a new status, restocking on cancel or refund"""
    try:
        return await orders.update_order_status(db, order_id, status_update)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update order status {order_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to update order status: {str(e)}")
