import logging

from fastapi import APIRouter, Depends, HTTPException

from ..config.database import get_database
from ..schemas.order import CheckoutRequest, OrderResponse
from ..schemas.user import CartItemRequest, CartResponse, CreateUserRequest, UpdateAddressRequest, UserResponse
from ..services import orders, users

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", status_code=201, response_model=UserResponse)
async def register_user(request: CreateUserRequest, db=Depends(get_database)):
    """Register a user. The password is stored as a bcrypt hash."""
    try:
        return await users.register_user(db, request)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to register user: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to register user: {str(e)}")


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db=Depends(get_database)):
    try:
        return await users.get_user(db, user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch user: {str(e)}")


@router.put("/{user_id}/address", response_model=UserResponse)
async def update_address(user_id: str, request: UpdateAddressRequest, db=Depends(get_database)):
    try:
        return await users.update_address(db, user_id, request)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update address for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to update address: {str(e)}")


@router.get("/{user_id}/cart", response_model=CartResponse)
async def get_cart(user_id: str, db=Depends(get_database)):
    try:
        return await users.get_cart(db, user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch cart for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch cart: {str(e)}")


@router.post("/{user_id}/cart", response_model=CartResponse)
async def add_to_cart(user_id: str, item: CartItemRequest, db=Depends(get_database)):
    try:
        return await users.add_to_cart(db, user_id, item)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to add to cart for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to add to cart: {str(e)}")


@router.delete("/{user_id}/cart/{product_id}", response_model=CartResponse)
async def remove_from_cart(user_id: str, product_id: str, db=Depends(get_database)):
    try:
        return await users.remove_from_cart(db, user_id, product_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to remove from cart for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to remove from cart: {str(e)}")


@router.post("/{user_id}/checkout", status_code=201, response_model=OrderResponse)
async def checkout(user_id: str, request: CheckoutRequest, db=Depends(get_database)):
    """Place an order for everything in the cart"""
    try:
        return await orders.checkout(db, user_id, request)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Checkout failed for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Checkout failed: {str(e)}")
