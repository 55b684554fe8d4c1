"""
Order placement, checkout and status tracking.

Placing an order touches three collections (orders, products, users); the
writes run inside one transaction so stock, order and order history never
disagree.
"""
import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional, Tuple

from bson import ObjectId
from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase
from pymongo import DESCENDING

from ..config.settings import get_settings
from ..db.transactions import transaction
from ..models.order import FINAL_STATUSES, OrderDocument, OrderStatusHistory, ShippingAddress
from ..schemas.order import CheckoutRequest, CreateOrderRequest, UpdateOrderStatusRequest
from ..utils.dependencies import get_document_or_404, validate_object_id, verify_products_exist
from ..utils.serializers import serialize_doc
from ..utils.text import utcnow

logger = logging.getLogger(__name__)


def merge_lines(lines: Iterable[Tuple[str, int]]) -> List[Tuple[str, int]]:
    """Collapse repeated products into one line, keeping first-seen order."""
    merged: "OrderedDict[str, int]" = OrderedDict()
    for product_id, quantity in lines:
        merged[product_id] = merged.get(product_id, 0) + quantity
    return list(merged.items())


def check_order_limits(lines: List[Tuple[str, int]]) -> None:
    """
    Raises:
        HTTPException: 400 when an order has too many lines or a line is too large
    """
    settings = get_settings()
    if len(lines) > settings.max_order_items:
        raise HTTPException(
            status_code=400,
            detail=f"An order can hold at most {settings.max_order_items} different products"
        )
    for product_id, quantity in lines:
        if quantity > settings.max_item_quantity:
            raise HTTPException(
                status_code=400,
                detail=f"Quantity for product {product_id} exceeds {settings.max_item_quantity}"
            )


def build_order_items(
    lines: List[Tuple[str, int]], product_map: Dict[str, Dict[str, Any]]
) -> Tuple[List[Dict[str, Any]], float]:
    """
    Snapshot name and price for each line and compute the order total.

    Raises:
        HTTPException: 400 when a product does not have enough stock
    """
    total_amount = 0.0
    order_items = []

    for product_id, quantity in lines:
        product = product_map[product_id]
        available = product.get("stock_quantity", 0)
        if available < quantity:
            raise HTTPException(
                status_code=400,
                detail=f"Insufficient stock for product {product_id}. Available: {available}, Requested: {quantity}"
            )

        item_total = round(product["price"] * quantity, 2)
        total_amount += item_total
        order_items.append({
            "product_id": product_id,
            "product_name": product["name"],
            "quantity": quantity,
            "price_per_item": product["price"],
            "total_price": item_total,
        })

    return order_items, round(total_amount, 2)


def check_status_transition(current: str, new: str) -> None:
    """
    Raises:
        HTTPException: 400 when the order may not move from ``current`` to ``new``
    """
    if current == new:
        raise HTTPException(status_code=400, detail=f"Order is already {current}")
    if current in FINAL_STATUSES:
        raise HTTPException(status_code=400, detail=f"Order is {current} and can no longer change status")
    if current == "delivered" and new != "refunded":
        raise HTTPException(status_code=400, detail="A delivered order can only be refunded")


def restocks(current: str, new: str) -> bool:
    """Items go back on the shelf when an undelivered order is cancelled or refunded."""
    return new in FINAL_STATUSES and current != "delivered"


async def _adjust_stock(
    db: AsyncIOMotorDatabase,
    items: List[Dict[str, Any]],
    sign: int,
    session: AsyncIOMotorClientSession,
) -> None:
    now = utcnow()
    for item in items:
        query: Dict[str, Any] = {"_id": ObjectId(item["product_id"])}
        if sign < 0:
            # Guard against stock having moved since it was read
            query["stock_quantity"] = {"$gte": item["quantity"]}

        result = await db.products.update_one(
            query,
            {"$inc": {"stock_quantity": sign * item["quantity"]}, "$set": {"updated_at": now}},
            session=session,
        )
        if sign < 0 and result.modified_count == 0:
            raise HTTPException(
                status_code=400,
                detail=f"Insufficient stock for product {item['product_id']}"
            )


async def _place_order(
    db: AsyncIOMotorDatabase,
    session: AsyncIOMotorClientSession,
    user: Dict[str, Any],
    lines: List[Tuple[str, int]],
    shipping_address: Optional[ShippingAddress],
    payment_method: str,
    clear_cart: bool,
) -> ObjectId:
    lines = merge_lines(lines)
    check_order_limits(lines)
    product_map = await verify_products_exist([pid for pid, _ in lines], db, session=session)
    order_items, total_amount = build_order_items(lines, product_map)

    now = utcnow()
    order_doc = OrderDocument(
        user_id=str(user["_id"]),
        items=order_items,
        total_amount=total_amount,
        status="pending",
        status_history=[OrderStatusHistory(status="pending", timestamp=now, reason="Order placed")],
        shipping_address=shipping_address,
        payment_method=payment_method,
        created_at=now,
        updated_at=now,
    ).model_dump(exclude={"id"})

    result = await db.orders.insert_one(order_doc, session=session)

    await _adjust_stock(db, order_items, -1, session)

    user_update: Dict[str, Any] = {
        "$push": {"orders": str(result.inserted_id)},
        "$set": {"updated_at": now},
    }
    if clear_cart:
        user_update["$set"]["cart"] = []
    await db.users.update_one({"_id": user["_id"]}, user_update, session=session)

    return result.inserted_id


async def create_order(db: AsyncIOMotorDatabase, order: CreateOrderRequest) -> Dict[str, Any]:
    """Place an order for an explicit list of items."""
    async with transaction(db) as session:
        user = await get_document_or_404(
            db, "users", order.user_id, "user", projection={"_id": 1}, session=session
        )
        order_id = await _place_order(
            db,
            session,
            user,
            [(item.product_id, item.quantity) for item in order.items],
            order.shipping_address,
            order.payment_method,
            clear_cart=False,
        )

    logger.info(f"Order created: {order_id} for user {order.user_id}")
    return await get_order(db, str(order_id))


async def checkout(db: AsyncIOMotorDatabase, user_id: str, request: CheckoutRequest) -> Dict[str, Any]:
    """Turn the user's cart into an order and empty the cart."""
    async with transaction(db) as session:
        user = await get_document_or_404(
            db, "users", user_id, "user", projection={"cart": 1, "address": 1}, session=session
        )
        cart = user.get("cart") or []
        if not cart:
            raise HTTPException(status_code=400, detail="Cart is empty")

        shipping_address = request.shipping_address
        if shipping_address is None and user.get("address"):
            shipping_address = ShippingAddress(**user["address"])

        order_id = await _place_order(
            db,
            session,
            user,
            [(line["product_id"], line["quantity"]) for line in cart],
            shipping_address,
            request.payment_method,
            clear_cart=True,
        )

    logger.info(f"Checkout complete: order {order_id} for user {user_id}")
    return await get_order(db, str(order_id))


async def list_user_orders(
    db: AsyncIOMotorDatabase,
    user_id: str,
    status: Optional[str] = None,
    limit: int = 10,
    offset: int = 0,
) -> Dict[str, Any]:
    filter_query: Dict[str, Any] = {"user_id": user_id}
    if status:
        filter_query["status"] = status.lower()

    total_count = await db.orders.count_documents(filter_query)

    cursor = db.orders.find(filter_query).sort("created_at", DESCENDING).skip(offset).limit(limit)
    orders = await cursor.to_list(length=limit)

    return {
        "orders": [serialize_doc(o) for o in orders],
        "total": total_count,
        "limit": limit,
        "offset": offset,
        "user_id": user_id,
        "has_more": offset + limit < total_count,
    }


async def get_order(db: AsyncIOMotorDatabase, order_id: str) -> Dict[str, Any]:
    order = await get_document_or_404(db, "orders", order_id, "order")
    return serialize_doc(order)


async def update_order_status(
    db: AsyncIOMotorDatabase, order_id: str, status_update: UpdateOrderStatusRequest
) -> Dict[str, Any]:
    object_id = validate_object_id(order_id, "order")
    order = await get_document_or_404(db, "orders", order_id, "order")

    current = order["status"]
    new = status_update.status
    check_status_transition(current, new)

    now = utcnow()
    history = OrderStatusHistory(status=new, timestamp=now, reason=status_update.reason).model_dump()
    update = {"$set": {"status": new, "updated_at": now}, "$push": {"status_history": history}}

    if restocks(current, new):
        async with transaction(db) as session:
            # Only the writer that still sees the old status may restock
            result = await db.orders.update_one({"_id": object_id, "status": current}, update, session=session)
            if result.modified_count == 0:
                raise HTTPException(status_code=409, detail="Order status changed concurrently")
            await _adjust_stock(db, order["items"], 1, session)
    else:
        result = await db.orders.update_one({"_id": object_id, "status": current}, update)
        if result.modified_count == 0:
            raise HTTPException(status_code=409, detail="Order status changed concurrently")

    logger.info(f"Order status updated: {order_id} {current} -> {new}")
    return await get_order(db, order_id)
