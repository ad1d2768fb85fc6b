"""Orders API (caller's own orders only)"""

from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gympro.core.deps import TokenUser, get_current_user, get_db
from gympro.models.order import Order, OrderItem
from gympro.schemas.common import ApiResponse, ok
from gympro.schemas.order import OrderCreate, OrderResponse
from gympro.services.order_service import load_order, place_order

router = APIRouter()


@router.post("", response_model=ApiResponse[OrderResponse], status_code=status.HTTP_201_CREATED)
async def create_order(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    order_in: OrderCreate,
) -> Any:
    order = await place_order(
        db,
        user_id=user.id,
        items=[(item.product_id, item.quantity) for item in order_in.items],
        shipping_address=order_in.shipping_address,
        contact_phone=order_in.contact_phone,
        notes=order_in.notes,
    )
    return ok(OrderResponse.model_validate(order))


@router.get("", response_model=ApiResponse[List[OrderResponse]])
async def list_my_orders(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
) -> Any:
    """Newest first"""
    result = await db.execute(
        select(Order)
        .options(selectinload(Order.items).selectinload(OrderItem.product))
        .where(Order.user_id == user.id)
        .order_by(Order.created_at.desc())
    )
    return ok([OrderResponse.model_validate(o) for o in result.scalars().all()])


@router.get("/{order_id}", response_model=ApiResponse[OrderResponse])
async def get_my_order(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    order_id: str,
) -> Any:
    order = await load_order(db, order_id, user_id=user.id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return ok(OrderResponse.model_validate(order))
