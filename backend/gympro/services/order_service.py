"""
Order placement

Stock is validated up front for a clear error message, then decremented with a
guarded UPDATE inside the same transaction that inserts the order. A concurrent
order that drains the stock in between makes the guarded UPDATE match no row,
and the whole transaction is rolled back.
"""

from collections import OrderedDict
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gympro.core.logging_config import get_logger
from gympro.models.order import Order, OrderItem
from gympro.models.product import Product

logger = get_logger(__name__)

CENT = Decimal("0.01")


def merge_order_lines(items: Iterable[Tuple[str, int]]) -> "OrderedDict[str, int]":
    """Collapse repeated product ids into one line, summing quantities"""
    merged: "OrderedDict[str, int]" = OrderedDict()
    for product_id, quantity in items:
        merged[product_id] = merged.get(product_id, 0) + quantity
    return merged


def compute_total(lines: Dict[str, int], products: Dict[str, Product]) -> Decimal:
    total = sum(
        (Decimal(str(products[pid].price)) * qty for pid, qty in lines.items()),
        Decimal("0"),
    )
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


def _insufficient_stock(name: str, available: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=f'Insufficient stock for "{name}". Available: {available}',
    )


async def load_order(db: AsyncSession, order_id: str, user_id: Optional[str] = None) -> Optional[Order]:
    query = (
        select(Order)
        .options(selectinload(Order.items).selectinload(OrderItem.product))
        .where(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    if user_id is not None:
        query = query.where(Order.user_id == user_id)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def place_order(
    db: AsyncSession,
    user_id: str,
    items: List[Tuple[str, int]],
    shipping_address: str,
    contact_phone: str,
    notes: Optional[str] = None,
) -> Order:
    """
    Create a CONFIRMED order and take its quantities out of stock

    Raises:
        HTTPException 404: a product is missing or inactive
        HTTPException 422: a line asks for more than the available stock
    """
    lines = merge_order_lines(items)

    result = await db.execute(
        select(Product).where(Product.id.in_(list(lines.keys())), Product.is_active.is_(True))
    )
    products = {p.id: p for p in result.scalars().all()}
    if len(products) != len(lines):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="One or more products are unavailable",
        )

    for product_id, quantity in lines.items():
        product = products[product_id]
        if product.stock < quantity:
            raise _insufficient_stock(product.name, product.stock)

    total = compute_total(lines, products)
    # rollback expires loaded rows, keep what the error message needs
    names = {pid: p.name for pid, p in products.items()}

    try:
        order = Order(
            user_id=user_id,
            total=total,
            status="CONFIRMED",
            shipping_address=shipping_address,
            contact_phone=contact_phone,
            notes=notes or None,
        )
        db.add(order)
        await db.flush()

        for product_id, quantity in lines.items():
            db.add(OrderItem(
                order_id=order.id,
                product_id=product_id,
                quantity=quantity,
                price=products[product_id].price,
            ))

            decremented = await db.execute(
                update(Product)
                .where(Product.id == product_id, Product.stock >= quantity)
                .values(stock=Product.stock - quantity)
                .execution_options(synchronize_session=False)
            )
            if decremented.rowcount == 0:
                await db.rollback()
                current = await db.scalar(select(Product.stock).where(Product.id == product_id))
                raise _insufficient_stock(names[product_id], current or 0)

        await db.commit()
    except HTTPException:
        raise
    except Exception:
        await db.rollback()
        raise

    logger.info(f"Order {order.id} placed by user {user_id}: {len(lines)} line(s), total {total}")
    return await load_order(db, order.id)
