"""Shop catalog API: public browsing plus admin management"""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gympro.core.deps import TokenUser, get_db, get_page_params, require_admin
from gympro.core.logging_config import get_logger
from gympro.models.order import OrderItem
from gympro.models.product import Product, ProductCategory
from gympro.schemas.common import ApiResponse, MAX_LIMIT, MessageResponse, PageParams, PaginatedResponse, ok, paginate
from gympro.schemas.product import (
    ProductCategoryCreate, ProductCategoryResponse, ProductCategoryUpdate,
    ProductCreate, ProductResponse, ProductUpdate,
)

router = APIRouter()
logger = get_logger(__name__)

SORT_FIELDS = {
    "price": Product.price,
    "name": Product.name,
    "createdAt": Product.created_at,
}


async def _get_product(db: AsyncSession, product_id: str) -> Optional[Product]:
    result = await db.execute(
        select(Product)
        .options(selectinload(Product.category))
        .where(Product.id == product_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _get_category(db: AsyncSession, category_id: str) -> ProductCategory:
    category = await db.get(ProductCategory, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Product category not found")
    return category


async def _ensure_product_slug_free(db: AsyncSession, slug: str):
    existing = await db.scalar(select(Product.id).where(Product.slug == slug))
    if existing:
        raise HTTPException(status_code=409, detail="A product with this slug already exists")


def _category_response(cat: ProductCategory, product_count: Optional[int] = None) -> ProductCategoryResponse:
    response = ProductCategoryResponse.model_validate(cat)
    response.product_count = product_count
    return response


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

@router.get("/categories", response_model=ApiResponse[List[ProductCategoryResponse]])
async def list_product_categories(*, db: AsyncSession = Depends(get_db)) -> Any:
    """All categories with their product counts"""
    count_subq = (
        select(Product.category_id, func.count(Product.id).label("cnt"))
        .group_by(Product.category_id)
        .subquery()
    )
    result = await db.execute(
        select(ProductCategory, func.coalesce(count_subq.c.cnt, 0))
        .outerjoin(count_subq, count_subq.c.category_id == ProductCategory.id)
        .order_by(ProductCategory.sort_order.asc(), ProductCategory.name.asc())
    )
    return ok([_category_response(cat, cnt) for cat, cnt in result.all()])


@router.get("/featured", response_model=ApiResponse[List[ProductResponse]])
async def list_featured_products(*, db: AsyncSession = Depends(get_db)) -> Any:
    result = await db.execute(
        select(Product)
        .options(selectinload(Product.category))
        .where(Product.is_featured.is_(True), Product.is_active.is_(True))
        .order_by(Product.created_at.desc())
        .limit(8)
    )
    return ok([ProductResponse.model_validate(p) for p in result.scalars().all()])


@router.get("/by-slug/{slug}", response_model=ApiResponse[ProductResponse])
async def get_product_by_slug(*, db: AsyncSession = Depends(get_db), slug: str) -> Any:
    result = await db.execute(
        select(Product).options(selectinload(Product.category)).where(Product.slug == slug)
    )
    product = result.scalar_one_or_none()
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")
    return ok(ProductResponse.model_validate(product))


@router.get("/admin/all", response_model=ApiResponse[PaginatedResponse[ProductResponse]])
async def admin_list_products(
    *,
    db: AsyncSession = Depends(get_db),
    _: TokenUser = Depends(require_admin),
    pagination: PageParams = Depends(get_page_params),
    filter: str = Query("all", pattern="^(all|active|inactive|featured)$"),
    search: Optional[str] = Query(None),
) -> Any:
    """Every product, including inactive ones"""
    conditions = []
    if filter == "active":
        conditions.append(Product.is_active.is_(True))
    elif filter == "inactive":
        conditions.append(Product.is_active.is_(False))
    elif filter == "featured":
        conditions.append(Product.is_featured.is_(True))
    if search:
        conditions.append(Product.name.ilike(f"%{search}%"))

    query = select(Product).options(selectinload(Product.category))
    count_query = select(func.count(Product.id))
    if conditions:
        query = query.where(and_(*conditions))
        count_query = count_query.where(and_(*conditions))

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(Product.created_at.desc()).offset(pagination.offset).limit(pagination.limit)
    )
    items = [ProductResponse.model_validate(p) for p in result.scalars().all()]
    return ok(paginate(items, total, pagination.page, pagination.limit))


@router.get("", response_model=ApiResponse[PaginatedResponse[ProductResponse]])
async def list_products(
    *,
    db: AsyncSession = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    search: Optional[str] = Query(None),
    sort: str = Query("createdAt"),
    order: str = Query("desc"),
) -> Any:
    """Active products, paginated"""
    limit = min(limit, MAX_LIMIT)
    conditions = [Product.is_active.is_(True)]
    if category_id:
        conditions.append(Product.category_id == category_id)
    if search:
        conditions.append(Product.name.ilike(f"%{search}%"))

    sort_column = SORT_FIELDS.get(sort, Product.created_at)
    ordering = sort_column.asc() if order == "asc" else sort_column.desc()

    total = (await db.execute(select(func.count(Product.id)).where(and_(*conditions)))).scalar() or 0
    result = await db.execute(
        select(Product)
        .options(selectinload(Product.category))
        .where(and_(*conditions))
        .order_by(ordering)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    items = [ProductResponse.model_validate(p) for p in result.scalars().all()]
    return ok(paginate(items, total, page, limit))


@router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
async def get_product(*, db: AsyncSession = Depends(get_db), product_id: str) -> Any:
    product = await _get_product(db, product_id)
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")
    return ok(ProductResponse.model_validate(product))


# ---------------------------------------------------------------------------
# Admin: products
# ---------------------------------------------------------------------------

@router.post("", response_model=ApiResponse[ProductResponse], status_code=status.HTTP_201_CREATED)
async def create_product(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(require_admin),
    product_in: ProductCreate,
) -> Any:
    await _get_category(db, product_in.category_id)
    await _ensure_product_slug_free(db, product_in.slug)

    data = product_in.model_dump()
    data["is_featured"] = bool(data.get("is_featured"))
    data["is_active"] = True if data.get("is_active") is None else data["is_active"]
    data["stock"] = data.get("stock") or 0

    product = Product(**data)
    db.add(product)
    await db.commit()

    logger.info(f"Product {product.slug} created by {user.email}")
    return ok(ProductResponse.model_validate(await _get_product(db, product.id)))


@router.put("/{product_id}", response_model=ApiResponse[ProductResponse])
async def update_product(
    *,
    db: AsyncSession = Depends(get_db),
    _: TokenUser = Depends(require_admin),
    product_id: str,
    product_in: ProductUpdate,
) -> Any:
    product = await db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    update_data = product_in.model_dump(exclude_unset=True)
    if update_data.get("slug") and update_data["slug"] != product.slug:
        await _ensure_product_slug_free(db, update_data["slug"])
    if update_data.get("category_id"):
        await _get_category(db, update_data["category_id"])

    for field, value in update_data.items():
        setattr(product, field, value)

    await db.commit()
    return ok(ProductResponse.model_validate(await _get_product(db, product_id)))


@router.delete("/{product_id}", response_model=ApiResponse[MessageResponse])
async def delete_product(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(require_admin),
    product_id: str,
) -> Any:
    product = await db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    ordered = await db.scalar(select(func.count(OrderItem.id)).where(OrderItem.product_id == product_id))
    if ordered:
        raise HTTPException(
            status_code=400,
            detail=f'Cannot delete product "{product.name}" because it appears in orders. Deactivate it instead.',
        )

    await db.delete(product)
    await db.commit()
    logger.info(f"Product {product_id} deleted by {user.email}")
    return ok({"message": "Product deleted successfully"})


# ---------------------------------------------------------------------------
# Admin: categories
# ---------------------------------------------------------------------------

@router.post("/categories", response_model=ApiResponse[ProductCategoryResponse], status_code=status.HTTP_201_CREATED)
async def create_product_category(
    *,
    db: AsyncSession = Depends(get_db),
    _: TokenUser = Depends(require_admin),
    category_in: ProductCategoryCreate,
) -> Any:
    if await db.scalar(select(ProductCategory.id).where(ProductCategory.slug == category_in.slug)):
        raise HTTPException(status_code=409, detail="A category with this slug already exists")
    if await db.scalar(select(ProductCategory.id).where(ProductCategory.name == category_in.name)):
        raise HTTPException(status_code=409, detail="A category with this name already exists")

    data = category_in.model_dump()
    data["sort_order"] = data.get("sort_order") or 0
    category = ProductCategory(**data)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return ok(_category_response(category))


@router.put("/categories/{category_id}", response_model=ApiResponse[ProductCategoryResponse])
async def update_product_category(
    *,
    db: AsyncSession = Depends(get_db),
    _: TokenUser = Depends(require_admin),
    category_id: str,
    category_in: ProductCategoryUpdate,
) -> Any:
    category = await _get_category(db, category_id)
    update_data = category_in.model_dump(exclude_unset=True)

    if update_data.get("slug") and update_data["slug"] != category.slug:
        if await db.scalar(select(ProductCategory.id).where(ProductCategory.slug == update_data["slug"])):
            raise HTTPException(status_code=409, detail="A category with this slug already exists")
    if update_data.get("name") and update_data["name"] != category.name:
        if await db.scalar(select(ProductCategory.id).where(ProductCategory.name == update_data["name"])):
            raise HTTPException(status_code=409, detail="A category with this name already exists")

    for field, value in update_data.items():
        setattr(category, field, value)

    await db.commit()
    await db.refresh(category)
    return ok(_category_response(category))


@router.delete("/categories/{category_id}", response_model=ApiResponse[MessageResponse])
async def delete_product_category(
    *,
    db: AsyncSession = Depends(get_db),
    _: TokenUser = Depends(require_admin),
    category_id: str,
) -> Any:
    category = await _get_category(db, category_id)
    product_count = await db.scalar(select(func.count(Product.id)).where(Product.category_id == category_id)) or 0
    if product_count > 0:
        raise HTTPException(
            status_code=400,
            detail=f'Cannot delete category "{category.name}" because it has {product_count} product(s). Remove or reassign them first.',
        )

    await db.delete(category)
    await db.commit()
    return ok({"message": "Product category deleted successfully"})
