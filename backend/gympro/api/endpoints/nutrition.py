"""Nutrition logging: meal plans, quick-add meals, daily totals, food search"""

from datetime import date
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gympro.core.deps import TokenUser, get_current_user, get_db, get_page_params
from gympro.models.nutrition import Meal, MealPlan
from gympro.schemas.common import ApiResponse, MessageResponse, PageParams, PaginatedResponse, ok, paginate
from gympro.schemas.nutrition import (
    DailySummary, FoodItem, MealAdd, MealPlanCreate, MealPlanResponse, MealPlanUpdate, MealResponse,
)
from gympro.services.nutrition_service import MIN_FOOD_QUERY_LENGTH, build_meal, build_meals, plan_totals, search_foods

router = APIRouter(dependencies=[Depends(get_current_user)])

PLAN_LOAD = selectinload(MealPlan.meals).selectinload(Meal.items)


async def _load_plan(db: AsyncSession, plan_id: str) -> Optional[MealPlan]:
    result = await db.execute(
        select(MealPlan).options(PLAN_LOAD).where(MealPlan.id == plan_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _get_owned_plan(db: AsyncSession, plan_id: str, user_id: str, action: str) -> MealPlan:
    plan = await db.get(MealPlan, plan_id)
    if not plan:
        raise HTTPException(status_code=404, detail="Meal plan not found")
    if plan.user_id != user_id:
        raise HTTPException(status_code=403, detail=f"Not authorized to {action}")
    return plan


@router.get("/meal-plans", response_model=ApiResponse[PaginatedResponse[MealPlanResponse]])
async def list_meal_plans(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    pagination: PageParams = Depends(get_page_params),
    plan_date: Optional[date] = Query(None, alias="date"),
) -> Any:
    conditions = [MealPlan.user_id == user.id]
    if plan_date:
        conditions.append(MealPlan.date == plan_date)

    total = (await db.execute(select(func.count(MealPlan.id)).where(and_(*conditions)))).scalar() or 0
    result = await db.execute(
        select(MealPlan)
        .options(PLAN_LOAD)
        .where(and_(*conditions))
        .order_by(MealPlan.date.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    items = [MealPlanResponse.model_validate(p) for p in result.scalars().all()]
    return ok(paginate(items, total, pagination.page, pagination.limit))


@router.post("/meal-plans", response_model=ApiResponse[MealPlanResponse], status_code=status.HTTP_201_CREATED)
async def create_meal_plan(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    plan_in: MealPlanCreate,
) -> Any:
    plan = MealPlan(
        user_id=user.id,
        name=plan_in.name,
        date=plan_in.date,
        target_calories=plan_in.target_calories,
        meals=build_meals(plan_in.meals),
    )
    db.add(plan)
    await db.commit()
    return ok(MealPlanResponse.model_validate(await _load_plan(db, plan.id)))


@router.get("/meal-plans/{plan_id}", response_model=ApiResponse[MealPlanResponse])
async def get_meal_plan(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    plan_id: str,
) -> Any:
    await _get_owned_plan(db, plan_id, user.id, "view this meal plan")
    return ok(MealPlanResponse.model_validate(await _load_plan(db, plan_id)))


@router.put("/meal-plans/{plan_id}", response_model=ApiResponse[MealPlanResponse])
async def update_meal_plan(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    plan_id: str,
    plan_in: MealPlanUpdate,
) -> Any:
    plan = await _get_owned_plan(db, plan_id, user.id, "update this meal plan")

    update_data = plan_in.model_dump(exclude_unset=True, exclude={"meals"})
    for field, value in update_data.items():
        if field in ("name", "date") and value is None:
            continue
        setattr(plan, field, value)

    if plan_in.meals is not None:
        # Meal items go with their meal through the FK cascade
        await db.execute(delete(Meal).where(Meal.meal_plan_id == plan_id))
        for meal in build_meals(plan_in.meals):
            meal.meal_plan_id = plan_id
            db.add(meal)

    await db.commit()
    return ok(MealPlanResponse.model_validate(await _load_plan(db, plan_id)))


@router.delete("/meal-plans/{plan_id}", response_model=ApiResponse[MessageResponse])
async def delete_meal_plan(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    plan_id: str,
) -> Any:
    plan = await _get_owned_plan(db, plan_id, user.id, "delete this meal plan")
    await db.delete(plan)
    await db.commit()
    return ok({"message": "Meal plan deleted successfully"})


@router.get("/daily-summary", response_model=ApiResponse[DailySummary])
async def daily_summary(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    summary_date: Optional[date] = Query(None, alias="date"),
) -> Any:
    """Totals for the caller's meal plan on a date (today by default)"""
    target_date = summary_date or date.today()
    result = await db.execute(
        select(MealPlan)
        .options(PLAN_LOAD)
        .where(MealPlan.user_id == user.id, MealPlan.date == target_date)
        .order_by(MealPlan.created_at.asc())
        .limit(1)
    )
    plan = result.scalar_one_or_none()
    if not plan:
        return ok(DailySummary(date=target_date))

    return ok(DailySummary(
        date=target_date,
        meal_plan={"id": plan.id, "name": plan.name, "target_calories": plan.target_calories},
        target_calories=plan.target_calories,
        meals=[MealResponse.model_validate(m) for m in plan.meals],
        **plan_totals(plan),
    ))


@router.post("/meals", response_model=ApiResponse[MealResponse], status_code=status.HTTP_201_CREATED)
async def add_meal(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    meal_in: MealAdd,
) -> Any:
    """Append one meal to an existing plan"""
    await _get_owned_plan(db, meal_in.meal_plan_id, user.id, "add meals to this plan")

    max_sort = await db.scalar(select(func.max(Meal.sort_order)).where(Meal.meal_plan_id == meal_in.meal_plan_id))
    meal = build_meal(meal_in, (max_sort if max_sort is not None else -1) + 1)
    meal.meal_plan_id = meal_in.meal_plan_id
    db.add(meal)
    await db.commit()

    result = await db.execute(select(Meal).options(selectinload(Meal.items)).where(Meal.id == meal.id))
    return ok(MealResponse.model_validate(result.scalar_one()))


@router.get("/food-search", response_model=ApiResponse[List[FoodItem]])
async def food_search(*, q: Optional[str] = Query(None)) -> Any:
    if not q or len(q) < MIN_FOOD_QUERY_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Search query must be at least {MIN_FOOD_QUERY_LENGTH} characters",
        )
    return ok(search_foods(q))
