"""Custom workout builder"""

from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gympro.core.deps import TokenUser, get_current_user, get_db, get_page_params
from gympro.models.custom_workout import CustomWorkout, CustomWorkoutExercise
from gympro.schemas.common import ApiResponse, MessageResponse, PageParams, PaginatedResponse, ok, paginate
from gympro.schemas.custom_workout import (
    CustomWorkoutCreate, CustomWorkoutResponse, CustomWorkoutSummary, CustomWorkoutUpdate, ExerciseIn,
)
from gympro.services.achievement_service import refresh_achievements_after

router = APIRouter()


def _build_exercises(exercises: List[ExerciseIn]) -> List[CustomWorkoutExercise]:
    """List position becomes sort_order"""
    return [
        CustomWorkoutExercise(**ex.model_dump(), sort_order=index)
        for index, ex in enumerate(exercises)
    ]


async def _load_workout(db: AsyncSession, workout_id: str):
    result = await db.execute(
        select(CustomWorkout)
        .options(selectinload(CustomWorkout.exercises))
        .where(CustomWorkout.id == workout_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _get_owned(db: AsyncSession, workout_id: str, user_id: str, action: str) -> CustomWorkout:
    workout = await db.get(CustomWorkout, workout_id)
    if not workout:
        raise HTTPException(status_code=404, detail="Custom workout not found")
    if workout.user_id != user_id:
        raise HTTPException(status_code=403, detail=f"You can only {action} your own workouts")
    return workout


@router.get("", response_model=ApiResponse[PaginatedResponse[CustomWorkoutSummary]])
async def list_custom_workouts(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    pagination: PageParams = Depends(get_page_params),
) -> Any:
    count_subq = (
        select(CustomWorkoutExercise.custom_workout_id, func.count(CustomWorkoutExercise.id).label("cnt"))
        .group_by(CustomWorkoutExercise.custom_workout_id)
        .subquery()
    )
    total = (await db.execute(
        select(func.count(CustomWorkout.id)).where(CustomWorkout.user_id == user.id)
    )).scalar() or 0
    result = await db.execute(
        select(CustomWorkout, func.coalesce(count_subq.c.cnt, 0))
        .outerjoin(count_subq, count_subq.c.custom_workout_id == CustomWorkout.id)
        .where(CustomWorkout.user_id == user.id)
        .order_by(CustomWorkout.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    items = []
    for workout, exercise_count in result.all():
        summary = CustomWorkoutSummary.model_validate(workout)
        summary.exercise_count = exercise_count
        items.append(summary)
    return ok(paginate(items, total, pagination.page, pagination.limit))


@router.post("", response_model=ApiResponse[CustomWorkoutResponse], status_code=status.HTTP_201_CREATED)
async def create_custom_workout(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    workout_in: CustomWorkoutCreate,
) -> Any:
    workout = CustomWorkout(
        user_id=user.id,
        name=workout_in.name,
        description=workout_in.description,
        is_public=workout_in.is_public,
        exercises=_build_exercises(workout_in.exercises),
    )
    db.add(workout)
    await db.commit()

    await refresh_achievements_after(db, user.id)
    return ok(CustomWorkoutResponse.model_validate(await _load_workout(db, workout.id)))


@router.get("/{workout_id}", response_model=ApiResponse[CustomWorkoutResponse])
async def get_custom_workout(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    workout_id: str,
) -> Any:
    """Visible to the owner, or to anyone when public"""
    workout = await _load_workout(db, workout_id)
    if not workout or (workout.user_id != user.id and not workout.is_public):
        raise HTTPException(status_code=404, detail="Custom workout not found")
    return ok(CustomWorkoutResponse.model_validate(workout))


@router.put("/{workout_id}", response_model=ApiResponse[CustomWorkoutResponse])
async def update_custom_workout(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    workout_id: str,
    workout_in: CustomWorkoutUpdate,
) -> Any:
    workout = await _get_owned(db, workout_id, user.id, "update")

    update_data = workout_in.model_dump(exclude_unset=True, exclude={"exercises"})
    for field, value in update_data.items():
        if field in ("name", "is_public") and value is None:
            continue
        setattr(workout, field, value)

    if workout_in.exercises is not None:
        # Old rows go in the same transaction as the new ones
        await db.execute(
            delete(CustomWorkoutExercise).where(CustomWorkoutExercise.custom_workout_id == workout_id)
        )
        for exercise in _build_exercises(workout_in.exercises):
            exercise.custom_workout_id = workout_id
            db.add(exercise)

    await db.commit()
    return ok(CustomWorkoutResponse.model_validate(await _load_workout(db, workout_id)))


@router.delete("/{workout_id}", response_model=ApiResponse[MessageResponse])
async def delete_custom_workout(
    *,
    db: AsyncSession = Depends(get_db),
    user: TokenUser = Depends(get_current_user),
    workout_id: str,
) -> Any:
    workout = await _get_owned(db, workout_id, user.id, "delete")
    await db.delete(workout)
    await db.commit()
    return ok({"message": "Custom workout deleted successfully"})
