"""Nutrition schemas: meal plans, meals, meal items"""

from datetime import date as date_type, datetime
from typing import List, Literal, Optional

from pydantic import Field

from gympro.schemas.common import CamelModel

MealType = Literal["BREAKFAST", "LUNCH", "DINNER", "SNACK"]


class MealItemIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    calories: Optional[int] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fat: Optional[float] = Field(None, ge=0)
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = Field(None, max_length=50)


class MealIn(CamelModel):
    type: MealType
    name: str = Field(..., min_length=1, max_length=200)
    items: List[MealItemIn] = []


class MealPlanCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    date: date_type
    target_calories: Optional[int] = Field(None, gt=0)
    meals: List[MealIn] = []


class MealPlanUpdate(CamelModel):
    """meals, when given, replace every existing meal"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    date: Optional[date_type] = None
    target_calories: Optional[int] = Field(None, gt=0)
    meals: Optional[List[MealIn]] = None


class MealAdd(MealIn):
    meal_plan_id: str


class MealItemResponse(CamelModel):
    id: str
    name: str
    calories: Optional[int] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    sort_order: int


class MealResponse(CamelModel):
    id: str
    meal_plan_id: str
    type: str
    name: str
    sort_order: int
    items: List[MealItemResponse] = []


class MealPlanResponse(CamelModel):
    id: str
    user_id: str
    name: str
    date: date_type
    target_calories: Optional[int] = None
    meals: List[MealResponse] = []
    created_at: datetime
    updated_at: datetime


class MealPlanBrief(CamelModel):
    id: str
    name: str
    target_calories: Optional[int] = None


class DailySummary(CamelModel):
    date: date_type
    meal_plan: Optional[MealPlanBrief] = None
    total_calories: int = 0
    total_protein: float = 0
    total_carbs: float = 0
    total_fat: float = 0
    target_calories: Optional[int] = None
    meals: List[MealResponse] = []


class FoodItem(CamelModel):
    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    unit: str
    quantity: float
