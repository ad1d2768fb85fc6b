"""
Meal building, daily totals and the built-in food list
"""

from typing import Dict, List

from gympro.models.nutrition import Meal, MealItem, MealPlan
from gympro.schemas.nutrition import MealIn

# name, calories, protein, carbs, fat, unit, quantity
_FOODS = [
    ("Chicken Breast", 165, 31, 0, 3.6, "g", 100),
    ("White Rice", 130, 2.7, 28, 0.3, "g", 100),
    ("Banana", 105, 1.3, 27, 0.4, "medium", 1),
    ("Oatmeal", 154, 5, 27, 2.6, "g", 100),
    ("Eggs", 78, 6, 0.6, 5, "large", 1),
    ("Salmon", 208, 20, 0, 13, "g", 100),
    ("Broccoli", 55, 3.7, 11, 0.6, "g", 100),
    ("Sweet Potato", 103, 2.3, 24, 0.1, "g", 100),
    ("Almonds", 164, 6, 6, 14, "g", 28),
    ("Greek Yogurt", 100, 17, 6, 0.7, "g", 170),
    ("Avocado", 240, 3, 13, 22, "whole", 1),
    ("Brown Rice", 216, 5, 45, 1.8, "g", 100),
    ("Quinoa", 222, 8, 39, 3.6, "g", 100),
    ("Spinach", 23, 2.9, 3.6, 0.4, "g", 100),
    ("Apple", 95, 0.5, 25, 0.3, "medium", 1),
    ("Blueberries", 84, 1.1, 21, 0.5, "g", 148),
    ("Whey Protein", 120, 24, 3, 1, "scoop", 1),
    ("Turkey Breast", 135, 30, 0, 1, "g", 100),
    ("Tuna", 132, 28, 0, 1.3, "g", 100),
    ("Olive Oil", 119, 0, 0, 14, "tbsp", 1),
    ("Peanut Butter", 188, 8, 6, 16, "tbsp", 2),
    ("Milk (Whole)", 149, 8, 12, 8, "cup", 1),
    ("Whole Wheat Bread", 69, 3.6, 12, 1, "slice", 1),
    ("Pasta", 220, 8, 43, 1.3, "g", 100),
    ("Steak (Sirloin)", 271, 26, 0, 18, "g", 100),
    ("Tofu", 144, 17, 3, 9, "g", 100),
    ("Lentils", 230, 18, 40, 0.8, "g", 100),
    ("Cottage Cheese", 206, 28, 6, 9, "cup", 1),
    ("Orange", 62, 1.2, 15, 0.2, "medium", 1),
    ("Honey", 64, 0.1, 17, 0, "tbsp", 1),
]

COMMON_FOODS: List[Dict] = [
    dict(zip(("name", "calories", "protein", "carbs", "fat", "unit", "quantity"), row))
    for row in _FOODS
]

MIN_FOOD_QUERY_LENGTH = 2


def search_foods(query: str) -> List[Dict]:
    """Case-insensitive substring match on the food name"""
    needle = query.lower()
    return [food for food in COMMON_FOODS if needle in food["name"].lower()]


def build_meal(meal_in: MealIn, sort_order: int) -> Meal:
    meal = Meal(type=meal_in.type, name=meal_in.name, sort_order=sort_order)
    meal.items = [
        MealItem(**item.model_dump(), sort_order=index)
        for index, item in enumerate(meal_in.items)
    ]
    return meal


def build_meals(meals_in: List[MealIn], start: int = 0) -> List[Meal]:
    return [build_meal(m, start + index) for index, m in enumerate(meals_in)]


def plan_totals(plan: MealPlan) -> Dict[str, float]:
    """Calories rounded to the unit, macros to one decimal"""
    calories = protein = carbs = fat = 0.0
    for meal in plan.meals:
        for item in meal.items:
            calories += item.calories or 0
            protein += item.protein or 0
            carbs += item.carbs or 0
            fat += item.fat or 0
    return {
        "total_calories": int(round(calories)),
        "total_protein": round(protein, 1),
        "total_carbs": round(carbs, 1),
        "total_fat": round(fat, 1),
    }
