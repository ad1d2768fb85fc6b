"""
Nutrition tracking: a meal plan per day, meals inside it, food items inside meals
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from gympro.db.base import Base, generate_uuid

MEAL_TYPES = ("BREAKFAST", "LUNCH", "DINNER", "SNACK")


class MealPlan(Base):
    __tablename__ = "meal_plans"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    date = Column(Date, nullable=False, index=True)
    target_calories = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    meals = relationship("Meal", back_populates="meal_plan", cascade="all, delete-orphan", order_by="Meal.sort_order")


class Meal(Base):
    __tablename__ = "meals"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    meal_plan_id = Column(String(36), ForeignKey("meal_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    name = Column(String(200), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    meal_plan = relationship("MealPlan", back_populates="meals")
    items = relationship("MealItem", back_populates="meal", cascade="all, delete-orphan", order_by="MealItem.sort_order")


class MealItem(Base):
    __tablename__ = "meal_items"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    meal_id = Column(String(36), ForeignKey("meals.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    calories = Column(Integer, nullable=True)
    protein = Column(Float, nullable=True)
    carbs = Column(Float, nullable=True)
    fat = Column(Float, nullable=True)
    quantity = Column(Float, nullable=True)
    unit = Column(String(50), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)

    meal = relationship("Meal", back_populates="items")
