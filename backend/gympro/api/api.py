"""API router aggregation"""
from fastapi import APIRouter

from gympro.api.endpoints import (
    achievements, activity, admin, auth, community, custom_workouts,
    leaderboard, nutrition, orders, products, workouts,
)

api_router = APIRouter()

# Accounts
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])

# Training
api_router.include_router(workouts.router, prefix="/workouts", tags=["Workouts"])
api_router.include_router(custom_workouts.router, prefix="/custom-workouts", tags=["Custom workouts"])
api_router.include_router(activity.router, prefix="/activity", tags=["Activity"])
api_router.include_router(nutrition.router, prefix="/nutrition", tags=["Nutrition"])

# Social
api_router.include_router(community.router, prefix="/posts", tags=["Community"])
api_router.include_router(leaderboard.router, prefix="/leaderboard", tags=["Leaderboard"])
api_router.include_router(achievements.router, prefix="/achievements", tags=["Achievements"])

# Shop
api_router.include_router(products.router, prefix="/products", tags=["Products"])
api_router.include_router(orders.router, prefix="/orders", tags=["Orders"])
