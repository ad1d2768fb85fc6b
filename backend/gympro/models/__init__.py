from gympro.models.user import User, UserProfile
from gympro.models.workout import WorkoutCategory, WorkoutVideo, WorkoutSession
from gympro.models.custom_workout import CustomWorkout, CustomWorkoutExercise
from gympro.models.activity import ActivityLog
from gympro.models.nutrition import MealPlan, Meal, MealItem
from gympro.models.community import Post, Comment, Like
from gympro.models.leaderboard import LeaderboardEntry
from gympro.models.achievement import Achievement, UserAchievement
from gympro.models.product import ProductCategory, Product
from gympro.models.order import Order, OrderItem

__all__ = [
    "User", "UserProfile",
    "WorkoutCategory", "WorkoutVideo", "WorkoutSession",
    "CustomWorkout", "CustomWorkoutExercise",
    "ActivityLog",
    "MealPlan", "Meal", "MealItem",
    "Post", "Comment", "Like",
    "LeaderboardEntry",
    "Achievement", "UserAchievement",
    "ProductCategory", "Product",
    "Order", "OrderItem",
]
