"""
User account and profile
Role and subscription are plain strings, validated at the API layer
"""

from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Date, Float, Text, ForeignKey
from sqlalchemy.orm import relationship

from gympro.db.base import Base, generate_uuid

ROLES = ("USER", "TRAINER", "ADMIN")
SUBSCRIPTION_STATUSES = ("FREE", "PREMIUM")


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    avatar_url = Column(String(500), nullable=True)
    phone = Column(String(30), nullable=True)
    role = Column(String(20), nullable=False, default="USER")
    subscription_status = Column(String(20), nullable=False, default="FREE")
    is_active = Column(Boolean, nullable=False, default=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    workout_sessions = relationship("WorkoutSession", back_populates="user", cascade="all, delete-orphan")
    custom_workouts = relationship("CustomWorkout", back_populates="user", cascade="all, delete-orphan")
    posts = relationship("Post", back_populates="user", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="user")

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class UserProfile(Base):
    """Optional fitness profile, one per user"""
    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    bio = Column(Text, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(30), nullable=True)
    height = Column(Float, nullable=True, comment="cm")
    weight = Column(Float, nullable=True, comment="kg")
    fitness_goal = Column(String(50), nullable=True)
    experience_level = Column(String(20), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="profile")
