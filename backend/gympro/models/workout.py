"""
Workout video catalog and logged workout sessions
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from gympro.db.base import Base, generate_uuid

DIFFICULTIES = ("BEGINNER", "INTERMEDIATE", "ADVANCED")


class WorkoutCategory(Base):
    __tablename__ = "workout_categories"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    description = Column(String(500), nullable=True)
    image_url = Column(String(500), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    videos = relationship("WorkoutVideo", back_populates="category", order_by="WorkoutVideo.created_at.desc()")

    def __repr__(self):
        return f"<WorkoutCategory {self.slug}>"


class WorkoutVideo(Base):
    __tablename__ = "workout_videos"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    video_url = Column(String(500), nullable=False)
    thumbnail_url = Column(String(500), nullable=True)
    duration = Column(Integer, nullable=False, comment="seconds")
    difficulty = Column(String(20), nullable=False, default="BEGINNER")
    category_id = Column(String(36), ForeignKey("workout_categories.id"), nullable=False, index=True)
    trainer_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    equipment_needed = Column(JSON, nullable=True)
    calories_burned = Column(Integer, nullable=True)
    is_premium = Column(Boolean, nullable=False, default=False)
    is_published = Column(Boolean, nullable=False, default=True)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    category = relationship("WorkoutCategory", back_populates="videos")
    trainer = relationship("User", foreign_keys=[trainer_id])

    def __repr__(self):
        return f"<WorkoutVideo {self.title}>"


class WorkoutSession(Base):
    """A workout started by a user; completed_at is set when finished"""
    __tablename__ = "workout_sessions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id = Column(String(36), ForeignKey("workout_videos.id", ondelete="SET NULL"), nullable=True)
    custom_workout_id = Column(String(36), ForeignKey("custom_workouts.id", ondelete="SET NULL"), nullable=True)
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)
    duration = Column(Integer, nullable=True, comment="seconds")
    calories_burned = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    user = relationship("User", back_populates="workout_sessions")
    video = relationship("WorkoutVideo")
    custom_workout = relationship("CustomWorkout")

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None
