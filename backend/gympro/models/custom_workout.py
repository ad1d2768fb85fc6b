"""
User-built workouts: an ordered list of exercises
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Float, ForeignKey
from sqlalchemy.orm import relationship

from gympro.db.base import Base, generate_uuid


class CustomWorkout(Base):
    __tablename__ = "custom_workouts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="custom_workouts")
    exercises = relationship(
        "CustomWorkoutExercise",
        back_populates="custom_workout",
        cascade="all, delete-orphan",
        order_by="CustomWorkoutExercise.sort_order",
    )

    def __repr__(self):
        return f"<CustomWorkout {self.name}>"


class CustomWorkoutExercise(Base):
    __tablename__ = "custom_workout_exercises"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    custom_workout_id = Column(String(36), ForeignKey("custom_workouts.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_name = Column(String(200), nullable=False)
    sets = Column(Integer, nullable=False)
    reps = Column(Integer, nullable=True)
    weight = Column(Float, nullable=True)
    rest_seconds = Column(Integer, nullable=True)
    notes = Column(String(500), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    custom_workout = relationship("CustomWorkout", back_populates="exercises")
