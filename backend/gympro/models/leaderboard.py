from datetime import datetime
from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from gympro.db.base import Base, generate_uuid

PERIODS = ("WEEKLY", "MONTHLY", "ALL_TIME")
CATEGORIES = ("WORKOUTS", "CALORIES", "STREAK")


class LeaderboardEntry(Base):
    """Stored ranking row, rewritten by the leaderboard refresh"""
    __tablename__ = "leaderboard_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "period", "category", name="uq_leaderboard_user_period_category"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    period = Column(String(20), nullable=False)
    category = Column(String(20), nullable=False)
    score = Column(Float, nullable=False, default=0)
    rank = Column(Integer, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User")
