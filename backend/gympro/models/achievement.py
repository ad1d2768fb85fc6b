"""
Achievements and per-user progress

criteria is a JSON object: {"type": "<criteria type>", "threshold": <int>}
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship

from gympro.db.base import Base, generate_uuid


class Achievement(Base):
    __tablename__ = "achievements"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(500), nullable=False)
    icon_url = Column(String(500), nullable=True)
    criteria = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user_achievements = relationship("UserAchievement", back_populates="achievement", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Achievement {self.name}>"

    @property
    def criteria_type(self) -> str:
        return (self.criteria or {}).get("type", "")

    @property
    def threshold(self) -> int:
        return int((self.criteria or {}).get("threshold", 0))


class UserAchievement(Base):
    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    achievement_id = Column(String(36), ForeignKey("achievements.id", ondelete="CASCADE"), nullable=False)
    progress = Column(Integer, nullable=False, default=0)
    # Null until the threshold is first reached
    unlocked_at = Column(DateTime, nullable=True)

    achievement = relationship("Achievement", back_populates="user_achievements")
    user = relationship("User")
