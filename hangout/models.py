"""
SQLAlchemyモデル定義。
SQLAlchemy model definitions.
"""

import datetime
from typing import Any, Dict

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from hangout.database import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class SavedItinerary(Base):
    """
    ユーザーが保存した旅程を管理するモデル
    Model to store itineraries saved by a user.

    作成後は変更せず、所有者のみが削除できます。
    Rows are never updated after insert and only their owner may delete them.
    """
    __tablename__ = "itineraries"

    id: Column = Column(Integer, primary_key=True, index=True)
    # ユーザーID: 認証トークンの subject
    # User ID: subject claim of the bearer token
    user_id: Column = Column(String(64), index=True, nullable=False)

    title: Column = Column(Text, nullable=False)
    description: Column = Column(Text, nullable=False)
    location: Column = Column(Text, nullable=False)
    activities: Column = Column(JSON, nullable=False)
    recommendations: Column = Column(JSON, nullable=False)
    created_at: Column = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        """APIレスポンス用の辞書に変換する / Serialize for API responses."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "activities": self.activities,
            "recommendations": self.recommendations,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
