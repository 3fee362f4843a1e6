"""
保存済み旅程の永続化処理。
Persistence of saved itineraries, scoped to their owner.
"""

import logging
from typing import Any, Dict, List, Union

from hangout.database import SessionLocal
from hangout.models import SavedItinerary

logger = logging.getLogger(__name__)


def save_itinerary(user_id: str, itinerary: Dict[str, Any]) -> Dict[str, Any]:
    """
    旅程をユーザーのコレクションに追加する
    Append an itinerary to the user's collection.
    """
    db = SessionLocal()
    try:
        row = SavedItinerary(
            user_id=user_id,
            title=itinerary["title"],
            description=itinerary["description"],
            location=itinerary["location"],
            activities=itinerary["activities"],
            recommendations=itinerary["recommendations"],
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        logger.info("Saved itinerary %s for user %s", row.id, user_id)
        return row.to_dict()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def list_itineraries(user_id: str) -> List[Dict[str, Any]]:
    """
    ユーザーの保存済み旅程を新しい順に取得する
    List the user's saved itineraries, newest first.
    """
    db = SessionLocal()
    try:
        rows = (
            db.query(SavedItinerary)
            .filter(SavedItinerary.user_id == user_id)
            .order_by(SavedItinerary.created_at.desc(), SavedItinerary.id.desc())
            .all()
        )
        return [row.to_dict() for row in rows]
    finally:
        db.close()


def delete_itinerary(user_id: str, itinerary_id: Union[int, str]) -> int:
    """
    所有者の旅程だけを削除し、削除件数を返す
    Delete one of the caller's own itineraries and return the affected row count.

    他人の旅程や存在しないIDは0件となり、エラーにはしません。
    Foreign or unknown ids simply affect zero rows.
    """
    try:
        row_id = int(itinerary_id)
    except (TypeError, ValueError):
        return 0

    db = SessionLocal()
    try:
        deleted = (
            db.query(SavedItinerary)
            .filter(SavedItinerary.id == row_id, SavedItinerary.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        if not deleted:
            logger.info("Delete of itinerary %s by user %s matched no rows", row_id, user_id)
        return deleted
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
