"""
ブラウザセッション（Flaskの署名付きCookie）に入力フォームの内容を保持する。
Keep the planner form submissions in the browser session.

Cookieの容量制限があるため、表示した旅程はサーバー側に保存し、
セッションにはその参照IDだけを置きます。
Cookies are size-limited, so the itinerary shown to the user is stored
server-side and the session only holds its plan id.
"""

import uuid
from typing import Any, Dict, Optional

from flask import session

from hangout import redis_client
from hangout.constants import SESSION_ITINERARY_KEY, SESSION_LOCATION_KEY, SESSION_PREFERENCE_KEY


def save_preferences(preferences: Dict[str, Any]) -> None:
    session[SESSION_PREFERENCE_KEY] = preferences


def get_preferences() -> Optional[Dict[str, Any]]:
    return session.get(SESSION_PREFERENCE_KEY)


def save_location(location_data: Dict[str, Any]) -> None:
    session[SESSION_LOCATION_KEY] = location_data


def get_location() -> Optional[Dict[str, Any]]:
    return session.get(SESSION_LOCATION_KEY)


def build_generate_request() -> Optional[Dict[str, Any]]:
    """
    2つのフォーム入力を1つの生成リクエストにまとめる
    Combine both form submissions into one generation request body.
    """
    preferences = get_preferences()
    location_data = get_location()
    if preferences is None or location_data is None:
        return None
    return {"preferences": preferences, "locationData": location_data}


def save_itinerary(itinerary: Dict[str, Any]) -> str:
    """
    表示する旅程を保存し、セッションに参照IDを記録する
    Store the itinerary being shown and remember its plan id in the session.
    """
    plan_id = uuid.uuid4().hex
    redis_client.save_session_plan(plan_id, itinerary)
    session[SESSION_ITINERARY_KEY] = plan_id
    return plan_id


def get_itinerary() -> Optional[Dict[str, Any]]:
    """
    セッションで表示した旅程をそのまま返す
    Return exactly the itinerary this session was shown.

    保存期限が切れていれば None を返し、再生成はしません。
    Returns None once the stored copy has expired; nothing is regenerated.
    """
    plan_id = session.get(SESSION_ITINERARY_KEY)
    if not plan_id:
        return None
    return redis_client.get_session_plan(plan_id)


def clear() -> None:
    """「もう一度プランを作る」でセッションを空にする / Reset for "plan another"."""
    for key in (SESSION_PREFERENCE_KEY, SESSION_LOCATION_KEY, SESSION_ITINERARY_KEY):
        session.pop(key, None)
