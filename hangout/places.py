"""
Google Places による写真の取得と、ストック画像へのフォールバック。
Photo lookup through Google Places with stock-image fallbacks.
"""

import hashlib
import logging
from typing import Dict, List, Optional

import requests

from hangout import constants

logger = logging.getLogger(__name__)

_UNSPLASH_PARAMS = "?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=600"

CITY_EXPLORATION = "city exploration"
CAFE_ATMOSPHERE = "cafe atmosphere"
HISTORICAL_LANDMARKS = "historical landmarks"
RESTAURANT_DINING = "restaurant dining"
PEOPLE_ENJOYING_OUTINGS = "people enjoying outings"

STOCK_IMAGES: Dict[str, List[str]] = {
    CITY_EXPLORATION: [
        f"https://images.unsplash.com/photo-1513635269975-59663e0ac1ad{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1480714378408-67cf0d13bc1b{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1449824913935-59a10b8d2000{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1444723121867-7a241cacace9{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1570168007204-dfb528c6958f{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1517760444937-f6397edcbbcd{_UNSPLASH_PARAMS}",
    ],
    CAFE_ATMOSPHERE: [
        f"https://images.unsplash.com/photo-1517231925375-bf2cb42917a5{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1445116572660-236099ec97a0{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1600093463592-8e36ae95ef56{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1501339847302-ac426a4a7cbb{_UNSPLASH_PARAMS}",
    ],
    HISTORICAL_LANDMARKS: [
        f"https://images.unsplash.com/photo-1547710272-f0cd2545f838{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1552832230-c0197dd311b5{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1533929736458-ca588d08c8be{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1588614959060-4d489ad1f035{_UNSPLASH_PARAMS}",
    ],
    RESTAURANT_DINING: [
        f"https://images.unsplash.com/photo-1555396273-367ea4eb4db5{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1414235077428-338989a2e8c0{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1517248135467-4c7edcad34c4{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1559339352-11d035aa65de{_UNSPLASH_PARAMS}",
    ],
    PEOPLE_ENJOYING_OUTINGS: [
        f"https://images.unsplash.com/photo-1529156069898-49953e39b3ac{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1548199973-03cce0bbc87b{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1537721664796-76f77222a5d0{_UNSPLASH_PARAMS}",
        f"https://images.unsplash.com/photo-1536640712-4d4c36ff0e4e{_UNSPLASH_PARAMS}",
    ],
}

ACTIVITY_TYPE_CATEGORIES = {
    "exploring": CITY_EXPLORATION,
    "eating": RESTAURANT_DINING,
    "historical": HISTORICAL_LANDMARKS,
    "cafe": CAFE_ATMOSPHERE,
}


def category_for_activity_type(activity_type: Optional[str]) -> str:
    """アクティビティ種別から画像カテゴリを決める / Map an activity type to an image category."""
    return ACTIVITY_TYPE_CATEGORIES.get((activity_type or "").strip().lower(), PEOPLE_ENJOYING_OUTINGS)


def stock_image(category: str, seed: str = "") -> str:
    """
    カテゴリのストック画像を1枚選ぶ
    Pick one stock image for a category.

    同じ seed なら常に同じ画像になります。
    The same seed always selects the same image.
    """
    images = STOCK_IMAGES.get(category, STOCK_IMAGES[PEOPLE_ENJOYING_OUTINGS])
    index = int(hashlib.md5(seed.encode("utf-8")).hexdigest(), 16) % len(images)
    return images[index]


def lookup_place_photo(query: str) -> Optional[str]:
    """
    Places Text Search で場所を検索し、最初の写真のURLを返す
    Search Places for the query and return the first result's photo URL.

    APIキー未設定・通信失敗・写真なしの場合は None を返します。
    Returns None when no API key is configured, the call fails, or no photo exists.
    """
    api_key = constants.GOOGLE_MAPS_API_KEY
    if not api_key or not query:
        return None

    try:
        r = requests.get(
            constants.PLACES_TEXT_SEARCH_URL,
            params={"query": query, "key": api_key},
            timeout=constants.PLACES_TIMEOUT_SECONDS,
        )
        r.raise_for_status()
        payload = r.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Places lookup failed for %r: %s", query, e)
        return None

    if not isinstance(payload, dict):
        logger.warning("Places lookup for %r returned a malformed body", query)
        return None
    status = payload.get("status")
    if status not in ("OK", None):
        logger.warning("Places lookup for %r returned status %s", query, status)
        return None

    results = payload.get("results")
    for result in results if isinstance(results, list) else []:
        if not isinstance(result, dict):
            continue
        photos = result.get("photos")
        if not isinstance(photos, list) or not photos or not isinstance(photos[0], dict):
            continue
        reference = photos[0].get("photo_reference")
        if isinstance(reference, str) and reference:
            return (
                f"{constants.PLACES_PHOTO_URL}?maxwidth={constants.PLACES_PHOTO_MAX_WIDTH}"
                f"&photo_reference={reference}&key={api_key}"
            )
    return None


def resolve_image(title: str, address: str, category: str) -> str:
    """
    写真を取得し、失敗した場合はカテゴリのストック画像を返す
    Best-effort venue photo, falling back to a stock image for the category.
    """
    query = ", ".join(part for part in (title, address) if part)
    photo = lookup_place_photo(query)
    if photo:
        return photo
    return stock_image(category, seed=query)
