"""
アクティビティ間のGoogleマップ経路リンクを組み立てる。
Google Maps links chaining each activity to the previous stop.
"""

from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urlencode

from hangout.constants import DEFAULT_TRAVEL_MODE, TRAVEL_MODES

DIRECTIONS_BASE_URL = "https://www.google.com/maps/dir/"
SEARCH_BASE_URL = "https://www.google.com/maps/search/"


def travel_mode_for(transportation: Optional[Sequence[str]]) -> str:
    """最初に認識できた移動手段を使う / First recognized transportation tag wins."""
    for tag in transportation or []:
        mode = TRAVEL_MODES.get(tag.strip().lower())
        if mode:
            return mode
    return DEFAULT_TRAVEL_MODE


def city_centre(city: str) -> str:
    return f"{city.strip()} city centre"


def directions_url(origin: str, destination: str, travel_mode: str) -> str:
    query = urlencode(
        {"api": "1", "origin": origin, "destination": destination, "travelmode": travel_mode}
    )
    return f"{DIRECTIONS_BASE_URL}?{query}"


def maps_search_url(title: str, address: str) -> str:
    place = ", ".join(part for part in (title, address) if part)
    return f"{SEARCH_BASE_URL}?{urlencode({'api': '1', 'query': place})}"


def attach_navigation_links(
    activities: List[Dict[str, Any]],
    city: str,
    transportation: Optional[Sequence[str]] = None,
) -> List[Dict[str, Any]]:
    """
    各アクティビティに経路リンクと地図リンクを付与する
    Add `directionsUrl` and `googleMapsLink` to every activity in place.

    出発地は直前のアクティビティの場所（最初は市の中心）で、
    利用者の固定の出発地ではなく、連続する立ち寄り先の間の経路になります。
    The origin is the previous activity's location, or the city centre for
    the first stop, so links navigate between consecutive stops.
    """
    mode = travel_mode_for(transportation)
    origin = city_centre(city)
    for activity in activities:
        destination = activity.get("location") or activity.get("title") or city
        activity["directionsUrl"] = directions_url(origin, destination, mode)
        activity["googleMapsLink"] = maps_search_url(activity.get("title", ""), activity.get("location", ""))
        origin = destination
    return activities
