"""
旅程を時間帯別のタイムラインに整形する。
Shape an itinerary into a morning/afternoon/evening timeline.
"""

import logging
from typing import Any, Dict, List

from hangout.constants import TIME_OF_DAY_VALUES

logger = logging.getLogger(__name__)


def group_by_time_of_day(activities: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """
    アクティビティを時間帯ごとに分ける（生成順を維持）
    Bucket activities by timeOfDay, keeping generation order.

    morning / afternoon / evening 以外の値を持つアクティビティはどの枠にも入りません。
    Activities with any other timeOfDay value appear in no bucket.
    """
    timeline: Dict[str, List[Dict[str, Any]]] = {value: [] for value in TIME_OF_DAY_VALUES}
    for activity in activities or []:
        bucket = timeline.get(activity.get("timeOfDay"))
        if bucket is None:
            logger.debug("Activity %s has unrecognized timeOfDay %r", activity.get("id"), activity.get("timeOfDay"))
            continue
        bucket.append(activity)
    return timeline


def build_results_view(itinerary: Dict[str, Any]) -> Dict[str, Any]:
    """結果画面用のデータを作る / View model for the results page."""
    return {
        "title": itinerary.get("title", ""),
        "description": itinerary.get("description", ""),
        "location": itinerary.get("location", ""),
        "timeline": group_by_time_of_day(itinerary.get("activities", [])),
        "recommendations": list(itinerary.get("recommendations", [])),
    }
