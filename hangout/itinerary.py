"""
旅程生成パイプラインのコア実装。
Core itinerary-generation pipeline.

検証 → キャッシュ確認 → AI生成（失敗時はカタログ） → 画像・経路の付与 → キャッシュ保存
validate → cache check → generate or fall back → enrichment → cache write
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from hangout import constants
from hangout import redis_client
from hangout.directions import attach_navigation_links
from hangout.fallback_catalog import get_fallback_itinerary
from hangout.openai_client import get_openai_client
from hangout.places import PEOPLE_ENJOYING_OUTINGS, category_for_activity_type, resolve_image
from hangout.prompts import build_messages
from hangout.schemas import ItineraryResponse, validate_generate_request

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class ItineraryGenerationError(RuntimeError):
    """AIの出力が利用できない場合に送出される / Raised when the model output is unusable."""


def _strip_code_fences(text: str) -> str:
    return _CODE_FENCE_RE.sub("", text.strip())


def _extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    テキストからJSONオブジェクトを取り出す
    Parse a JSON object from model text, tolerating fences and chatter.
    """
    if not text:
        return None
    text = _strip_code_fences(text)
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            parsed = json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            return None
    return parsed if isinstance(parsed, dict) else None


def _invoke_model(messages: List[Dict[str, str]]) -> str:
    client = get_openai_client()
    completion = client.chat.completions.create(
        model=constants.OPENAI_MODEL_NAME,
        messages=messages,
        response_format={"type": "json_object"},
        temperature=constants.OPENAI_TEMPERATURE,
    )
    return completion.choices[0].message.content or ""


def _normalize_ai_itinerary(data: Dict[str, Any], location: str) -> Dict[str, Any]:
    """
    AIの出力を ItineraryResponse モデルで検証し、IDを補完する
    Validate model output against ItineraryResponse and fill missing ids.

    タイトル・説明・アクティビティが欠けている場合は ValidationError。
    Raises pydantic's ValidationError when the title, description or activities are missing.
    """
    parsed = ItineraryResponse.model_validate(data)
    for index, activity in enumerate(parsed.activities, start=1):
        activity.id = activity.id or f"act{index}"
        activity.image = ""
    for index, recommendation in enumerate(parsed.recommendations, start=1):
        recommendation.id = recommendation.id or f"rec{index}"
        recommendation.image = ""
    parsed.location = parsed.location.strip() or location
    return parsed.model_dump(exclude_none=True)


def request_ai_itinerary(preferences: Dict[str, Any], location_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    生成AIに旅程を依頼する
    Ask the generative model for an itinerary.

    通信・クォータ・解析の失敗はすべて呼び出し元に例外として伝わります。
    Transport, quota and parse failures all propagate to the caller.
    """
    raw = _invoke_model(build_messages(preferences, location_data))
    parsed = _extract_json_object(raw)
    if parsed is None:
        raise ItineraryGenerationError("model output is not a JSON object")
    return _normalize_ai_itinerary(parsed, location_data["location"])


def enrich_itinerary(itinerary: Dict[str, Any], location_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    アクティビティとおすすめに写真と経路リンクを付与する
    Attach photos and navigation links to activities and recommendations.

    写真の取得は1件ずつ順番に行い、失敗した項目だけストック画像になります。
    Photo lookups run one item at a time; a failed lookup only affects its own item.
    """
    for activity in itinerary["activities"]:
        activity["image"] = resolve_image(
            activity.get("title", ""),
            activity.get("location", ""),
            category_for_activity_type(activity.get("type")),
        )
    attach_navigation_links(itinerary["activities"], location_data["location"], location_data["transportation"])

    for recommendation in itinerary["recommendations"]:
        recommendation["image"] = resolve_image(
            recommendation.get("title", ""),
            itinerary.get("location", ""),
            PEOPLE_ENJOYING_OUTINGS,
        )
    return itinerary


def build_fallback_itinerary(location_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    カタログから旅程を作る（写真は手書きのまま、経路リンクのみ付与）
    Build an itinerary from the catalog; keep its images and add navigation links.
    """
    itinerary = get_fallback_itinerary(location_data["location"])
    attach_navigation_links(itinerary["activities"], itinerary["location"], location_data["transportation"])
    return itinerary


def _generate_uncached(preferences: Dict[str, Any], location_data: Dict[str, Any]) -> Dict[str, Any]:
    if not constants.AI_GENERATION_ENABLED:
        logger.info("AI generation disabled; using fallback itinerary for %s", location_data["location"])
        return build_fallback_itinerary(location_data)

    try:
        itinerary = request_ai_itinerary(preferences, location_data)
    except (ItineraryGenerationError, ValidationError) as e:
        logger.warning("AI output unusable, using fallback data: %s", e)
        return build_fallback_itinerary(location_data)
    except Exception as e:
        logger.warning("AI generation failed, using fallback data: %s", e)
        return build_fallback_itinerary(location_data)

    return enrich_itinerary(itinerary, location_data)


def generate_itinerary(payload: Any) -> Dict[str, Any]:
    """
    旅程生成のメイン関数
    Main entry point for itinerary generation.

    1. リクエスト形状の検証（不正なら ItineraryValidationError）
    2. キャッシュにあればそのまま返す
    3. AI生成、失敗時はフォールバックカタログ
    4. 写真・経路リンクの付与
    5. TTL付きでキャッシュに保存
    1) Validate the request shape (ItineraryValidationError when invalid)
    2) Return the cached response unchanged on a hit
    3) Generate with the model, or fall back to the catalog
    4) Enrich with photos and navigation links
    5) Cache the finished response with a TTL
    """
    preferences, location_data = validate_generate_request(payload)

    cache_key = redis_client.build_itinerary_cache_key(preferences, location_data)
    cached = redis_client.get_cached_itinerary(cache_key)
    if cached is not None:
        logger.info("Itinerary cache hit for %s", location_data["location"])
        return cached

    itinerary = _generate_uncached(preferences, location_data)
    redis_client.save_cached_itinerary(cache_key, itinerary, constants.ITINERARY_CACHE_TTL_SECONDS)
    return itinerary
