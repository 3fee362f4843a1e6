"""
アプリ全体で共有する設定値・定数。
Shared configuration and constants for the hangout planner.
"""

import os


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default)).strip()
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# OpenAIモデル設定
# OpenAI model configuration
OPENAI_MODEL_NAME = os.getenv("OPENAI_MODEL_NAME", "gpt-4o")
OPENAI_TEMPERATURE = _env_float("OPENAI_TEMPERATURE", 0.7)
AI_GENERATION_ENABLED = _env_bool("AI_GENERATION_ENABLED", True)

# キャッシュ設定
# Itinerary cache configuration
ITINERARY_CACHE_TTL_SECONDS = _env_int("ITINERARY_CACHE_TTL_SECONDS", 86400)
ITINERARY_CACHE_PREFIX = "itinerary"

# 外部API（Places / 認証）
# Third-party APIs (Places / auth)
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
PLACES_TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
PLACES_PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"
PLACES_PHOTO_MAX_WIDTH = _env_int("PLACES_PHOTO_MAX_WIDTH", 800)
PLACES_TIMEOUT_SECONDS = _env_float("PLACES_TIMEOUT_SECONDS", 5.0)

SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
AUTH_TIMEOUT_SECONDS = _env_float("AUTH_TIMEOUT_SECONDS", 10.0)

TIME_OF_DAY_VALUES = ("morning", "afternoon", "evening")

# セッションストレージのキー
# Browser-session keys used by the planner flow
SESSION_PREFERENCE_KEY = "preferenceData"
SESSION_LOCATION_KEY = "locationData"
SESSION_ITINERARY_KEY = "itineraryData"

# 表示した旅程のサーバー側コピー（Cookie容量の制限のため）
# Server-side copy of the itinerary shown to a session
SESSION_PLAN_PREFIX = "plan"
SESSION_PLAN_TTL_SECONDS = _env_int("SESSION_PLAN_TTL_SECONDS", 604800)

# Googleマップの移動手段
# Google Maps travel modes keyed by transportation tag
TRAVEL_MODES = {
    "walking": "walking",
    "public transit": "transit",
    "rideshare": "driving",
    "biking": "bicycling",
}
DEFAULT_TRAVEL_MODE = "walking"

DEFAULT_FALLBACK_LOCATION = "delhi"
