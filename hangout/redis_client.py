"""
Redisによる旅程キャッシュと簡易フォールバック（インメモリ）の管理。
Redis-backed itinerary cache with a lightweight in-memory fallback.
"""

import hashlib
import json
import logging
import os
import re
import threading
import time
from typing import Any, Dict, Optional, Tuple

import redis

from hangout.constants import (
    ITINERARY_CACHE_PREFIX,
    ITINERARY_CACHE_TTL_SECONDS,
    SESSION_PLAN_PREFIX,
    SESSION_PLAN_TTL_SECONDS,
    _env_bool,
    _env_float,
    _env_int,
)

logger = logging.getLogger(__name__)

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

REDIS_SOCKET_TIMEOUT_SECONDS = _env_float("REDIS_SOCKET_TIMEOUT_SECONDS", 2.0)
REDIS_CONNECT_TIMEOUT_SECONDS = _env_float("REDIS_CONNECT_TIMEOUT_SECONDS", 2.0)
REDIS_HEALTH_CHECK_INTERVAL = _env_int("REDIS_HEALTH_CHECK_INTERVAL", 30)
REDIS_RECONNECT_RETRIES = _env_int("REDIS_RECONNECT_RETRIES", 3)
REDIS_RECONNECT_INITIAL_DELAY_SECONDS = _env_float("REDIS_RECONNECT_INITIAL_DELAY_SECONDS", 0.5)
REDIS_RECONNECT_MAX_DELAY_SECONDS = _env_float("REDIS_RECONNECT_MAX_DELAY_SECONDS", 5.0)
REDIS_RECONNECT_MIN_INTERVAL_SECONDS = _env_float("REDIS_RECONNECT_MIN_INTERVAL_SECONDS", 2.0)
REDIS_ALLOW_FALLBACK = _env_bool("REDIS_ALLOW_FALLBACK", True)

# Redisクライアントの状態管理
# Redis client state tracking
redis_client: Optional[Any] = None
_redis_lock = threading.Lock()
_last_health_check = 0.0
_last_reconnect_attempt = 0.0

# Redisが使えない場合の簡易フォールバック（単一プロセス限定）
# In-memory fallback when Redis is unavailable (single-process only)
_memory_store: Dict[str, Tuple[str, Optional[float]]] = {}

_WHITESPACE_RE = re.compile(r"\s+")


def _ping_if_available(client: Any) -> None:
    if hasattr(client, "ping") and callable(getattr(client, "ping")):
        client.ping()


def _create_redis_client() -> Optional[Any]:
    try:
        client = redis.from_url(
            REDIS_URL,
            decode_responses=True,
            socket_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
            socket_connect_timeout=REDIS_CONNECT_TIMEOUT_SECONDS,
            retry_on_timeout=True,
            health_check_interval=REDIS_HEALTH_CHECK_INTERVAL,
        )
        _ping_if_available(client)
        return client
    except Exception as e:
        logger.error("Failed to connect to Redis: %s", e)
        return None


def _connect_with_retries() -> Optional[Any]:
    retries = max(1, REDIS_RECONNECT_RETRIES)
    delay = max(0.0, REDIS_RECONNECT_INITIAL_DELAY_SECONDS)

    for attempt in range(1, retries + 1):
        client = _create_redis_client()
        if client is not None:
            return client
        if attempt < retries:
            sleep_for = min(delay, REDIS_RECONNECT_MAX_DELAY_SECONDS)
            if sleep_for > 0:
                time.sleep(sleep_for)
            delay = min(max(delay * 2, 0.1), REDIS_RECONNECT_MAX_DELAY_SECONDS)
    return None


def _health_check_due(now: float) -> bool:
    if REDIS_HEALTH_CHECK_INTERVAL <= 0:
        return False
    return now - _last_health_check >= REDIS_HEALTH_CHECK_INTERVAL


def _mark_unhealthy(reason: str, err: Exception) -> None:
    global redis_client, _last_health_check
    logger.error("Redis %s failed: %s", reason, err, exc_info=True)
    with _redis_lock:
        redis_client = None
        _last_health_check = 0.0


def get_redis_client() -> Optional[Any]:
    """
    Redisクライアントを取得する（必要に応じて再接続）
    Return the shared Redis client, reconnecting when needed.
    """
    global redis_client, _last_health_check, _last_reconnect_attempt
    now = time.time()

    with _redis_lock:
        client = redis_client
        if client is not None and _health_check_due(now):
            _last_health_check = now
            try:
                _ping_if_available(client)
            except Exception as e:
                redis_client = None
                client = None
                logger.warning("Redis health check failed: %s", e)

        if client is not None:
            return client

        if now - _last_reconnect_attempt < REDIS_RECONNECT_MIN_INTERVAL_SECONDS:
            return None
        _last_reconnect_attempt = now

        client = _connect_with_retries()
        if client is not None:
            redis_client = client
            _last_health_check = now
        return client


def _sweep_expired_memory(now: float) -> None:
    expired = [key for key, (_, expires_at) in _memory_store.items() if expires_at and now > expires_at]
    for key in expired:
        _memory_store.pop(key, None)


def _memory_set(key: str, value: str, ttl: int) -> None:
    now = time.time()
    # 書き込みのたびに期限切れを掃除する
    _sweep_expired_memory(now)
    expires_at = now + ttl if ttl > 0 else None
    _memory_store[key] = (value, expires_at)


def _memory_get(key: str) -> Optional[str]:
    item = _memory_store.get(key)
    if not item:
        return None
    value, expires_at = item
    if expires_at and time.time() > expires_at:
        _memory_store.pop(key, None)
        return None
    return value


def normalize_location(location: str) -> str:
    """場所名を正規化する / Lower-case, trim and collapse whitespace in a location."""
    return _WHITESPACE_RE.sub(" ", (location or "").strip()).lower()


def build_itinerary_cache_key(preferences: Dict[str, Any], location_data: Dict[str, Any]) -> str:
    """
    旅程キャッシュのキーを生成する
    Build the itinerary cache key.

    正規化した場所名と、嗜好・場所の選択内容全体から決定的に算出します。
    Deterministic over the normalized location and the full preference and
    location selections, so identical requests always share a key.

    例: itinerary:3f2a...
    Example: itinerary:3f2a...
    """
    canonical = json.dumps(
        {
            "location": normalize_location(location_data.get("location", "")),
            "preferences": preferences,
            "locationData": location_data,
        },
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
    )
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"{ITINERARY_CACHE_PREFIX}:{digest}"


def _get_json(key: str) -> Optional[Dict[str, Any]]:
    data: Optional[str] = None
    try:
        client = get_redis_client()
        if client:
            data = client.get(key)
        elif REDIS_ALLOW_FALLBACK:
            logger.warning("Redis client is not available; using in-memory fallback.")
            data = _memory_get(key)
    except Exception as e:
        _mark_unhealthy("get", e)
        if REDIS_ALLOW_FALLBACK:
            data = _memory_get(key)

    if not data:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError:
        logger.warning("Discarding undecodable cache entry %s", key)
        return None


def _set_json(key: str, payload: Dict[str, Any], ttl: int) -> None:
    value = json.dumps(payload, ensure_ascii=False)
    try:
        client = get_redis_client()
        if not client:
            if REDIS_ALLOW_FALLBACK:
                _memory_set(key, value, ttl)
            return
        if ttl > 0:
            client.setex(key, ttl, value)
        else:
            client.set(key, value)
    except Exception as e:
        _mark_unhealthy("set", e)
        if REDIS_ALLOW_FALLBACK:
            _memory_set(key, value, ttl)


def get_cached_itinerary(key: str) -> Optional[Dict[str, Any]]:
    """
    キャッシュ済みの旅程を取得する
    Fetch a cached itinerary, or None on miss.
    """
    return _get_json(key)


def save_cached_itinerary(key: str, itinerary: Dict[str, Any], ttl: int = ITINERARY_CACHE_TTL_SECONDS) -> None:
    """
    TTL付きで旅程全体をキャッシュに保存する（部分更新なし）
    Store the whole itinerary under the key with a TTL; no partial updates.
    """
    _set_json(key, itinerary, ttl)


def _session_plan_key(plan_id: str) -> str:
    return f"{SESSION_PLAN_PREFIX}:{plan_id}"


def save_session_plan(plan_id: str, itinerary: Dict[str, Any], ttl: int = SESSION_PLAN_TTL_SECONDS) -> None:
    """
    セッションに表示した旅程をそのまま保存する
    Keep the exact itinerary shown to a browser session.
    """
    _set_json(_session_plan_key(plan_id), itinerary, ttl)


def get_session_plan(plan_id: str) -> Optional[Dict[str, Any]]:
    """
    セッションに表示した旅程を返す（期限切れなら None、再生成はしない）
    Return the itinerary shown to a session, or None once it has expired.
    """
    return _get_json(_session_plan_key(plan_id))
