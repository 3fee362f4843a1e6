"""
外部認証基盤（Supabase互換のGoTrue API）への登録・ログインの委譲。
Registration and login delegated to a GoTrue-compatible identity provider.
"""

import logging
from typing import Any, Dict

import requests

from hangout import constants

logger = logging.getLogger(__name__)


class AuthProviderError(Exception):
    """
    認証基盤がエラーを返した場合の例外（メッセージはそのまま返す）
    Error reported by the identity provider; the message is passed through verbatim.
    """

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.message = message
        self.status = status


def _provider_message(payload: Any, default: str) -> str:
    if isinstance(payload, dict):
        for key in ("msg", "error_description", "message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return default


def _post(path: str, body: Dict[str, Any], error_status: int) -> Dict[str, Any]:
    if not constants.SUPABASE_URL or not constants.SUPABASE_ANON_KEY:
        raise AuthProviderError("Authentication provider is not configured", 503)

    headers = {
        "apikey": constants.SUPABASE_ANON_KEY,
        "Authorization": f"Bearer {constants.SUPABASE_ANON_KEY}",
        "Content-Type": "application/json",
    }
    try:
        r = requests.post(
            f"{constants.SUPABASE_URL}{path}",
            json=body,
            headers=headers,
            timeout=constants.AUTH_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.error("Authentication provider unreachable: %s", e)
        raise AuthProviderError("Authentication provider is unavailable", 502) from e

    try:
        payload = r.json()
    except ValueError:
        payload = None

    if not r.ok:
        raise AuthProviderError(_provider_message(payload, r.reason or "Authentication failed"), error_status)
    return payload if isinstance(payload, dict) else {}


def register(email: str, password: str) -> Dict[str, Any]:
    """新規ユーザーを登録する / Sign a new user up with email and password."""
    return _post("/auth/v1/signup", {"email": email, "password": password}, error_status=400)


def login(email: str, password: str) -> Dict[str, Any]:
    """パスワードでログインしセッションを返す / Exchange email and password for a session."""
    return _post(
        "/auth/v1/token?grant_type=password",
        {"email": email, "password": password},
        error_status=401,
    )
