"""
オリジン検証・セキュリティヘッダー・Bearerトークンからの利用者特定。
Origin checks, security headers and caller identity from bearer tokens.
"""

import base64
import binascii
import json
import logging
import os
import time
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from flask import Flask, Request, Response, has_request_context
from flask import request as flask_request
from flask.sessions import SecureCookieSessionInterface

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_ORIGINS = ("http://localhost:5173", "http://localhost:5000")


def get_allowed_origins() -> List[str]:
    """
    許可されたオリジンのリストを取得する

    環境変数 `ALLOWED_ORIGINS` とデフォルト値をマージして返します。
    """
    frontend_origin = os.getenv("FRONTEND_ORIGIN", DEFAULT_ALLOWED_ORIGINS[0])
    raw_origins = os.getenv("ALLOWED_ORIGINS", frontend_origin).split(",")
    allowed = [origin.strip() for origin in raw_origins if origin.strip()]
    for origin in DEFAULT_ALLOWED_ORIGINS:
        if origin not in allowed:
            allowed.append(origin)
    return allowed


def _origin_from_referer(referer: str) -> str:
    try:
        parsed = urlparse(referer)
    except ValueError:
        return ""
    if parsed.scheme and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}"
    return ""


def is_csrf_valid(request: Request) -> bool:
    """
    CSRF（クロスサイトリクエストフォージェリ）検証を行う

    1. リクエストメソッドが安全な場合（GET, HEAD, OPTIONS）はスルー
    2. Originヘッダーが許可リストにあるか確認
    3. Originがない場合、Refererヘッダーを確認
    """
    if request.method not in ("POST", "PUT", "PATCH", "DELETE"):
        return True

    allowed = get_allowed_origins()
    origin = request.headers.get("Origin")
    if origin:
        return origin in allowed

    referer = request.headers.get("Referer")
    if referer:
        referer_origin = _origin_from_referer(referer)
        return referer_origin in allowed if referer_origin else False

    allow_missing = os.getenv("ALLOW_MISSING_ORIGIN", "false").lower() in ("1", "true", "yes")
    return allow_missing


def should_set_secure_cookie(request: Request) -> bool:
    """
    CookieにSecure属性を付与すべきか判定する

    `COOKIE_SECURE` が指定されていればそれに従い、なければHTTPS接続や
    localhost 以外のホストでTrueを返します。
    """
    env_value = os.getenv("COOKIE_SECURE", "").strip().lower()
    if env_value:
        return env_value in ("1", "true", "yes")

    if request.is_secure:
        return True

    host = request.headers.get("Host", "")
    if "localhost" in host or "127.0.0.1" in host:
        return False

    return True


class PlannerSessionInterface(SecureCookieSessionInterface):
    """
    署名付きCookieセッションのSecure属性をリクエストごとに決める
    Signed-cookie sessions whose Secure flag is decided per request.
    """

    def get_cookie_secure(self, app: Flask) -> bool:
        if has_request_context():
            return should_set_secure_cookie(flask_request)
        return super().get_cookie_secure(app)


def build_csp() -> str:
    """
    Content Security Policy (CSP) ヘッダー文字列を構築する

    旅程の写真（Unsplash / Google Places）の読み込みを許可します。
    """
    allowed = get_allowed_origins()
    connect_sources = ["'self'"] + allowed
    img_sources = [
        "'self'",
        "data:",
        "https://images.unsplash.com",
        "https://maps.googleapis.com",
        "https://*.googleusercontent.com",
    ]
    return (
        "default-src 'self'; "
        f"connect-src {' '.join(connect_sources)}; "
        "style-src 'self' 'unsafe-inline'; "
        "script-src 'self'; "
        f"img-src {' '.join(img_sources)}; "
        "frame-ancestors 'none'; "
        "base-uri 'self'; "
        "form-action 'self';"
    )


def apply_security_headers(response: Response) -> Response:
    """レスポンスに各種セキュリティヘッダーを付与する"""
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")

    csp = os.getenv("CONTENT_SECURITY_POLICY") or build_csp()
    response.headers.setdefault("Content-Security-Policy", csp)

    if os.getenv("ENABLE_HSTS", "true").lower() in ("1", "true", "yes"):
        response.headers.setdefault(
            "Strict-Transport-Security",
            "max-age=63072000; includeSubDomains; preload",
        )
    return response


def bearer_token(request: Request) -> Optional[str]:
    """Authorizationヘッダーからトークンを取り出す / Extract the bearer token, if any."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def decode_token_payload(token: str) -> Optional[Dict[str, Any]]:
    """
    JWTのペイロード部分をデコードする（署名は認証基盤側で検証済みとみなす）
    Decode the JWT payload segment; the identity provider owns signature checks.

    形式が不正な場合は None を返します。
    Returns None for anything that does not parse.
    """
    parts = token.split(".")
    if len(parts) != 3 or not parts[1]:
        return None
    segment = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        payload = json.loads(base64.urlsafe_b64decode(segment.encode("ascii")))
    except (binascii.Error, UnicodeError, ValueError):
        return None
    return payload if isinstance(payload, dict) else None


def get_user_id(request: Request) -> Optional[str]:
    """
    リクエストの利用者IDを返す（未認証なら None）
    Return the caller's user id, or None when unauthenticated.

    トークンなし・解析不能・sub なし・有効期限切れはすべて未認証扱いです。
    Missing, unparsable, subject-less and expired tokens are all unauthenticated.
    """
    token = bearer_token(request)
    if not token:
        return None
    payload = decode_token_payload(token)
    if not payload:
        logger.info("Rejected unparsable bearer token")
        return None

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None

    expires_at = payload.get("exp")
    if isinstance(expires_at, (int, float)) and expires_at < time.time():
        logger.info("Rejected expired bearer token for %s", subject)
        return None
    return subject
