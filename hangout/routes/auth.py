import logging

from flask import Blueprint, jsonify, request

from hangout import auth_provider
from hangout.routes import ResponseOrTuple, error_response

logger = logging.getLogger(__name__)

# Blueprintの定義: 認証の委譲
auth_bp = Blueprint("auth", __name__)


def _credentials():
    data = request.get_json(silent=True) or {}
    email = data.get("email")
    password = data.get("password")
    if not isinstance(email, str) or not email.strip() or not isinstance(password, str) or not password:
        return None
    return email.strip(), password


@auth_bp.route("/api/register", methods=["POST"])
def register() -> ResponseOrTuple:
    """外部認証基盤でユーザー登録する / Register through the identity provider."""
    credentials = _credentials()
    if credentials is None:
        return error_response("Email and password are required", status=400)
    try:
        return jsonify(auth_provider.register(*credentials))
    except auth_provider.AuthProviderError as e:
        logger.info("Registration rejected: %s", e.message)
        return error_response(e.message, status=e.status)


@auth_bp.route("/api/login", methods=["POST"])
def login() -> ResponseOrTuple:
    """外部認証基盤でログインする / Log in through the identity provider."""
    credentials = _credentials()
    if credentials is None:
        return error_response("Email and password are required", status=400)
    try:
        return jsonify(auth_provider.login(*credentials))
    except auth_provider.AuthProviderError as e:
        logger.info("Login rejected: %s", e.message)
        return error_response(e.message, status=e.status)
