import logging

from flask import Blueprint, jsonify, request

from hangout import security, storage
from hangout.routes import ResponseOrTuple, error_response
from hangout.schemas import missing_itinerary_fields

logger = logging.getLogger(__name__)

# Blueprintの定義: 保存済み旅程（要認証）
saved_bp = Blueprint("saved", __name__)

UNAUTHORIZED_MESSAGE = "Authentication required"


@saved_bp.route("/api/itineraries", methods=["POST"])
def save_itinerary() -> ResponseOrTuple:
    """
    表示中の旅程を保存する

    ユーザーIDはBearerトークンから取得します。
    """
    user_id = security.get_user_id(request)
    if not user_id:
        return error_response(UNAUTHORIZED_MESSAGE, status=401)

    itinerary = request.get_json(silent=True)
    missing = missing_itinerary_fields(itinerary)
    if missing:
        return error_response("Missing required itinerary fields", status=400, fields=missing)

    try:
        storage.save_itinerary(user_id, itinerary)
    except Exception as e:
        logger.error("Error saving itinerary: %s", e, exc_info=True)
        return error_response(str(e), status=500)
    return jsonify({"success": True})


@saved_bp.route("/api/itineraries", methods=["GET"])
def list_itineraries() -> ResponseOrTuple:
    """自分の保存済み旅程を新しい順に返す"""
    user_id = security.get_user_id(request)
    if not user_id:
        return error_response(UNAUTHORIZED_MESSAGE, status=401)

    try:
        itineraries = storage.list_itineraries(user_id)
    except Exception as e:
        logger.error("Error listing itineraries: %s", e, exc_info=True)
        return error_response(str(e), status=500)
    return jsonify({"itineraries": itineraries})


@saved_bp.route("/api/itineraries/<itinerary_id>", methods=["DELETE"])
def delete_itinerary(itinerary_id: str) -> ResponseOrTuple:
    """
    自分の旅程を削除する

    他人の旅程や存在しないIDでも成功を返します（冪等）。
    """
    user_id = security.get_user_id(request)
    if not user_id:
        return error_response(UNAUTHORIZED_MESSAGE, status=401)

    try:
        storage.delete_itinerary(user_id, itinerary_id)
    except Exception as e:
        logger.error("Error deleting itinerary: %s", e, exc_info=True)
        return error_response(str(e), status=500)
    return jsonify({"success": True})
