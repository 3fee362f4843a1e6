import logging

from flask import Blueprint, jsonify, redirect, render_template, request

from hangout import form_state, itinerary, security
from hangout.routes import ResponseOrTuple, error_response
from hangout.schemas import ItineraryValidationError, parse_location, parse_preferences
from hangout.timeline import build_results_view

logger = logging.getLogger(__name__)

# Blueprintの定義: 2段階フォームから旅程表示までの流れ
planner_bp = Blueprint("planner", __name__)

CSRF_MESSAGE = "Invalid request origin"


@planner_bp.route("/api/preferences", methods=["POST"])
def submit_preferences() -> ResponseOrTuple:
    """1段階目: 嗜好（種類・時間・予算）を保存する"""
    if not security.is_csrf_valid(request):
        return error_response(CSRF_MESSAGE, status=403)

    try:
        preferences = parse_preferences(request.get_json(silent=True))
    except ItineraryValidationError as e:
        return error_response("Invalid preferences", status=400, errors=e.errors)

    form_state.save_preferences(preferences)
    return jsonify({"success": True, "next": "/location"})


@planner_bp.route("/api/location", methods=["POST"])
def submit_location() -> ResponseOrTuple:
    """2段階目: 場所・距離・移動手段を保存する（嗜好が先に必要）"""
    if not security.is_csrf_valid(request):
        return error_response(CSRF_MESSAGE, status=403)
    if form_state.get_preferences() is None:
        return error_response("Preferences must be submitted first", status=400)

    try:
        location_data = parse_location(request.get_json(silent=True))
    except ItineraryValidationError as e:
        return error_response("Invalid location", status=400, errors=e.errors)

    form_state.save_location(location_data)
    return jsonify({"success": True, "next": "/loading"})


@planner_bp.route("/api/plan", methods=["POST"])
def create_plan() -> ResponseOrTuple:
    """
    セッションの2つの入力から旅程を生成する

    表示した旅程はサーバー側に保存し、以降の表示では同じものを返します。
    """
    if not security.is_csrf_valid(request):
        return error_response(CSRF_MESSAGE, status=403)

    request_body = form_state.build_generate_request()
    if request_body is None:
        return error_response("Preferences and location must be submitted first", status=400)

    try:
        result = itinerary.generate_itinerary(request_body)
    except ItineraryValidationError as e:
        return error_response("Invalid itinerary request", status=400, errors=e.errors)
    except Exception as e:
        logger.error("Error generating planned itinerary: %s", e, exc_info=True)
        return error_response("Failed to generate itinerary", status=500, error=str(e))

    form_state.save_itinerary(result)
    return jsonify(result)


@planner_bp.route("/api/plan", methods=["GET"])
def get_plan() -> ResponseOrTuple:
    """
    セッションで表示した旅程とタイムライン表示用データを返す

    保存期限が切れていれば404（再生成はしない）。
    """
    result = form_state.get_itinerary()
    if result is None:
        return error_response("No itinerary in this session", status=404)
    return jsonify({"itinerary": result, "view": build_results_view(result)})


@planner_bp.route("/api/plan/reset", methods=["POST"])
def reset_plan() -> ResponseOrTuple:
    """「もう一度プランを作る」: セッションの入力と旅程を消去する"""
    if not security.is_csrf_valid(request):
        return error_response(CSRF_MESSAGE, status=403)
    form_state.clear()
    return jsonify({"status": "reset"})


@planner_bp.route("/results")
def results():
    """旅程をタイムラインとおすすめのカルーセルで表示する（なければトップへ）"""
    result = form_state.get_itinerary()
    if result is None:
        return redirect("/")
    return render_template("results.html", view=build_results_view(result))
