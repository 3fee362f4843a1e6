import logging

from flask import Blueprint, jsonify, request

from hangout import itinerary
from hangout.routes import ResponseOrTuple, error_response
from hangout.schemas import ItineraryValidationError

logger = logging.getLogger(__name__)

# Blueprintの定義: 旅程生成API
generate_bp = Blueprint("generate", __name__)


@generate_bp.route("/api/generate-itinerary", methods=["POST"])
def generate_itinerary() -> ResponseOrTuple:
    """
    旅程生成エンドポイント

    AIやPlacesの障害はフォールバックで吸収されるため、500になるのは想定外のエラーのみです。
    Provider failures are absorbed by fallbacks; only unexpected errors return 500.
    """
    payload = request.get_json(silent=True)
    try:
        result = itinerary.generate_itinerary(payload)
    except ItineraryValidationError as e:
        return error_response("Invalid itinerary request", status=400, errors=e.errors)
    except Exception as e:
        logger.error("Error generating itinerary: %s", e, exc_info=True)
        return error_response("Failed to generate itinerary", status=500, error=str(e))
    return jsonify(result)
