"""
旅程生成APIを呼び出すクライアント。
HTTP client for the itinerary generation endpoint.
"""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate-itinerary"


class ItineraryRequestError(Exception):
    """旅程を取得できなかった場合の致命的エラー / Fatal failure to obtain an itinerary."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ItineraryClient:
    """
    嗜好と場所の2つの入力を1リクエストにまとめて送信する
    Send the preference and location selections as one request.
    """

    def __init__(self, base_url: str, timeout: float = 60.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate_itinerary(self, preferences: Dict[str, Any], location_data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            r = self.session.post(
                f"{self.base_url}{GENERATE_PATH}",
                json={"preferences": preferences, "locationData": location_data},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ItineraryRequestError(f"Could not reach itinerary service: {e}") from e

        try:
            payload = r.json()
        except ValueError:
            payload = None

        if not r.ok:
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.error("Itinerary request failed with %s: %s", r.status_code, message)
            raise ItineraryRequestError(message or f"HTTP {r.status_code}", status=r.status_code)
        if not isinstance(payload, dict):
            raise ItineraryRequestError("Itinerary service returned a non-JSON response", status=r.status_code)
        return payload
