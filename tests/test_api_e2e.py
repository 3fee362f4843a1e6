"""
主要APIエンドポイントのE2E挙動を検証するテスト。
E2E tests for the application's main API endpoints.
"""
import base64
import json
import os
import time
import unittest
from unittest import mock

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from hangout import constants, itinerary, redis_client  # noqa: E402
from hangout.app import create_app  # noqa: E402
from hangout.database import SessionLocal, init_db  # noqa: E402
from hangout.models import SavedItinerary  # noqa: E402

ORIGIN = {"Origin": "http://localhost:5173"}


class _DummyRedisBackend:
    """
    テスト用の最小Redisバックエンド（インメモリ）実装。
    Minimal in-memory Redis backend used for E2E stubbing.
    """
    def __init__(self):
        self.store = {}

    def setex(self, key, _ttl, value):
        self.store[key] = value

    def get(self, key):
        return self.store.get(key)

    def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)


def _token(user_id):
    """
    署名部分はダミーのJWTを作る
    Build a JWT-shaped bearer token for the given subject.
    """
    def segment(data):
        raw = json.dumps(data).encode("utf-8")
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    payload = {"sub": user_id, "exp": time.time() + 3600}
    return f"{segment({'alg': 'HS256'})}.{segment(payload)}.sig"


def _auth(user_id):
    return {"Authorization": f"Bearer {_token(user_id)}"}


PREFERENCES = {"hangoutTypes": ["Eating"], "duration": "Half day", "budget": "Mid-range"}
LOCATION = {"location": "Noida", "distance": "Moderate (up to 5 miles)", "transportation": ["Walking"]}


def _saved(title="My Day"):
    return {
        "title": title,
        "description": "A day out",
        "location": "Noida",
        "activities": [{"id": "act1", "title": "Cafe", "timeOfDay": "morning"}],
        "recommendations": [],
    }


def _ai_output(title):
    return {
        "title": title,
        "description": "Street food around Sector 18.",
        "location": "Noida",
        "activities": [
            {
                "time": "1:00 PM",
                "title": "Chaat Corner",
                "description": "Spicy snacks.",
                "location": "Sector 18, Noida",
                "price": "₹",
                "rating": 4.5,
                "timeOfDay": "afternoon",
                "type": "eating",
            }
        ],
        "recommendations": [],
    }


class ApiE2ETests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()

    def setUp(self):
        self.original_client = redis_client.redis_client
        self.backend = _DummyRedisBackend()
        redis_client.redis_client = self.backend

        for name, value in (("AI_GENERATION_ENABLED", False), ("GOOGLE_MAPS_API_KEY", "")):
            patcher = mock.patch.object(constants, name, value)
            patcher.start()
            self.addCleanup(patcher.stop)

        db = SessionLocal()
        try:
            db.query(SavedItinerary).delete()
            db.commit()
        finally:
            db.close()

        self.app = create_app({"TESTING": True})
        self.client = self.app.test_client()

    def tearDown(self):
        redis_client.redis_client = self.original_client

    # --- generation ---

    def test_generate_itinerary_noida_fallback(self):
        response = self.client.post(
            "/api/generate-itinerary",
            json={"preferences": PREFERENCES, "locationData": LOCATION},
        )
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertEqual(body["location"], "Noida")
        self.assertEqual(len(body["activities"]), 6)
        for activity in body["activities"]:
            self.assertTrue(activity["image"])
            self.assertIn("directionsUrl", activity)
            self.assertIn("googleMapsLink", activity)

    def test_generate_itinerary_repeat_is_identical(self):
        request_body = {"preferences": PREFERENCES, "locationData": LOCATION}
        first = self.client.post("/api/generate-itinerary", json=request_body)
        second = self.client.post("/api/generate-itinerary", json=request_body)
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.data, second.data)
        self.assertEqual(len(self.backend.store), 1)

    def test_generate_itinerary_invalid_request(self):
        response = self.client.post("/api/generate-itinerary", json={"preferences": PREFERENCES})
        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertEqual(body["message"], "Invalid itinerary request")
        self.assertIn("locationData: Field required", body["errors"])

    def test_generate_itinerary_non_json_body(self):
        response = self.client.post("/api/generate-itinerary", data="hello", content_type="text/plain")
        self.assertEqual(response.status_code, 400)

    # --- saved itineraries ---

    def test_saved_itineraries_require_auth(self):
        self.assertEqual(self.client.get("/api/itineraries").status_code, 401)
        self.assertEqual(self.client.post("/api/itineraries", json=_saved()).status_code, 401)
        self.assertEqual(self.client.delete("/api/itineraries/1").status_code, 401)
        response = self.client.get("/api/itineraries", headers={"Authorization": "Bearer nonsense"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["message"], "Authentication required")

    def test_save_and_list_newest_first(self):
        headers = _auth("user-a")
        self.assertEqual(
            self.client.post("/api/itineraries", json=_saved("First"), headers=headers).get_json(),
            {"success": True},
        )
        self.client.post("/api/itineraries", json=_saved("Second"), headers=headers)

        body = self.client.get("/api/itineraries", headers=headers).get_json()
        titles = [item["title"] for item in body["itineraries"]]
        self.assertEqual(titles, ["Second", "First"])
        self.assertEqual(body["itineraries"][0]["userId"], "user-a")
        self.assertEqual(body["itineraries"][0]["activities"][0]["id"], "act1")

        other = self.client.get("/api/itineraries", headers=_auth("user-b")).get_json()
        self.assertEqual(other["itineraries"], [])

    def test_save_missing_fields(self):
        payload = _saved()
        del payload["recommendations"]
        payload["title"] = ""
        response = self.client.post("/api/itineraries", json=payload, headers=_auth("user-a"))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(sorted(response.get_json()["fields"]), ["recommendations", "title"])

    def test_delete_is_scoped_to_owner(self):
        self.client.post("/api/itineraries", json=_saved(), headers=_auth("user-a"))
        saved_id = self.client.get("/api/itineraries", headers=_auth("user-a")).get_json()["itineraries"][0]["id"]

        response = self.client.delete(f"/api/itineraries/{saved_id}", headers=_auth("user-b"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"success": True})
        remaining = self.client.get("/api/itineraries", headers=_auth("user-a")).get_json()["itineraries"]
        self.assertEqual(len(remaining), 1)

        response = self.client.delete(f"/api/itineraries/{saved_id}", headers=_auth("user-a"))
        self.assertEqual(response.get_json(), {"success": True})
        remaining = self.client.get("/api/itineraries", headers=_auth("user-a")).get_json()["itineraries"]
        self.assertEqual(remaining, [])

    def test_delete_unknown_id_succeeds(self):
        response = self.client.delete("/api/itineraries/not-a-number", headers=_auth("user-a"))
        self.assertEqual(response.status_code, 200)

    # --- identity delegation ---

    def test_register_requires_credentials(self):
        response = self.client.post("/api/register", json={"email": "a@example.com"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["message"], "Email and password are required")

    def test_login_passes_provider_error_through(self):
        from hangout import auth_provider

        error = auth_provider.AuthProviderError("Invalid login credentials", 401)
        with mock.patch.object(auth_provider, "login", side_effect=error):
            response = self.client.post("/api/login", json={"email": "a@example.com", "password": "x"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["message"], "Invalid login credentials")

    def test_register_returns_provider_payload(self):
        from hangout import auth_provider

        with mock.patch.object(auth_provider, "register", return_value={"id": "user-1"}) as register:
            response = self.client.post("/api/register", json={"email": " a@example.com ", "password": "pw"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"id": "user-1"})
        register.assert_called_once_with("a@example.com", "pw")

    # --- planner form flow ---

    def test_planner_flow(self):
        response = self.client.post("/api/preferences", json=PREFERENCES, headers=ORIGIN)
        self.assertEqual(response.status_code, 200)
        response = self.client.post("/api/location", json=LOCATION, headers=ORIGIN)
        self.assertEqual(response.status_code, 200)

        response = self.client.post("/api/plan", headers=ORIGIN)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["location"], "Noida")

        body = self.client.get("/api/plan").get_json()
        self.assertEqual(body["itinerary"]["title"], response.get_json()["title"])
        timeline = body["view"]["timeline"]
        self.assertEqual(sum(len(items) for items in timeline.values()), 6)

        page = self.client.get("/results")
        self.assertEqual(page.status_code, 200)
        self.assertIn(body["itinerary"]["title"], page.get_data(as_text=True))

        reset = self.client.post("/api/plan/reset", headers=ORIGIN)
        self.assertEqual(reset.get_json(), {"status": "reset"})
        self.assertEqual(self.client.get("/api/plan").status_code, 404)
        self.assertEqual(self.client.get("/results").status_code, 302)

    def test_plan_is_returned_unchanged_after_cache_expiry(self):
        """
        EN: Test the session keeps the itinerary it was shown even when the generation cache expires.
        JP: 生成キャッシュが切れてもセッションには表示した旅程がそのまま返ることを検証するテスト。
        """
        outputs = [json.dumps(_ai_output("First plan")), json.dumps(_ai_output("Second plan"))]
        with mock.patch.object(constants, "AI_GENERATION_ENABLED", True), \
                mock.patch.object(itinerary, "_invoke_model", side_effect=outputs) as invoke:
            self.client.post("/api/preferences", json=PREFERENCES, headers=ORIGIN)
            self.client.post("/api/location", json=LOCATION, headers=ORIGIN)
            created = self.client.post("/api/plan", headers=ORIGIN)
            for key in [key for key in self.backend.store if key.startswith("itinerary:")]:
                del self.backend.store[key]

            response = self.client.get("/api/plan")

        self.assertEqual(created.get_json()["title"], "First plan")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["itinerary"]["title"], "First plan")
        self.assertEqual(invoke.call_count, 1)

    def test_expired_plan_is_not_regenerated(self):
        with mock.patch.object(itinerary, "_invoke_model") as invoke:
            self.client.post("/api/preferences", json=PREFERENCES, headers=ORIGIN)
            self.client.post("/api/location", json=LOCATION, headers=ORIGIN)
            self.client.post("/api/plan", headers=ORIGIN)
            self.backend.store.clear()

            self.assertEqual(self.client.get("/api/plan").status_code, 404)
            self.assertEqual(self.client.get("/results").status_code, 302)

        invoke.assert_not_called()
        self.assertEqual(self.backend.store, {})

    def test_location_before_preferences(self):
        response = self.client.post("/api/location", json=LOCATION, headers=ORIGIN)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["message"], "Preferences must be submitted first")

    def test_plan_without_inputs(self):
        self.assertEqual(self.client.post("/api/plan", headers=ORIGIN).status_code, 400)

    def test_invalid_preferences(self):
        response = self.client.post("/api/preferences", json={"hangoutTypes": []}, headers=ORIGIN)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["message"], "Invalid preferences")

    def test_planner_rejects_foreign_origin(self):
        response = self.client.post(
            "/api/preferences", json=PREFERENCES, headers={"Origin": "https://evil.example"}
        )
        self.assertEqual(response.status_code, 403)

    # --- misc ---

    def test_health_and_security_headers(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.get_json(), {"status": "ok"})
        self.assertEqual(response.headers.get("X-Content-Type-Options"), "nosniff")


if __name__ == "__main__":
    unittest.main()
