"""
写真の取得とストック画像、経路リンク生成を検証するテスト。
Tests for photo lookup, stock images and navigation links.
"""
import unittest
from unittest import mock
from urllib.parse import parse_qs, urlparse

import requests

from hangout import constants, directions, places


def _response(payload, status_code=200):
    response = mock.Mock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code}")
    else:
        response.raise_for_status.return_value = None
    return response


class PlacesLookupTests(unittest.TestCase):
    def setUp(self):
        patcher = mock.patch.object(constants, "GOOGLE_MAPS_API_KEY", "test-key")
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_returns_photo_url_for_first_result_with_photo(self):
        payload = {
            "status": "OK",
            "results": [
                {"name": "No photo"},
                {"name": "Karim's", "photos": [{"photo_reference": "ref-123"}]},
            ],
        }
        with mock.patch.object(places.requests, "get", return_value=_response(payload)) as get:
            url = places.lookup_place_photo("Karim's, Old Delhi")

        self.assertIn("photo_reference=ref-123", url)
        self.assertIn("key=test-key", url)
        self.assertEqual(get.call_args.kwargs["params"]["query"], "Karim's, Old Delhi")

    def test_transport_error_returns_none(self):
        with mock.patch.object(places.requests, "get", side_effect=requests.ConnectionError("down")):
            self.assertIsNone(places.lookup_place_photo("Anywhere"))

    def test_http_error_returns_none(self):
        with mock.patch.object(places.requests, "get", return_value=_response({}, status_code=403)):
            self.assertIsNone(places.lookup_place_photo("Anywhere"))

    def test_denied_status_returns_none(self):
        payload = {"status": "REQUEST_DENIED", "results": []}
        with mock.patch.object(places.requests, "get", return_value=_response(payload)):
            self.assertIsNone(places.lookup_place_photo("Anywhere"))

    def test_malformed_bodies_return_none(self):
        bodies = [
            ["not", "a", "dict"],
            {"status": "OK", "results": "nope"},
            {"status": "OK", "results": ["not-a-place"]},
            {"status": "OK", "results": [{"photos": ["not-a-photo"]}]},
            {"status": "OK", "results": [{"photos": [{"photo_reference": 42}]}]},
        ]
        for body in bodies:
            with self.subTest(body=body):
                with mock.patch.object(places.requests, "get", return_value=_response(body)):
                    self.assertIsNone(places.lookup_place_photo("Anywhere"))

    def test_no_api_key_skips_network(self):
        with mock.patch.object(constants, "GOOGLE_MAPS_API_KEY", ""), \
                mock.patch.object(places.requests, "get") as get:
            self.assertIsNone(places.lookup_place_photo("Anywhere"))
        get.assert_not_called()

    def test_resolve_image_falls_back_to_category_stock(self):
        with mock.patch.object(places.requests, "get", side_effect=requests.Timeout("slow")):
            image = places.resolve_image("Blue Tokai", "Sector 18, Noida", places.CAFE_ATMOSPHERE)
        self.assertIn(image, places.STOCK_IMAGES[places.CAFE_ATMOSPHERE])


class StockImageTests(unittest.TestCase):
    def test_category_mapping(self):
        self.assertEqual(places.category_for_activity_type("Eating"), places.RESTAURANT_DINING)
        self.assertEqual(places.category_for_activity_type("cafe"), places.CAFE_ATMOSPHERE)
        self.assertEqual(places.category_for_activity_type("shopping"), places.PEOPLE_ENJOYING_OUTINGS)
        self.assertEqual(places.category_for_activity_type(None), places.PEOPLE_ENJOYING_OUTINGS)

    def test_same_seed_same_image(self):
        first = places.stock_image(places.HISTORICAL_LANDMARKS, seed="India Gate")
        second = places.stock_image(places.HISTORICAL_LANDMARKS, seed="India Gate")
        self.assertEqual(first, second)

    def test_unknown_category_uses_outings(self):
        image = places.stock_image("underwater", seed="x")
        self.assertIn(image, places.STOCK_IMAGES[places.PEOPLE_ENJOYING_OUTINGS])


class DirectionsTests(unittest.TestCase):
    def test_travel_mode(self):
        self.assertEqual(directions.travel_mode_for(["Public Transit", "Walking"]), "transit")
        self.assertEqual(directions.travel_mode_for(["Rideshare"]), "driving")
        self.assertEqual(directions.travel_mode_for(["Hoverboard"]), "walking")
        self.assertEqual(directions.travel_mode_for([]), "walking")

    def test_links_chain_consecutive_stops(self):
        activities = [
            {"title": "A", "location": "Stop A"},
            {"title": "B", "location": "Stop B"},
            {"title": "C", "location": "Stop C"},
        ]
        directions.attach_navigation_links(activities, "Jaipur", ["Biking"])

        origins = [parse_qs(urlparse(a["directionsUrl"]).query)["origin"][0] for a in activities]
        destinations = [parse_qs(urlparse(a["directionsUrl"]).query)["destination"][0] for a in activities]
        self.assertEqual(origins, ["Jaipur city centre", "Stop A", "Stop B"])
        self.assertEqual(destinations, ["Stop A", "Stop B", "Stop C"])
        self.assertEqual(parse_qs(urlparse(activities[0]["directionsUrl"]).query)["travelmode"], ["bicycling"])
        self.assertEqual(
            parse_qs(urlparse(activities[2]["googleMapsLink"]).query)["query"], ["C, Stop C"]
        )


if __name__ == "__main__":
    unittest.main()
