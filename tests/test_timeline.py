import unittest

from hangout.timeline import build_results_view, group_by_time_of_day


class TimelineTests(unittest.TestCase):
    def test_groups_keep_generation_order(self):
        activities = [
            {"id": "act1", "timeOfDay": "evening"},
            {"id": "act2", "timeOfDay": "morning"},
            {"id": "act3", "timeOfDay": "evening"},
            {"id": "act4", "timeOfDay": "afternoon"},
        ]
        timeline = group_by_time_of_day(activities)

        self.assertEqual(list(timeline), ["morning", "afternoon", "evening"])
        self.assertEqual([a["id"] for a in timeline["morning"]], ["act2"])
        self.assertEqual([a["id"] for a in timeline["afternoon"]], ["act4"])
        self.assertEqual([a["id"] for a in timeline["evening"]], ["act1", "act3"])

    def test_unknown_time_of_day_is_dropped(self):
        timeline = group_by_time_of_day([{"id": "act1", "timeOfDay": "night"}, {"id": "act2"}])
        self.assertEqual(timeline, {"morning": [], "afternoon": [], "evening": []})

    def test_results_view(self):
        view = build_results_view(
            {
                "title": "Day",
                "description": "Nice",
                "location": "Delhi",
                "activities": [{"id": "act1", "timeOfDay": "morning"}],
                "recommendations": [{"id": "rec1"}],
            }
        )
        self.assertEqual(view["title"], "Day")
        self.assertEqual(view["location"], "Delhi")
        self.assertEqual(len(view["timeline"]["morning"]), 1)
        self.assertEqual(view["recommendations"], [{"id": "rec1"}])


if __name__ == "__main__":
    unittest.main()
