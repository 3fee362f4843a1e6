"""
旅程生成用のプロンプト。
Prompt templates for itinerary generation.
"""

from typing import Any, Dict, List

SYSTEM_PROMPT = (
    "You are an expert travel planner with deep knowledge of locations worldwide. "
    "You create detailed, realistic itineraries based on user preferences. "
    "You always answer with a single JSON object and nothing else."
)

ITINERARY_PROMPT_TEMPLATE = """
Generate a personalized hangout itinerary for {location}.

Preferences:
- Activities: {hangout_types}
- Duration: {duration}
- Budget: {budget}
- Maximum travel distance: {distance}
- Transportation: {transportation}

Return strict JSON with exactly this shape:
{{
  "title": "string",
  "description": "string",
  "location": "string",
  "activities": [
    {{
      "id": "act1",
      "time": "9:00 AM",
      "title": "exact venue name",
      "description": "1-2 engaging sentences",
      "location": "exact street address and neighborhood",
      "price": "$ | $$ | $$$ (or the local currency symbol)",
      "rating": "4.8 ★",
      "timeOfDay": "morning | afternoon | evening",
      "type": "exploring | eating | historical | cafe",
      "justification": "one sentence on why it fits these preferences"
    }}
  ],
  "recommendations": [
    {{
      "id": "rec1",
      "title": "string",
      "description": "string",
      "rating": "4.7 ★",
      "duration": "2-3 hours"
    }}
  ]
}}

Rules:
- Use real, currently operating venues with their exact names and addresses.
- Order activities chronologically; keep stops within the travel distance.
- timeOfDay must be one of "morning", "afternoon" or "evening".
- Include exactly three recommendations for similar adventures.
- Do not include image URLs; they are added later.
"""


def _join(values: List[str]) -> str:
    return ", ".join(values) if values else "No preference"


def build_itinerary_prompt(preferences: Dict[str, Any], location_data: Dict[str, Any]) -> str:
    """ユーザーの選択内容をテンプレートに埋め込む / Fill the template with the user's selections."""
    return ITINERARY_PROMPT_TEMPLATE.format(
        location=location_data["location"],
        hangout_types=_join(preferences["hangoutTypes"]),
        duration=preferences["duration"],
        budget=preferences["budget"],
        distance=location_data["distance"],
        transportation=_join(location_data["transportation"]),
    ).strip()


def build_messages(preferences: Dict[str, Any], location_data: Dict[str, Any]) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_itinerary_prompt(preferences, location_data)},
    ]
