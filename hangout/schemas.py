"""
リクエストとAI出力のPydanticモデル。
Pydantic models for planner requests and structured model output.
"""

from typing import Annotated, Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

ModelT = TypeVar("ModelT", bound=BaseModel)


class ItineraryValidationError(ValueError):
    """
    リクエストの項目が欠落・型不一致の場合に送出される
    Raised when request fields are missing or mistyped.
    """

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class PreferenceSelection(BaseModel):
    """1段階目のフォーム: 種類・時間・予算 / First form step."""
    hangoutTypes: List[str] = Field(min_length=1, description="遊びの種類")
    duration: NonEmptyStr = Field(description="所要時間のラベル")
    budget: NonEmptyStr = Field(description="予算のラベル")


class LocationSelection(BaseModel):
    """2段階目のフォーム: 場所・距離・移動手段 / Second form step."""
    location: NonEmptyStr = Field(description="都市や地域の名前")
    distance: NonEmptyStr = Field(description="移動距離のラベル")
    transportation: List[str] = Field(description="移動手段のタグ")


class GenerateItineraryRequest(BaseModel):
    preferences: PreferenceSelection
    locationData: LocationSelection


class ItineraryActivity(BaseModel):
    """
    LLMからの構造化出力のためのPydanticモデル（アクティビティ1件）
    One activity in the model's structured output.

    数値の評価や価格は文字列に変換します。
    Numeric ratings and prices are coerced to strings.
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[str] = None
    time: str = ""
    title: NonEmptyStr
    description: str = ""
    location: str = ""
    image: str = ""
    price: str = ""
    rating: str = ""
    timeOfDay: str = ""
    type: str = ""
    justification: Optional[str] = None
    directionsUrl: Optional[str] = None
    googleMapsLink: Optional[str] = None


class Recommendation(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[str] = None
    title: NonEmptyStr
    description: str = ""
    image: str = ""
    rating: str = ""
    duration: str = ""


class ItineraryResponse(BaseModel):
    """
    LLMからの構造化出力のためのPydanticモデル（旅程全体）
    Pydantic model for the model's structured itinerary output.
    """
    title: NonEmptyStr
    description: NonEmptyStr
    location: str = ""
    activities: List[ItineraryActivity] = Field(min_length=1)
    recommendations: List[Recommendation] = Field(default_factory=list)


class SavedItineraryPayload(BaseModel):
    """保存リクエストの必須項目 / Required fields for saving an itinerary."""
    title: NonEmptyStr
    description: NonEmptyStr
    location: NonEmptyStr
    activities: List[Any]
    recommendations: List[Any]


def format_errors(error: ValidationError, prefix: str = "") -> List[str]:
    """
    ValidationError を "preferences.hangoutTypes: ..." 形式の文字列に変換する
    Flatten a ValidationError into "path: message" strings.
    """
    messages = []
    for item in error.errors():
        path = ".".join(str(part) for part in item["loc"])
        if prefix:
            path = f"{prefix}.{path}" if path else prefix
        messages.append(f"{path}: {item['msg']}" if path else item["msg"])
    return messages


def parse_model(model: Type[ModelT], data: Any, prefix: str = "") -> ModelT:
    """モデルで検証し、失敗時は ItineraryValidationError を送出する"""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ItineraryValidationError(format_errors(e, prefix)) from e


def parse_preferences(data: Any) -> Dict[str, Any]:
    return parse_model(PreferenceSelection, data, "preferences").model_dump()


def parse_location(data: Any) -> Dict[str, Any]:
    return parse_model(LocationSelection, data, "locationData").model_dump()


def validate_generate_request(payload: Any) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    旅程生成リクエストを検証し、余分な項目を除いた (preferences, locationData) を返す
    Validate a generation request and return cleaned (preferences, locationData).

    不正な場合は ItineraryValidationError を送出します。
    Raises ItineraryValidationError listing every problem found.
    """
    if not isinstance(payload, dict):
        raise ItineraryValidationError(["request body must be a JSON object"])

    request = parse_model(GenerateItineraryRequest, payload)
    return request.preferences.model_dump(), request.locationData.model_dump()


def missing_itinerary_fields(itinerary: Any) -> List[str]:
    """
    保存に必要な項目のうち欠けているものを返す
    Return the required itinerary fields that are missing or invalid.
    """
    if not isinstance(itinerary, dict):
        return list(SavedItineraryPayload.model_fields)
    try:
        SavedItineraryPayload.model_validate(itinerary)
    except ValidationError as e:
        invalid = {item["loc"][0] for item in e.errors() if item["loc"]}
        return [field for field in SavedItineraryPayload.model_fields if field in invalid]
    return []
