"""
機能ごとのBlueprint。
Feature blueprints.
"""

from typing import Tuple, Union

from flask import Response, jsonify

ResponseOrTuple = Union[Response, Tuple[Response, int]]


def error_response(message: str, status: int = 400, **extra) -> ResponseOrTuple:
    """エラーレスポンスを返すヘルパー関数"""
    return jsonify({"message": message, **extra}), status
