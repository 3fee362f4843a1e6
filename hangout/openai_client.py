"""
OpenAI互換クライアントの生成と再利用。
Factory for an OpenAI-compatible client with caching.
"""

import os
from typing import Optional

import openai

_client: Optional[openai.OpenAI] = None


def get_openai_client() -> openai.OpenAI:
    """
    OpenAIクライアントを生成・再利用する
    Create and reuse a singleton OpenAI client.

    OPENAI_BASE_URL を指定すると互換API（Groqなど）も利用できます。
    Set OPENAI_BASE_URL to target a compatible provider such as Groq.
    """
    global _client
    if _client is None:
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is not set.")
        base_url = os.environ.get("OPENAI_BASE_URL") or None
        _client = openai.OpenAI(base_url=base_url, api_key=api_key)
    return _client
