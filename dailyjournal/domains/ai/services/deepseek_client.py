"""Thin client for the DeepSeek chat-completion endpoint."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import requests
from flask import current_app, has_app_context

from dailyjournal.core.errors import ExternalServiceError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_MODEL = "deepseek-chat"
DEFAULT_TIMEOUT_SECONDS = 60.0

MISSING_API_KEY = "未设置DeepSeek API密钥，请先在设置中配置"


class DeepSeekClient:
    """Send a chat message list and return the assistant's reply text.

    Failures are not retried: transport errors, non-2xx statuses and
    malformed envelopes all raise ``ExternalServiceError``.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ValidationError(MISSING_API_KEY)
        config = current_app.config if has_app_context() else {}
        self.api_key = api_key.strip()
        self.base_url = (base_url or config.get("DEEPSEEK_API_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.model = model or config.get("DEEPSEEK_MODEL") or DEFAULT_MODEL
        self.timeout = timeout or config.get("DEEPSEEK_TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_SECONDS

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def chat(
        self,
        messages: List[Dict[str, str]],
        *,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        url = f"{self.base_url}/chat/completions"
        try:
            resp = requests.post(url, json=payload, headers=self._headers(), timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json()
        except requests.RequestException as e:
            logger.error("DeepSeek request failed: %s", e)
            raise ExternalServiceError(f"DeepSeek request failed: {e}") from e
        except ValueError as e:
            logger.error("DeepSeek returned a non-JSON body: %s", e)
            raise ExternalServiceError("DeepSeek returned a non-JSON body") from e

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error("Unexpected DeepSeek response envelope: %r", body)
            raise ExternalServiceError("Unexpected DeepSeek response envelope") from e
        if not isinstance(content, str):
            raise ExternalServiceError("DeepSeek reply content is not text")
        return content
