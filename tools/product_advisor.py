"""Gemini-backed product advisor chat."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from logic.safety import system_instruction
from site_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)
REQUEST_TIMEOUT_SECONDS = 14.0
GENERATION_CONFIG = {
    "max_output_tokens": 1000,
    "temperature": 0.7,
    "top_p": 1,
    "top_k": 32,
}


class AdvisorError(RuntimeError):
    """Raised when the advisor model cannot produce a reply."""


class AdvisorTimeoutError(AdvisorError):
    """Raised when the advisor model does not answer in time."""


def _message_text(message: Dict[str, Any]) -> str:
    return "".join(str(part.get("text", "")) for part in message.get("parts", []))


class ProductAdvisor:
    """Answers shopper questions using the catalogue as grounding data."""

    def __init__(
        self,
        model_name: str,
        brand_name: str,
        api_key: str | None = None,
        model_factory: Optional[Callable[[str], Any]] = None,
        timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.model_name = model_name
        self.brand_name = brand_name
        self.timeout_seconds = timeout_seconds
        if api_key:
            genai.configure(api_key=api_key)
        self._model_factory = model_factory or self._default_model

    def _default_model(self, instruction: str) -> Any:
        return genai.GenerativeModel(
            model_name=self.model_name,
            system_instruction=instruction,
            generation_config=GENERATION_CONFIG,
        )

    def reply(self, history: List[Dict[str, Any]], products: List[Dict[str, Any]]) -> str:
        """Continue the conversation; the last history entry is the shopper's message."""

        if not history:
            raise ValueError("Chat history must contain at least one message")
        model = self._model_factory(system_instruction(self.brand_name, products))
        prior = [
            {"role": message["role"], "parts": [{"text": _message_text(message)}]} for message in history[:-1]
        ]
        user_message = _message_text(history[-1])

        log_event(LOGGER, logging.INFO, "advisor_request", turns=len(history), product_count=len(products))
        try:
            chat = model.start_chat(history=prior)
            response = chat.send_message(user_message, request_options={"timeout": self.timeout_seconds})
            text = response.text
        except google_exceptions.DeadlineExceeded as exc:
            log_event(LOGGER, logging.ERROR, "advisor_timeout", timeout_seconds=self.timeout_seconds)
            raise AdvisorTimeoutError("The request timed out. Please try again.") from exc
        except (google_exceptions.GoogleAPIError, ValueError) as exc:
            log_event(LOGGER, logging.ERROR, "advisor_failed", exc_info=exc)
            raise AdvisorError(str(exc)) from exc

        log_event(LOGGER, logging.INFO, "advisor_reply", reply_length=len(text))
        return text


__all__ = ["ProductAdvisor", "AdvisorError", "AdvisorTimeoutError", "GENERATION_CONFIG"]
