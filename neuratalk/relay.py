import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from pydantic import ValidationError

from neuratalk.config import Settings
from neuratalk.errors import InvalidRequest, RelayError, ServerMisconfigured, TransportFailure, UpstreamError
from neuratalk.extract import dig
from neuratalk.models import ChatRequest, ChatResponse, ErrorResponse

logger = logging.getLogger(__name__)

REPLY_PATH = ("candidates", 0, "content", "parts", 0, "text")
ERROR_MESSAGE_PATH = ("error", "message")

FALLBACK_REPLY = "I could not generate a response."
FALLBACK_FAILURE = "Failed to generate AI response"


@dataclass(frozen=True)
class RelayResult:
    status_code: int
    body: dict
    failure: Optional[RelayError] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class ChatRelay:
    """Translates one chat message into one Gemini ``generateContent`` call.

    Holds no per-request state, so a single instance serves concurrent requests.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @property
    def endpoint(self) -> str:
        return f"{self.settings.gemini_base_url}/models/{self.settings.gemini_model}:generateContent"

    def handle(self, payload: Any) -> RelayResult:
        try:
            reply = self._relay(payload)
        except RelayError as e:
            return self._failure(e)
        except Exception as e:
            logger.exception("Gemini relay failed: %s", e)
            return self._failure(TransportFailure(str(e) or FALLBACK_FAILURE))
        return RelayResult(200, ChatResponse(reply=reply).model_dump())

    @staticmethod
    def _failure(error: RelayError) -> RelayResult:
        return RelayResult(error.status_code, ErrorResponse(error=error.message).model_dump(), error)

    def _relay(self, payload: Any) -> str:
        try:
            request = ChatRequest.model_validate(payload)
        except ValidationError:
            raise InvalidRequest("Request body must include a text message")

        if not self.settings.gemini_api_key:
            raise ServerMisconfigured("Gemini API key is not configured on the server")
        if not self.settings.gemini_model:
            raise ServerMisconfigured("Gemini model is not configured on the server")

        response = requests.post(
            self.endpoint,
            headers={"x-goog-api-key": self.settings.gemini_api_key},
            json={"contents": [{"parts": [{"text": request.message}]}]},
        )

        if not response.ok:
            try:
                data = response.json()
            except ValueError:
                data = None
            message = dig(data, ERROR_MESSAGE_PATH) or FALLBACK_FAILURE
            logger.warning("Gemini returned %s: %s", response.status_code, message)
            raise UpstreamError(message, response.status_code or 500)

        text = dig(response.json(), REPLY_PATH)
        if not text:
            logger.warning("Gemini response had no reply text, using fallback")
            return FALLBACK_REPLY
        return text
