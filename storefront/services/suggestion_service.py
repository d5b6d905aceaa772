# storefront/services/suggestion_service.py
import json
import logging
from typing import Any, Callable

from supabase import Client

from storefront.core.exceptions import ServiceUnavailable
from storefront.schemas.suggestion import SuggestionRead

logger = logging.getLogger(__name__)


class SuggestionService:
    """
    Adaptive clothing suggestions.

    The heavy lifting (prompting the hosted model, generating an image)
    happens in a Supabase Edge Function; this service only invokes it and
    validates the answer. The function returns:

        {"suggestions": "<markdown text>", "image": "<url or empty>"}

    or {"error": "..."} on failure.
    """

    def __init__(self, client_factory: Callable[[], Client], function_name: str):
        self.client_factory = client_factory
        self.function_name = function_name

    def suggest(self, user_preferences: str) -> SuggestionRead:
        try:
            raw = self.client_factory().functions.invoke(
                self.function_name,
                invoke_options={
                    "body": {"userPreferences": user_preferences},
                    "responseType": "json",
                },
            )
        except Exception as exc:
            # supabase raises FunctionsHttpError / FunctionsRelayError,
            # the transport may raise httpx errors
            logger.error("Edge function %s failed: %s", self.function_name, exc)
            raise ServiceUnavailable("Failed to get AI suggestions") from exc

        data = self._parse(raw)

        if data.get("error"):
            logger.error(
                "Edge function %s returned error: %s", self.function_name, data["error"]
            )
            raise ServiceUnavailable("Failed to get AI suggestions")

        suggestions = data.get("suggestions")
        if not isinstance(suggestions, str) or not suggestions.strip():
            raise ServiceUnavailable("AI suggestions response was empty")

        # The function sends "" when image generation failed
        image = data.get("image") or None
        return SuggestionRead(suggestions=suggestions, image=image)

    def _parse(self, raw: Any) -> dict[str, Any]:
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8")
        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except ValueError as exc:
                raise ServiceUnavailable("Malformed AI suggestions response") from exc
        if not isinstance(raw, dict):
            raise ServiceUnavailable("Malformed AI suggestions response")
        return raw
