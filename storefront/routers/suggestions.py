# storefront/routers/suggestions.py
from fastapi import APIRouter

from storefront.core.config import get_settings
from storefront.core.supabase_client import supabase_public
from storefront.schemas.suggestion import SuggestionRead, SuggestionRequest
from storefront.services.suggestion_service import SuggestionService

settings = get_settings()

router = APIRouter(prefix="/suggestions", tags=["Suggestions"])

service = SuggestionService(supabase_public, settings.SUGGESTION_FUNCTION_NAME)


@router.post("", response_model=SuggestionRead)
def suggest_clothes(payload: SuggestionRequest):
    """
    Adaptive clothing suggestions for free-text preferences (public).

    Returns 503 when the suggestion service is unavailable.
    """
    return service.suggest(payload.user_preferences)
