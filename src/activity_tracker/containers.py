"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from activity_tracker.adapters.openai_text_client import OpenAITextClient
from activity_tracker.adapters.supabase_activity_repository import (
    SupabaseActivityRepository,
)
from activity_tracker.adapters.supabase_auth_client import SupabaseAuthClient
from activity_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from activity_tracker.adapters.supabase_preferences_repository import (
    SupabasePreferencesRepository,
)
from activity_tracker.adapters.supabase_saved_meal_repository import (
    SupabaseSavedMealRepository,
)
from activity_tracker.config import Settings
from activity_tracker.services.activities import ActivityService
from activity_tracker.services.auth import AuthService
from activity_tracker.services.meals import MealService
from activity_tracker.services.preferences import PreferencesService
from activity_tracker.services.saved_meals import SavedMealService
from activity_tracker.services.summary import SummaryService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    activity_service: ActivityService
    meal_service: MealService
    saved_meal_service: SavedMealService
    preferences_service: PreferencesService
    summary_service: SummaryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    text_client = (
        OpenAITextClient.create(
            api_key=resolved_settings.openai_api_key or "",
            timeout_seconds=resolved_settings.ai_timeout_seconds,
        )
        if resolved_settings.ai_enabled
        else None
    )
    summary_service = SummaryService(
        client=text_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        if text_client is not None:
            await text_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=AuthService(SupabaseAuthClient(supabase_client)),
        activity_service=ActivityService(SupabaseActivityRepository(supabase_client)),
        meal_service=MealService(SupabaseMealRepository(supabase_client)),
        saved_meal_service=SavedMealService(
            SupabaseSavedMealRepository(supabase_client)
        ),
        preferences_service=PreferencesService(
            SupabasePreferencesRepository(supabase_client),
            default_timezone=resolved_settings.default_timezone,
        ),
        summary_service=summary_service,
        close_resources=close_resources,
    )
