"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from activity_tracker.config import Settings
from activity_tracker.containers import AppContainer
from activity_tracker.domain.activities import ActivityDefinition, CompletionRecord
from activity_tracker.domain.meals import MealRecord, SavedMeal
from activity_tracker.domain.preferences import UserPreferences
from activity_tracker.domain.stats import DailyTotals
from activity_tracker.services.activities import ActivityRepository, ActivityService
from activity_tracker.services.auth import AuthClient, AuthService
from activity_tracker.services.meals import MealRepository, MealService
from activity_tracker.services.preferences import (
    PreferencesRepository,
    PreferencesService,
)
from activity_tracker.services.saved_meals import (
    SavedMealRepository,
    SavedMealService,
)
from activity_tracker.services.summary import SummaryService, TextGenerationClient

USER_ID = "user-1"
TOKEN = "valid-token"  # noqa: S105


@dataclass
class InMemoryActivityRepository(ActivityRepository):
    """In-memory activity repository for tests."""

    activities: dict[str, ActivityDefinition] = field(default_factory=dict)
    completions: set[CompletionRecord] = field(default_factory=set)
    upserts: list[ActivityDefinition] = field(default_factory=list)

    def list_activities(self, user_id: str) -> list[ActivityDefinition]:
        return list(self.activities.values())

    def upsert_activity(
        self, user_id: str, activity: ActivityDefinition
    ) -> ActivityDefinition:
        self.activities[activity.id] = activity
        self.upserts.append(activity)
        return activity

    def upsert_activities(
        self, user_id: str, activities: list[ActivityDefinition]
    ) -> list[ActivityDefinition]:
        for activity in activities:
            self.activities[activity.id] = activity
        self.upserts.extend(activities)
        return list(activities)

    def delete_activity(self, user_id: str, activity_id: str) -> None:
        self.activities.pop(activity_id, None)
        self.completions = {
            record for record in self.completions if record.activity_id != activity_id
        }

    def list_completions(self, user_id: str) -> list[CompletionRecord]:
        return sorted(self.completions, key=lambda record: record.day)

    def add_completion(self, user_id: str, record: CompletionRecord) -> None:
        self.completions.add(record)

    def delete_completion(self, user_id: str, record: CompletionRecord) -> None:
        self.completions.discard(record)


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[str, MealRecord] = field(default_factory=dict)
    stored_totals: list[DailyTotals] = field(default_factory=list)
    upsert_calls: int = 0
    list_calls: int = 0

    def list_meals(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[MealRecord]:
        self.list_calls += 1
        return sorted(
            (meal for meal in self.meals.values() if start <= meal.eaten_at <= end),
            key=lambda meal: meal.eaten_at,
        )

    def upsert_meal(self, user_id: str, payload: dict[str, object]) -> MealRecord:
        self.upsert_calls += 1
        meal = MealRecord(
            id=str(payload.get("id") or uuid4()),
            user_id=user_id,
            eaten_at=datetime.fromisoformat(str(payload["meal_time"])),
            name=str(payload["meal_name"]),
            calories=int(payload["calories"]),
            protein_g=int(payload["protein"]),
            carbs_g=int(payload["carbs"]),
            fats_g=int(payload["fats"]),
            notes=payload.get("notes"),
        )
        self.meals[meal.id] = meal
        return meal

    def delete_meal(self, user_id: str, meal_id: str) -> None:
        self.meals.pop(meal_id, None)

    def get_daily_totals(
        self, user_id: str, start_day: str, end_day: str
    ) -> list[DailyTotals]:
        return [
            totals
            for totals in self.stored_totals
            if start_day <= totals.day <= end_day
        ]


@dataclass
class InMemorySavedMealRepository(SavedMealRepository):
    """In-memory saved meal repository for tests."""

    saved: dict[str, SavedMeal] = field(default_factory=dict)

    def list_saved_meals(self, user_id: str) -> list[SavedMeal]:
        return sorted(self.saved.values(), key=lambda meal: meal.name)

    def create_saved_meal(
        self, user_id: str, payload: dict[str, object]
    ) -> SavedMeal:
        now = datetime.now(tz=UTC)
        meal = SavedMeal(
            id=str(uuid4()),
            user_id=user_id,
            name=str(payload["meal_name"]),
            calories=int(payload["calories"]),
            protein_g=int(payload["protein"]),
            carbs_g=int(payload["carbs"]),
            fats_g=int(payload["fats"]),
            created_at=now,
            updated_at=now,
        )
        self.saved[meal.id] = meal
        return meal

    def update_saved_meal(
        self, user_id: str, saved_meal_id: str, payload: dict[str, object]
    ) -> SavedMeal:
        current = self.saved[saved_meal_id]
        updated = replace(
            current,
            name=str(payload["meal_name"]),
            calories=int(payload["calories"]),
            protein_g=int(payload["protein"]),
            carbs_g=int(payload["carbs"]),
            fats_g=int(payload["fats"]),
            updated_at=datetime.now(tz=UTC),
        )
        self.saved[saved_meal_id] = updated
        return updated

    def delete_saved_meal(self, user_id: str, saved_meal_id: str) -> None:
        self.saved.pop(saved_meal_id, None)


@dataclass
class InMemoryPreferencesRepository(PreferencesRepository):
    """In-memory preferences repository for tests."""

    rows: dict[str, UserPreferences] = field(default_factory=dict)

    def get_preferences(self, user_id: str) -> UserPreferences | None:
        return self.rows.get(user_id)

    def upsert_preferences(
        self, user_id: str, payload: dict[str, object]
    ) -> UserPreferences:
        current = self.rows.get(user_id)
        preferences = UserPreferences(
            user_id=user_id,
            daily_calories_goal=payload.get("daily_calories_goal"),
            daily_protein_goal=payload.get("daily_protein_goal"),
            daily_carbs_goal=payload.get("daily_carbs_goal"),
            daily_fats_goal=payload.get("daily_fats_goal"),
            timezone=payload.get("timezone", current.timezone if current else None),
            updated_at=datetime.now(tz=UTC),
        )
        self.rows[user_id] = preferences
        return preferences


@dataclass
class FakeAuthClient(AuthClient):
    """Accepts a single known token."""

    tokens: dict[str, str] = field(default_factory=lambda: {TOKEN: USER_ID})

    def get_user_id(self, access_token: str) -> str | None:
        return self.tokens.get(access_token)


@dataclass
class FakeTextClient(TextGenerationClient):
    """Returns a fixed reply or raises a fixed error."""

    reply: str = "Great week!"
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object] | None = None,
    ) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
    )


@pytest.fixture
def activity_repository() -> InMemoryActivityRepository:
    return InMemoryActivityRepository()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def preferences_repository() -> InMemoryPreferencesRepository:
    return InMemoryPreferencesRepository()


@pytest.fixture
def text_client() -> FakeTextClient:
    return FakeTextClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    activity_repository: InMemoryActivityRepository,
    meal_repository: InMemoryMealRepository,
    preferences_repository: InMemoryPreferencesRepository,
    text_client: FakeTextClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_service=AuthService(FakeAuthClient()),
        activity_service=ActivityService(activity_repository),
        meal_service=MealService(meal_repository),
        saved_meal_service=SavedMealService(InMemorySavedMealRepository()),
        preferences_service=PreferencesService(preferences_repository),
        summary_service=SummaryService(
            client=text_client,
            model=settings.openai_model,
            reasoning_effort=settings.openai_reasoning_effort,
            store=settings.openai_store,
        ),
        close_resources=close_resources,
    )


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {TOKEN}"}
