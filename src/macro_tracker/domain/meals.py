"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from macro_tracker.domain.nutrition import NutrientVector


@dataclass(frozen=True)
class MealLogEntry:
    """A logged meal with nutrients snapshotted at log time."""

    id: UUID | None
    owner_id: UUID
    recipe_id: UUID | None
    label: str
    mass_g: float
    nutrients: NutrientVector
    logged_on: date
    created_at: datetime
