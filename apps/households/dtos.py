"""DTOs for Households app - what the generation core reads about a family."""
from dataclasses import dataclass
from datetime import date
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class HouseholdDTO:
    id: UUID
    name: str
    country: str
    timezone: str
    locale: str
    is_active: bool


@dataclass(frozen=True)
class ChildDTO:
    id: UUID
    household_id: UUID
    first_name: str
    birthdate: date
    is_active: bool = True


@dataclass(frozen=True)
class TemplateSettingsDTO:
    household_id: UUID
    template_id: str
    is_enabled: bool = True
    custom_days_before: Optional[int] = None
    custom_weight: Optional[int] = None
