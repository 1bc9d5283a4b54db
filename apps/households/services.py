"""
Service layer for Households app.
Exposes families, children and template overrides as DTOs.
"""
import logging
from datetime import date
from typing import Dict, List, Optional
from uuid import UUID

from django.db import transaction

from apps.catalog.dtos import MAX_WEIGHT, MIN_WEIGHT
from apps.catalog.milestones import MILESTONE_TEMPLATE_PREFIX
from apps.catalog.period_rules import PERIOD_RULE_TEMPLATE_PREFIX
from apps.catalog.services import get_age_rules, get_period_rules, get_template_catalog
from apps.core.dates import resolve_timezone
from .dtos import ChildDTO, HouseholdDTO, TemplateSettingsDTO
from .models import Child, Household, HouseholdTemplateSettings

logger = logging.getLogger(__name__)


def _household_dto(household: Household) -> HouseholdDTO:
    return HouseholdDTO(
        id=household.id,
        name=household.name,
        country=household.country,
        timezone=household.timezone,
        locale=household.locale,
        is_active=household.is_active,
    )


def _child_dto(child: Child) -> ChildDTO:
    return ChildDTO(
        id=child.id,
        household_id=child.household_id,
        first_name=child.first_name,
        birthdate=child.birthdate,
        is_active=child.is_active,
    )


def _settings_dto(row: HouseholdTemplateSettings) -> TemplateSettingsDTO:
    return TemplateSettingsDTO(
        household_id=row.household_id,
        template_id=row.template_id,
        is_enabled=row.is_enabled,
        custom_days_before=row.custom_days_before,
        custom_weight=row.custom_weight,
    )


# =============================================================================
# Households and children
# =============================================================================

def create_household(
    name: str,
    country: Optional[str] = None,
    timezone: Optional[str] = None,
    locale: Optional[str] = None,
) -> HouseholdDTO:
    """Create a household; unset fields use the configured defaults."""
    if not name:
        raise ValueError("Household name is required")
    fields = {'name': name}
    if country:
        if len(country) != 2:
            raise ValueError("country must be an ISO-2 code")
        fields['country'] = country.upper()
    if timezone:
        if str(resolve_timezone(timezone)) != timezone:
            raise ValueError(f"Unknown timezone: {timezone}")
        fields['timezone'] = timezone
    if locale:
        fields['locale'] = locale
    household = Household.objects.create(**fields)
    logger.info(f"Household {household.id} created")
    return _household_dto(household)


def get_household(household_id: UUID) -> Optional[HouseholdDTO]:
    household = Household.objects.filter(id=household_id).first()
    return _household_dto(household) if household else None


def list_active_households() -> List[HouseholdDTO]:
    return [_household_dto(h) for h in Household.objects.filter(is_active=True)]


def add_child(household_id: UUID, first_name: str, birthdate: date) -> ChildDTO:
    if not Household.objects.filter(id=household_id).exists():
        raise ValueError(f"Household {household_id} not found")
    if not first_name:
        raise ValueError("first_name is required")
    child = Child.objects.create(household_id=household_id, first_name=first_name, birthdate=birthdate)
    return _child_dto(child)


def get_child(child_id: UUID) -> Optional[ChildDTO]:
    child = Child.objects.filter(id=child_id).first()
    return _child_dto(child) if child else None


def list_children(household_id: UUID, active_only: bool = True) -> List[ChildDTO]:
    children = Child.objects.filter(household_id=household_id)
    if active_only:
        children = children.filter(is_active=True)
    return [_child_dto(c) for c in children]


# =============================================================================
# Template overrides
# =============================================================================

def get_template_settings(household_id: UUID) -> Dict[str, TemplateSettingsDTO]:
    """Overrides keyed by template id; templates without a row use defaults."""
    rows = HouseholdTemplateSettings.objects.filter(household_id=household_id)
    return {row.template_id: _settings_dto(row) for row in rows}


def _template_exists(template_id: str) -> bool:
    if template_id.startswith(MILESTONE_TEMPLATE_PREFIX):
        return get_age_rules().get(template_id[len(MILESTONE_TEMPLATE_PREFIX):]) is not None
    if template_id.startswith(PERIOD_RULE_TEMPLATE_PREFIX):
        return get_period_rules().get(template_id[len(PERIOD_RULE_TEMPLATE_PREFIX):]) is not None
    return get_template_catalog().get(template_id) is not None


@transaction.atomic
def update_template_settings(
    household_id: UUID,
    template_id: str,
    is_enabled: bool = True,
    custom_days_before: Optional[int] = None,
    custom_weight: Optional[int] = None,
) -> TemplateSettingsDTO:
    """
    Create or replace a household's override for one template.

    Raises:
        ValueError: unknown household or template, or out-of-range values
    """
    if not Household.objects.filter(id=household_id).exists():
        raise ValueError(f"Household {household_id} not found")
    if not _template_exists(template_id):
        raise ValueError(f"Template {template_id} not found")
    if custom_days_before is not None and custom_days_before < 0:
        raise ValueError("custom_days_before must be >= 0")
    if custom_weight is not None and not MIN_WEIGHT <= custom_weight <= MAX_WEIGHT:
        raise ValueError(f"custom_weight must be between {MIN_WEIGHT} and {MAX_WEIGHT}")

    row, created = HouseholdTemplateSettings.objects.update_or_create(
        household_id=household_id,
        template_id=template_id,
        defaults={
            'is_enabled': is_enabled,
            'custom_days_before': custom_days_before,
            'custom_weight': custom_weight,
        },
    )
    logger.info(
        f"Template settings {'created' if created else 'updated'} for household {household_id}: "
        f"{template_id} enabled={is_enabled}"
    )
    return _settings_dto(row)
