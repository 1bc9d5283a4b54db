"""
API Router for Households app.
Template customisation per household.
"""
from dataclasses import asdict
from uuid import UUID
from ninja import Router
from ninja.errors import HttpError
from django.http import HttpRequest

from .schemas import TemplateSettingsIn, TemplateSettingsOut
from . import services

router = Router(tags=["Households"])


def require_auth(request: HttpRequest):
    """Ensure user is authenticated."""
    if not request.user.is_authenticated:
        raise HttpError(401, "Unauthorized")


def require_household(household_id: UUID):
    household = services.get_household(household_id)
    if household is None:
        raise HttpError(404, "Household not found")
    return household


@router.put("/{household_id}/templates/{template_id}", response=TemplateSettingsOut, auth=None)
def customize_template(request: HttpRequest, household_id: UUID, template_id: str, payload: TemplateSettingsIn):
    """Enable/disable a template or override its lead days and weight."""
    require_auth(request)
    require_household(household_id)
    try:
        result = services.update_template_settings(
            household_id=household_id,
            template_id=template_id,
            is_enabled=payload.is_enabled,
            custom_days_before=payload.custom_days_before,
            custom_weight=payload.custom_weight,
        )
    except ValueError as e:
        raise HttpError(400, str(e))
    return TemplateSettingsOut(**asdict(result))
