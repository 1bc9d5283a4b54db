"""
API Schemas for Households app.
"""
from typing import Optional
from uuid import UUID
from ninja import Schema


class TemplateSettingsIn(Schema):
    """Full replacement of a template override; null custom values use the template default."""
    is_enabled: bool = True
    custom_days_before: Optional[int] = None
    custom_weight: Optional[int] = None


class TemplateSettingsOut(Schema):
    household_id: UUID
    template_id: str
    is_enabled: bool
    custom_days_before: Optional[int] = None
    custom_weight: Optional[int] = None
