"""
API Schemas for Recurrence app.
"""
from typing import Any, Dict, List, Optional
from datetime import date
from ninja import Schema


# =============================================================================
# Request Schemas
# =============================================================================

class PreviewIn(Schema):
    """Rule in its JSON shape (camelCase keys); validated by the evaluator."""
    rule: Optional[Dict[str, Any]] = None
    start_date: date
    count: int = 5
    locale: str = "en"


class LabelIn(Schema):
    rule: Optional[Dict[str, Any]] = None
    locale: str = "en"


class CronIn(Schema):
    pattern: str
    locale: str = "en"


# =============================================================================
# Response Schemas
# =============================================================================

class PreviewOut(Schema):
    label: str
    next_occurrence: Optional[date] = None
    occurrences: List[date]


class LabelOut(Schema):
    label: str


class RuleOut(Schema):
    rule: Dict[str, Any]
    label: str


class PresetOut(Schema):
    key: str
    label: str
    rule: Dict[str, Any]
