"""DTOs for Household Tasks app."""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional
from uuid import UUID


@dataclass(frozen=True)
class TaskDTO:
    id: UUID
    household_id: UUID
    title: str
    status: str
    source: str
    deadline: Optional[date] = None
    child_id: Optional[UUID] = None
    category: str = ""
    priority: str = "medium"
    load_weight: int = 1
    is_critical: bool = False
    template_id: Optional[str] = None
    generation_key: Optional[str] = None
    recurrence_rule: Optional[Dict[str, Any]] = None
    series_id: Optional[UUID] = None
    parent_task_id: Optional[UUID] = None
    completed_at: Optional[datetime] = None
    series_ended_at: Optional[datetime] = None


@dataclass(frozen=True)
class RecurringProcessResult:
    processed: int = 0
    generated: int = 0
    errors: int = 0
