"""DTOs for Generation app - candidates, ledger rows and run summaries."""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Tuple
from uuid import UUID

from apps.catalog.dtos import TaskTemplate
from apps.households.dtos import ChildDTO


TIMING_DUE = "due"
TIMING_FUTURE = "future"


@dataclass(frozen=True)
class GenerationCandidate:
    """
    A planned task for one template, one child and one deadline.

    Nothing is persisted until a materializer records it.
    """
    template: TaskTemplate
    child: ChildDTO
    deadline: date
    generation_key: str
    opens_on: date
    weight: int
    days_before: int
    timing: str
    age_months: int

    @property
    def template_id(self) -> str:
        return self.template.id

    @property
    def child_id(self) -> UUID:
        return self.child.id

    @property
    def household_id(self) -> UUID:
        return self.child.household_id

    @property
    def is_due(self) -> bool:
        return self.timing == TIMING_DUE

    @property
    def can_skip(self) -> bool:
        return not self.template.critical


@dataclass(frozen=True)
class PlanFailure:
    template_id: str
    child_id: UUID
    error: str


@dataclass(frozen=True)
class PlanReport:
    candidates: Tuple[GenerationCandidate, ...] = ()
    failures: Tuple[PlanFailure, ...] = ()


@dataclass(frozen=True)
class LedgerEntryDTO:
    id: UUID
    household_id: UUID
    child_id: UUID
    template_id: str
    deadline: date
    generation_key: str
    status: str
    task_id: Optional[UUID] = None
    acknowledged: bool = False
    acknowledged_at: Optional[datetime] = None
    acknowledged_by_id: Optional[int] = None


@dataclass(frozen=True)
class LedgerInsert:
    """Result of insert_if_absent: the stored row and whether this call wrote it."""
    entry: LedgerEntryDTO
    created: bool


@dataclass(frozen=True)
class MaterializeResult:
    created: bool
    generation_key: str
    status: str
    task_id: Optional[UUID] = None
    entry_id: Optional[UUID] = None


@dataclass(frozen=True)
class SkipResult:
    skipped: bool
    generation_key: str
    status: str
    entry_id: Optional[UUID] = None


@dataclass(frozen=True)
class GenerationDetail:
    template_id: str
    child_id: UUID
    success: bool
    created: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class TaskGenerationResult:
    generated: int = 0
    skipped: int = 0
    errors: int = 0
    details: List[GenerationDetail] = field(default_factory=list)


@dataclass(frozen=True)
class ChildSummary:
    id: UUID
    first_name: str
    age: int


@dataclass(frozen=True)
class UpcomingTaskPreview:
    """A candidate as shown to the family before it is confirmed or skipped."""
    template: TaskTemplate
    child: ChildSummary
    deadline: date
    days_until: int
    status: str
    can_skip: bool
    generation_key: str
    weight: int


@dataclass(frozen=True)
class SweepResult:
    households: int = 0
    generated: int = 0
    skipped: int = 0
    errors: int = 0
    failed_households: int = 0


@dataclass(frozen=True)
class HouseholdGenerationStats:
    """Ledger counts for one household; critical and due_soon count pending rows only."""
    total: int = 0
    pending: int = 0
    created: int = 0
    skipped: int = 0
    expired: int = 0
    critical: int = 0
    due_soon: int = 0
