"""
Generation planner.

Turns a child, the household's template overrides and a date into the list
of tasks the catalog expects for that child. Planning reads only the
catalog and its inputs and writes nothing; the same inputs always give the
same candidates and keys, which is what makes materialization idempotent.
"""
import logging
from datetime import date
from typing import List, Mapping, Optional

from apps.catalog.dtos import TaskTemplate
from apps.catalog.milestones import MILESTONE_TEMPLATE_PREFIX, AgeRuleStore, milestone_to_template
from apps.catalog.period_rules import PERIOD_RULE_TEMPLATE_PREFIX, PeriodRuleStore, period_rule_to_template
from apps.catalog.periods import Period, period_start_for
from apps.catalog.templates import TemplateCatalog
from apps.core.dates import add_days, add_months, age_in_months
from apps.core.exceptions import RecurrenceError
from apps.households.dtos import ChildDTO, TemplateSettingsDTO
from apps.recurrence.services import occurrence_on_or_after
from .dtos import TIMING_DUE, TIMING_FUTURE, GenerationCandidate, PlanFailure, PlanReport

logger = logging.getLogger(__name__)


def generation_key(template_id: str, child_id, deadline: date) -> str:
    return f"{template_id}:{child_id}:{deadline.isoformat()}"


class GenerationPlanner:
    """
    Plans candidates from an immutable template catalog, age rule store and
    period rule store.

    The stores are passed in, so tests can plan against their own catalogs.
    Without a period rule store no calendar-triggered tasks are planned.
    """

    def __init__(
        self,
        template_catalog: TemplateCatalog,
        age_rules: AgeRuleStore,
        period_rules: Optional[PeriodRuleStore] = None,
        *,
        milestone_look_ahead_months: int = 2,
        locale: str = "fr",
    ):
        self.template_catalog = template_catalog
        self.age_rules = age_rules
        self.period_rules = period_rules or PeriodRuleStore([])
        self.milestone_look_ahead_months = milestone_look_ahead_months
        self.locale = locale

    # =========================================================================
    # Templates
    # =========================================================================

    def templates_for_age(self, age_months: int, country: str, locale: Optional[str] = None) -> List[TaskTemplate]:
        """
        Catalog templates containing the age, then current and upcoming
        milestones, then the period rules covering the age.
        """
        locale = locale or self.locale
        templates = self.template_catalog.for_child(age_months, country)
        milestones = self.age_rules.current(age_months, country) + self.age_rules.next_milestones(
            age_months, self.milestone_look_ahead_months, country
        )
        templates.extend(milestone_to_template(m, locale, country.upper()) for m in milestones)
        templates.extend(
            period_rule_to_template(r, locale, country.upper())
            for r in self.period_rules.for_age(age_months, country)
        )
        return templates

    def resolve_template(self, template_id: str, country: str, locale: Optional[str] = None) -> Optional[TaskTemplate]:
        """Template by id, including the `milestone:<id>` and `period_rule:<id>` forms."""
        locale = locale or self.locale
        if template_id.startswith(MILESTONE_TEMPLATE_PREFIX):
            milestone = self.age_rules.get(template_id[len(MILESTONE_TEMPLATE_PREFIX):])
            if milestone is None:
                return None
            return milestone_to_template(milestone, locale, country.upper())
        if template_id.startswith(PERIOD_RULE_TEMPLATE_PREFIX):
            rule = self.period_rules.get(template_id[len(PERIOD_RULE_TEMPLATE_PREFIX):])
            if rule is None:
                return None
            return period_rule_to_template(rule, locale, country.upper())
        return self.template_catalog.get(template_id)

    # =========================================================================
    # Deadlines
    # =========================================================================

    @staticmethod
    def deadline_for(template: TaskTemplate, child: ChildDTO, as_of: date) -> Optional[date]:
        """
        Deadline of the template's next due occurrence for the child.

        Recurring series are anchored at the child's birthdate. Returns None
        when a recurring series has no occurrence left. Period rules are due
        on their next trigger date.
        """
        if template.trigger is not None:
            return template.trigger.next_on_or_after(as_of)
        if template.recurrence is not None:
            return occurrence_on_or_after(template.recurrence, child.birthdate, as_of)
        if template.trigger_age_months is not None:
            return add_months(child.birthdate, template.trigger_age_months)
        if template.period is not Period.YEAR_ROUND:
            return period_start_for(template.period, as_of)
        # One-off, year round: due when the child enters the age range
        return add_months(child.birthdate, template.min_age_months)

    def build_candidate(
        self,
        template: TaskTemplate,
        child: ChildDTO,
        deadline: date,
        as_of: date,
        override: Optional[TemplateSettingsDTO] = None,
    ) -> GenerationCandidate:
        days_before = template.days_before_deadline
        weight = template.weight
        if override is not None:
            if override.custom_days_before is not None:
                days_before = override.custom_days_before
            if override.custom_weight is not None:
                weight = override.custom_weight

        opens_on = add_days(deadline, -days_before)
        return GenerationCandidate(
            template=template,
            child=child,
            deadline=deadline,
            generation_key=generation_key(template.id, child.id, deadline),
            opens_on=opens_on,
            weight=weight,
            days_before=days_before,
            timing=TIMING_DUE if opens_on <= as_of else TIMING_FUTURE,
            age_months=age_in_months(child.birthdate, as_of),
        )

    # =========================================================================
    # Planning
    # =========================================================================

    def plan(
        self,
        child: ChildDTO,
        settings: Mapping[str, TemplateSettingsDTO],
        as_of: date,
        country: str = "FR",
        locale: Optional[str] = None,
    ) -> PlanReport:
        """
        Candidates for one child, ordered by deadline then template id.

        A template whose recurrence cannot be evaluated is reported in
        `failures` and does not stop the others.
        """
        if child.birthdate > as_of:
            return PlanReport()

        age = age_in_months(child.birthdate, as_of)
        candidates: List[GenerationCandidate] = []
        failures: List[PlanFailure] = []

        for template in self.templates_for_age(age, country, locale):
            override = settings.get(template.id)
            if override is not None and not override.is_enabled:
                continue
            try:
                deadline = self.deadline_for(template, child, as_of)
            except RecurrenceError as e:
                logger.warning(f"Could not plan template {template.id} for child {child.id}: {e}")
                failures.append(PlanFailure(template_id=template.id, child_id=child.id, error=str(e)))
                continue
            if deadline is None:
                continue
            candidates.append(self.build_candidate(template, child, deadline, as_of, override))

        candidates.sort(key=lambda c: (c.deadline, c.template_id))
        return PlanReport(candidates=tuple(candidates), failures=tuple(failures))

    def plan_for_child(
        self,
        child: ChildDTO,
        settings: Mapping[str, TemplateSettingsDTO],
        as_of: date,
        country: str = "FR",
        locale: Optional[str] = None,
    ) -> List[GenerationCandidate]:
        return list(self.plan(child, settings, as_of, country, locale).candidates)
