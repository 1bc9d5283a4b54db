"""
Unit tests for the generation planner, against a small injected catalog.
"""
from datetime import date
from uuid import uuid4
from django.test import SimpleTestCase

from apps.catalog.dtos import TaskCategory, TaskTemplate
from apps.catalog.milestones import AgeRuleStore
from apps.catalog.period_rules import PeriodRuleStore
from apps.catalog.templates import TemplateCatalog, build_template
from apps.generation.dtos import TIMING_DUE, TIMING_FUTURE
from apps.generation.planner import GenerationPlanner, generation_key
from apps.households.dtos import ChildDTO, TemplateSettingsDTO


AS_OF = date(2026, 3, 4)

TEMPLATE_ROWS = [
    {"id": "weekly_bag", "age_min": 3, "age_max": 5, "category": "school", "title": "Pack the bag",
     "recurrence": {"frequency": "weekly", "byDayOfWeek": [1]}, "days_before_deadline": 1, "weight": 2},
    {"id": "summer", "age_min": 3, "age_max": 10, "category": "activities", "title": "Book summer camp",
     "period": "summer", "days_before_deadline": 14, "weight": 4},
    {"id": "checkup_4y", "age_min": 4, "age_max": 4, "category": "health", "title": "4 year checkup",
     "trigger_age_months": 48, "days_before_deadline": 30},
    {"id": "welcome", "age_min": 0, "age_max": 17, "category": "other", "title": "Set up the profile"},
    {"id": "teen", "age_min": 11, "age_max": 17, "category": "social", "title": "Phone contract"},
]

MILESTONE_ROWS = [
    {"id": "m12", "type": "vaccine", "age_months": 12, "name": {"fr": "Vaccin 12 mois", "en": "12 month vaccine"}},
    {"id": "m50", "type": "vaccine", "age_months": 50, "name": {"fr": "Rappel", "en": "Booster"},
     "priority": "critical", "mandatory": True, "reminders": [14, 7]},
    {"id": "m60", "type": "health_checkup", "age_months": 60, "name": {"fr": "Bilan", "en": "Checkup"}},
]


def make_planner(**kwargs):
    return GenerationPlanner(
        TemplateCatalog.from_rows(TEMPLATE_ROWS),
        AgeRuleStore.from_rows(MILESTONE_ROWS),
        milestone_look_ahead_months=2,
        **kwargs,
    )


def make_child(birthdate=date(2022, 1, 10)):
    return ChildDTO(id=uuid4(), household_id=uuid4(), first_name="Léa", birthdate=birthdate)


class PlanForChildTest(SimpleTestCase):
    """Test template selection, deadlines and ordering."""

    def setUp(self):
        self.planner = make_planner()
        self.child = make_child()

    def plan(self, settings=None, **kwargs):
        return self.planner.plan_for_child(self.child, settings or {}, AS_OF, **kwargs)

    def test_selection_and_order(self):
        ids = [c.template_id for c in self.plan()]
        self.assertEqual(ids, ["welcome", "checkup_4y", "weekly_bag", "milestone:m50", "summer"])

    def test_deadlines(self):
        deadlines = {c.template_id: c.deadline for c in self.plan()}
        self.assertEqual(deadlines["welcome"], date(2022, 1, 10))
        self.assertEqual(deadlines["checkup_4y"], date(2026, 1, 10))
        self.assertEqual(deadlines["weekly_bag"], date(2026, 3, 9))
        self.assertEqual(deadlines["milestone:m50"], date(2026, 3, 10))
        self.assertEqual(deadlines["summer"], date(2026, 6, 1))

    def test_timing(self):
        timing = {c.template_id: c.timing for c in self.plan()}
        self.assertEqual(timing["welcome"], TIMING_DUE)
        self.assertEqual(timing["milestone:m50"], TIMING_DUE)
        self.assertEqual(timing["weekly_bag"], TIMING_FUTURE)
        self.assertEqual(timing["summer"], TIMING_FUTURE)

    def test_generation_key(self):
        candidate = next(c for c in self.plan() if c.template_id == "weekly_bag")
        self.assertEqual(candidate.generation_key, f"weekly_bag:{self.child.id}:2026-03-09")
        self.assertEqual(candidate.generation_key, generation_key("weekly_bag", self.child.id, date(2026, 3, 9)))

    def test_mandatory_milestone_cannot_be_skipped(self):
        candidate = next(c for c in self.plan() if c.template_id == "milestone:m50")
        self.assertFalse(candidate.can_skip)
        self.assertEqual(candidate.opens_on, date(2026, 2, 24))
        self.assertEqual(candidate.template.category, TaskCategory.HEALTH)

    def test_milestone_title_follows_locale(self):
        candidate = next(c for c in self.plan(locale="en") if c.template_id == "milestone:m50")
        self.assertEqual(candidate.template.title, "Booster")

    def test_deterministic(self):
        self.assertEqual(self.plan(), self.plan())

    def test_disabled_template_excluded(self):
        settings = {"summer": TemplateSettingsDTO(household_id=self.child.household_id, template_id="summer", is_enabled=False)}
        self.assertNotIn("summer", [c.template_id for c in self.plan(settings)])

    def test_overrides_apply(self):
        settings = {"weekly_bag": TemplateSettingsDTO(
            household_id=self.child.household_id, template_id="weekly_bag",
            custom_days_before=5, custom_weight=9,
        )}
        candidate = next(c for c in self.plan(settings) if c.template_id == "weekly_bag")
        self.assertEqual(candidate.weight, 9)
        self.assertEqual(candidate.days_before, 5)
        self.assertEqual(candidate.opens_on, date(2026, 3, 4))
        self.assertEqual(candidate.timing, TIMING_DUE)

    def test_other_country(self):
        self.assertEqual(self.plan(country="BE"), [])

    def test_age_outside_every_template(self):
        adult = make_child(birthdate=date(2000, 1, 1))
        self.assertEqual(self.planner.plan_for_child(adult, {}, AS_OF), [])

    def test_unborn_child(self):
        unborn = make_child(birthdate=date(2026, 6, 1))
        self.assertEqual(self.planner.plan_for_child(unborn, {}, AS_OF), [])


class PlanFailureTest(SimpleTestCase):
    """A template whose rule cannot be evaluated does not stop the others."""

    def test_failure_isolated(self):
        broken = TaskTemplate(
            id="broken", country="FR", age_min=0, age_max=17,
            category=TaskCategory.OTHER, title="Broken",
            recurrence={"frequency": "hourly"},
        )
        catalog = TemplateCatalog([broken, build_template(TEMPLATE_ROWS[3])])
        planner = GenerationPlanner(catalog, AgeRuleStore([]))
        child = make_child()

        report = planner.plan(child, {}, AS_OF)
        self.assertEqual([c.template_id for c in report.candidates], ["welcome"])
        self.assertEqual([f.template_id for f in report.failures], ["broken"])


class ResolveTemplateTest(SimpleTestCase):

    def test_resolve_catalog_and_milestone_ids(self):
        planner = make_planner()
        self.assertEqual(planner.resolve_template("summer", "FR").title, "Book summer camp")
        self.assertEqual(planner.resolve_template("milestone:m60", "FR", "en").title, "Checkup")
        self.assertIsNone(planner.resolve_template("milestone:missing", "FR"))

    def test_resolve_period_rule_id(self):
        planner = make_planner(period_rules=PeriodRuleStore.from_rows(PERIOD_RULE_ROWS))
        template = planner.resolve_template("period_rule:christmas_show", "FR", "en")
        self.assertEqual(template.title, "Christmas show")
        self.assertEqual(template.days_before_deadline, 7)
        self.assertIsNone(planner.resolve_template("period_rule:missing", "FR"))


PERIOD_RULE_ROWS = [
    {"id": "christmas_show", "period_type": "christmas", "month": 12, "week_of_month": 2, "day_of_week": 0,
     "name": {"fr": "Spectacle de Noël", "en": "Christmas show"}, "category": "school",
     "lead_days": 7, "age_range": (36, 144)},
    {"id": "spring_registration", "period_type": "spring", "month": 3, "name": {"fr": "Inscriptions"},
     "category": "administrative", "priority": "critical", "lead_days": 30, "age_range": (24, 204)},
    {"id": "teen_only", "period_type": "annual", "month": 9, "name": {"fr": "Ado"},
     "category": "social", "age_range": (132, 204)},
    {"id": "monthly_check", "period_type": "monthly", "month": 1, "day_of_month": 1, "recurrence": "monthly",
     "name": {"fr": "Vérifier"}, "category": "school"},
]


class PeriodRulePlanTest(SimpleTestCase):
    """Period rules covering the child's age are planned on their next trigger date."""

    def setUp(self):
        self.planner = make_planner(period_rules=PeriodRuleStore.from_rows(PERIOD_RULE_ROWS))
        self.child = make_child()

    def candidates(self, as_of=AS_OF):
        return {
            c.template_id: c for c in self.planner.plan_for_child(self.child, {}, as_of)
            if c.template_id.startswith("period_rule:")
        }

    def test_rules_outside_age_are_left_out(self):
        self.assertEqual(set(self.candidates()), {
            "period_rule:christmas_show", "period_rule:spring_registration", "period_rule:monthly_check",
        })

    def test_nth_weekday_deadline(self):
        # Second Sunday of December 2026
        candidate = self.candidates()["period_rule:christmas_show"]
        self.assertEqual(candidate.deadline, date(2026, 12, 13))
        self.assertEqual(candidate.opens_on, date(2026, 12, 6))
        self.assertEqual(candidate.timing, TIMING_FUTURE)

    def test_trigger_passed_this_year_rolls_over(self):
        candidate = self.candidates(as_of=date(2026, 2, 15))["period_rule:spring_registration"]
        self.assertEqual(candidate.deadline, date(2026, 3, 1))
        self.assertEqual(candidate.timing, TIMING_DUE)
        candidate = self.candidates()["period_rule:spring_registration"]
        self.assertEqual(candidate.deadline, date(2027, 3, 1))
        self.assertFalse(candidate.can_skip)

    def test_monthly_rule_is_due_next_month(self):
        candidate = self.candidates()["period_rule:monthly_check"]
        self.assertEqual(candidate.deadline, date(2026, 4, 1))
        self.assertEqual(
            candidate.generation_key, generation_key("period_rule:monthly_check", self.child.id, date(2026, 4, 1)),
        )

    def test_default_planner_has_no_period_rules(self):
        ids = [c.template_id for c in make_planner().plan_for_child(self.child, {}, AS_OF)]
        self.assertFalse([i for i in ids if i.startswith("period_rule:")])
