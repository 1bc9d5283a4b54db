"""
Unit tests for period triggers and the period rule store.
"""
from datetime import date
from django.test import SimpleTestCase

from apps.catalog import services
from apps.catalog.dtos import AgeUnit, Priority, RecurrenceKind, TaskCategory
from apps.catalog.period_rules import (
    PeriodRuleStore, build_period_rule, due_date, period_rule_to_template, should_trigger,
)
from apps.catalog.periods import PeriodTrigger
from apps.core.exceptions import CatalogValidationError


def rule_row(**overrides):
    row = {
        "id": "rule", "period_type": "christmas", "month": 12,
        "name": {"fr": "Spectacle", "en": "Show"}, "category": "school", "lead_days": 7,
    }
    row.update(overrides)
    return row


class PeriodTriggerTest(SimpleTestCase):
    """Trigger dates inside a month."""

    def test_first_of_month_by_default(self):
        self.assertEqual(PeriodTrigger(month=3).date_in(2026), date(2026, 3, 1))

    def test_day_of_month_clamps(self):
        trigger = PeriodTrigger(month=1, day_of_month=31, monthly=True)
        self.assertEqual(trigger.date_in(2026, 2), date(2026, 2, 28))
        self.assertEqual(trigger.date_in(2028, 2), date(2028, 2, 29))

    def test_nth_weekday(self):
        # December 2026 starts on a Tuesday
        second_sunday = PeriodTrigger(month=12, week_of_month=2, day_of_week=0)
        self.assertEqual(second_sunday.date_in(2026), date(2026, 12, 13))
        first_tuesday = PeriodTrigger(month=12, week_of_month=1, day_of_week=2)
        self.assertEqual(first_tuesday.date_in(2026), date(2026, 12, 1))
        fourth_saturday = PeriodTrigger(month=12, week_of_month=4, day_of_week=6)
        self.assertEqual(fourth_saturday.date_in(2026), date(2026, 12, 26))

    def test_week_without_weekday_is_mid_week(self):
        self.assertEqual(PeriodTrigger(month=12, week_of_month=2).date_in(2026), date(2026, 12, 11))
        self.assertEqual(PeriodTrigger(month=6, week_of_month=3).date_in(2026), date(2026, 6, 18))

    def test_next_yearly_trigger(self):
        trigger = PeriodTrigger(month=12, week_of_month=2)
        self.assertEqual(trigger.next_on_or_after(date(2026, 3, 4)), date(2026, 12, 11))
        self.assertEqual(trigger.next_on_or_after(date(2026, 12, 11)), date(2026, 12, 11))
        self.assertEqual(trigger.next_on_or_after(date(2026, 12, 12)), date(2027, 12, 11))

    def test_next_monthly_trigger(self):
        trigger = PeriodTrigger(month=1, day_of_month=1, monthly=True)
        self.assertEqual(trigger.next_on_or_after(date(2026, 3, 1)), date(2026, 3, 1))
        self.assertEqual(trigger.next_on_or_after(date(2026, 3, 4)), date(2026, 4, 1))
        self.assertEqual(trigger.next_on_or_after(date(2026, 12, 15)), date(2027, 1, 1))

    def test_invalid_fields(self):
        with self.assertRaises(ValueError):
            PeriodTrigger(month=13)
        with self.assertRaises(ValueError):
            PeriodTrigger(month=6, week_of_month=5)
        with self.assertRaises(ValueError):
            PeriodTrigger(month=6, week_of_month=1, day_of_week=7)


class ShouldTriggerTest(SimpleTestCase):
    """A rule triggers during the lead days before its due date."""

    def test_yearly_window(self):
        rule = services.get_period_rules().get("spring_inscriptions_prochaine_annee")
        self.assertEqual(due_date(rule, 2026), date(2026, 1, 30))
        self.assertFalse(should_trigger(rule, date(2025, 12, 30)))
        self.assertTrue(should_trigger(rule, date(2026, 1, 1)))
        self.assertTrue(should_trigger(rule, date(2026, 1, 30)))
        self.assertFalse(should_trigger(rule, date(2026, 1, 31)))

    def test_monthly_rule_without_lead(self):
        rule = services.get_period_rules().get("monthly_check_fournitures")
        self.assertTrue(should_trigger(rule, date(2026, 5, 1)))
        self.assertFalse(should_trigger(rule, date(2026, 5, 2)))


class PeriodRuleStoreTest(SimpleTestCase):
    """Test month, upcoming, type and age queries over the loaded rules."""

    def setUp(self):
        self.store = services.get_period_rules()

    def test_rules_for_month(self):
        ids = [r.id for r in self.store.rules_for_month(6)]
        self.assertEqual(ids, [
            "monthly_check_fournitures", "june_cadeaux_maitresse",
            "june_spectacle_fin_annee", "summer_cahier_vacances",
        ])

    def test_rules_for_month_filters_country(self):
        self.assertEqual([r.id for r in self.store.rules_for_month(6, "BE")], ["monthly_check_fournitures"])

    def test_rules_for_invalid_month(self):
        with self.assertRaises(ValueError):
            self.store.rules_for_month(13)

    def test_upcoming_without_duplicates(self):
        ids = [r.id for r in self.store.upcoming(date(2026, 11, 20), days_ahead=30)]
        self.assertEqual(ids, ["monthly_check_fournitures", "christmas_cadeaux_liste", "christmas_spectacle_ecole"])

    def test_upcoming_across_new_year(self):
        ids = [r.id for r in self.store.upcoming(date(2026, 12, 20), days_ahead=30)]
        self.assertEqual(ids, [
            "monthly_check_fournitures", "christmas_spectacle_ecole",
            "january_declaration_impots_prep", "january_renouvellement_activites",
        ])

    def test_upcoming_rejects_negative_days(self):
        with self.assertRaises(ValueError):
            self.store.upcoming(date(2026, 3, 4), days_ahead=-1)

    def test_by_type(self):
        ids = [r.id for r in self.store.by_type("summer")]
        self.assertEqual(ids, ["summer_centres_loisirs", "summer_cahier_vacances"])

    def test_for_age(self):
        ids = [r.id for r in self.store.for_age(24)]
        self.assertEqual(ids, [
            "january_declaration_impots_prep", "spring_inscriptions_prochaine_annee", "christmas_cadeaux_liste",
        ])

    def test_disabled_rules_are_hidden(self):
        store = PeriodRuleStore.from_rows([rule_row(), rule_row(id="off", enabled=False)])
        self.assertEqual([r.id for r in store.rules_for_month(12)], ["rule"])
        self.assertEqual(len(store), 2)


class BuildPeriodRuleTest(SimpleTestCase):

    def test_missing_month(self):
        row = rule_row()
        del row["month"]
        with self.assertRaises(CatalogValidationError):
            build_period_rule(row)

    def test_invalid_weekday(self):
        with self.assertRaises(CatalogValidationError):
            build_period_rule(rule_row(week_of_month=1, day_of_week=7))

    def test_invalid_category(self):
        with self.assertRaises(CatalogValidationError):
            build_period_rule(rule_row(category="seasonal"))

    def test_half_open_age_range(self):
        with self.assertRaises(CatalogValidationError):
            build_period_rule(rule_row(age_range=(36, None)))

    def test_duplicate_ids(self):
        with self.assertRaises(CatalogValidationError):
            PeriodRuleStore.from_rows([rule_row(), rule_row()])


class PeriodRuleToTemplateTest(SimpleTestCase):

    def test_critical_rule(self):
        rule = services.get_period_rules().get("spring_inscriptions_prochaine_annee")
        template = period_rule_to_template(rule, locale="en")
        self.assertEqual(template.id, "period_rule:spring_inscriptions_prochaine_annee")
        self.assertEqual(template.title, "Next year registrations")
        self.assertEqual(template.category, TaskCategory.ADMINISTRATIVE)
        self.assertEqual(template.priority, Priority.CRITICAL)
        self.assertTrue(template.critical)
        self.assertEqual(template.days_before_deadline, 30)
        self.assertEqual((template.age_unit, template.age_min, template.age_max), (AgeUnit.MONTHS, 24, 204))
        self.assertEqual(template.recurrence_kind, RecurrenceKind.YEARLY)

    def test_rule_without_age_range_covers_minors(self):
        rule = services.get_period_rules().get("january_declaration_impots_prep")
        template = period_rule_to_template(rule)
        self.assertTrue(template.applies_to_age(0))
        self.assertTrue(template.applies_to_age(215))
        self.assertFalse(template.applies_to_age(216))
        self.assertFalse(template.critical)

    def test_monthly_rule(self):
        rule = services.get_period_rules().get("monthly_check_fournitures")
        self.assertEqual(period_rule_to_template(rule).recurrence_kind, RecurrenceKind.MONTHLY)
