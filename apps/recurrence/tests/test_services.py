"""
Unit tests for recurrence services.
Covers every frequency, month-end clamping, interval phasing and labels.
"""
import random
from datetime import date, timedelta
from types import SimpleNamespace
from django.test import SimpleTestCase

from apps.core.dates import sunday_based_weekday
from apps.core.exceptions import RecurrenceValidationError, UnsupportedFrequency
from apps.recurrence import services
from apps.recurrence.cron import parse_cron_pattern
from apps.recurrence.dtos import Frequency, RecurrenceRule


class NextOccurrenceTest(SimpleTestCase):
    """Test next_occurrence for each frequency."""

    def test_none_rule_has_no_occurrence(self):
        self.assertIsNone(services.next_occurrence(None, date(2026, 1, 1)))

    def test_daily_steps_by_interval(self):
        rule = {"frequency": "daily", "interval": 3}
        self.assertEqual(services.next_occurrence(rule, date(2026, 3, 10)), date(2026, 3, 13))

    def test_daily_ignores_weekday_constraint(self):
        rule = {"frequency": "daily", "interval": 1, "byDayOfWeek": [1]}
        self.assertEqual(services.next_occurrence(rule, date(2026, 3, 10)), date(2026, 3, 11))

    def test_weekly_without_weekdays(self):
        self.assertEqual(
            services.next_occurrence({"frequency": "weekly"}, date(2026, 1, 16)),
            date(2026, 1, 23),
        )
        self.assertEqual(
            services.next_occurrence({"frequency": "weekly", "interval": 2}, date(2026, 1, 16)),
            date(2026, 1, 30),
        )

    def test_weekly_weekdays_skip_the_weekend(self):
        """Friday 2026-01-16 -> Monday 2026-01-19."""
        rule = {"frequency": "weekly", "interval": 1, "byDayOfWeek": [1, 2, 3, 4, 5]}
        self.assertEqual(services.next_occurrence(rule, date(2026, 1, 16)), date(2026, 1, 19))

    def test_weekly_interval_skips_inactive_weeks(self):
        """Every other week on Monday and Wednesday, from Wednesday 2026-01-14."""
        rule = {"frequency": "weekly", "interval": 2, "byDayOfWeek": [1, 3]}
        self.assertEqual(
            services.preview(rule, date(2026, 1, 14), 3),
            [date(2026, 1, 26), date(2026, 1, 28), date(2026, 2, 9)],
        )

    def test_monthly_clamps_to_month_end(self):
        rule = {"frequency": "monthly", "interval": 1}
        self.assertEqual(services.next_occurrence(rule, date(2026, 1, 31)), date(2026, 2, 28))

    def test_monthly_on_listed_days(self):
        rule = {"frequency": "monthly", "byDayOfMonth": [1, 15]}
        self.assertEqual(services.next_occurrence(rule, date(2026, 1, 10)), date(2026, 1, 15))
        self.assertEqual(services.next_occurrence(rule, date(2026, 1, 15)), date(2026, 2, 1))

    def test_monthly_missing_day_is_clamped(self):
        rule = {"frequency": "monthly", "byDayOfMonth": [31]}
        self.assertEqual(services.next_occurrence(rule, date(2026, 2, 1)), date(2026, 2, 28))

    def test_clamped_days_are_collapsed(self):
        rule = {"frequency": "monthly", "byDayOfMonth": [30, 31]}
        self.assertEqual(
            services.preview(rule, date(2026, 2, 1), 3),
            [date(2026, 2, 28), date(2026, 3, 30), date(2026, 3, 31)],
        )

    def test_yearly_leap_day(self):
        rule = {"frequency": "yearly"}
        self.assertEqual(services.next_occurrence(rule, date(2024, 2, 29)), date(2025, 2, 28))

    def test_yearly_on_month_and_day(self):
        rule = {"frequency": "yearly", "byMonth": [9], "byDayOfMonth": [1]}
        self.assertEqual(services.next_occurrence(rule, date(2026, 1, 10)), date(2026, 9, 1))
        self.assertEqual(services.next_occurrence(rule, date(2026, 9, 1)), date(2027, 9, 1))

    def test_month_filter_on_monthly(self):
        rule = {"frequency": "monthly", "byMonth": [6, 7]}
        self.assertEqual(services.next_occurrence(rule, date(2026, 1, 15)), date(2026, 6, 15))

    def test_end_date_stops_the_series(self):
        rule = {"frequency": "weekly", "endDate": "2026-01-20"}
        self.assertIsNone(services.next_occurrence(rule, date(2026, 1, 16)))
        self.assertIsNone(services.next_occurrence(rule, date(2026, 2, 1)))

    def test_end_date_is_inclusive(self):
        rule = {"frequency": "weekly", "endDate": "2026-01-23"}
        self.assertEqual(services.next_occurrence(rule, date(2026, 1, 16)), date(2026, 1, 23))


class PreviewTest(SimpleTestCase):
    """Test preview sequences."""

    def test_quarterly_preview(self):
        rule = {"frequency": "monthly", "interval": 3}
        self.assertEqual(
            services.preview(rule, date(2026, 1, 15), 3),
            [date(2026, 4, 15), date(2026, 7, 15), date(2026, 10, 15)],
        )

    def test_month_end_does_not_drift(self):
        rule = {"frequency": "monthly"}
        self.assertEqual(
            services.preview(rule, date(2026, 1, 31), 3),
            [date(2026, 2, 28), date(2026, 3, 31), date(2026, 4, 30)],
        )

    def test_leap_day_series(self):
        self.assertEqual(
            services.preview({"frequency": "yearly"}, date(2024, 2, 29), 4),
            [date(2025, 2, 28), date(2026, 2, 28), date(2027, 2, 28), date(2028, 2, 29)],
        )

    def test_preview_capped_by_count(self):
        rule = {"frequency": "daily", "count": 2}
        self.assertEqual(len(services.preview(rule, date(2026, 1, 1), 5)), 2)

    def test_preview_is_restartable(self):
        rule = {"frequency": "weekly", "byDayOfWeek": [0, 6]}
        first = services.preview(rule, date(2026, 1, 1), 4)
        self.assertEqual(first, services.preview(rule, date(2026, 1, 1), 4))
        self.assertEqual(first, [date(2026, 1, 3), date(2026, 1, 4), date(2026, 1, 10), date(2026, 1, 11)])

    def test_preview_without_rule(self):
        self.assertEqual(services.preview(None, date(2026, 1, 1), 3), [])

    def test_preview_non_positive_count(self):
        self.assertEqual(services.preview({"frequency": "daily"}, date(2026, 1, 1), 0), [])


class OccurrenceOnOrAfterTest(SimpleTestCase):
    """Test anchored occurrence lookup."""

    def test_monthly_anchor_survives_years(self):
        rule = {"frequency": "monthly"}
        self.assertEqual(
            services.occurrence_on_or_after(rule, date(2020, 1, 31), date(2026, 3, 1)),
            date(2026, 3, 31),
        )

    def test_target_on_an_occurrence(self):
        rule = {"frequency": "weekly"}
        self.assertEqual(
            services.occurrence_on_or_after(rule, date(2026, 1, 5), date(2026, 1, 19)),
            date(2026, 1, 19),
        )

    def test_stable_within_a_period(self):
        rule = {"frequency": "weekly"}
        origin = date(2026, 1, 5)
        self.assertEqual(
            services.occurrence_on_or_after(rule, origin, date(2026, 1, 13)),
            services.occurrence_on_or_after(rule, origin, date(2026, 1, 19)),
        )

    def test_target_before_origin(self):
        rule = {"frequency": "daily"}
        self.assertEqual(
            services.occurrence_on_or_after(rule, date(2026, 1, 10), date(2026, 1, 1)),
            date(2026, 1, 11),
        )

    def test_count_limits_the_series(self):
        rule = {"frequency": "daily", "count": 3}
        origin = date(2026, 1, 1)
        self.assertEqual(services.occurrence_on_or_after(rule, origin, date(2026, 1, 3)), date(2026, 1, 3))
        self.assertIsNone(services.occurrence_on_or_after(rule, origin, date(2026, 1, 10)))


class RuleValidationTest(SimpleTestCase):
    """Test rule construction and validation."""

    def test_zero_interval_rejected(self):
        with self.assertRaises(RecurrenceValidationError):
            services.next_occurrence({"frequency": "daily", "interval": 0}, date(2026, 1, 1))

    def test_string_interval_rejected(self):
        with self.assertRaises(RecurrenceValidationError):
            RecurrenceRule.from_dict({"frequency": "daily", "interval": "2"})

    def test_weekday_out_of_range(self):
        with self.assertRaises(RecurrenceValidationError):
            RecurrenceRule.from_dict({"frequency": "weekly", "byDayOfWeek": [7]})

    def test_month_day_out_of_range(self):
        with self.assertRaises(RecurrenceValidationError):
            RecurrenceRule.from_dict({"frequency": "monthly", "byDayOfMonth": [0]})

    def test_unknown_frequency(self):
        with self.assertRaises(UnsupportedFrequency) as ctx:
            services.next_occurrence({"frequency": "hourly"}, date(2026, 1, 1))
        self.assertEqual(ctx.exception.frequency, "hourly")

    def test_validation_errors_are_value_errors(self):
        with self.assertRaises(ValueError):
            RecurrenceRule.from_dict({"frequency": "weekly", "count": 0})

    def test_dict_round_trip_uses_camel_case(self):
        rule = RecurrenceRule.from_dict({
            "frequency": "weekly",
            "by_day_of_week": [5, 1, 1],
            "endDate": "2026-12-31",
        })
        self.assertEqual(rule.by_day_of_week, (1, 5))
        self.assertEqual(rule.to_dict(), {
            "frequency": "weekly",
            "interval": 1,
            "byDayOfWeek": [1, 5],
            "endDate": "2026-12-31",
        })


class LabelTest(SimpleTestCase):
    """Test human-readable labels."""

    def test_no_recurrence(self):
        self.assertEqual(services.label(None), "No recurrence")
        self.assertEqual(services.label(None, "fr"), "Aucune récurrence")

    def test_simple_labels(self):
        self.assertEqual(services.label({"frequency": "daily"}), "Every day")
        self.assertEqual(services.label({"frequency": "weekly"}, "fr"), "Toutes les semaines")
        self.assertEqual(services.label({"frequency": "monthly", "interval": 3}), "Every 3 months")

    def test_weekday_labels(self):
        rule = {"frequency": "weekly", "interval": 2, "byDayOfWeek": [1, 3]}
        self.assertEqual(services.label(rule), "Every 2 weeks on Monday and Wednesday")
        self.assertEqual(
            services.label({"frequency": "weekly", "byDayOfWeek": [1, 2, 5]}, "fr"),
            "Chaque semaine les lundi, mardi et vendredi",
        )
        self.assertEqual(
            services.label({"frequency": "weekly", "byDayOfWeek": [1]}, "fr"),
            "Chaque semaine le lundi",
        )

    def test_month_day_labels(self):
        self.assertEqual(services.label({"frequency": "monthly", "byDayOfMonth": [1]}, "fr"), "Chaque mois le 1er")
        self.assertEqual(
            services.label({"frequency": "yearly", "byMonth": [9], "byDayOfMonth": [1]}),
            "Every year on the 1st in September",
        )

    def test_ignored_constraints_are_not_labelled(self):
        self.assertEqual(services.label({"frequency": "daily", "byDayOfWeek": [1]}), "Every day")

    def test_unknown_locale_falls_back_to_english(self):
        self.assertEqual(services.label({"frequency": "daily"}, "de"), "Every day")


class CronPatternTest(SimpleTestCase):
    """Test cron-pattern parsing."""

    def test_shortcuts(self):
        self.assertEqual(parse_cron_pattern("@weekly").by_day_of_week, (0,))
        self.assertEqual(parse_cron_pattern("@monthly").by_day_of_month, (1,))
        yearly = parse_cron_pattern("@yearly")
        self.assertEqual((yearly.by_month, yearly.by_day_of_month), ((1,), (1,)))

    def test_fixed_date_becomes_yearly(self):
        rule = parse_cron_pattern("0 0 1 9 *")
        self.assertEqual(rule.frequency, Frequency.YEARLY)
        self.assertEqual(rule.by_month, (9,))
        self.assertEqual(rule.by_day_of_month, (1,))

    def test_weekday_list_becomes_weekly(self):
        rule = parse_cron_pattern("0 8 * * 1,3")
        self.assertEqual(rule.frequency, Frequency.WEEKLY)
        self.assertEqual(rule.by_day_of_week, (1, 3))
        self.assertEqual(parse_cron_pattern("0 0 * * 7").by_day_of_week, (0,))

    def test_month_day_becomes_monthly(self):
        rule = parse_cron_pattern("0 0 15 * *")
        self.assertEqual(rule.frequency, Frequency.MONTHLY)
        self.assertEqual(rule.by_day_of_month, (15,))

    def test_malformed_patterns(self):
        for pattern in ("0 0 1 *", "@hourly", "0 0 L * *", ""):
            with self.assertRaises(RecurrenceValidationError):
                parse_cron_pattern(pattern)


class PresetTest(SimpleTestCase):

    def test_presets_are_listed_with_labels(self):
        presets = {p["key"]: p for p in services.list_presets("fr")}
        self.assertEqual(len(presets), 7)
        self.assertEqual(presets["weekdays"]["rule"]["byDayOfWeek"], [1, 2, 3, 4, 5])
        self.assertEqual(presets["quarterly"]["label"], "Tous les trimestres")


class GeneratedRulePropertiesTest(SimpleTestCase):
    """Properties that hold for any valid rule, checked over a seeded sample."""

    def random_rule(self, rng):
        frequency = rng.choice(["daily", "weekly", "monthly", "yearly"])
        rule = {"frequency": frequency, "interval": rng.randint(1, 4)}
        if frequency == "weekly" and rng.random() < 0.7:
            rule["byDayOfWeek"] = sorted(rng.sample(range(7), rng.randint(1, 4)))
        if frequency in ("monthly", "yearly") and rng.random() < 0.5:
            rule["byDayOfMonth"] = sorted(rng.sample(range(1, 32), rng.randint(1, 3)))
        if rng.random() < 0.3:
            rule["byMonth"] = sorted(rng.sample(range(1, 13), rng.randint(1, 6)))
        return rule

    def test_occurrences_follow_the_rule(self):
        rng = random.Random(20260304)
        for _ in range(400):
            rule = self.random_rule(rng)
            reference = date(2024, 1, 1) + timedelta(days=rng.randint(0, 1500))
            with self.subTest(rule=rule, reference=reference):
                occurrence = services.next_occurrence(rule, reference)
                if occurrence is None:
                    continue
                self.assertGreater(occurrence, reference)
                if "byDayOfWeek" in rule:
                    self.assertIn(sunday_based_weekday(occurrence), rule["byDayOfWeek"])
                if "byMonth" in rule:
                    self.assertIn(occurrence.month, rule["byMonth"])

                dates = services.preview(rule, reference, 5)
                self.assertEqual(dates[0], occurrence)
                self.assertEqual(dates, sorted(set(dates)))


class UnsupportedFrequencyWalkTest(SimpleTestCase):

    def test_walk_rejects_unknown_frequency(self):
        rule = SimpleNamespace(frequency="hourly", by_month=None, end_date=None)
        with self.assertRaises(UnsupportedFrequency):
            list(services._walk(rule, date(2026, 1, 1)))
