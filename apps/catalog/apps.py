import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CatalogConfig(AppConfig):
    """Builds the template catalog, the age rule store and the period rule store once per process."""
    name = "apps.catalog"
    label = "catalog"
    verbose_name = "Task catalog"

    template_catalog = None
    age_rules = None
    period_rules = None

    def ready(self):
        from .data import MILESTONE_ROWS, PERIOD_RULE_ROWS, TEMPLATE_ROWS
        from .milestones import AgeRuleStore
        from .period_rules import PeriodRuleStore
        from .templates import TemplateCatalog

        self.template_catalog = TemplateCatalog.from_rows(TEMPLATE_ROWS)
        self.age_rules = AgeRuleStore.from_rows(MILESTONE_ROWS)
        self.period_rules = PeriodRuleStore.from_rows(PERIOD_RULE_ROWS)
