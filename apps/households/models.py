import uuid
from django.conf import settings
from django.db import models


def default_country():
    return getattr(settings, 'DEFAULT_HOUSEHOLD_COUNTRY', 'FR')


def default_timezone():
    return getattr(settings, 'DEFAULT_HOUSEHOLD_TIMEZONE', 'Europe/Paris')


def default_locale():
    return getattr(settings, 'DEFAULT_LOCALE', 'fr')


class Household(models.Model):
    """
    A family sharing tasks. Country selects the catalog, timezone decides
    what "today" means for generation.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    country = models.CharField(max_length=2, default=default_country, help_text="ISO-2 country code")
    timezone = models.CharField(max_length=64, default=default_timezone, help_text="IANA timezone name")
    locale = models.CharField(max_length=5, default=default_locale)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Child(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    household_id = models.UUIDField(db_index=True)  # No FK - modular boundary
    first_name = models.CharField(max_length=100)
    birthdate = models.DateField()

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['birthdate', 'first_name']
        verbose_name_plural = 'children'

    def __str__(self):
        return f"{self.first_name} ({self.birthdate})"


class HouseholdTemplateSettings(models.Model):
    """
    Per-household override of a catalog template.
    Null custom values fall back to the template defaults.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    household_id = models.UUIDField(db_index=True)
    template_id = models.CharField(max_length=100, help_text="Catalog template id or milestone:<id>")
    is_enabled = models.BooleanField(default=True)
    custom_days_before = models.PositiveIntegerField(null=True, blank=True)
    custom_weight = models.PositiveSmallIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ['household_id', 'template_id']
        verbose_name_plural = 'household template settings'

    def __str__(self):
        return f"{self.household_id} / {self.template_id}"
