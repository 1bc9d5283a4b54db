from django.contrib import admin
from .models import Household, Child, HouseholdTemplateSettings


@admin.register(Household)
class HouseholdAdmin(admin.ModelAdmin):
    list_display = ['name', 'country', 'timezone', 'locale', 'is_active']
    list_filter = ['country', 'is_active']
    search_fields = ['name']


@admin.register(Child)
class ChildAdmin(admin.ModelAdmin):
    list_display = ['first_name', 'birthdate', 'household_id', 'is_active']
    list_filter = ['is_active']
    search_fields = ['first_name']


@admin.register(HouseholdTemplateSettings)
class HouseholdTemplateSettingsAdmin(admin.ModelAdmin):
    list_display = ['household_id', 'template_id', 'is_enabled', 'custom_days_before', 'custom_weight']
    list_filter = ['is_enabled']
    search_fields = ['template_id']
