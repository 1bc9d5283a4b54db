from django.contrib import admin
from .models import GeneratedTask


@admin.register(GeneratedTask)
class GeneratedTaskAdmin(admin.ModelAdmin):
    list_display = ['generation_key', 'status', 'deadline', 'household_id', 'acknowledged']
    list_filter = ['status', 'acknowledged']
    search_fields = ['generation_key', 'template_id']
    readonly_fields = ['generation_key', 'generated_at', 'updated_at']
