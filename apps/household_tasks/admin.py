from django.contrib import admin
from .models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['title', 'deadline', 'status', 'source', 'is_critical', 'household_id']
    list_filter = ['status', 'source', 'is_critical', 'priority']
    search_fields = ['title', 'template_id', 'generation_key']
