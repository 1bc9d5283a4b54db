"""
URL configuration for Tasknest project.
"""
from django.contrib import admin
from django.urls import path
from ninja import NinjaAPI

api = NinjaAPI(
    title="Tasknest API",
    version="1.0.0",
    description="Household task generation and recurrence API",
    docs_url="/docs",
)

from apps.recurrence.api import router as recurrence_router
from apps.catalog.api import router as catalog_router
from apps.households.api import router as households_router
from apps.generation.api import router as generation_router

api.add_router("/recurrence/", recurrence_router)
api.add_router("/catalog/", catalog_router)
api.add_router("/households/", households_router)
api.add_router("/generation/", generation_router)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', api.urls),
]
