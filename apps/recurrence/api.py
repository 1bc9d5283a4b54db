"""
API Router for Recurrence app.
Stateless helpers used by task forms: preview dates and label rules.
"""
from typing import List
from ninja import Router
from ninja.errors import HttpError
from django.http import HttpRequest

from .schemas import PreviewIn, LabelIn, CronIn, PreviewOut, LabelOut, RuleOut, PresetOut
from .cron import parse_cron_pattern
from . import services

router = Router(tags=["Recurrence"])

MAX_PREVIEW_COUNT = 50


def require_auth(request: HttpRequest):
    """Ensure user is authenticated."""
    if not request.user.is_authenticated:
        raise HttpError(401, "Unauthorized")


@router.post("/preview", response=PreviewOut, auth=None)
def preview_rule(request: HttpRequest, payload: PreviewIn):
    """Upcoming occurrences of a rule, starting after `start_date`."""
    require_auth(request)
    if payload.count < 1 or payload.count > MAX_PREVIEW_COUNT:
        raise HttpError(400, f"count must be between 1 and {MAX_PREVIEW_COUNT}")

    try:
        occurrences = services.preview(payload.rule, payload.start_date, payload.count)
        return PreviewOut(
            label=services.label(payload.rule, payload.locale),
            next_occurrence=occurrences[0] if occurrences else None,
            occurrences=occurrences,
        )
    except ValueError as e:
        raise HttpError(400, str(e))


@router.post("/label", response=LabelOut, auth=None)
def label_rule(request: HttpRequest, payload: LabelIn):
    require_auth(request)
    try:
        return LabelOut(label=services.label(payload.rule, payload.locale))
    except ValueError as e:
        raise HttpError(400, str(e))


@router.post("/cron", response=RuleOut, auth=None)
def parse_cron(request: HttpRequest, payload: CronIn):
    """Translate a cron pattern into a recurrence rule."""
    require_auth(request)
    try:
        rule = parse_cron_pattern(payload.pattern)
    except ValueError as e:
        raise HttpError(400, str(e))
    return RuleOut(rule=rule.to_dict(), label=services.label(rule, payload.locale))


@router.get("/presets", response=List[PresetOut], auth=None)
def list_presets(request: HttpRequest, locale: str = "en"):
    require_auth(request)
    return [PresetOut(**preset) for preset in services.list_presets(locale)]
