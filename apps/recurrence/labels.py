"""Localized wording for recurrence labels (English and French)."""
from typing import Dict, List

DEFAULT_LOCALE = "en"

LABELS: Dict[str, dict] = {
    "en": {
        "none": "No recurrence",
        "simple": {
            "daily": "Every day",
            "weekly": "Every week",
            "monthly": "Every month",
            "yearly": "Every year",
        },
        "every": {
            "daily": "Every day",
            "weekly": "Every week",
            "monthly": "Every month",
            "yearly": "Every year",
        },
        "every_n": {
            "daily": "Every {n} days",
            "weekly": "Every {n} weeks",
            "monthly": "Every {n} months",
            "yearly": "Every {n} years",
        },
        "weekdays": ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
        "months": [
            "January", "February", "March", "April", "May", "June",
            "July", "August", "September", "October", "November", "December",
        ],
        "on_weekday": "on {day}",
        "on_weekdays": "on {days}",
        "on_month_day": "on the {day}",
        "on_month_days": "on the {days}",
        "in_months": "in {months}",
        "and": "and",
        "until": "until {date}",
        "times": "{n} times",
    },
    "fr": {
        "none": "Aucune récurrence",
        "simple": {
            "daily": "Tous les jours",
            "weekly": "Toutes les semaines",
            "monthly": "Tous les mois",
            "yearly": "Tous les ans",
        },
        "every": {
            "daily": "Chaque jour",
            "weekly": "Chaque semaine",
            "monthly": "Chaque mois",
            "yearly": "Chaque année",
        },
        "every_n": {
            "daily": "Tous les {n} jours",
            "weekly": "Toutes les {n} semaines",
            "monthly": "Tous les {n} mois",
            "yearly": "Tous les {n} ans",
        },
        "weekdays": ["dimanche", "lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi"],
        "months": [
            "janvier", "février", "mars", "avril", "mai", "juin",
            "juillet", "août", "septembre", "octobre", "novembre", "décembre",
        ],
        "on_weekday": "le {day}",
        "on_weekdays": "les {days}",
        "on_month_day": "le {day}",
        "on_month_days": "les {days}",
        "in_months": "en {months}",
        "and": "et",
        "until": "jusqu'au {date}",
        "times": "{n} fois",
    },
}

PRESET_LABELS: Dict[str, Dict[str, str]] = {
    "en": {
        "daily": "Every day",
        "weekdays": "Weekdays",
        "weekly": "Every week",
        "biweekly": "Every two weeks",
        "monthly": "Every month",
        "quarterly": "Every quarter",
        "yearly": "Every year",
    },
    "fr": {
        "daily": "Tous les jours",
        "weekdays": "Jours de semaine",
        "weekly": "Toutes les semaines",
        "biweekly": "Toutes les deux semaines",
        "monthly": "Tous les mois",
        "quarterly": "Tous les trimestres",
        "yearly": "Tous les ans",
    },
}


def wording(locale: str) -> dict:
    return LABELS.get((locale or DEFAULT_LOCALE).lower()[:2], LABELS[DEFAULT_LOCALE])


def ordinal(day: int, locale: str) -> str:
    if locale == "fr":
        return "1er" if day == 1 else str(day)
    if 10 <= day % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def join_words(words: List[str], conjunction: str) -> str:
    """'a', 'a and b', 'a, b and c'."""
    if len(words) <= 1:
        return "".join(words)
    return f"{', '.join(words[:-1])} {conjunction} {words[-1]}"


NO_RECURRENCE = {locale: words["none"] for locale, words in LABELS.items()}
