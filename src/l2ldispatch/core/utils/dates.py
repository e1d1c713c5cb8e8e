"""Formats date/heure acceptés par l'API Dispatch (heure locale du site, jamais UTC)."""

from __future__ import annotations

import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

API_MINUTE_FORMAT = "%Y-%m-%d %H:%M"
API_SECONDS_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_minute(value: datetime.datetime) -> str:
    """Ex. 2024-03-05 14:07"""
    return value.strftime(API_MINUTE_FORMAT)


def format_seconds(value: datetime.datetime) -> str:
    """Ex. 2024-03-05 14:07:31"""
    return value.strftime(API_SECONDS_FORMAT)


def site_now(timezone: str | None = None) -> datetime.datetime:
    """
    Heure courante dans le fuseau du site.

    Sans fuseau, retourne l'heure locale naïve de la machine (comportement
    historique des scripts de démo). Lève ValueError si le fuseau est inconnu.
    """
    if not timezone:
        return datetime.datetime.now()
    try:
        tz = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {timezone!r}") from e
    return datetime.datetime.now(tz)
