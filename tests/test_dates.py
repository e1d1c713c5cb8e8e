"""Tests des formats de date de l'API."""

from __future__ import annotations

import datetime

import pytest

from l2ldispatch.core.utils.dates import format_minute, format_seconds, site_now


def test_formats_use_calendar_year_and_zero_padding() -> None:
    # 2024-12-30 tombe dans la semaine ISO 1 de 2025 : l'année calendaire doit rester 2024
    value = datetime.datetime(2024, 12, 30, 7, 5, 9)

    assert format_minute(value) == "2024-12-30 07:05"
    assert format_seconds(value) == "2024-12-30 07:05:09"


def test_site_now_is_expressed_in_the_site_zone() -> None:
    now = site_now("America/Chicago")

    assert now.tzinfo is not None
    assert now.tzinfo.key == "America/Chicago"


def test_site_now_without_zone_is_local_naive_time() -> None:
    assert site_now().tzinfo is None


def test_site_now_rejects_unknown_zone() -> None:
    with pytest.raises(ValueError, match="Unknown timezone"):
        site_now("Nowhere/Special")
