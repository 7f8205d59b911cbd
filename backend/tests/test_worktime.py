from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

import pytest

from nightclub import business_date, calculate_work_minutes, month_bounds, summarize_month
from nightclub.identifiers import generate_menu_id, generate_receipt_id, generate_visit_id
from nightclub.worktime import as_utc, business_day_window


@dataclass
class Shift:
    check_in_at: datetime | None
    check_out_at: datetime | None


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_work_minutes_floor_partial_minutes():
    start = _utc(2025, 9, 1, 11, 0)
    assert calculate_work_minutes(start, start + timedelta(hours=5, minutes=30, seconds=59)) == 330


def test_work_minutes_zero_when_open():
    assert calculate_work_minutes(_utc(2025, 9, 1, 11, 0), None) == 0
    assert calculate_work_minutes(None, _utc(2025, 9, 1, 11, 0)) == 0


def test_work_minutes_accepts_naive_utc():
    assert calculate_work_minutes(datetime(2025, 9, 1, 11, 0), _utc(2025, 9, 1, 12, 0)) == 60


def test_business_date_rolls_early_morning_into_previous_night():
    # 02:30 JST on the 2nd still belongs to the night of the 1st.
    assert business_date(_utc(2025, 9, 1, 17, 30), "Asia/Tokyo", 6) == date(2025, 9, 1)
    # 20:00 JST
    assert business_date(_utc(2025, 9, 1, 11, 0), "Asia/Tokyo", 6) == date(2025, 9, 1)
    # 06:00 JST starts a new business day.
    assert business_date(_utc(2025, 9, 1, 21, 0), "Asia/Tokyo", 6) == date(2025, 9, 2)


def test_business_day_window_spans_cutoff_to_cutoff():
    lower, upper = business_day_window(date(2025, 9, 1), date(2025, 9, 2), "Asia/Tokyo", 6)
    assert lower == _utc(2025, 8, 31, 21, 0)
    assert upper == _utc(2025, 9, 2, 21, 0)


def test_month_bounds():
    assert month_bounds("2025-02") == (date(2025, 2, 1), date(2025, 3, 1))
    assert month_bounds("2025-12") == (date(2025, 12, 1), date(2026, 1, 1))


@pytest.mark.parametrize("value", ["2025-13", "2025", "25-01", "abcd-ef", "2025-1"])
def test_month_bounds_rejects_malformed(value: str):
    with pytest.raises(ValueError):
        month_bounds(value)


def test_summarize_month_skips_open_shifts():
    shifts = [
        Shift(_utc(2025, 9, 1, 11, 0), _utc(2025, 9, 1, 17, 0)),
        Shift(_utc(2025, 9, 2, 11, 0), _utc(2025, 9, 2, 15, 30)),
        Shift(_utc(2025, 9, 3, 11, 0), None),
    ]
    stats = summarize_month(shifts)
    assert stats.total_minutes == 360 + 270
    assert stats.work_days == 2


def test_as_utc_normalises_offsets():
    jst = timezone(timedelta(hours=9))
    assert as_utc(datetime(2025, 9, 2, 2, 0, tzinfo=jst)) == _utc(2025, 9, 1, 17, 0)
    assert as_utc(datetime(2025, 9, 1, 17, 0)).tzinfo is timezone.utc


def test_identifiers_carry_prefix_and_date():
    moment = datetime(2025, 8, 30, 21, 0)
    assert re.fullmatch(r"RCPT-20250830-[0-9a-f]{6}", generate_receipt_id(moment))
    assert re.fullmatch(r"ATD-20250830-[0-9a-f]{6}", generate_visit_id(moment))
    assert re.fullmatch(r"MENU-20250830-[0-9a-f]{6}", generate_menu_id(moment))
    assert len({generate_receipt_id(moment) for _ in range(50)}) > 1
