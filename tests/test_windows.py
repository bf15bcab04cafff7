from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from pyoctopusgo.exceptions import ValidationError
from pyoctopusgo.windows import standard_windows


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=UTC)


def test_standard_windows_in_winter() -> None:
    windows = standard_windows(_utc(2024, 1, 10, 0, 0), "Europe/London")

    assert [(w.start, w.end) for w in windows] == [
        (_utc(2024, 1, 9, 23, 30), _utc(2024, 1, 10, 5, 30)),
        (_utc(2024, 1, 10, 23, 30), _utc(2024, 1, 11, 5, 30)),
    ]


def test_standard_windows_in_summer() -> None:
    windows = standard_windows(_utc(2024, 7, 25, 10, 47, 30), "Europe/London")

    assert [(w.start, w.end) for w in windows] == [
        (_utc(2024, 7, 24, 22, 30), _utc(2024, 7, 25, 4, 30)),
        (_utc(2024, 7, 25, 22, 30), _utc(2024, 7, 26, 4, 30)),
    ]


def test_standard_windows_use_local_date() -> None:
    # 23:30 UTC is already the next day in London during summer time.
    windows = standard_windows(_utc(2024, 7, 25, 23, 30), "Europe/London")

    assert windows[0].start == _utc(2024, 7, 25, 22, 30)
    assert windows[0].contains(_utc(2024, 7, 25, 23, 30))


def test_standard_windows_always_two_and_a_day_apart() -> None:
    for hour in range(24):
        windows = standard_windows(_utc(2024, 2, 14, hour, 15), "Europe/London")
        assert len(windows) == 2
        assert all(w.start < w.end for w in windows)
        assert windows[1].start - windows[0].start == timedelta(days=1)
        assert windows[0].end < windows[1].start


def test_standard_window_shortened_when_clocks_go_forward() -> None:
    windows = standard_windows(_utc(2024, 3, 31, 12, 0), "Europe/London")

    assert windows[0].start == _utc(2024, 3, 30, 23, 30)
    assert windows[0].end == _utc(2024, 3, 31, 4, 30)
    assert windows[0].end - windows[0].start == timedelta(hours=5)


def test_standard_window_lengthened_when_clocks_go_back() -> None:
    windows = standard_windows(_utc(2024, 10, 27, 12, 0), "Europe/London")

    assert windows[0].start == _utc(2024, 10, 26, 22, 30)
    assert windows[0].end == _utc(2024, 10, 27, 5, 30)
    assert windows[0].end - windows[0].start == timedelta(hours=7)


def test_standard_windows_other_zone() -> None:
    windows = standard_windows(_utc(2024, 1, 15, 12, 0), "America/New_York")

    assert windows[1].start == _utc(2024, 1, 16, 4, 30)
    assert windows[1].end == _utc(2024, 1, 16, 10, 30)


def test_standard_windows_reject_naive_now() -> None:
    with pytest.raises(ValidationError):
        standard_windows(datetime(2024, 1, 10, 0, 0), "Europe/London")
