"""Property-based tests for interval arithmetic using hypothesis."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from src.hourtracker.core.intervals import (
    compute_duration_minutes,
    intervals_overlap,
    normalize_instant,
)

pytestmark = pytest.mark.unit

BASE = datetime(2024, 1, 1)

# Intervals as (start, end) with end strictly after start, at microsecond resolution
offsets = st.integers(min_value=0, max_value=10 * 24 * 3600 * 1_000_000)
lengths = st.integers(min_value=1, max_value=24 * 3600 * 1_000_000)


@st.composite
def intervals(draw) -> tuple[datetime, datetime]:
    start = BASE + timedelta(microseconds=draw(offsets))
    return start, start + timedelta(microseconds=draw(lengths))


@given(a=intervals(), b=intervals())
@settings(max_examples=200)
def test_overlap_is_symmetric(a, b):
    """overlap(A, B) == overlap(B, A) for every pair of intervals."""
    assert intervals_overlap(*a, *b) == intervals_overlap(*b, *a)


@given(a=intervals())
def test_interval_overlaps_itself(a):
    assert intervals_overlap(*a, *a)


@given(a=intervals(), gap=st.integers(min_value=0, max_value=3600 * 1_000_000), length=lengths)
def test_adjacent_or_later_intervals_do_not_overlap(a, gap, length):
    """An interval starting at or after another's end never overlaps it."""
    b_start = a[1] + timedelta(microseconds=gap)
    b_end = b_start + timedelta(microseconds=length)
    assert not intervals_overlap(*a, b_start, b_end)


def test_adjacent_hours():
    assert not intervals_overlap(
        datetime(2024, 1, 1, 10), datetime(2024, 1, 1, 11),
        datetime(2024, 1, 1, 11), datetime(2024, 1, 1, 12),
    )  # fmt: skip


def test_containment_overlaps():
    assert intervals_overlap(
        datetime(2024, 1, 1, 9), datetime(2024, 1, 1, 17),
        datetime(2024, 1, 1, 12), datetime(2024, 1, 1, 13),
    )  # fmt: skip


@given(minutes=st.integers(min_value=0, max_value=100_000))
def test_whole_minutes_are_exact(minutes: int):
    assert compute_duration_minutes(BASE, BASE + timedelta(minutes=minutes)) == minutes


@given(
    minutes=st.integers(min_value=0, max_value=100_000),
    extra_us=st.integers(min_value=0, max_value=59_999_999),
)
def test_duration_rounds_half_up(minutes: int, extra_us: int):
    """Remainders of 30s or more round up; anything less rounds down."""
    end = BASE + timedelta(minutes=minutes, microseconds=extra_us)
    expected = minutes + 1 if extra_us >= 30_000_000 else minutes
    assert compute_duration_minutes(BASE, end) == expected


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(29, 0), (30, 1), (89, 1), (90, 2), (5399, 90), (5400, 90)],
)
def test_duration_rounding_boundaries(seconds: int, expected: int):
    assert compute_duration_minutes(BASE, BASE + timedelta(seconds=seconds)) == expected


def test_normalize_converts_aware_to_naive_utc():
    aware = datetime(2024, 6, 1, 12, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert normalize_instant(aware) == datetime(2024, 6, 1, 17, 0)
    assert normalize_instant(aware).tzinfo is None


def test_normalize_leaves_naive_untouched():
    naive = datetime(2024, 6, 1, 12, 0)
    assert normalize_instant(naive) is naive


@given(a=intervals(), shift_hours=st.integers(min_value=-12, max_value=14))
def test_overlap_ignores_source_timezone(a, shift_hours: int):
    """The same instants expressed in any offset compare identically after normalising."""
    tz = timezone(timedelta(hours=shift_hours))
    start = a[0].replace(tzinfo=UTC).astimezone(tz)
    end = a[1].replace(tzinfo=UTC).astimezone(tz)
    assert intervals_overlap(normalize_instant(start), normalize_instant(end), *a)
