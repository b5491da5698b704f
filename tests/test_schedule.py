"""Tests for the daily load windows and the brunch buffer."""

from datetime import datetime, time, timezone

import pytest

from dishrota.schedule import (
    AFTERNOON_WINDOW,
    BRUNCH_BUFFER,
    LOAD_WINDOWS,
    NIGHT_WINDOW,
    brunch_warning,
    in_brunch_buffer,
    schedule_lines,
)


class TestBrunchBuffer:
    """11:00 up to 14:00 local time."""

    @pytest.mark.parametrize(
        "clock,expected",
        [
            (time(10, 59), False),
            (time(11, 0), True),
            (time(13, 59), True),
            (time(14, 0), False),
            (time(21, 30), False),
        ],
    )
    def test_boundaries(self, clock: time, expected: bool):
        """Start is inside, end is outside."""
        assert in_brunch_buffer(clock) is expected

    def test_datetime_uses_wall_clock(self):
        """An aware datetime is judged by its own clock time."""
        assert in_brunch_buffer(datetime(2026, 5, 3, 12, 15, tzinfo=timezone.utc))

    def test_warning_text(self):
        """The warning names the buffer hours."""
        warning = brunch_warning(time(12, 0))

        assert warning is not None
        assert "11:00-14:00" in warning

    def test_no_warning_outside(self):
        """Outside the buffer there is no warning."""
        assert brunch_warning(time(15, 0)) is None


class TestLoadWindows:
    """The afternoon and night anchors."""

    def test_windows_by_kind(self):
        """Each load kind has its window."""
        assert LOAD_WINDOWS == {"afternoon": AFTERNOON_WINDOW, "night": NIGHT_WINDOW}

    def test_afternoon_is_open_ended(self):
        """The 3 PM load may run any time after 14:00."""
        assert not AFTERNOON_WINDOW.contains(time(13, 59))
        assert AFTERNOON_WINDOW.contains(time(14, 0))
        assert AFTERNOON_WINDOW.contains(time(23, 59))
        assert AFTERNOON_WINDOW.target == time(15, 0)

    def test_night_window(self):
        """Night load runs 21:00 up to 23:00."""
        assert not NIGHT_WINDOW.contains(time(20, 59))
        assert NIGHT_WINDOW.contains(time(22, 59))
        assert not NIGHT_WINDOW.contains(time(23, 0))

    def test_schedule_lines(self):
        """Loads are listed before the brunch buffer."""
        assert schedule_lines() == [
            "3 PM load: after 14:00, aim for 15:00",
            "Night load: 21:00-23:00, unload before bed",
            "Brunch buffer: 11:00-14:00, don't run the dishwasher",
        ]
        assert BRUNCH_BUFFER.describe() == schedule_lines()[-1]
