"""Tests for payment schedules: descriptor parsing, due dates, period starts."""

import pytest
from datetime import date

from payrun.sdk.schedule import (
    EPOCH_MONDAY,
    InvalidScheduleError,
    ScheduleBook,
    ScheduleExistsError,
    UnknownScheduleError,
    is_due,
    last_business_day,
    parse_schedule,
    period_start,
    weeks_since_epoch,
)


class TestParseSchedule:
    """Descriptor grammar."""

    @pytest.mark.parametrize("text", [
        "monthly 1", "monthly 28", "monthly $",
        "weekly 1", "weekly 7", "weekly 2 5", "weekly 52 1",
    ])
    def test_valid_descriptors(self, text):
        assert parse_schedule(text).text == text

    @pytest.mark.parametrize("text", [
        "", "monthly", "monthly 0", "monthly 29", "monthly x",
        "weekly 0", "weekly 8", "weekly 0 5", "weekly 53 5", "weekly 2 8",
        "yearly 1", "monthly  $", "weekly 2 5 1",
    ])
    def test_invalid_descriptors(self, text):
        with pytest.raises(InvalidScheduleError):
            parse_schedule(text)

    def test_parsed_fields(self):
        schedule = parse_schedule("weekly 2 5")
        assert schedule.is_weekly
        assert schedule.frequency == 2
        assert schedule.day == 5

        last = parse_schedule("monthly $")
        assert last.is_monthly
        assert last.day is None

    def test_identity_is_text(self):
        """Equal text means equal schedules, and they hash alike."""
        assert parse_schedule("weekly 5") == parse_schedule("weekly 5")
        assert parse_schedule("weekly 5") != parse_schedule("weekly 1 5")
        assert len({parse_schedule("monthly $"), parse_schedule("monthly $")}) == 1


class TestWeeklyDue:
    """Weekly schedules anchored on the epoch Monday."""

    def test_epoch_is_monday(self):
        assert EPOCH_MONDAY.isoweekday() == 1

    def test_every_friday(self):
        schedule = parse_schedule("weekly 1 5")
        assert is_due(schedule, None, date(2004, 12, 31))
        assert is_due(schedule, None, date(2005, 1, 7))
        assert is_due(schedule, None, date(2005, 1, 14))
        assert not is_due(schedule, None, date(2005, 1, 6))

    def test_every_other_friday_anchored_at_week_zero(self):
        schedule = parse_schedule("weekly 2 5")
        assert weeks_since_epoch(date(2004, 12, 31)) == 0
        assert is_due(schedule, None, date(2004, 12, 31))
        assert not is_due(schedule, None, date(2005, 1, 7))
        assert is_due(schedule, None, date(2005, 1, 14))
        assert is_due(schedule, None, date(2005, 1, 28))

    def test_never_due_before_epoch(self):
        schedule = parse_schedule("weekly 1 5")
        assert not is_due(schedule, None, date(2004, 12, 24))

    def test_not_due_before_hire_date(self):
        schedule = parse_schedule("weekly 2 5")
        assert not is_due(schedule, date(2005, 1, 1), date(2004, 12, 31))
        assert is_due(schedule, date(2005, 1, 1), date(2005, 1, 14))


class TestMonthlyDue:
    """Fixed-day and last-business-day monthly schedules."""

    def test_fixed_day(self):
        schedule = parse_schedule("monthly 15")
        assert is_due(schedule, None, date(2005, 2, 15))
        assert not is_due(schedule, None, date(2005, 2, 14))

    def test_last_business_day_on_weekday(self):
        # 2005-01-31 is a Monday
        schedule = parse_schedule("monthly $")
        assert is_due(schedule, None, date(2005, 1, 31))

    def test_last_business_day_walks_back_from_saturday(self):
        # 2005-04-30 is a Saturday
        schedule = parse_schedule("monthly $")
        assert last_business_day(date(2005, 4, 1)) == date(2005, 4, 29)
        assert is_due(schedule, None, date(2005, 4, 29))
        assert not is_due(schedule, None, date(2005, 4, 30))

    def test_last_business_day_walks_back_from_sunday(self):
        # 2005-07-31 is a Sunday
        assert last_business_day(date(2005, 7, 10)) == date(2005, 7, 29)

    def test_hire_date_blocks_monthly(self):
        schedule = parse_schedule("monthly $")
        assert not is_due(schedule, date(2005, 2, 1), date(2005, 1, 31))


class TestPeriodStart:
    """First day of the period covered by a payment."""

    def test_monthly_starts_on_first(self):
        schedule = parse_schedule("monthly $")
        assert period_start(schedule, date(2005, 1, 31), None) == date(2005, 1, 1)

    def test_weekly_goes_back_frequency_weeks(self):
        schedule = parse_schedule("weekly 2 5")
        assert period_start(schedule, date(2005, 1, 28), None) == date(2005, 1, 15)

    def test_last_paid_pushes_start_forward(self):
        schedule = parse_schedule("weekly 2 5")
        start = period_start(schedule, date(2005, 1, 28), date(2005, 1, 20))
        assert start == date(2005, 1, 21)

    def test_implied_start_wins_over_old_payment(self):
        schedule = parse_schedule("weekly 1 5")
        start = period_start(schedule, date(2005, 3, 4), date(2005, 1, 7))
        assert start == date(2005, 2, 26)

    def test_never_paid_bounded_by_hire_date(self):
        schedule = parse_schedule("monthly $")
        start = period_start(schedule, date(2005, 1, 31), None, hire_date=date(2005, 1, 10))
        assert start == date(2005, 1, 10)

    def test_hire_date_ignored_once_paid(self):
        schedule = parse_schedule("monthly $")
        start = period_start(schedule, date(2005, 2, 28), date(2005, 1, 31), hire_date=date(2005, 1, 10))
        assert start == date(2005, 2, 1)


class TestScheduleBook:
    """Available descriptors: built-ins plus registered ones."""

    def test_builtins_available(self):
        book = ScheduleBook()
        assert book.available() == ["weekly 5", "monthly $", "weekly 2 5"]
        assert "monthly $" in book

    def test_register_custom(self):
        book = ScheduleBook()
        book.register("monthly 10")
        assert "monthly 10" in book
        assert book.available()[-1] == "monthly 10"

    def test_register_rejects_duplicates(self):
        book = ScheduleBook()
        with pytest.raises(ScheduleExistsError):
            book.register("weekly 5")
        book.register("monthly 10")
        with pytest.raises(ScheduleExistsError):
            book.register("monthly 10")

    def test_register_rejects_invalid(self):
        with pytest.raises(InvalidScheduleError):
            ScheduleBook().register("monthly 31")

    def test_require_unknown(self):
        with pytest.raises(UnknownScheduleError):
            ScheduleBook().require("monthly 10")

    def test_reset_keeps_builtins_only(self):
        book = ScheduleBook.from_descriptors(["monthly 10", "weekly 4 5"])
        book.reset()
        assert book.available() == ["weekly 5", "monthly $", "weekly 2 5"]
