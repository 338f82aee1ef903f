from datetime import date

from apps.ledger import weeks


class TestWeekBoundaries:

    def test_week_start_for_each_day(self):
        for day in range(1, 8):
            assert weeks.week_start_for(date(2024, 1, day)) == date(2024, 1, 1)

    def test_sunday_belongs_to_previous_monday(self):
        assert weeks.week_start_for(date(2024, 1, 14)) == date(2024, 1, 8)

    def test_week_start_across_year_boundary(self):
        assert weeks.week_start_for(date(2025, 1, 1)) == date(2024, 12, 30)

    def test_week_end(self):
        assert weeks.week_end_for(date(2024, 1, 8)) == date(2024, 1, 14)

    def test_week_days(self):
        days = weeks.week_days(date(2024, 1, 8))

        assert len(days) == 7
        assert days[0] == date(2024, 1, 8)
        assert days[-1] == date(2024, 1, 14)


class TestCompletedWeeks:

    def test_week_completed_only_after_sunday(self):
        week = date(2024, 1, 8)

        assert not weeks.is_week_completed(week, date(2024, 1, 14))
        assert weeks.is_week_completed(week, date(2024, 1, 15))

    def test_completed_week_starts_newest_first(self):
        starts = weeks.completed_week_starts(date(2024, 1, 31), 4)

        assert starts == [date(2024, 1, 22), date(2024, 1, 15), date(2024, 1, 8), date(2024, 1, 1)]

    def test_completed_weeks_on_monday(self):
        """On a Monday the week that just ended is already completed."""
        starts = weeks.completed_week_starts(date(2024, 1, 15), 1)

        assert starts == [date(2024, 1, 8)]

    def test_recent_week_starts_include_current_week(self):
        starts = weeks.recent_week_starts(date(2024, 1, 31), 3)

        assert starts == [date(2024, 1, 15), date(2024, 1, 22), date(2024, 1, 29)]
