"""
Tests for ISO week date codes.
"""

import re
import pytest
from datetime import date, datetime, timedelta

from label_service.label_generation.date_code import date_code, iso_week_number


class TestISOWeekNumber:
    """Tests for ISO-8601 week numbering."""

    def test_mid_year_week(self):
        """Test an ordinary mid-year date."""
        assert iso_week_number(date(2025, 4, 29)) == 18

    def test_december_in_week_one(self):
        """Test that 2024-12-31 (Tuesday) belongs to week 1 of 2025."""
        assert iso_week_number(date(2024, 12, 31)) == 1

    def test_january_in_previous_year_week(self):
        """Test that 2021-01-01 (Friday) belongs to week 53 of 2020."""
        assert iso_week_number(date(2021, 1, 1)) == 53

    def test_sunday_counts_as_end_of_week(self):
        """Test that Sunday stays in the week of the preceding Monday."""
        monday = date(2025, 4, 28)
        sunday = monday + timedelta(days=6)

        assert iso_week_number(monday) == iso_week_number(sunday)
        assert iso_week_number(sunday + timedelta(days=1)) == iso_week_number(monday) + 1


class TestDateCode:
    """Tests for YYWW date code formatting."""

    def test_date_code_format(self):
        """Test date code for a mid-year date."""
        assert date_code(date(2025, 4, 29)) == "2518"

    def test_week_is_zero_padded(self):
        """Test single-digit weeks are padded to two digits."""
        assert date_code(date(2025, 1, 8)) == "2502"

    def test_year_end_stays_in_previous_year(self):
        """Test 1999-12-31 (Friday) is week 52 of 1999."""
        assert date_code(date(1999, 12, 31)) == "9952"

    def test_year_end_rolls_into_next_year(self):
        """Test 2024-12-31 (Tuesday) reports the next year's suffix."""
        assert date_code(date(2024, 12, 31)) == "2501"

    def test_early_january_reports_previous_year(self):
        """Test 2021-01-03 (Sunday) reports week 53 of 2020."""
        assert date_code(date(2021, 1, 3)) == "2053"

    def test_accepts_datetime(self):
        """Test datetimes are handled like their date."""
        assert date_code(datetime(2025, 4, 29, 23, 59, 59)) == "2518"

    def test_defaults_to_today(self):
        """Test date code without argument uses today."""
        assert date_code() == date_code(date.today())

    def test_every_day_of_several_years(self):
        """Test format and week range for every day from 1999 to 2030."""
        pattern = re.compile(r"^[0-9]{2}[0-9]{2}$")
        day = date(1999, 1, 1)

        while day <= date(2030, 12, 31):
            code = date_code(day)
            assert pattern.match(code), code
            assert 1 <= int(code[2:]) <= 53
            day += timedelta(days=1)
