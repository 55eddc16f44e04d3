"""
Tests for time-based HU number generation.
"""

import pytest
from datetime import datetime

from label_service.label_generation.identifier import generate_hu_number


class TestGenerateHUNumber:
    """Tests for HU number structure."""

    def test_known_time(self):
        """Test HU number for 10:30:45 in week 2518."""
        hu = generate_hu_number("2518", now=datetime(2025, 4, 29, 10, 30, 45))

        assert hu == "1103045" + "2518" + "V" + "3000594"

    def test_structure(self):
        """Test length and fixed positions."""
        hu = generate_hu_number("2518", now=datetime(2025, 4, 29, 7, 5, 9))

        assert len(hu) == 19
        assert hu[0] == "1"
        assert hu[1:7] == "070509"
        assert hu[7:11] == "2518"
        assert hu[11] == "V"
        assert hu[12:] == "3000594"

    def test_midnight_is_zero_padded(self):
        """Test time component keeps leading zeros."""
        hu = generate_hu_number("2501", now=datetime(2024, 12, 31, 0, 0, 0))

        assert hu.startswith("1000000")

    def test_different_seconds_differ(self):
        """Test refresh at another second yields a new HU number."""
        first = generate_hu_number("2518", now=datetime(2025, 4, 29, 10, 30, 45))
        second = generate_hu_number("2518", now=datetime(2025, 4, 29, 10, 30, 46))

        assert first != second

    def test_same_second_is_identical(self):
        """Test two refreshes in the same second give the same number."""
        now = datetime(2025, 4, 29, 10, 30, 45, 1000)
        later = datetime(2025, 4, 29, 10, 30, 45, 999000)

        assert generate_hu_number("2518", now=now) == generate_hu_number("2518", now=later)

    def test_custom_vendor_code(self):
        """Test vendor code override."""
        hu = generate_hu_number("2518", now=datetime(2025, 4, 29, 10, 30, 45), vendor_code="14881")

        assert hu.endswith("V14881")

    def test_defaults_to_wall_clock(self):
        """Test generation without explicit time."""
        hu = generate_hu_number("2518")

        assert len(hu) == 19
        assert hu[7:11] == "2518"
