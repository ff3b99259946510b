from datetime import date, datetime

import pytest

from leaderboard.utils.display import (
    get_formatted_date,
    get_numeric_date,
    remove_year_from_event_name,
)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("2024 Winter League", "Winter League"),
        ("2024 - Winter League", "Winter League"),
        ("Spring Open (2019)", "Spring Open"),
        ("Spring (2019) Open", "Spring Open"),
        ("Spring Open - 2023", "Spring Open"),
        ("Spring Open, 2023", "Spring Open"),
        ("Spring Open 2023", "Spring Open"),
        ("Spring 2023 Open", "Spring Open"),
        ("Class of 2015", "Class of 2015"),
        ("Winter   League", "Winter League"),
        (None, ""),
    ],
)
def test_remove_year_from_event_name(name, expected):
    assert remove_year_from_event_name(name) == expected


def test_formatted_date():
    assert get_formatted_date(date(2024, 7, 4)) == "July 4, 2024"
    assert get_formatted_date(datetime(2023, 12, 31, 18, 30)) == "December 31, 2023"
    assert get_formatted_date("2024-01-09") == "January 9, 2024"


def test_numeric_date():
    assert get_numeric_date(date(2024, 7, 4)) == "07/04/2024"
    assert get_numeric_date("2024-07-04T10:00:00") == "07/04/2024"


def test_dates_handle_missing_and_garbage():
    assert get_formatted_date(None) == ""
    assert get_numeric_date(None) == ""
    assert get_formatted_date("not a date") == "not a date"
    assert get_numeric_date("soon") == "soon"
