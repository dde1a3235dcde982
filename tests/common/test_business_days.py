from datetime import date, datetime

import pytest

from src.school_admin.school_admin.common.datetime_utils import (
    business_days,
    format_long_es,
    parse_iso_date,
    parse_iso_datetime,
    week_bounds,
)


def test_monday_to_saturday_is_five_days():
    assert business_days(date(2024, 1, 1), date(2024, 1, 6)) == 5


def test_return_day_is_not_counted():
    # Monday -> Tuesday covers only the Monday
    assert business_days(date(2024, 1, 1), date(2024, 1, 2)) == 1


def test_weekend_only_range_is_zero():
    assert business_days(date(2024, 1, 6), date(2024, 1, 8)) == 0


@pytest.mark.parametrize(
    "start,end",
    [
        (None, date(2024, 1, 2)),
        (date(2024, 1, 2), None),
        (date(2024, 1, 2), date(2024, 1, 2)),
        (date(2024, 1, 5), date(2024, 1, 2)),
    ],
)
def test_invalid_ranges_return_none(start, end):
    assert business_days(start, end) is None


def test_datetimes_are_compared_by_day():
    assert business_days(datetime(2024, 1, 1, 23, 0), datetime(2024, 1, 3, 1, 0)) == 2


def test_parse_api_timestamps():
    assert parse_iso_date("2024-03-04T00:00:00.000Z") == date(2024, 3, 4)
    assert parse_iso_datetime("2024-03-04T08:15:30.123Z") == datetime(2024, 3, 4, 8, 15, 30)
    assert parse_iso_datetime("2024-03-04 08:15") == datetime(2024, 3, 4, 8, 15)
    with pytest.raises(ValueError):
        parse_iso_datetime("ayer")


def test_week_runs_sunday_to_saturday():
    # 2024-03-06 is a Wednesday
    assert week_bounds(date(2024, 3, 6)) == (date(2024, 3, 3), date(2024, 3, 9))
    assert week_bounds(date(2024, 3, 3)) == (date(2024, 3, 3), date(2024, 3, 9))


def test_format_long_es():
    assert format_long_es(date(2024, 3, 4)) == "Lunes 4 de marzo de 2024"
