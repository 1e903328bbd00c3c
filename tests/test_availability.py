from datetime import date, time, timedelta

import pytest

from tablebook.extensions import db
from tablebook.models import Reservation, ReservationStatus
from tablebook.services.availability import AvailabilityChecker
from tablebook.utils.time import shift_time

from .conftest import DAY, add_reservation


@pytest.fixture
def checker(app):
    return AvailabilityChecker(db.session)


def test_empty_table_set_is_always_available(checker, tables):
    add_reservation(at=time(19, 0), table_ids=[tables[1]])
    assert checker.is_available([], DAY, time(19, 0)) is True


@pytest.mark.parametrize("at", [time(17, 1), time(18, 0), time(19, 0), time(20, 30), time(20, 59)])
def test_booking_within_two_hours_conflicts(checker, tables, at):
    add_reservation(at=time(19, 0), table_ids=[tables[1]])
    assert checker.is_available([tables[1]], DAY, at) is False


@pytest.mark.parametrize("at", [time(17, 0), time(21, 0), time(12, 0), time(23, 30)])
def test_exactly_two_hours_apart_is_allowed(checker, tables, at):
    add_reservation(at=time(19, 0), table_ids=[tables[1]])
    assert checker.is_available([tables[1]], DAY, at) is True


def test_conflict_on_any_requested_table_blocks_the_set(checker, tables):
    add_reservation(at=time(19, 0), table_ids=[tables[2]])
    assert checker.is_available([tables[1], tables[2]], DAY, time(19, 30)) is False
    assert checker.is_available([tables[1], tables[3]], DAY, time(19, 30)) is True


def test_other_dates_do_not_conflict(checker, tables):
    add_reservation(day=DAY + timedelta(days=1), at=time(19, 0), table_ids=[tables[1]])
    assert checker.is_available([tables[1]], DAY, time(19, 0)) is True


def test_cancelled_booking_frees_the_slot(checker, tables):
    reservation_id = add_reservation(at=time(19, 0), table_ids=[tables[1]])
    assert checker.is_available([tables[1]], DAY, time(19, 0)) is False

    db.session.get(Reservation, reservation_id).status = ReservationStatus.CANCELLED
    db.session.commit()

    assert checker.is_available([tables[1]], DAY, time(19, 0)) is True


@pytest.mark.parametrize("status", [ReservationStatus.PENDING, ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED])
def test_every_non_cancelled_status_blocks(checker, tables, status):
    add_reservation(at=time(19, 0), table_ids=[tables[1]], status=status)
    assert checker.is_available([tables[1]], DAY, time(19, 0)) is False


def test_window_is_clamped_at_the_start_of_the_day(checker, tables):
    add_reservation(at=time(0, 30), table_ids=[tables[1]])
    assert checker.is_available([tables[1]], DAY, time(1, 0)) is False
    assert checker.is_available([tables[1]], DAY, time(2, 30)) is True


def test_window_is_clamped_at_the_end_of_the_day(checker, tables):
    add_reservation(at=time(23, 30), table_ids=[tables[1]])
    assert checker.is_available([tables[1]], DAY, time(22, 0)) is False
    assert checker.is_available([tables[1]], DAY, time(21, 30)) is True


def test_excluded_reservation_does_not_block_itself(checker, tables):
    reservation_id = add_reservation(at=time(19, 0), table_ids=[tables[1]])
    assert checker.is_available([tables[1]], DAY, time(19, 0), exclude_reservation_id=reservation_id) is True


def test_available_tables_skip_switched_off_and_booked(checker, tables):
    add_reservation(at=time(19, 0), table_ids=[tables[2], tables[3]])

    available = checker.get_available_tables(DAY, time(20, 0))
    numbers = [t.number for t in available]

    assert numbers == ["1", "4", "5"]
    assert all(t.is_available for t in available)


def test_available_tables_ignore_cancelled_and_distant_bookings(checker, tables):
    add_reservation(at=time(19, 0), table_ids=[tables[2]], status=ReservationStatus.CANCELLED)
    add_reservation(at=time(12, 0), table_ids=[tables[3]])

    numbers = [t.number for t in checker.get_available_tables(DAY, time(19, 0))]
    assert numbers == ["1", "2", "3", "4", "5"]


def test_available_tables_are_ordered_by_number(checker, tables):
    numbers = [t.number for t in checker.get_available_tables(date(2030, 1, 1), time(12, 0))]
    assert numbers == sorted(numbers)


@pytest.mark.parametrize("t, delta, expected", [
    (time(19, 0), timedelta(minutes=-120), time(17, 0)),
    (time(19, 0), timedelta(minutes=120), time(21, 0)),
    (time(1, 0), timedelta(minutes=-120), None),
    (time(22, 0), timedelta(minutes=120), None),
    (time(21, 59, 59), timedelta(minutes=120), time(23, 59, 59)),
])
def test_shift_time(t, delta, expected):
    assert shift_time(t, delta) == expected
