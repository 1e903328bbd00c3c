"""Table availability at a given date and time.

Two bookings of the same table conflict when they fall on the same calendar
day, neither is cancelled, and their times are strictly less than
``CONFLICT_WINDOW`` apart. Exactly two hours apart is allowed.
"""
import logging
from datetime import date, time, timedelta
from sqlalchemy import func, select
from ..models import DiningTable, Reservation, ReservationStatus, reservation_tables
from ..utils.time import shift_time

log = logging.getLogger(__name__)

CONFLICT_WINDOW = timedelta(minutes=120)


def window_conditions(at: time) -> list:
    """Open interval (at - window, at + window) on the stored time, clamped to the day."""
    conditions = []
    at = at.replace(second=0, microsecond=0)
    lower = shift_time(at, -CONFLICT_WINDOW)
    upper = shift_time(at, CONFLICT_WINDOW)
    if lower is not None:
        conditions.append(Reservation.reservation_time > lower)
    if upper is not None:
        conditions.append(Reservation.reservation_time < upper)
    return conditions


class AvailabilityChecker:

    def __init__(self, session):
        self.session = session

    def conflicting_table_ids(self, on: date, at: time, exclude_reservation_id: int | None = None):
        """Select of table ids held by an active reservation inside the window."""
        stmt = (
            select(reservation_tables.c.table_id)
            .join(Reservation, Reservation.id == reservation_tables.c.reservation_id)
            .where(
                Reservation.reservation_date == on,
                Reservation.status != ReservationStatus.CANCELLED,
                *window_conditions(at),
            )
        )
        if exclude_reservation_id is not None:
            stmt = stmt.where(Reservation.id != exclude_reservation_id)
        return stmt

    def is_available(self, table_ids, on: date, at: time, exclude_reservation_id: int | None = None) -> bool:
        table_ids = list(table_ids)
        if not table_ids:
            return True

        conflicts = self.conflicting_table_ids(on, at, exclude_reservation_id).where(
            reservation_tables.c.table_id.in_(table_ids)
        )
        count = self.session.execute(
            select(func.count()).select_from(conflicts.subquery())
        ).scalar_one()

        if count:
            log.debug("Tables %s blocked on %s at %s (%d conflicting bookings)", table_ids, on, at, count)
        return count == 0

    def get_available_tables(self, on: date, at: time) -> list[DiningTable]:
        stmt = (
            select(DiningTable)
            .where(
                DiningTable.is_available.is_(True),
                DiningTable.id.not_in(self.conflicting_table_ids(on, at)),
            )
            .order_by(DiningTable.number.asc())
        )
        return list(self.session.execute(stmt).scalars())
