"""Reservation admission and the reservation read/write paths.

``create`` runs the admission rules in order: guest count, past date, daily
cap, table existence, table availability. Only then is the reservation written,
together with its table links, in one transaction.

The cap and availability checks are a plain check-then-insert: two concurrent
creations can both pass before either commits. ``serialize=True`` closes that
gap by holding a per-date lock for the whole admission (an in-process lock,
plus a transaction-scoped advisory lock on PostgreSQL).
"""
import logging
import threading
import zlib
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from sqlalchemy import delete, func, insert, select, text
from sqlalchemy.exc import SQLAlchemyError
from ..errors import (
    DailyLimitReached,
    DateInPast,
    InvalidGuestCount,
    NotFound,
    StoreFailure,
    TablesUnavailable,
)
from ..models import DiningTable, Reservation, ReservationStatus, reservation_tables
from ..utils.time import today as local_today
from .availability import AvailabilityChecker

log = logging.getLogger(__name__)

DEFAULT_DAILY_CAP = 50
DISCOUNT_THRESHOLD = 3
DISCOUNT_PERCENTAGE = Decimal("20")

# Fixed stripe of locks; dates sharing a stripe are serialised together.
_ADMISSION_LOCKS = tuple(threading.Lock() for _ in range(64))


def _lock_for(day: date) -> threading.Lock:
    return _ADMISSION_LOCKS[day.toordinal() % len(_ADMISSION_LOCKS)]


@dataclass(frozen=True)
class CustomerStatistics:
    email: str
    completed_reservations: int

    @property
    def is_eligible_for_discount(self) -> bool:
        return self.completed_reservations >= DISCOUNT_THRESHOLD

    @property
    def discount_percentage(self) -> Decimal:
        return DISCOUNT_PERCENTAGE if self.is_eligible_for_discount else Decimal("0")

    def to_dict(self) -> dict:
        return {
            "email": self.email,
            "completedReservations": self.completed_reservations,
            "isEligibleForDiscount": self.is_eligible_for_discount,
            "discountPercentage": int(self.discount_percentage),
        }


class ReservationService:

    def __init__(self, session, daily_cap: int = DEFAULT_DAILY_CAP, serialize: bool = False, today=local_today):
        self.session = session
        self.daily_cap = daily_cap
        self.serialize = serialize
        self.today = today
        self.availability = AvailabilityChecker(session)

    # -- reads -------------------------------------------------------------

    def get_all(self) -> list[Reservation]:
        stmt = select(Reservation).order_by(
            Reservation.reservation_date.desc(), Reservation.reservation_time.desc()
        )
        return list(self.session.execute(stmt).scalars())

    def get_by_id(self, reservation_id: int) -> Reservation:
        reservation = self.session.get(Reservation, reservation_id)
        if reservation is None:
            raise NotFound(f"Reservation {reservation_id} not found.")
        return reservation

    def count_on(self, day: date, exclude_reservation_id: int | None = None) -> int:
        stmt = select(func.count()).select_from(Reservation).where(Reservation.reservation_date == day)
        if exclude_reservation_id is not None:
            stmt = stmt.where(Reservation.id != exclude_reservation_id)
        return self.session.execute(stmt).scalar_one()

    def get_customer_statistics(self, email: str) -> CustomerStatistics:
        email = email.strip().lower()
        completed = self.session.execute(
            select(func.count()).select_from(Reservation).where(
                Reservation.customer_email == email,
                Reservation.status == ReservationStatus.COMPLETED,
            )
        ).scalar_one()
        return CustomerStatistics(email=email, completed_reservations=completed)

    # -- admission ---------------------------------------------------------

    def create(self, data) -> int:
        """Admits and stores a reservation, returning its id."""
        if data.guests <= 0:
            raise InvalidGuestCount("Number of guests must be greater than zero.")
        if data.date < self.today():
            raise DateInPast(f"Reservation date {data.date.isoformat()} is in the past.")

        with self._admission(data.date):
            self._check_daily_cap(data.date)
            self._check_tables_exist(data.tables)
            self._check_available(data)

            reservation = Reservation(
                customer_name=data.name,
                customer_email=data.email,
                customer_phone=data.phone,
                reservation_date=data.date,
                reservation_time=data.time,
                guests=data.guests,
                note=data.note,
                status=data.status,
            )
            with self._unit_of_work():
                self.session.add(reservation)
                self.session.flush()
                self._insert_links(reservation.id, data.tables)

        log.info("Created reservation %s on %s at %s for tables %s",
                 reservation.id, data.date, data.time, data.tables)
        return reservation.id

    def update(self, reservation_id: int, data) -> Reservation:
        """Overwrites a reservation and its tables without re-running the cap or availability checks."""
        with self._store_errors():
            reservation = self.get_by_id(reservation_id)
            if data.guests <= 0:
                raise InvalidGuestCount("Number of guests must be greater than zero.")
            self._check_tables_exist(data.tables)
        return self._overwrite(reservation, data)

    def update_with_revalidation(self, reservation_id: int, data) -> Reservation:
        """Like ``update`` but re-applies the daily cap and availability, ignoring the reservation itself."""
        with self._store_errors():
            reservation = self.get_by_id(reservation_id)
        if data.guests <= 0:
            raise InvalidGuestCount("Number of guests must be greater than zero.")

        with self._admission(data.date):
            self._check_daily_cap(data.date, exclude_reservation_id=reservation.id)
            self._check_tables_exist(data.tables)
            self._check_available(data, exclude_reservation_id=reservation.id)
            return self._overwrite(reservation, data)

    def delete(self, reservation_id: int) -> None:
        with self._store_errors():
            reservation = self.get_by_id(reservation_id)
        with self._unit_of_work():
            self.session.execute(
                delete(reservation_tables).where(reservation_tables.c.reservation_id == reservation.id)
            )
            self.session.delete(reservation)
        log.info("Deleted reservation %s", reservation_id)

    # -- helpers -----------------------------------------------------------

    def _overwrite(self, reservation: Reservation, data) -> Reservation:
        with self._unit_of_work():
            reservation.customer_name = data.name
            reservation.customer_email = data.email
            reservation.customer_phone = data.phone
            reservation.reservation_date = data.date
            reservation.reservation_time = data.time
            reservation.guests = data.guests
            reservation.note = data.note
            reservation.status = data.status
            reservation.updated_at = datetime.now(timezone.utc).replace(tzinfo=None)

            self.session.execute(
                delete(reservation_tables).where(reservation_tables.c.reservation_id == reservation.id)
            )
            self._insert_links(reservation.id, data.tables)

        log.info("Updated reservation %s (status %s)", reservation.id, reservation.status.value)
        return reservation

    def _insert_links(self, reservation_id: int, table_ids) -> None:
        rows = [{"reservation_id": reservation_id, "table_id": table_id} for table_id in table_ids]
        if rows:
            self.session.execute(insert(reservation_tables), rows)

    def _check_daily_cap(self, day: date, exclude_reservation_id: int | None = None) -> None:
        count = self.count_on(day, exclude_reservation_id)
        if count >= self.daily_cap:
            raise DailyLimitReached(
                f"Reservation limit reached for {day.isoformat()}.",
                details={"count": count, "cap": self.daily_cap},
            )

    def _check_tables_exist(self, table_ids) -> None:
        if not table_ids:
            return
        found = set(self.session.execute(
            select(DiningTable.id).where(DiningTable.id.in_(table_ids))
        ).scalars())
        missing = sorted(set(table_ids) - found)
        if missing:
            raise NotFound(f"Unknown table id(s): {', '.join(map(str, missing))}.", details={"tableIds": missing})

    def _check_available(self, data, exclude_reservation_id: int | None = None) -> None:
        if not self.availability.is_available(data.tables, data.date, data.time, exclude_reservation_id):
            raise TablesUnavailable("One or more selected tables are not available for the specified time.")

    @contextmanager
    def _store_errors(self):
        """Rolls back and re-raises any database error as StoreFailure."""
        try:
            yield
        except SQLAlchemyError as e:
            self.session.rollback()
            log.exception("Store failure, transaction rolled back")
            raise StoreFailure("The reservation store is unavailable.", details=str(e.__class__.__name__)) from e

    @contextmanager
    def _unit_of_work(self):
        """Commits on success; rolls back and raises StoreFailure on any database error."""
        with self._store_errors():
            yield
            self.session.commit()

    @contextmanager
    def _admission(self, day: date):
        """Runs the checks and the write, holding the date's lock when serialising."""
        if not self.serialize:
            with self._store_errors():
                yield
            return

        with _lock_for(day), self._store_errors():
            bind = self.session.get_bind()
            if bind.dialect.name == "postgresql":
                key = zlib.crc32(day.isoformat().encode())
                self.session.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": key})
            try:
                yield
            finally:
                # Releases the advisory lock when admission was rejected; harmless after commit.
                self.session.rollback()
