from datetime import date, time

import pytest

from tablebook.app import create_app
from tablebook.extensions import db
from tablebook.models import DiningTable, Reservation, ReservationStatus, reservation_tables
from tablebook.schemas import ReservationRequest
from tablebook.services.reservations import ReservationService
from tablebook.services.tables import TableService

TODAY = date(2024, 5, 1)
DAY = date(2024, 6, 1)


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "MAX_RESERVATIONS_PER_DAY": 50,
        "SERIALIZE_ADMISSION": False,
        "RATE_LIMIT_PER_MINUTE": 0,
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tables(app):
    """Six tables; #6 is switched off administratively."""
    rows = [
        DiningTable(number=f"{n}", capacity=4, is_available=n != 6)
        for n in range(1, 7)
    ]
    db.session.add_all(rows)
    db.session.commit()
    return {int(t.number): t.id for t in rows}


@pytest.fixture
def service(app):
    return ReservationService(db.session, daily_cap=50, today=lambda: TODAY)


@pytest.fixture
def table_service(app):
    return TableService(db.session)


def make_request(**overrides) -> ReservationRequest:
    fields = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "555-0100",
        "date": DAY,
        "time": time(19, 0),
        "guests": 2,
        "tables": [],
        "note": None,
    }
    fields.update(overrides)
    return ReservationRequest(**fields)


def add_reservation(day=DAY, at=time(19, 0), table_ids=(), status=ReservationStatus.PENDING,
                    email="seed@example.com") -> int:
    """Writes a reservation directly, bypassing admission."""
    reservation = Reservation(
        customer_name="Seed",
        customer_email=email,
        reservation_date=day,
        reservation_time=at,
        guests=2,
        status=status,
    )
    db.session.add(reservation)
    db.session.flush()
    for table_id in table_ids:
        db.session.execute(reservation_tables.insert().values(reservation_id=reservation.id, table_id=table_id))
    db.session.commit()
    return reservation.id
