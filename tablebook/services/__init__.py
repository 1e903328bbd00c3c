from flask import current_app
from ..extensions import db
from .reservations import ReservationService
from .tables import TableService


def reservation_service() -> ReservationService:
    return ReservationService(
        db.session,
        daily_cap=current_app.config["MAX_RESERVATIONS_PER_DAY"],
        serialize=current_app.config["SERIALIZE_ADMISSION"],
    )


def table_service() -> TableService:
    return TableService(db.session)
