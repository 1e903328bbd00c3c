
import enum
from datetime import datetime, timezone
from .extensions import db


class ReservationStatus(enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


reservation_tables = db.Table(
    "reservation_tables",
    db.Column("reservation_id", db.Integer, db.ForeignKey("reservations.id", ondelete="CASCADE"), primary_key=True),
    db.Column("table_id", db.Integer, db.ForeignKey("tables.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class DiningTable(db.Model):
    __tablename__ = "tables"
    id = db.Column(db.Integer, primary_key=True)
    number = db.Column(db.String(16), nullable=False, unique=True)
    capacity = db.Column(db.Integer, nullable=False)
    is_available = db.Column(db.Boolean, nullable=False, default=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "number": self.number,
            "capacity": self.capacity,
            "isAvailable": self.is_available,
        }


class Reservation(db.Model):
    __tablename__ = "reservations"
    id = db.Column(db.Integer, primary_key=True)
    customer_name = db.Column(db.String(120), nullable=False)
    customer_email = db.Column(db.String(255), nullable=False, index=True)
    customer_phone = db.Column(db.String(32))
    reservation_date = db.Column(db.Date, nullable=False, index=True)
    reservation_time = db.Column(db.Time, nullable=False)
    guests = db.Column(db.Integer, nullable=False)
    note = db.Column(db.Text)
    status = db.Column(db.Enum(ReservationStatus, name="reservation_status"), nullable=False, default=ReservationStatus.PENDING)

    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime)

    # Links are written with explicit deletes/inserts on reservation_tables, never through this collection.
    tables = db.relationship("DiningTable", secondary=reservation_tables, viewonly=True, order_by=DiningTable.id)

    @property
    def table_ids(self) -> list[int]:
        return [t.id for t in self.tables]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.customer_name,
            "email": self.customer_email,
            "phone": self.customer_phone,
            "date": self.reservation_date.isoformat(),
            "time": self.reservation_time.strftime("%H:%M"),
            "guests": self.guests,
            "tableIds": self.table_ids,
            "note": self.note,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
