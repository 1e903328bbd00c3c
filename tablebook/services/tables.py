import logging
from datetime import date, time
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from ..errors import NotFound, ReservationError, StoreFailure
from ..models import DiningTable, reservation_tables
from .availability import AvailabilityChecker

log = logging.getLogger(__name__)


class DuplicateTableNumber(ReservationError):
    code = "DUPLICATE_TABLE_NUMBER"
    status = 409


class TableService:
    """Admin management of the table pool."""

    def __init__(self, session):
        self.session = session
        self.availability = AvailabilityChecker(session)

    def get_all(self) -> list[DiningTable]:
        return list(self.session.execute(select(DiningTable).order_by(DiningTable.number.asc())).scalars())

    def get(self, table_id: int) -> DiningTable:
        table = self.session.get(DiningTable, table_id)
        if table is None:
            raise NotFound(f"Table {table_id} not found.")
        return table

    def get_available(self, on: date, at: time) -> list[DiningTable]:
        return self.availability.get_available_tables(on, at)

    def create(self, data) -> int:
        table = DiningTable(number=data.number, capacity=data.capacity, is_available=data.is_available)
        self.session.add(table)
        self._commit(data.number)
        log.info("Created table %s (#%s, seats %s)", table.id, table.number, table.capacity)
        return table.id

    def update(self, table_id: int, data) -> DiningTable:
        table = self.get(table_id)
        table.number = data.number
        table.capacity = data.capacity
        table.is_available = data.is_available
        self._commit(data.number)
        return table

    def delete(self, table_id: int) -> None:
        table = self.get(table_id)
        self.session.execute(delete(reservation_tables).where(reservation_tables.c.table_id == table.id))
        self.session.delete(table)
        self._commit(table.number)
        log.info("Deleted table %s", table_id)

    def _commit(self, number: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateTableNumber(f"Table number {number} already exists.") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            log.exception("Store failure, transaction rolled back")
            raise StoreFailure("The reservation store is unavailable.") from e
