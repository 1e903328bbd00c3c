"""Rejections and failures raised by the reservation services."""


class ReservationError(Exception):
    code = "RESERVATION_ERROR"
    status = 400

    def __init__(self, message: str, details=None):
        self.message = message
        self.details = details
        super().__init__(message)


class InvalidGuestCount(ReservationError):
    code = "INVALID_GUEST_COUNT"
    status = 422


class DateInPast(ReservationError):
    code = "DATE_IN_PAST"
    status = 422


class DailyLimitReached(ReservationError):
    code = "DAILY_LIMIT_REACHED"
    status = 409


class TablesUnavailable(ReservationError):
    code = "TABLES_UNAVAILABLE"
    status = 409


class NotFound(ReservationError):
    code = "NOT_FOUND"
    status = 404


class StoreFailure(ReservationError):
    code = "STORE_FAILURE"
    status = 503
