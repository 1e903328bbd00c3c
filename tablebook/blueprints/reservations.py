from flask import Blueprint, request, jsonify, current_app
from datetime import datetime, timezone
from pydantic import ValidationError
from ..http import jerror, slot_args
from ..schemas import ReservationRequest
from ..services import reservation_service
from ..utils.time import parse_date

bp = Blueprint("reservations", __name__)

_rate_state: dict[str, tuple[int, int]] = {}
_RATE_WINDOW = 60

def _allow(ip: str) -> bool:
    limit = current_app.config["RATE_LIMIT_PER_MINUTE"]
    if limit <= 0:
        return True
    now = int(datetime.now(tz=timezone.utc).timestamp())
    window = now // _RATE_WINDOW
    count, win = _rate_state.get(ip, (0, window))
    if win != window:
        count, win = 0, window
    count += 1
    _rate_state[ip] = (count, win)
    return count <= limit


def _client_ip() -> str:
    fwd = request.headers.get("X-Forwarded-For")
    return (fwd.split(",")[0].strip() if fwd else request.remote_addr or "0.0.0.0")


def _parse_payload():
    payload = request.get_json(silent=True)
    if not payload:
        return None, jerror(400, "INVALID_PAYLOAD", "Missing or invalid JSON payload.")
    try:
        return ReservationRequest.model_validate(payload), None
    except ValidationError as e:
        return None, jerror(422, "VALIDATION_ERROR", "Invalid input.", details=e.errors(include_url=False, include_context=False))


@bp.get("/availability")
def availability():
    on, at, err = slot_args()
    if err:
        return err

    raw = request.args.get("tables", "")
    try:
        table_ids = [int(part) for part in raw.split(",") if part.strip()]
    except ValueError as e:
        return jerror(422, "BAD_TABLES", "Table ids must be a comma-separated list of integers.", str(e))

    available = reservation_service().availability.is_available(table_ids, on, at)
    return jsonify(date=on.isoformat(), time=at.strftime("%H:%M"), tableIds=table_ids, available=available)


@bp.get("/daily")
def daily_summary():
    date_str = request.args.get("date")
    if not date_str:
        return jerror(400, "MISSING_DATE", "Missing 'date' query parameter (YYYY-MM-DD).")
    try:
        day = parse_date(date_str)
    except ValueError as e:
        return jerror(422, "BAD_DATE", "Invalid date format. Use YYYY-MM-DD.", str(e))

    service = reservation_service()
    count = service.count_on(day)
    return jsonify(date=day.isoformat(), count=count, cap=service.daily_cap, remaining=max(service.daily_cap - count, 0))


@bp.get("/statistics")
def customer_statistics():
    email = request.args.get("email", "").strip()
    if not email:
        return jerror(400, "MISSING_EMAIL", "Missing 'email' query parameter.")
    return jsonify(reservation_service().get_customer_statistics(email).to_dict())


@bp.post("")
def create_reservation():
    ip = _client_ip()
    if not _allow(ip):
        return jerror(429, "RATE_LIMITED", "Too many requests. Try again shortly.")

    data, err = _parse_payload()
    if err:
        return err

    reservation_id = reservation_service().create(data)
    return jsonify(reservationId=reservation_id), 201


@bp.get("")
def list_reservations():
    reservations = reservation_service().get_all()
    return jsonify(total=len(reservations), reservations=[r.to_dict() for r in reservations])


@bp.get("/<int:reservation_id>")
def get_reservation(reservation_id: int):
    return jsonify(reservation_service().get_by_id(reservation_id).to_dict())


@bp.put("/<int:reservation_id>")
def update_reservation(reservation_id: int):
    data, err = _parse_payload()
    if err:
        return err

    service = reservation_service()
    if request.args.get("revalidate", "").lower() in ("1", "true", "yes"):
        reservation = service.update_with_revalidation(reservation_id, data)
    else:
        reservation = service.update(reservation_id, data)
    return jsonify(reservation.to_dict())


@bp.delete("/<int:reservation_id>")
def delete_reservation(reservation_id: int):
    reservation_service().delete(reservation_id)
    return "", 204
