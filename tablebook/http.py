from flask import jsonify, request
from .utils.time import parse_date, parse_time

def jerror(status: int, code: str, message: str, details=None):
    payload = {"code": code, "message": message}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def slot_args():
    """Reads ?date=YYYY-MM-DD&time=HH:MM, returning (date, time, error_response)."""
    date_str = request.args.get("date")
    time_str = request.args.get("time")
    if not date_str or not time_str:
        return None, None, jerror(400, "MISSING_SLOT", "Missing 'date' or 'time' query parameter.")
    try:
        return parse_date(date_str), parse_time(time_str), None
    except ValueError as e:
        return None, None, jerror(422, "BAD_SLOT", "Invalid date or time. Use YYYY-MM-DD and HH:MM.", str(e))
