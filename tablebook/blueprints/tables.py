from flask import Blueprint, request, jsonify
from pydantic import ValidationError
from ..http import jerror, slot_args
from ..schemas import TableRequest
from ..services import table_service

bp = Blueprint("tables", __name__)


def _parse_payload():
    payload = request.get_json(silent=True)
    if not payload:
        return None, jerror(400, "INVALID_PAYLOAD", "Missing or invalid JSON payload.")
    try:
        return TableRequest.model_validate(payload), None
    except ValidationError as e:
        return None, jerror(422, "VALIDATION_ERROR", "Invalid input.", details=e.errors(include_url=False, include_context=False))


@bp.get("")
def list_tables():
    return jsonify(tables=[t.to_dict() for t in table_service().get_all()])


@bp.get("/available")
def available_tables():
    """Tables switched on and free of active bookings within two hours of ?date=&time=."""
    on, at, err = slot_args()
    if err:
        return err
    tables = table_service().get_available(on, at)
    return jsonify(date=on.isoformat(), time=at.strftime("%H:%M"), tables=[t.to_dict() for t in tables])


@bp.post("")
def create_table():
    data, err = _parse_payload()
    if err:
        return err
    return jsonify(tableId=table_service().create(data)), 201


@bp.get("/<int:table_id>")
def get_table(table_id: int):
    return jsonify(table_service().get(table_id).to_dict())


@bp.put("/<int:table_id>")
def update_table(table_id: int):
    data, err = _parse_payload()
    if err:
        return err
    return jsonify(table_service().update(table_id, data).to_dict())


@bp.delete("/<int:table_id>")
def delete_table(table_id: int):
    table_service().delete(table_id)
    return "", 204
