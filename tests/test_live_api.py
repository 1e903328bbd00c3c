"""Smoke tests against a running server; set BASE_URL to enable them."""
import os
import uuid
from datetime import date, timedelta

import pytest
import requests

BASE_URL = os.getenv("BASE_URL")

pytestmark = pytest.mark.skipif(not BASE_URL, reason="BASE_URL not set")


def _unique_email(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:10]}@example.com"


def test_health_ok():
    r = requests.get(f"{BASE_URL}/health", timeout=10)
    assert r.status_code == 200
    assert r.json().get("status") == "ok"


def test_create_then_read_back():
    day = (date.today() + timedelta(days=30)).isoformat()
    payload = {
        "name": "Smoke Tester",
        "email": _unique_email("smoke"),
        "date": day,
        "time": "18:00",
        "guests": 2,
    }
    r = requests.post(f"{BASE_URL}/api/reservations", json=payload, timeout=15)
    assert r.status_code in (201, 409)
    if r.status_code == 409:
        assert r.json()["code"] in ("DAILY_LIMIT_REACHED", "TABLES_UNAVAILABLE")
        return

    reservation_id = r.json()["reservationId"]
    body = requests.get(f"{BASE_URL}/api/reservations/{reservation_id}", timeout=10).json()
    assert body["date"] == day
    assert body["email"] == payload["email"]

    assert requests.delete(f"{BASE_URL}/api/reservations/{reservation_id}", timeout=10).status_code == 204


def test_available_tables_shape():
    day = (date.today() + timedelta(days=1)).isoformat()
    r = requests.get(f"{BASE_URL}/api/tables/available", params={"date": day, "time": "19:00"}, timeout=10)
    assert r.status_code == 200
    assert isinstance(r.json()["tables"], list)
