"""Health record creation and payload validation"""
import pytest

from exceptions import ValidationError
from models import HealthRecord
from services.health_records import HealthRecordService
from validators.health_record_validator import validate_record_payload


def test_lab_result_payload_normalised():
    payload = validate_record_payload("lab_result", {"test_name": "HbA1c", "taken_on": "2025-02-01"})
    assert payload["test_name"] == "HbA1c"
    assert payload["taken_on"] == "2025-02-01"
    assert "record_type" not in payload


def test_missing_payload_is_an_empty_variant():
    assert validate_record_payload("consultation", None)["diagnosis"] is None


@pytest.mark.parametrize("record_type,data", [
    ("prescription", {"unexpected": "field"}),
    ("lab_result", {"taken_on": "not a date"}),
    ("symptom_check", {"severity": "critical"}),
    ("x-ray", {}),
    ("lab_result", {"record_type": "prescription"}),
])
def test_invalid_payload_rejected(record_type, data):
    with pytest.raises(ValidationError):
        validate_record_payload(record_type, data)


def test_create_stores_record(store, ctx):
    record = HealthRecordService(store).create(
        ctx, "prescription", "  Amoxicillin course ", data={"medication": "Amoxicillin", "dosage": "250mg"}
    )
    assert record.title == "Amoxicillin course"
    assert record.data["dosage"] == "250mg"
    assert store.count(HealthRecord, HealthRecord.user_id == ctx.user_id) == 1


@pytest.mark.parametrize("record_type,title", [(None, "Checkup"), ("consultation", ""), ("consultation", "   ")])
def test_create_requires_type_and_title(store, ctx, record_type, title):
    with pytest.raises(ValidationError, match="required fields"):
        HealthRecordService(store).create(ctx, record_type, title)
    assert store.count(HealthRecord) == 0


def test_list_is_per_user(store, ctx, other_ctx):
    service = HealthRecordService(store)
    service.create(ctx, "consultation", "GP visit")
    service.create(other_ctx, "consultation", "Dentist")
    assert [record.title for record in service.list_for_user(ctx)] == ["GP visit"]


def test_health_record_endpoints(client, auth_headers):
    response = client.post("/api/health-records", json={
        "record_type": "lab_result",
        "title": "Blood panel",
        "data": {"test_name": "Cholesterol", "result_value": "180", "unit": "mg/dL"},
    }, headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["data"]["unit"] == "mg/dL"

    records = client.get("/api/health-records", headers=auth_headers).json()
    assert [r["title"] for r in records] == ["Blood panel"]


def test_health_record_endpoint_rejects_bad_payload(client, auth_headers):
    response = client.post("/api/health-records", json={
        "record_type": "prescription",
        "title": "Antibiotics",
        "data": {"medication": "Amoxicillin", "colour": "blue"},
    }, headers=auth_headers)
    assert response.status_code == 400
