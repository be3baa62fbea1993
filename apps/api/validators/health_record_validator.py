"""Health record payload validation.

Each record type carries its own payload schema. The payload is a tagged
variant keyed on ``record_type`` and is validated before anything is
persisted.
"""
from datetime import date
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from typing_extensions import Annotated

from exceptions import ValidationError


class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid")


class SymptomCheckPayload(_Payload):
    record_type: Literal["symptom_check"] = "symptom_check"
    symptoms: List[str] = []
    severity: Optional[Literal["low", "medium", "high"]] = None


class PrescriptionPayload(_Payload):
    record_type: Literal["prescription"] = "prescription"
    medication: Optional[str] = None
    dosage: Optional[str] = None
    prescribed_by: Optional[str] = None
    issued_on: Optional[date] = None


class LabResultPayload(_Payload):
    record_type: Literal["lab_result"] = "lab_result"
    test_name: Optional[str] = None
    result_value: Optional[str] = None
    unit: Optional[str] = None
    reference_range: Optional[str] = None
    taken_on: Optional[date] = None


class ConsultationPayload(_Payload):
    record_type: Literal["consultation"] = "consultation"
    doctor_name: Optional[str] = None
    diagnosis: Optional[str] = None
    follow_up_on: Optional[date] = None


HealthRecordPayload = Annotated[
    Union[SymptomCheckPayload, PrescriptionPayload, LabResultPayload, ConsultationPayload],
    Field(discriminator="record_type"),
]

_payload_adapter = TypeAdapter(HealthRecordPayload)


def validate_record_payload(record_type: Optional[str], data: Optional[dict]) -> dict:
    """Validate `data` against the schema for `record_type` and return it normalised"""
    if not record_type:
        raise ValidationError("Record type is required")

    payload = dict(data or {})
    if payload.get("record_type", record_type) != record_type:
        raise ValidationError("Payload record_type does not match the record")
    payload["record_type"] = record_type

    try:
        validated = _payload_adapter.validate_python(payload)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid {record_type} payload: {e.errors()[0]['msg']}") from e

    return validated.model_dump(mode="json", exclude={"record_type"})
