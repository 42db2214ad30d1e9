"""Ownership repositories."""

import pytest

from app.features.patients.models import Patient
from app.features.patients.service import PatientService
from app.features.prescriptions.service import PrescriptionService
from app.shared.repository import DoctorOwnedRepository, ScopedRepository, parse_object_id


def test_base_repository_is_abstract():
    with pytest.raises(TypeError):
        ScopedRepository(Patient, "Patient")


def test_concrete_repositories():
    assert isinstance(PatientService.repository, DoctorOwnedRepository)
    assert isinstance(PrescriptionService.repository, ScopedRepository)


@pytest.mark.parametrize("value", ["not-an-id", "", 42])
def test_parse_object_id_rejects_malformed_ids(value):
    assert parse_object_id(value) is None


def test_parse_object_id():
    assert str(parse_object_id("507f1f77bcf86cd799439011")) == "507f1f77bcf86cd799439011"
