"""
Tests for the tutor registration endpoints.
"""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from app.api.tutors import is_email_conflict, register_tutor
from app.core import tutor_validation
from app.core.security import verify_password
from app.main import app
from app.models.tutor import Tutor
from tests.helpers import VALID_CPF, create_tutor, seed_catalog, tutor_payload


def test_register_tutor(db_session):
    """Test a valid body creates the tutor and links catalog rows"""
    seed_catalog(db_session)
    client = TestClient(app)
    r = client.post("/tutors", json=tutor_payload())
    assert r.status_code == 201
    body = r.json()
    assert body["full_name"] == "Ana Beatriz Souza"
    assert body["username"] == "anabeatriz"
    assert body["birth_date"] == "15/03/1995"
    assert body["cpf"] == VALID_CPF
    assert body["email"] == "ana.souza@escola.com.br"
    assert body["subject_ids"] == [1, 2]
    assert body["education_level_ids"] == [1, 2]
    assert "password" not in body
    assert "password_hash" not in body


def test_register_tutor_stores_hashed_password(db_session):
    """Test the password is only kept as a hash"""
    seed_catalog(db_session)
    client = TestClient(app)
    r = client.post("/tutors", json=tutor_payload(password="  Abc123!  "))
    assert r.status_code == 201

    tutor = db_session.get(Tutor, r.json()["id"])
    assert tutor.password_hash != "Abc123!"
    # the body is trimmed before hashing
    assert verify_password("Abc123!", tutor.password_hash)


def test_register_tutor_validation_errors(db_session):
    """Test invalid fields come back as a 400 error list"""
    seed_catalog(db_session)
    client = TestClient(app)
    r = client.post(
        "/tutors",
        json=tutor_payload(fullName=None, cpf="123.456.789-09", subjects=[1, 2, 999]),
    )
    assert r.status_code == 400
    detail = r.json()["detail"]
    assert detail["message"] == "Validation failed"
    assert detail["errors"] == [
        {"field": "fullName", "code": "required", "message": "Nome completo é obrigatório."},
        {"field": "cpf", "code": "format", "message": "CPF inválido."},
        {"field": "subjects", "code": "not_found", "message": "Uma ou mais matérias não existem."},
    ]
    assert db_session.query(Tutor).count() == 0


def test_register_tutor_duplicate_email(db_session):
    """Test an already registered email is rejected before insert"""
    seed_catalog(db_session)
    create_tutor(db_session, "existing@x.com")
    client = TestClient(app)
    r = client.post("/tutors", json=tutor_payload(email="existing@x.com"))
    assert r.status_code == 400
    errors = r.json()["detail"]["errors"]
    assert errors == [{"field": "email", "code": "conflict", "message": "Email já cadastrado"}]


def test_register_tutor_invalid_json(db_session):
    """Test a body that is not JSON"""
    client = TestClient(app)
    r = client.post("/tutors", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json()["detail"]["message"] == "Invalid JSON body"


def test_register_tutor_empty_body_reports_every_field(db_session):
    """Test an empty object yields one required error per field"""
    client = TestClient(app)
    r = client.post("/tutors", json={})
    assert r.status_code == 400
    errors = r.json()["detail"]["errors"]
    assert len(errors) == 8
    assert {e["code"] for e in errors} == {"required"}


def test_register_tutor_email_race_maps_to_conflict(db_session):
    """Test the unique index catches a duplicate that slipped past validation"""
    seed_catalog(db_session)
    create_tutor(db_session, "race@x.com")

    data = tutor_payload(email="race@x.com")
    with pytest.raises(HTTPException) as exc:
        register_tutor(db_session, data)
    assert exc.value.status_code == 409
    assert exc.value.detail == "Email já cadastrado"
    assert db_session.query(Tutor).filter(Tutor.email == "race@x.com").count() == 1


def test_storage_failure_during_validation_is_503(db_session, monkeypatch):
    """Test a lookup failure is not turned into a field error"""
    seed_catalog(db_session)

    def broken(db, email):
        raise OperationalError("SELECT tutors.id", {}, Exception("connection lost"))

    monkeypatch.setattr(tutor_validation, "_find_tutor_id_by_email", broken)

    client = TestClient(app)
    r = client.post("/tutors", json=tutor_payload())
    assert r.status_code == 503
    assert r.json()["detail"] == "Serviço de dados indisponível."


def test_validate_preview_valid(db_session):
    """Test preview reports valid without creating anything"""
    seed_catalog(db_session)
    client = TestClient(app)
    r = client.post("/tutors/validate", json=tutor_payload())
    assert r.status_code == 200
    assert r.json() == {"valid": True, "errors": [], "warnings": []}
    assert db_session.query(Tutor).count() == 0


def test_validate_preview_invalid(db_session):
    """Test preview returns field errors with 200"""
    seed_catalog(db_session)
    client = TestClient(app)
    r = client.post("/tutors/validate", json=tutor_payload(password="abc123", birthDate="31/02/2020"))
    assert r.status_code == 200
    body = r.json()
    assert body["valid"] is False
    assert [e["field"] for e in body["errors"]] == ["password"]


def test_get_tutor(db_session):
    """Test getting a tutor by ID"""
    tutor = create_tutor(db_session, "ana@x.com", full_name="Ana")
    client = TestClient(app)
    r = client.get(f"/tutors/{tutor.id}")
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == tutor.id
    assert body["full_name"] == "Ana"
    assert body["subject_ids"] == []


def test_get_tutor_not_found(db_session):
    """Test getting non-existent tutor returns 404"""
    client = TestClient(app)
    r = client.get("/tutors/4242")
    assert r.status_code == 404


def test_register_tutor_other_integrity_errors_are_not_email_conflicts(db_session, monkeypatch):
    """Test a foreign key failure at commit is re-raised, not reported as a duplicate email"""
    seed_catalog(db_session)

    def failing_commit():
        raise IntegrityError(
            "INSERT INTO tutor_subjects", {}, Exception("FOREIGN KEY constraint failed")
        )

    monkeypatch.setattr(db_session, "commit", failing_commit)

    with pytest.raises(IntegrityError):
        register_tutor(db_session, tutor_payload())


def test_is_email_conflict_uses_constraint_name():
    """Test the Postgres constraint name decides, when the driver reports one"""
    email_orig = Exception("duplicate key value violates unique constraint")
    email_orig.diag = SimpleNamespace(constraint_name="ix_tutors_email")
    fk_orig = Exception("insert or update violates foreign key constraint")
    fk_orig.diag = SimpleNamespace(constraint_name="fk_tutor_subjects_subject_id_subjects")

    assert is_email_conflict(IntegrityError("INSERT", {}, email_orig))
    assert not is_email_conflict(IntegrityError("INSERT", {}, fk_orig))
    assert is_email_conflict(
        IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: tutors.email"))
    )
