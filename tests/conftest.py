import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret")
os.environ["REDIS_URL"] = ""
os.environ.setdefault("LOG_JSON", "false")

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from smartmed.core.cache import get_cache_invalidator
from smartmed.core.database import build_engine, get_db
from smartmed.main import app
from smartmed.models.base import Base
from smartmed.models.doctor import Doctor
from smartmed.models.patient import Patient
from smartmed.models.report import Report

TEST_JWT_SECRET = os.environ["AUTH_JWT_SECRET"]


class RecordingInvalidator:
    """Stands in for the page cache; remembers every invalidation call."""

    def __init__(self):
        self.calls: list[list[str]] = []

    def invalidate(self, paths):
        self.calls.append(list(paths))


@pytest.fixture()
def engine():
    engine = build_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, future=True)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def invalidator() -> RecordingInvalidator:
    return RecordingInvalidator()


@pytest.fixture()
def doctor(db) -> Doctor:
    doctor = Doctor(id=uuid.uuid4(), name="Dr. Ada Byrne", email="ada@clinic.test")
    db.add(doctor)
    db.commit()
    return doctor


@pytest.fixture()
def make_patient(db):
    def _make(doctor: Doctor, name: str = "Jane Roe", dob: date | None = date(1980, 5, 17)):
        patient = Patient(name=name, dob=dob, doctor_id=doctor.id)
        db.add(patient)
        db.commit()
        return patient

    return _make


@pytest.fixture()
def patient(make_patient, doctor) -> Patient:
    return make_patient(doctor)


@pytest.fixture()
def make_report(db):
    def _make(patient: Patient, created_at: datetime, summary: str = "Stable vitals."):
        report = Report(
            patient_id=patient.id,
            summary=summary,
            diagnosis="No acute findings.",
            recommendations="Re-check in two weeks.",
            urgency_level="LOW",
            created_at=created_at,
            updated_at=created_at,
        )
        db.add(report)
        db.commit()
        return report

    return _make


def make_token(user_id, email: str = "ada@clinic.test", **overrides) -> str:
    claims = {
        "sub": str(user_id),
        "email": email,
        "role": "authenticated",
        "aud": "authenticated",
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    claims.update(overrides)
    return jwt.encode(claims, TEST_JWT_SECRET, algorithm="HS256")


@pytest.fixture()
def client(db, invalidator):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_cache_invalidator] = lambda: invalidator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers(doctor) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(doctor.id)}"}
