#!/usr/bin/env python3
# scripts/seed_demo_data.py
"""
Demo data seeder for the dashboard.

- One doctor whose id must match the identity provider's user id
  (so a real login lands on the seeded data).
- A handful of patients, each with readings spread over the past weeks.
- Reports for some readings, standing in for the external report generator.
- Reset removes everything owned by the demo doctor (cascades to patients,
  readings and reports).

Run:
  python -m scripts.seed_demo_data --seed --doctor-id <uuid> --email doc@example.com
  python -m scripts.seed_demo_data --reset --doctor-id <uuid>
"""
from __future__ import annotations

import argparse
import logging
import random
import sys
from datetime import date, datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from smartmed.core.database import SessionLocal
from smartmed.models.doctor import Doctor
from smartmed.models.patient import Patient
from smartmed.models.reading import Reading
from smartmed.models.report import Report

logger = logging.getLogger(__name__)

DEMO_PATIENTS = [
    ("Amelia Hart", date(1958, 4, 12), "F"),
    ("Rohan Mehta", date(1983, 11, 2), "M"),
    ("Lucia Fernandez", date(1991, 7, 23), "F"),
    ("Tomasz Nowak", date(1946, 1, 30), "M"),
    ("Grace Okafor", date(2001, 9, 5), "F"),
]

URGENCY_LEVELS = ["LOW", "MEDIUM", "HIGH"]


def _demo_reading(rng: random.Random, patient_id: UUID, taken_at: datetime) -> Reading:
    return Reading(
        patient_id=patient_id,
        height=round(rng.uniform(150, 190), 0),
        weight=round(rng.uniform(50, 100), 1),
        temperature=round(rng.uniform(36.1, 38.4), 1),
        heart_rate=float(rng.randint(58, 110)),
        bp_systolic=float(rng.randint(100, 160)),
        bp_diastolic=float(rng.randint(60, 100)),
        respiratory_rate=float(rng.randint(12, 22)) if rng.random() < 0.7 else None,
        glucose_level=float(rng.randint(70, 180)) if rng.random() < 0.5 else None,
        oxygen_saturation=float(rng.randint(90, 100)),
        diagnosed_for=rng.choice([None, "Routine check-up", "Follow-up", "Chest pain"]),
        created_at=taken_at,
        updated_at=taken_at,
    )


def _demo_report(rng: random.Random, reading: Reading) -> Report:
    urgency = rng.choice(URGENCY_LEVELS)
    return Report(
        patient_id=reading.patient_id,
        reading_id=reading.id,
        summary=f"Vitals reviewed: BP {reading.bp_systolic:.0f}/{reading.bp_diastolic:.0f}, "
        f"HR {reading.heart_rate:.0f}, SpO2 {reading.oxygen_saturation:.0f}%.",
        diagnosis="No acute findings." if urgency == "LOW" else "Elevated vitals, monitor.",
        recommendations="Continue current plan and re-check in two weeks.",
        urgency_level=urgency,
        additional_notes=None if urgency == "LOW" else "Flagged for follow-up.",
        created_at=reading.created_at + timedelta(hours=1),
        updated_at=reading.created_at + timedelta(hours=1),
    )


def seed_demo_doctor(
    db: Session,
    *,
    doctor_id: UUID,
    name: str,
    email: str,
    readings_per_patient: int = 4,
    seed: int = 42,
) -> dict[str, int]:
    """
    Create the demo doctor and its patients/readings/reports.
    Idempotent: if the doctor already exists nothing is added.
    """
    rng = random.Random(seed)

    if db.get(Doctor, doctor_id):
        print(f"Doctor {doctor_id} already exists, skipping seed.")
        return {"patients": 0, "readings": 0, "reports": 0}

    stats = {"patients": 0, "readings": 0, "reports": 0}
    now = datetime.now(timezone.utc)

    db.add(Doctor(id=doctor_id, name=name, email=email, specialization="General Medicine"))
    db.flush()

    for patient_name, dob, gender in DEMO_PATIENTS:
        patient = Patient(name=patient_name, dob=dob, gender=gender, doctor_id=doctor_id)
        db.add(patient)
        db.flush()
        stats["patients"] += 1

        for i in range(readings_per_patient):
            taken_at = now - timedelta(days=7 * (readings_per_patient - i), hours=rng.randint(0, 8))
            reading = _demo_reading(rng, patient.id, taken_at)
            db.add(reading)
            db.flush()
            stats["readings"] += 1

            if rng.random() < 0.6:
                db.add(_demo_report(rng, reading))
                stats["reports"] += 1

    db.commit()
    return stats


def reset_demo_doctor(db: Session, *, doctor_id: UUID) -> bool:
    doctor = db.get(Doctor, doctor_id)
    if not doctor:
        print(f"Doctor {doctor_id} not found, skipping reset.")
        return False

    patient_ids = [p.id for p in db.query(Patient).filter(Patient.doctor_id == doctor_id)]
    if patient_ids:
        db.query(Report).filter(Report.patient_id.in_(patient_ids)).delete(
            synchronize_session=False
        )
        db.query(Reading).filter(Reading.patient_id.in_(patient_ids)).delete(
            synchronize_session=False
        )
        db.query(Patient).filter(Patient.id.in_(patient_ids)).delete(
            synchronize_session=False
        )
    db.delete(doctor)
    db.commit()
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed or reset dashboard demo data.")
    parser.add_argument("--seed", action="store_true")
    parser.add_argument("--reset", action="store_true")
    parser.add_argument("--doctor-id", type=UUID, required=True)
    parser.add_argument("--name", default="Dr. Demo")
    parser.add_argument("--email", default="demo.doctor@example.com")
    parser.add_argument("--readings-per-patient", type=int, default=4)
    args = parser.parse_args(argv)

    if not (args.seed or args.reset):
        parser.error("nothing to do: pass --seed and/or --reset")

    db = SessionLocal()
    try:
        if args.reset:
            reset_demo_doctor(db, doctor_id=args.doctor_id)
            print("Reset done.")
        if args.seed:
            stats = seed_demo_doctor(
                db,
                doctor_id=args.doctor_id,
                name=args.name,
                email=args.email,
                readings_per_patient=args.readings_per_patient,
            )
            print(f"Seeded: {stats}")
    except SQLAlchemyError:
        logger.exception("Demo seeding failed")
        db.rollback()
        return 1
    finally:
        db.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
