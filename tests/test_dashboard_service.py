import json
import uuid
from datetime import date, datetime, timezone
from unittest.mock import patch

from smartmed.schemas.dashboard import DashboardSummaryView, PatientDetailView
from smartmed.schemas.reading import ReadingCreate
from smartmed.services import dashboard_service
from smartmed.services.dashboard_service import (
    dashboard_summary_view,
    patient_detail_view,
    patient_readings_view,
    patient_reports_view,
)
from smartmed.services.patient_service import calculate_age
from smartmed.services.reading_service import create_reading


def test_reports_view_for_unknown_patient_is_not_found(db):
    patient_id = uuid.uuid4()

    view = patient_reports_view(db, patient_id)

    assert view.state == "not_found"
    assert view.empty_state.title == "Patient Not Found"
    assert [c.label for c in view.breadcrumbs] == ["Dashboard", "Patients", "Invalid", "Reports"]
    assert view.breadcrumbs[2].href == f"/dashboard/patients/{patient_id}"


def test_reports_view_without_reports_offers_readings_link(db, patient):
    view = patient_reports_view(db, patient.id)

    assert view.state == "empty"
    assert view.empty_state.title == "No Reports Found"
    assert patient.name in view.empty_state.message
    assert view.empty_state.action.href == f"/dashboard/patients/{patient.id}/readings"
    assert view.empty_state.action.label == f"Readings for {patient.name}"
    assert view.reports == []


def test_reports_view_summarises_latest_report(db, patient, make_report):
    make_report(patient, datetime(2025, 2, 1, tzinfo=timezone.utc), summary="Older")
    latest = make_report(patient, datetime(2025, 3, 9, tzinfo=timezone.utc), summary="Latest")

    view = patient_reports_view(db, patient.id)

    assert view.state == "ready"
    assert [r.summary for r in view.reports] == ["Older", "Latest"]
    assert view.latest_report.id == latest.id
    assert view.latest_report.summary == "Latest"
    assert view.latest_report.generated_on == date(2025, 3, 9)
    assert view.latest_report.short_id == str(latest.id)[:6]
    assert view.latest_report.href == f"/dashboard/patients/{patient.id}/reports/{latest.id}"
    assert view.patient.short_id == str(patient.id)[:6]
    assert view.patient.new_reading_href == f"/dashboard/patients/{patient.id}/readings/new"


def test_detail_view_shows_latest_reading_and_count(db, patient, invalidator):
    create_reading(db, ReadingCreate(patient_id=patient.id, heart_rate=70), invalidator=invalidator)
    newest = create_reading(
        db, ReadingCreate(patient_id=patient.id, heart_rate=95), invalidator=invalidator
    )

    view = patient_detail_view(db, patient.id)

    assert view.state == "ready"
    assert view.num_readings == 2
    assert view.latest_reading.id == newest.id
    assert view.readings_href == f"/dashboard/patients/{patient.id}/readings"


def test_readings_view_empty_state(db, patient):
    view = patient_readings_view(db, patient.id)
    assert view.state == "empty"
    assert view.readings == []
    assert view.empty_state.title == "No Readings Found"


def test_summary_view_counts_only_the_doctors_patients(db, doctor, make_patient, invalidator):
    first = make_patient(doctor, name="First")
    second = make_patient(doctor, name="Second", dob=None)
    for p, n in [(first, 2), (second, 1)]:
        for _ in range(n):
            create_reading(db, ReadingCreate(patient_id=p.id), invalidator=invalidator)

    view = dashboard_summary_view(db, doctor)

    assert view.doctor_name == doctor.name
    assert view.num_patients == 2
    assert view.num_readings == 3
    assert view.num_reports == 0
    assert sum(p.num_readings for p in view.patients) == view.num_readings
    assert {p.name: p.age for p in view.patients}["Second"] is None


def test_cached_view_is_served_without_touching_the_database(db):
    patient_id = uuid.uuid4()
    cached = PatientDetailView(
        state="empty",
        breadcrumbs=[],
        num_readings=0,
    ).model_dump_json()

    with patch.object(dashboard_service, "get_cached_page", return_value=cached) as get_page, \
            patch.object(dashboard_service, "get_patient_by_id") as get_patient:
        view = patient_detail_view(db, patient_id)

    get_page.assert_called_once_with(f"/dashboard/patients/{patient_id}", None)
    get_patient.assert_not_called()
    assert view == PatientDetailView(**json.loads(cached))


def test_cached_summary_reports_current_report_count(db, doctor, patient, make_report):
    stale = DashboardSummaryView(
        doctor_name=doctor.name,
        num_patients=1,
        num_readings=0,
        num_reports=0,
        patients=[],
    ).model_dump_json()
    make_report(patient, datetime(2025, 3, 9, tzinfo=timezone.utc))

    with patch.object(dashboard_service, "get_cached_page", return_value=stale):
        view = dashboard_summary_view(db, doctor)

    assert view.num_patients == 1
    assert view.num_reports == 1


def test_not_found_views_are_not_cached(db):
    with patch.object(dashboard_service, "set_cached_page") as set_page:
        view = patient_readings_view(db, uuid.uuid4())
    assert view.state == "not_found"
    set_page.assert_not_called()


def test_calculate_age_counts_whole_years():
    assert calculate_age(date(1980, 5, 17), today=date(2025, 5, 16)) == 44
    assert calculate_age(date(1980, 5, 17), today=date(2025, 5, 17)) == 45
    assert calculate_age(None) is None
