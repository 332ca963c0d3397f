"""
Read-side view models for the dashboard pages.

Nothing here mutates. Patient detail, patient readings and the dashboard
summary are cached under their page path and dropped by the reading
repository's invalidation; the reports page is not cached because reports
are written by the external generator.
"""

import json
import logging
from typing import Callable, TypeVar
from urllib.parse import quote
from uuid import UUID

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from smartmed.core.cache import (
    dashboard_path,
    get_cached_page,
    patient_path,
    patient_readings_path,
    patient_reports_path,
    set_cached_page,
)
from smartmed.models.doctor import Doctor
from smartmed.models.patient import Patient
from smartmed.models.report import Report
from smartmed.schemas.dashboard import (
    Breadcrumb,
    CallToAction,
    DashboardSummaryView,
    EmptyState,
    LatestReportSummary,
    PatientDetailView,
    PatientHeader,
    PatientReadingsView,
    PatientReportsView,
    PatientSummary,
)
from smartmed.schemas.reading import ReadingResponse
from smartmed.schemas.report import ReportResponse
from smartmed.services.patient_service import (
    calculate_age,
    get_patient_by_id,
    get_patients_by_doctor_id,
)
from smartmed.services.reading_service import (
    get_num_readings_by_doctor_id,
    get_num_readings_by_patient_id,
    get_readings_by_patient_id,
)
from smartmed.services.report_service import (
    get_num_reports_by_doctor_id,
    get_reports_by_patient_id,
)

logger = logging.getLogger(__name__)

ViewT = TypeVar("ViewT", bound=BaseModel)

SHORT_ID_LENGTH = 6
AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"

PATIENT_NOT_FOUND = EmptyState(
    title="Patient Not Found",
    message="The patient with the provided ID could not be found.",
)


def short_id(value: UUID) -> str:
    return str(value)[:SHORT_ID_LENGTH]


def breadcrumbs(patient_id: UUID, patient_name: str, page: str | None) -> list[Breadcrumb]:
    crumbs = [
        Breadcrumb(label="Dashboard", href=dashboard_path()),
        Breadcrumb(label="Patients", href="/dashboard/patients"),
    ]
    if page is None:
        crumbs.append(Breadcrumb(label=patient_name))
        return crumbs
    crumbs.append(Breadcrumb(label=patient_name, href=patient_path(patient_id)))
    crumbs.append(Breadcrumb(label=page))
    return crumbs


def patient_header(patient: Patient) -> PatientHeader:
    return PatientHeader(
        id=patient.id,
        short_id=short_id(patient.id),
        name=patient.name,
        age=calculate_age(patient.dob),
        avatar_url=AVATAR_URL.format(seed=quote(patient.name)),
        new_reading_href=f"{patient_readings_path(patient.id)}/new",
    )


def latest_report_summary(patient_id: UUID, report: Report) -> LatestReportSummary:
    return LatestReportSummary(
        id=report.id,
        short_id=short_id(report.id),
        generated_on=report.created_at.date(),
        summary=report.summary,
        diagnosis=report.diagnosis,
        recommendations=report.recommendations,
        urgency_level=report.urgency_level,
        additional_notes=report.additional_notes,
        href=f"{patient_reports_path(patient_id)}/{report.id}",
    )


def cached_view(
    path: str,
    view_cls: type[ViewT],
    build: Callable[[], ViewT],
    *,
    variant: str | None = None,
) -> ViewT:
    """
    Return the cached view for ``path`` or build and cache it.
    ``not_found`` views are never cached.
    """
    cached = get_cached_page(path, variant)
    if cached:
        try:
            return view_cls(**json.loads(cached))
        except (ValueError, ValidationError):
            logger.warning(f"Page cache corrupted for {path}. Recomputing.", exc_info=True)

    view = build()
    if getattr(view, "state", None) != "not_found":
        set_cached_page(path, view.model_dump_json(), variant)
    return view


def patient_reports_view(db: Session, patient_id: UUID) -> PatientReportsView:
    patient = get_patient_by_id(db, patient_id)
    if patient is None:
        return PatientReportsView(
            state="not_found",
            breadcrumbs=breadcrumbs(patient_id, "Invalid", "Reports"),
            empty_state=PATIENT_NOT_FOUND,
        )

    crumbs = breadcrumbs(patient_id, patient.name, "Reports")
    reports = get_reports_by_patient_id(db, patient_id)

    if not reports:
        return PatientReportsView(
            state="empty",
            breadcrumbs=crumbs,
            empty_state=EmptyState(
                title="No Reports Found",
                message=(
                    f"{patient.name} does not have any reports generated yet. "
                    "Generate a new report for any reading on the readings page."
                ),
                action=CallToAction(
                    label=f"Readings for {patient.name}",
                    href=patient_readings_path(patient_id),
                ),
            ),
        )

    return PatientReportsView(
        state="ready",
        breadcrumbs=crumbs,
        patient=patient_header(patient),
        latest_report=latest_report_summary(patient_id, reports[-1]),
        reports=[ReportResponse.model_validate(r) for r in reports],
    )


def patient_detail_view(db: Session, patient_id: UUID) -> PatientDetailView:
    def build() -> PatientDetailView:
        patient = get_patient_by_id(db, patient_id)
        if patient is None:
            return PatientDetailView(
                state="not_found",
                breadcrumbs=breadcrumbs(patient_id, "Invalid", None),
                empty_state=PATIENT_NOT_FOUND,
            )

        readings = get_readings_by_patient_id(db, patient_id)
        return PatientDetailView(
            state="ready" if readings else "empty",
            breadcrumbs=breadcrumbs(patient_id, patient.name, None),
            empty_state=None
            if readings
            else EmptyState(
                title="No Readings Found",
                message=f"{patient.name} does not have any readings recorded yet.",
                action=CallToAction(
                    label="New Reading",
                    href=f"{patient_readings_path(patient_id)}/new",
                ),
            ),
            patient=patient_header(patient),
            num_readings=len(readings),
            latest_reading=ReadingResponse.model_validate(readings[0])
            if readings
            else None,
            readings_href=patient_readings_path(patient_id),
            reports_href=patient_reports_path(patient_id),
        )

    return cached_view(patient_path(patient_id), PatientDetailView, build)


def patient_readings_view(db: Session, patient_id: UUID) -> PatientReadingsView:
    def build() -> PatientReadingsView:
        patient = get_patient_by_id(db, patient_id)
        if patient is None:
            return PatientReadingsView(
                state="not_found",
                breadcrumbs=breadcrumbs(patient_id, "Invalid", "Readings"),
                empty_state=PATIENT_NOT_FOUND,
            )

        readings = get_readings_by_patient_id(db, patient_id)
        return PatientReadingsView(
            state="ready" if readings else "empty",
            breadcrumbs=breadcrumbs(patient_id, patient.name, "Readings"),
            empty_state=None
            if readings
            else EmptyState(
                title="No Readings Found",
                message=f"{patient.name} does not have any readings recorded yet.",
                action=CallToAction(
                    label="New Reading",
                    href=f"{patient_readings_path(patient_id)}/new",
                ),
            ),
            patient=patient_header(patient),
            readings=[ReadingResponse.model_validate(r) for r in readings],
        )

    return cached_view(patient_readings_path(patient_id), PatientReadingsView, build)


def dashboard_summary_view(db: Session, doctor: Doctor) -> DashboardSummaryView:
    # Report writes never invalidate this page; count them per request.
    num_reports = get_num_reports_by_doctor_id(db, doctor.id)

    def build() -> DashboardSummaryView:
        patients = get_patients_by_doctor_id(db, doctor.id)
        return DashboardSummaryView(
            doctor_name=doctor.name,
            num_patients=len(patients),
            num_readings=get_num_readings_by_doctor_id(db, doctor.id),
            num_reports=num_reports,
            patients=[
                PatientSummary(
                    id=p.id,
                    name=p.name,
                    age=calculate_age(p.dob),
                    num_readings=get_num_readings_by_patient_id(db, p.id),
                    href=patient_path(p.id),
                )
                for p in patients
            ],
        )

    view = cached_view(
        dashboard_path(),
        DashboardSummaryView,
        build,
        variant=f"doctor:{doctor.id}",
    )
    return view.model_copy(update={"num_reports": num_reports})
