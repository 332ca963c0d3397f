from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smartmed.api.v1.endpoints.auth import get_current_doctor
from smartmed.api.v1.endpoints.readings import to_http_exception
from smartmed.core.database import get_db
from smartmed.core.errors import ServiceError
from smartmed.models.doctor import Doctor
from smartmed.schemas.dashboard import (
    DashboardSummaryView,
    PatientDetailView,
    PatientReadingsView,
    PatientReportsView,
)
from smartmed.services.dashboard_service import (
    dashboard_summary_view,
    patient_detail_view,
    patient_readings_view,
    patient_reports_view,
)

router = APIRouter()


@router.get("", response_model=DashboardSummaryView, tags=["dashboard"])
def get_dashboard_summary(
    db: Session = Depends(get_db),
    doctor: Doctor = Depends(get_current_doctor),
) -> DashboardSummaryView:
    """
    Counts and patient list for the signed-in doctor. Cached per doctor.
    """
    try:
        return dashboard_summary_view(db, doctor)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get("/patients/{patient_id}", response_model=PatientDetailView, tags=["dashboard"])
def get_patient_detail(
    patient_id: UUID,
    db: Session = Depends(get_db),
    doctor: Doctor = Depends(get_current_doctor),
) -> PatientDetailView:
    try:
        return patient_detail_view(db, patient_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get(
    "/patients/{patient_id}/readings",
    response_model=PatientReadingsView,
    tags=["dashboard"],
)
def get_patient_readings(
    patient_id: UUID,
    db: Session = Depends(get_db),
    doctor: Doctor = Depends(get_current_doctor),
) -> PatientReadingsView:
    try:
        return patient_readings_view(db, patient_id)
    except ServiceError as e:
        raise to_http_exception(e) from e


@router.get(
    "/patients/{patient_id}/reports",
    response_model=PatientReportsView,
    tags=["dashboard"],
)
def get_patient_reports(
    patient_id: UUID,
    db: Session = Depends(get_db),
    doctor: Doctor = Depends(get_current_doctor),
) -> PatientReportsView:
    """
    Reports page: not-found, empty (with a link to the readings page) or
    the latest report's summary plus the full report table.
    """
    return patient_reports_view(db, patient_id)
