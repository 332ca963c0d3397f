from datetime import date
from typing import Literal
from uuid import UUID

from pydantic import BaseModel

from smartmed.schemas.reading import ReadingResponse
from smartmed.schemas.report import ReportResponse

ViewState = Literal["not_found", "empty", "ready"]


class Breadcrumb(BaseModel):
    label: str
    href: str | None = None


class CallToAction(BaseModel):
    label: str
    href: str


class EmptyState(BaseModel):
    title: str
    message: str
    action: CallToAction | None = None


class PatientHeader(BaseModel):
    id: UUID
    short_id: str
    name: str
    age: int | None = None
    avatar_url: str
    new_reading_href: str


class LatestReportSummary(BaseModel):
    id: UUID
    short_id: str
    generated_on: date
    summary: str
    diagnosis: str
    recommendations: str
    urgency_level: str
    additional_notes: str | None = None
    href: str


class PatientReportsView(BaseModel):
    state: ViewState
    breadcrumbs: list[Breadcrumb]
    empty_state: EmptyState | None = None
    patient: PatientHeader | None = None
    latest_report: LatestReportSummary | None = None
    reports: list[ReportResponse] = []


class PatientDetailView(BaseModel):
    state: ViewState
    breadcrumbs: list[Breadcrumb]
    empty_state: EmptyState | None = None
    patient: PatientHeader | None = None
    num_readings: int = 0
    latest_reading: ReadingResponse | None = None
    readings_href: str | None = None
    reports_href: str | None = None


class PatientReadingsView(BaseModel):
    state: ViewState
    breadcrumbs: list[Breadcrumb]
    empty_state: EmptyState | None = None
    patient: PatientHeader | None = None
    readings: list[ReadingResponse] = []


class PatientSummary(BaseModel):
    id: UUID
    name: str
    age: int | None = None
    num_readings: int
    href: str


class DashboardSummaryView(BaseModel):
    doctor_name: str
    num_patients: int
    num_readings: int
    num_reports: int
    patients: list[PatientSummary]
