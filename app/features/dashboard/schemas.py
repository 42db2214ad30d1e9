# Dashboard Feature - Schemas

from typing import List
from pydantic import BaseModel
from app.features.patients.schemas import PatientResponse
from app.features.appointments.schemas import AppointmentResponse


# ============== Dashboard Statistics ==============

class TrendItem(BaseModel):
    """A percentage change with its direction."""
    value: int = 0
    is_positive: bool = False


class DashboardTrends(BaseModel):
    patients: TrendItem
    appointments: TrendItem


class DashboardStats(BaseModel):
    """Headline counts for the current doctor."""
    total_patients: int
    scheduled_appointments: int
    active_prescriptions: int
    medical_records: int
    trends: DashboardTrends


# ============== Weekly Activity ==============

class ActivityDay(BaseModel):
    """Appointments on one day of the current week."""
    name: str
    value: int


class DashboardResponse(BaseModel):
    """Response schema for the dashboard."""
    stats: DashboardStats
    recent_patients: List[PatientResponse]
    upcoming_appointments: List[AppointmentResponse]
    activity_data: List[ActivityDay]

    class Config:
        json_schema_extra = {
            "example": {
                "stats": {
                    "total_patients": 42,
                    "scheduled_appointments": 7,
                    "active_prescriptions": 12,
                    "medical_records": 95,
                    "trends": {
                        "patients": {"value": 10, "is_positive": True},
                        "appointments": {"value": 5, "is_positive": False},
                    },
                },
                "recent_patients": [],
                "upcoming_appointments": [],
                "activity_data": [{"name": "Sun", "value": 0}, {"name": "Mon", "value": 3}],
            }
        }
