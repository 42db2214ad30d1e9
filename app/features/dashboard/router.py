# Dashboard Feature - Router

from fastapi import APIRouter, Depends
from app.features.auth.dependencies import get_current_user_id
from app.features.dashboard.schemas import DashboardResponse
from app.features.dashboard.service import DashboardService


router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(doctor_id: str = Depends(get_current_user_id)):
    """
    Get the dashboard for the current doctor.

    Returns:
    - Patient, upcoming appointment, active prescription and medical record counts
    - Patient and appointment trends against last month
    - The 5 most recently updated patients
    - The next 5 scheduled appointments
    - Appointments per day of the current week

    Requires authentication.
    """
    return await DashboardService.get_dashboard(doctor_id)
