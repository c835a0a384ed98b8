from fastapi import APIRouter

from payroll_calendar.api.calendar_settings import calendar_settings_router
from payroll_calendar.api.holidays import holidays_router
from payroll_calendar.api.working_days import working_days_router

api_router = APIRouter()
api_router.include_router(holidays_router)
api_router.include_router(working_days_router)
api_router.include_router(calendar_settings_router)
