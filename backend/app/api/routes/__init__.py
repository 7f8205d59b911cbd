"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .attendance import router as attendance_router
from .dashboard import router as dashboard_router
from .menu import router as menu_router
from .payroll import router as payroll_router
from .receipts import router as receipts_router
from .settings import router as settings_router
from .shifts import router as shifts_router
from .staff import router as staff_router
from .staff_attendance import router as staff_attendance_router

api_router = APIRouter()
api_router.include_router(settings_router, prefix="/settings", tags=["settings"])
api_router.include_router(menu_router, prefix="/menu", tags=["menu"])
api_router.include_router(receipts_router, prefix="/receipts", tags=["receipts"])
api_router.include_router(attendance_router, prefix="/attendance", tags=["attendance"])
api_router.include_router(staff_router, prefix="/staff", tags=["staff"])
api_router.include_router(staff_attendance_router, prefix="/staff-attendance", tags=["staff-attendance"])
api_router.include_router(shifts_router, prefix="/shifts", tags=["shifts"])
api_router.include_router(payroll_router, prefix="/payroll", tags=["payroll"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])

__all__ = ["api_router"]
