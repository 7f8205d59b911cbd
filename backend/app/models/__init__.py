"""Database model exports."""

from .attendance import GuestVisit
from .menu import MenuCategory, MenuItem
from .payroll import PayrollRecord, PayrollStatus, StaffSalary
from .receipt import (
    AssignmentType,
    PaymentMethod,
    Receipt,
    ReceiptAssignment,
    ReceiptItem,
    ReceiptStatus,
)
from .shift import ShiftPlan, ShiftWish
from .staff import (
    AttendanceReason,
    AttendanceRequest,
    AttendanceStatus,
    RequestStatus,
    Staff,
    StaffAttendanceRecord,
)
from .store import StoreSettings

__all__ = [
    "StoreSettings",
    "MenuItem",
    "MenuCategory",
    "Receipt",
    "ReceiptItem",
    "ReceiptAssignment",
    "ReceiptStatus",
    "PaymentMethod",
    "AssignmentType",
    "GuestVisit",
    "Staff",
    "StaffAttendanceRecord",
    "AttendanceRequest",
    "AttendanceStatus",
    "AttendanceReason",
    "RequestStatus",
    "ShiftWish",
    "ShiftPlan",
    "StaffSalary",
    "PayrollRecord",
    "PayrollStatus",
]
