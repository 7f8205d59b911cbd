"""Pydantic schema exports."""

from .attendance import CheckInRequest, CurrentGuestsSchema, GuestVisitSchema
from .dashboard import DashboardKPIResponse, KPIDataSchema, KPITotalsSchema, TodaySummarySchema
from .menu import (
    MenuDeleteResponse,
    MenuItemCreateRequest,
    MenuItemSchema,
    MenuItemUpdateRequest,
    MenuToggleRequest,
)
from .payroll import (
    PayrollRecordSchema,
    PayrollRecordUpdateRequest,
    PayrollSummarySchema,
    SalarySchema,
    SalaryUpsertRequest,
)
from .receipts import (
    BatchReceiptOp,
    BatchReceiptResult,
    ReceiptAssignmentRequest,
    ReceiptAssignmentSchema,
    ReceiptCreateRequest,
    ReceiptItemInput,
    ReceiptItemSchema,
    ReceiptPreviewRequest,
    ReceiptSchema,
    ReceiptTotalsSchema,
    ReceiptUpdateRequest,
)
from .shifts import ShiftPlanRequest, ShiftPlanSchema, ShiftWishRequest, ShiftWishSchema
from .staff import (
    AttendanceRecordSchema,
    EditRequestCreate,
    EditRequestSchema,
    MonthlyStatsSchema,
    PunchInRequest,
    PunchOutRequest,
    RecordDecisionRequest,
    RequestDecisionRequest,
    StaffCreateRequest,
    StaffSchema,
)
from .store import StoreSettingsSchema, StoreSettingsUpdateRequest

__all__ = [
    "StoreSettingsSchema",
    "StoreSettingsUpdateRequest",
    "MenuItemCreateRequest",
    "MenuItemUpdateRequest",
    "MenuToggleRequest",
    "MenuItemSchema",
    "MenuDeleteResponse",
    "ReceiptItemInput",
    "ReceiptCreateRequest",
    "ReceiptUpdateRequest",
    "ReceiptPreviewRequest",
    "ReceiptItemSchema",
    "ReceiptTotalsSchema",
    "ReceiptSchema",
    "ReceiptAssignmentRequest",
    "ReceiptAssignmentSchema",
    "BatchReceiptOp",
    "BatchReceiptResult",
    "CheckInRequest",
    "GuestVisitSchema",
    "CurrentGuestsSchema",
    "StaffCreateRequest",
    "StaffSchema",
    "PunchInRequest",
    "PunchOutRequest",
    "AttendanceRecordSchema",
    "RecordDecisionRequest",
    "EditRequestCreate",
    "EditRequestSchema",
    "RequestDecisionRequest",
    "MonthlyStatsSchema",
    "ShiftWishRequest",
    "ShiftWishSchema",
    "ShiftPlanRequest",
    "ShiftPlanSchema",
    "SalaryUpsertRequest",
    "SalarySchema",
    "PayrollRecordSchema",
    "PayrollRecordUpdateRequest",
    "PayrollSummarySchema",
    "KPIDataSchema",
    "KPITotalsSchema",
    "DashboardKPIResponse",
    "TodaySummarySchema",
]
