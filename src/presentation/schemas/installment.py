"""Installment-related Pydantic schemas."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class InstallmentSchema(BaseModel):
    """Schema for an installment in plan responses."""

    installment_id: str = Field(..., description="UUID of the installment")
    installment_no: int = Field(..., ge=1, description="1-based position in the plan")
    due_date: str = Field(
        ...,
        description="Due date in ISO 8601 format (YYYY-MM-DD)",
        examples=["2025-10-01"],
    )
    amount: int = Field(..., gt=0, description="Installment amount", examples=[333])
    status: str = Field(..., description="UNPAID, PAID, OVERDUE or CANCELLED", examples=["UNPAID"])
    paid_at: Optional[str] = Field(None, description="When the installment was paid")
    payment_method: Optional[str] = Field(None, examples=["CARD"])
    notes: Optional[str] = None
    is_custom: bool = Field(..., description="Amount fixed by a person; never auto-rebalanced")
    auto_adjusted: bool = Field(..., description="Amount last written by redistribution")

    @classmethod
    def from_dto(cls, dto) -> "InstallmentSchema":
        return cls(
            installment_id=dto.installment_id,
            installment_no=dto.installment_no,
            due_date=dto.due_date,
            amount=dto.amount,
            status=dto.status,
            paid_at=dto.paid_at,
            payment_method=dto.payment_method,
            notes=dto.notes,
            is_custom=dto.is_custom,
            auto_adjusted=dto.auto_adjusted,
        )


class RecordPaymentRequestSchema(BaseModel):
    """Schema for POST /v1/installments/{installment_id}/payment body."""

    payment_method: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="How the installment was paid",
        examples=["CARD"],
    )
    paid_at: Optional[datetime] = Field(None, description="Defaults to now")
    notes: Optional[str] = None

    @field_validator("payment_method")
    @classmethod
    def validate_payment_method(cls, v: str) -> str:
        """Ensure payment_method is not just whitespace."""
        if not v.strip():
            raise ValueError("payment_method cannot be empty or whitespace")
        return v.strip()


class UpdateInstallmentRequestSchema(BaseModel):
    """Schema for PATCH /v1/installments/{installment_id} body."""

    due_date: Optional[date] = None
    notes: Optional[str] = None


class OverdueInstallmentSchema(BaseModel):
    """Schema for an overdue installment with its order context."""

    installment: InstallmentSchema
    order_id: str
    order_total_amount: int
    order_status: str
    member_id: str
    member_name: Optional[str] = None
    branch_id: str

    @classmethod
    def from_dto(cls, dto) -> "OverdueInstallmentSchema":
        return cls(
            installment=InstallmentSchema.from_dto(dto.installment),
            order_id=dto.order_id,
            order_total_amount=dto.order_total_amount,
            order_status=dto.order_status,
            member_id=dto.member_id,
            member_name=dto.member_name,
            branch_id=dto.branch_id,
        )


class OverdueListResponseSchema(BaseModel):
    """Schema for GET /v1/installments/overdue response."""

    installments: list[OverdueInstallmentSchema]
    count: int


class MarkOverdueResponseSchema(BaseModel):
    """Schema for POST /v1/installments/overdue/mark response."""

    marked_count: int = Field(..., ge=0, description="Installments moved to OVERDUE")
    as_of: str = Field(..., description="Date the sweep compared against")
