"""Plan-related Pydantic schemas."""

from datetime import date
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import PaymentType

from .installment import InstallmentSchema


class BuildPlanRequestSchema(BaseModel):
    """Schema for POST /v1/orders/{order_id}/plan request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "payment_type": "INSTALLMENT",
                    "installment_count": 3,
                    "first_payment_amount": 400,
                }
            ]
        }
    )

    payment_type: PaymentType = Field(
        ...,
        description="ONE_TIME or INSTALLMENT",
    )
    installment_count: Optional[int] = Field(
        None,
        description="Number of installments (required for INSTALLMENT)",
        examples=[3],
    )
    first_payment_amount: Optional[int] = Field(
        None,
        description="Fixed amount of installment 1; 0 or absent means an even split",
        examples=[400],
    )
    start_date: Optional[date] = Field(
        None,
        description="Due date of installment 1 (defaults to next month)",
    )


class CheckoutRequestSchema(BaseModel):
    """Schema for POST /v1/orders/{order_id}/checkout request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "payment_type": "INSTALLMENT",
                    "installment_count": 4,
                    "custom_plan": {"1": 500},
                }
            ]
        }
    )

    payment_type: PaymentType = Field(
        ...,
        description="ONE_TIME settles the order now; INSTALLMENT opens a plan",
    )
    installment_count: Optional[int] = Field(
        None,
        description="Number of installments (required for INSTALLMENT)",
    )
    start_date: Optional[date] = Field(
        None,
        description="Due date of installment 1 (defaults to next month)",
    )
    custom_plan: Dict[int, int] = Field(
        default_factory=dict,
        description="Installment number -> fixed amount; these are marked custom",
    )


class AdjustInstallmentRequestSchema(BaseModel):
    """Schema for POST /v1/orders/{order_id}/installments/{no}/adjust body."""

    new_amount: int = Field(
        ...,
        description="New amount for the installment, in the smallest currency unit",
        examples=[500],
    )


class PlanResponseSchema(BaseModel):
    """Schema for an order's payment state and its installments."""

    order_id: str = Field(..., description="UUID of the order")
    member_id: str = Field(..., description="Member who owns the order")
    branch_id: str = Field(..., description="Branch the order belongs to")
    total_amount: int = Field(..., description="Order total", examples=[1000])
    status: str = Field(..., description="Order payment status", examples=["INSTALLMENT_ACTIVE"])
    payment_type: str = Field(..., description="ONE_TIME or INSTALLMENT")
    is_installment: bool = Field(..., description="Whether the order is paid in installments")
    paid_at: Optional[str] = Field(None, description="When the order was fully paid")
    paid_amount: int = Field(..., ge=0, description="Sum of PAID installments")
    outstanding_amount: int = Field(..., ge=0, description="Amount still to be collected")
    installments: list[InstallmentSchema] = Field(
        ...,
        description="Installments ordered by installment_no",
    )

    @classmethod
    def from_dto(cls, dto) -> "PlanResponseSchema":
        return cls(
            order_id=dto.order_id,
            member_id=dto.member_id,
            branch_id=dto.branch_id,
            total_amount=dto.total_amount,
            status=dto.status,
            payment_type=dto.payment_type,
            is_installment=dto.is_installment,
            paid_at=dto.paid_at,
            paid_amount=dto.paid_amount,
            outstanding_amount=dto.outstanding_amount,
            installments=[InstallmentSchema.from_dto(i) for i in dto.installments],
        )


class AdjustmentResponseSchema(BaseModel):
    """Schema for an adjustment result: the new plan and how it was reached."""

    plan: PlanResponseSchema
    paid_sum: int = Field(..., description="Sum of PAID installments")
    locked_unpaid_sum: int = Field(
        ...,
        description="Sum of unpaid custom installments, excluding the target",
    )
    remaining: int = Field(..., description="Amount redistributed over adjustable installments")
    adjustable_count: int = Field(..., description="Number of installments that were rebalanced")
    rounding_correction: int = Field(
        ...,
        description="Drift added to the last unpaid installment to keep the total exact",
    )

    @classmethod
    def from_dto(cls, dto) -> "AdjustmentResponseSchema":
        return cls(
            plan=PlanResponseSchema.from_dto(dto.plan),
            paid_sum=dto.paid_sum,
            locked_unpaid_sum=dto.locked_unpaid_sum,
            remaining=dto.remaining,
            adjustable_count=dto.adjustable_count,
            rounding_correction=dto.rounding_correction,
        )
