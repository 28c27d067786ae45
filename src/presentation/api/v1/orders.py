"""Order plan endpoints: build, read, checkout and adjust."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path

from src.application.dto import AdjustmentRequest, BuildPlanRequest, CheckoutRequest
from src.application.services import AdjustmentService, PlanService
from src.core.dependencies import (
    get_adjustment_service,
    get_current_actor,
    get_plan_service,
)
from src.core.metrics import record_operation, track_operation_latency
from src.domain.entities import Actor
from src.presentation.schemas import (
    AdjustInstallmentRequestSchema,
    AdjustmentResponseSchema,
    BuildPlanRequestSchema,
    CheckoutRequestSchema,
    ErrorResponseSchema,
    PlanResponseSchema,
)

orders_router = APIRouter(
    prefix="/orders",
    responses={
        403: {"model": ErrorResponseSchema, "description": "Actor not allowed"},
        404: {"model": ErrorResponseSchema, "description": "Order not found"},
    },
)

OrderId = Annotated[UUID, Path(description="UUID of the order")]


@orders_router.post(
    "/{order_id}/plan",
    response_model=PlanResponseSchema,
    summary="Build Installment Plan",
    description="""
    Build or rebuild the plan of an order from scratch.

    INSTALLMENT splits the total evenly (remainder on the last
    installment), optionally with a fixed first payment. Refused once any
    installment is paid.
    """,
    responses={
        409: {"model": ErrorResponseSchema, "description": "Plan can no longer be rebuilt"},
        422: {"model": ErrorResponseSchema, "description": "Invalid count or amounts"},
    },
)
async def build_plan(
    order_id: OrderId,
    request: BuildPlanRequestSchema,
    actor: Annotated[Actor, Depends(get_current_actor)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanResponseSchema:
    dto = BuildPlanRequest(
        order_id=order_id,
        payment_type=request.payment_type,
        installment_count=request.installment_count,
        first_payment_amount=request.first_payment_amount,
        start_date=request.start_date,
    )

    with track_operation_latency("build_plan"):
        response = await plan_service.build_plan(dto, actor=actor)

    record_operation("build_plan")

    return PlanResponseSchema.from_dto(response)


@orders_router.get(
    "/{order_id}/plan",
    response_model=PlanResponseSchema,
    summary="Get Installment Plan",
    description="""
    Retrieve an order's payment status and its installments, ordered by
    installment number, with paid and outstanding amounts.
    """,
)
async def get_plan(
    order_id: OrderId,
    actor: Annotated[Actor, Depends(get_current_actor)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanResponseSchema:
    response = await plan_service.get_plan(actor, order_id)

    return PlanResponseSchema.from_dto(response)


@orders_router.post(
    "/{order_id}/checkout",
    response_model=PlanResponseSchema,
    summary="Complete Order Payment",
    description="""
    Checkout an order. ONE_TIME marks it PAID at once; INSTALLMENT opens
    an active plan, pinning any amounts given in `custom_plan`.
    """,
    responses={
        409: {"model": ErrorResponseSchema, "description": "Order already settled"},
        422: {"model": ErrorResponseSchema, "description": "Invalid count or custom plan"},
    },
)
async def checkout(
    order_id: OrderId,
    request: CheckoutRequestSchema,
    actor: Annotated[Actor, Depends(get_current_actor)],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanResponseSchema:
    dto = CheckoutRequest(
        order_id=order_id,
        payment_type=request.payment_type,
        installment_count=request.installment_count,
        start_date=request.start_date,
        custom_plan=dict(request.custom_plan),
    )

    with track_operation_latency("checkout"):
        response = await plan_service.complete_order_payment(actor, dto)

    record_operation("checkout")

    return PlanResponseSchema.from_dto(response)


@orders_router.post(
    "/{order_id}/installments/{installment_no}/adjust",
    response_model=AdjustmentResponseSchema,
    summary="Adjust Installment Amount",
    description="""
    Set one installment to a new amount and rebalance the other unpaid,
    non-custom installments so the plan still sums to the order total.

    On a 409 the `details` carry the value that would be accepted
    (`max_allowed_amount` or `required_amount`).
    """,
    responses={
        409: {"model": ErrorResponseSchema, "description": "Adjustment not possible"},
        422: {"model": ErrorResponseSchema, "description": "Invalid amount"},
    },
)
async def adjust_installment(
    order_id: OrderId,
    installment_no: Annotated[int, Path(ge=1, description="1-based installment number")],
    request: AdjustInstallmentRequestSchema,
    actor: Annotated[Actor, Depends(get_current_actor)],
    adjustment_service: Annotated[AdjustmentService, Depends(get_adjustment_service)],
) -> AdjustmentResponseSchema:
    dto = AdjustmentRequest(
        order_id=order_id,
        installment_no=installment_no,
        new_amount=request.new_amount,
    )

    with track_operation_latency("adjust_installment"):
        response = await adjustment_service.adjust_installment(actor, dto)

    record_operation("adjust_installment")

    return AdjustmentResponseSchema.from_dto(response)
