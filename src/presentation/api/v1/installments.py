"""Single-installment endpoints and the overdue sweep."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Response

from src.application.dto import RecordPaymentRequest, UpdateInstallmentRequest
from src.application.services import InstallmentService, OverdueService
from src.core.dependencies import (
    get_current_actor,
    get_installment_service,
    get_overdue_service,
)
from src.core.metrics import (
    record_operation,
    record_overdue_marked,
    record_payment,
    track_operation_latency,
)
from src.domain.entities import Actor
from src.presentation.schemas import (
    ErrorResponseSchema,
    InstallmentSchema,
    MarkOverdueResponseSchema,
    OverdueInstallmentSchema,
    OverdueListResponseSchema,
    RecordPaymentRequestSchema,
    UpdateInstallmentRequestSchema,
)

installments_router = APIRouter(
    prefix="/installments",
    responses={
        403: {"model": ErrorResponseSchema, "description": "Actor not allowed"},
    },
)

InstallmentId = Annotated[UUID, Path(description="UUID of the installment")]


@installments_router.get(
    "/overdue",
    response_model=OverdueListResponseSchema,
    summary="List Overdue Installments",
    description="""
    Overdue installments with order and member context, oldest due date
    first. The top-level role sees every branch; others see their own.
    """,
)
async def list_overdue(
    actor: Annotated[Actor, Depends(get_current_actor)],
    overdue_service: Annotated[OverdueService, Depends(get_overdue_service)],
) -> OverdueListResponseSchema:
    views = await overdue_service.list_overdue(actor)

    return OverdueListResponseSchema(
        installments=[OverdueInstallmentSchema.from_dto(v) for v in views],
        count=len(views),
    )


@installments_router.post(
    "/overdue/mark",
    response_model=MarkOverdueResponseSchema,
    summary="Mark Overdue Installments",
    description="Move every UNPAID installment past its due date to OVERDUE.",
)
async def mark_overdue(
    actor: Annotated[Actor, Depends(get_current_actor)],
    overdue_service: Annotated[OverdueService, Depends(get_overdue_service)],
) -> MarkOverdueResponseSchema:
    with track_operation_latency("mark_overdue"):
        response = await overdue_service.mark_overdue(actor)

    record_operation("mark_overdue")
    record_overdue_marked(response.marked_count)

    return MarkOverdueResponseSchema(
        marked_count=response.marked_count,
        as_of=response.as_of,
    )


@installments_router.post(
    "/{installment_id}/payment",
    response_model=InstallmentSchema,
    summary="Record Installment Payment",
    description="""
    Mark an installment PAID and move the order to PARTIALLY_PAID or
    PAID_COMPLETE. Paying an installment twice is refused.
    """,
    responses={
        404: {"model": ErrorResponseSchema, "description": "Installment not found"},
        409: {"model": ErrorResponseSchema, "description": "Installment cannot be paid"},
    },
)
async def record_payment_endpoint(
    installment_id: InstallmentId,
    request: RecordPaymentRequestSchema,
    actor: Annotated[Actor, Depends(get_current_actor)],
    installment_service: Annotated[InstallmentService, Depends(get_installment_service)],
) -> InstallmentSchema:
    dto = RecordPaymentRequest(
        installment_id=installment_id,
        payment_method=request.payment_method,
        paid_at=request.paid_at,
        notes=request.notes,
    )

    with track_operation_latency("record_payment"):
        response = await installment_service.record_payment(actor, dto)

    record_operation("record_payment")
    record_payment(response.amount, response.payment_method)

    return InstallmentSchema.from_dto(response)


@installments_router.patch(
    "/{installment_id}",
    response_model=InstallmentSchema,
    summary="Update Installment",
    description="Change the due date and/or notes of an installment.",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Installment not found"},
        422: {"model": ErrorResponseSchema, "description": "Nothing to update"},
    },
)
async def update_installment(
    installment_id: InstallmentId,
    request: UpdateInstallmentRequestSchema,
    actor: Annotated[Actor, Depends(get_current_actor)],
    installment_service: Annotated[InstallmentService, Depends(get_installment_service)],
) -> InstallmentSchema:
    dto = UpdateInstallmentRequest(
        installment_id=installment_id,
        due_date=request.due_date,
        notes=request.notes,
    )

    with track_operation_latency("update_installment"):
        response = await installment_service.update_installment(actor, dto)

    record_operation("update_installment")

    return InstallmentSchema.from_dto(response)


@installments_router.delete(
    "/{installment_id}",
    status_code=204,
    summary="Delete Installment",
    description="""
    Remove an unpaid installment. Its amount moves to the last remaining
    unpaid installment and later installments are renumbered.
    """,
    responses={
        404: {"model": ErrorResponseSchema, "description": "Installment not found"},
        409: {"model": ErrorResponseSchema, "description": "Installment cannot be removed"},
    },
)
async def delete_installment(
    installment_id: InstallmentId,
    actor: Annotated[Actor, Depends(get_current_actor)],
    installment_service: Annotated[InstallmentService, Depends(get_installment_service)],
) -> Response:
    with track_operation_latency("delete_installment"):
        await installment_service.delete_installment(actor, installment_id)

    record_operation("delete_installment")

    return Response(status_code=204)
