"""
Installment Adjustment for the installment plan engine.

Changes one installment's amount after the fact and redistributes the
difference across the installments that are neither paid nor locked,
so the plan still sums exactly to the order total.

Terminology:
    locked      - unpaid, not the target, is_custom=True (fixed by a human)
    adjustable  - unpaid, not the target, is_custom=False
    remaining   - what is left for the adjustable installments once paid,
                  locked and the new target amount are accounted for

Everything in this module works on copies of the given installments and
either returns a complete, verified new state or raises. Callers persist
the returned state only when no exception was raised.
"""

from dataclasses import dataclass, replace
from typing import List, Sequence

from src.domain.entities import Installment, InstallmentStatus
from src.domain.exceptions import (
    AdjustmentBudgetExceededException,
    InstallmentAlreadyPaidException,
    InstallmentNotFoundException,
    InstallmentStateException,
    InvariantViolationException,
    ResidualMismatchException,
)

from .allocation import require_positive_int


@dataclass(frozen=True)
class AdjustmentBreakdown:
    """Figures behind an adjustment, returned to the caller for display."""

    paid_sum: int
    locked_unpaid_sum: int
    remaining: int
    adjustable_count: int
    rounding_correction: int = 0

    def to_dict(self) -> dict:
        return {
            "paid_sum": self.paid_sum,
            "locked_unpaid_sum": self.locked_unpaid_sum,
            "remaining": self.remaining,
            "adjustable_count": self.adjustable_count,
            "rounding_correction": self.rounding_correction,
        }


@dataclass(frozen=True)
class AdjustmentOutcome:
    """New state of every installment of the order, plus the breakdown."""

    installments: List[Installment]
    breakdown: AdjustmentBreakdown


def round_half_up(numerator: int, denominator: int) -> int:
    """
    Round numerator / denominator to the nearest integer, halves up.

    Integer-only, so there is no float error for large amounts.
    Both arguments must be non-negative and denominator positive.
    """
    return (2 * numerator + denominator) // (2 * denominator)


def distribute(remaining: int, count: int) -> List[int]:
    """
    Share `remaining` across `count` installments.

    Each gets round(remaining / count); the last absorbs the difference.
    Rounding up can push the last share to zero or below (e.g. 6 over 4
    gives 2, 2, 2, 0), in which case the share falls back to the floor so
    every amount stays positive.

    Requires remaining >= count.
    """
    each = round_half_up(remaining, count)
    rem = remaining - each * count

    if each + rem < 1:
        each = remaining // count
        rem = remaining - each * count

    return [each] * (count - 1) + [each + rem]


def reconcile_total(total_amount: int, installments: Sequence[Installment]) -> int:
    """
    Force the plan sum back to the order total.

    Any drift is added to the highest-numbered UNPAID installment. This
    is the single deterministic correction; if it cannot restore an exact,
    all-positive plan an InvariantViolationException is raised.

    Args:
        total_amount: Order total
        installments: Installments ordered by installment_no (mutated)

    Returns:
        The delta that was applied (0 when the sum already matched)
    """
    delta = total_amount - sum(i.amount for i in installments)
    if delta == 0:
        return 0

    unpaid = [i for i in installments if i.status == InstallmentStatus.UNPAID]
    if not unpaid:
        raise InvariantViolationException(
            "Irreconcilable rounding: no unpaid installment can absorb the difference",
            details={"total_amount": total_amount, "delta": delta},
        )

    absorber = unpaid[-1]
    absorber.amount += delta

    if absorber.amount <= 0 or sum(i.amount for i in installments) != total_amount:
        raise InvariantViolationException(
            "Irreconcilable rounding: correction leaves an invalid plan",
            details={
                "total_amount": total_amount,
                "delta": delta,
                "installment_no": absorber.installment_no,
            },
        )

    return delta


def plan_adjustment(
    total_amount: int,
    installments: Sequence[Installment],
    target_no: int,
    new_amount: int,
) -> AdjustmentOutcome:
    """
    Compute the plan that results from setting installment `target_no`
    to `new_amount`.

    The target becomes locked (is_custom=True). Adjustable installments
    split what is left and are marked auto_adjusted. Paid and locked
    installments keep their amounts.

    Args:
        total_amount: Order total
        installments: Every installment of the order, in any order
        target_no: installment_no of the installment to change
        new_amount: New amount for the target

    Returns:
        AdjustmentOutcome with copies of all installments, ordered by
        installment_no

    Raises:
        ValidationException: new_amount is not a positive integer
        InstallmentNotFoundException: no installment has target_no
        InstallmentAlreadyPaidException: the target is PAID
        InstallmentStateException: the target is CANCELLED
        AdjustmentBudgetExceededException: new_amount leaves too little;
            carries the maximum allowed amount
        ResidualMismatchException: nothing can absorb a non-zero remainder;
            carries the exact required amount
        InvariantViolationException: the final sum cannot be reconciled
    """
    require_positive_int(new_amount, "new_amount")

    ordered = sorted((replace(i) for i in installments), key=lambda i: i.installment_no)

    target = next((i for i in ordered if i.installment_no == target_no), None)
    if target is None:
        raise InstallmentNotFoundException(f"installment_no={target_no}")
    if target.is_paid:
        raise InstallmentAlreadyPaidException(target_no)
    if target.status == InstallmentStatus.CANCELLED:
        raise InstallmentStateException(target_no, target.status.value, "adjust")

    paid_sum = sum(i.amount for i in ordered if i.is_paid)
    others = [i for i in ordered if i is not target and not i.is_paid]
    locked_unpaid_sum = sum(i.amount for i in others if i.is_custom)
    adjustable = [i for i in others if not i.is_custom]

    budget = total_amount - paid_sum - locked_unpaid_sum
    remaining = budget - new_amount

    # every adjustable installment must keep at least one unit
    max_allowed = budget - len(adjustable)
    if remaining < len(adjustable):
        raise AdjustmentBudgetExceededException(new_amount, max_allowed)

    if not adjustable:
        if remaining != 0:
            raise ResidualMismatchException(new_amount, budget)
    else:
        for inst in others:
            inst.auto_adjusted = False

        for inst, share in zip(adjustable, distribute(remaining, len(adjustable))):
            inst.amount = share
            inst.is_custom = False
            inst.auto_adjusted = True

    target.amount = new_amount
    target.is_custom = True
    target.auto_adjusted = False

    correction = reconcile_total(total_amount, ordered)

    return AdjustmentOutcome(
        installments=ordered,
        breakdown=AdjustmentBreakdown(
            paid_sum=paid_sum,
            locked_unpaid_sum=locked_unpaid_sum,
            remaining=remaining,
            adjustable_count=len(adjustable),
            rounding_correction=correction,
        ),
    )
