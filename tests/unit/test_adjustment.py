"""
Unit tests for the installment adjustment algorithm.

These tests verify:
1. Full redistribution across adjustable installments
2. Paid and custom (locked) installments are never touched
3. Budget and residual rejections report the correcting value
4. Rounding stays positive and the plan always sums to the total
5. The caller's installments are never mutated
"""

from datetime import date
from uuid import uuid4

import pytest

from src.domain.entities import Installment, InstallmentStatus
from src.domain.exceptions import (
    AdjustmentBudgetExceededException,
    InstallmentAlreadyPaidException,
    InstallmentNotFoundException,
    InstallmentStateException,
    InvariantViolationException,
    ResidualMismatchException,
    ValidationException,
)
from src.service.installments import (
    distribute,
    plan_adjustment,
    reconcile_total,
    round_half_up,
)


# =============================================================================
# Test Fixtures
# =============================================================================

def make_plan(
    amounts: list[int],
    paid: set[int] = frozenset(),
    custom: set[int] = frozenset(),
    overdue: set[int] = frozenset(),
) -> list[Installment]:
    """Build installments 1..N with the given amounts and flags."""
    order_id = uuid4()
    plan = []
    for no, amount in enumerate(amounts, start=1):
        status = InstallmentStatus.UNPAID
        if no in paid:
            status = InstallmentStatus.PAID
        elif no in overdue:
            status = InstallmentStatus.OVERDUE
        plan.append(
            Installment(
                order_id=order_id,
                installment_no=no,
                due_date=date(2025, no, 1),
                amount=amount,
                status=status,
                is_custom=no in custom,
            )
        )
    return plan


def amounts_of(installments: list[Installment]) -> list[int]:
    return [i.amount for i in installments]


# =============================================================================
# Rounding Helper Tests
# =============================================================================

class TestRounding:
    """Tests for integer rounding and share distribution."""

    def test_round_half_up(self):
        assert round_half_up(500, 2) == 250
        assert round_half_up(649, 2) == 325
        assert round_half_up(10, 3) == 3
        assert round_half_up(11, 3) == 4

    def test_distribute_remainder_on_last(self):
        assert distribute(1000, 3) == [333, 333, 334]

    def test_distribute_negative_remainder_on_last(self):
        assert distribute(11, 3) == [4, 4, 3]

    def test_distribute_falls_back_to_floor_to_stay_positive(self):
        # rounding gives 2, 2, 2, 0
        shares = distribute(6, 4)
        assert shares == [1, 1, 1, 3]
        assert all(share > 0 for share in shares)


# =============================================================================
# Redistribution Tests
# =============================================================================

class TestPlanAdjustment:
    """Tests for plan_adjustment."""

    def test_full_redistribution(self):
        plan = make_plan([333, 333, 334])

        outcome = plan_adjustment(1000, plan, target_no=2, new_amount=500)
        result = outcome.installments

        assert amounts_of(result) == [250, 500, 250]
        assert sum(amounts_of(result)) == 1000
        assert result[1].is_custom is True
        assert result[1].auto_adjusted is False
        assert result[0].auto_adjusted is True
        assert result[2].auto_adjusted is True
        assert not result[0].is_custom and not result[2].is_custom

    def test_breakdown(self):
        plan = make_plan([250, 250, 250, 250], paid={1}, custom={4})

        outcome = plan_adjustment(1000, plan, target_no=2, new_amount=200)

        assert outcome.breakdown.paid_sum == 250
        assert outcome.breakdown.locked_unpaid_sum == 250
        assert outcome.breakdown.remaining == 300
        assert outcome.breakdown.adjustable_count == 1
        assert outcome.breakdown.rounding_correction == 0

    def test_paid_and_locked_installments_untouched(self):
        plan = make_plan([250, 250, 250, 250], paid={1}, custom={4})

        result = plan_adjustment(1000, plan, target_no=2, new_amount=200).installments

        assert amounts_of(result) == [250, 200, 300, 250]
        assert result[0].status == InstallmentStatus.PAID
        assert result[3].is_custom is True
        assert result[3].auto_adjusted is False

    def test_odd_split_keeps_total(self):
        plan = make_plan([250, 250, 250, 250], paid={1})

        result = plan_adjustment(1000, plan, target_no=2, new_amount=101).installments

        assert amounts_of(result) == [250, 101, 325, 324]
        assert sum(amounts_of(result)) == 1000

    def test_overdue_installments_are_adjustable(self):
        plan = make_plan([400, 300, 300], overdue={1})

        result = plan_adjustment(1000, plan, target_no=3, new_amount=200).installments

        assert amounts_of(result) == [400, 400, 200]
        assert result[0].status == InstallmentStatus.OVERDUE

    def test_input_is_not_mutated(self):
        plan = make_plan([333, 333, 334])

        plan_adjustment(1000, plan, target_no=2, new_amount=500)

        assert amounts_of(plan) == [333, 333, 334]
        assert not any(i.is_custom for i in plan)

    def test_unordered_input_is_sorted(self):
        plan = list(reversed(make_plan([333, 333, 334])))

        result = plan_adjustment(1000, plan, target_no=1, new_amount=200).installments

        assert [i.installment_no for i in result] == [1, 2, 3]
        assert amounts_of(result) == [200, 400, 400]

    def test_repeated_adjustments_keep_total(self):
        plan = make_plan([100] * 7)

        for no, amount in [(1, 77), (3, 91), (6, 55), (2, 120)]:
            plan = plan_adjustment(700, plan, target_no=no, new_amount=amount).installments
            assert sum(amounts_of(plan)) == 700
            assert all(i.amount > 0 for i in plan)

    def test_previous_auto_adjusted_flags_reset(self):
        plan = make_plan([333, 333, 334])
        plan = plan_adjustment(1000, plan, target_no=1, new_amount=200).installments
        assert plan[1].auto_adjusted and plan[2].auto_adjusted

        # only installment 3 remains adjustable; installment 1 is locked now
        result = plan_adjustment(1000, plan, target_no=2, new_amount=500).installments

        assert amounts_of(result) == [200, 500, 300]
        assert result[0].auto_adjusted is False
        assert result[2].auto_adjusted is True


# =============================================================================
# Rejection Tests
# =============================================================================

class TestAdjustmentRejections:
    """Rejections happen before any change and carry the correcting value."""

    def test_budget_exceeded_reports_maximum(self):
        plan = make_plan([300, 300, 400], paid={1})

        with pytest.raises(AdjustmentBudgetExceededException) as exc_info:
            plan_adjustment(1000, plan, target_no=2, new_amount=800)

        # total - paid - locked, less one unit for installment 3
        assert exc_info.value.max_allowed_amount == 699
        assert exc_info.value.details["max_allowed_amount"] == 699
        assert amounts_of(plan) == [300, 300, 400]

    def test_budget_must_leave_one_unit_per_adjustable(self):
        plan = make_plan([250, 250, 250, 250])

        with pytest.raises(AdjustmentBudgetExceededException) as exc_info:
            plan_adjustment(1000, plan, target_no=1, new_amount=999)

        assert exc_info.value.max_allowed_amount == 997

        result = plan_adjustment(1000, plan, target_no=1, new_amount=997).installments
        assert amounts_of(result) == [997, 1, 1, 1]

    def test_reported_maximum_is_accepted_on_retry(self):
        plan = make_plan([250, 250, 250, 250])

        with pytest.raises(AdjustmentBudgetExceededException) as exc_info:
            plan_adjustment(1000, plan, target_no=1, new_amount=1001)

        max_allowed = exc_info.value.max_allowed_amount
        assert max_allowed == 997

        result = plan_adjustment(1000, plan, target_no=1, new_amount=max_allowed)
        assert amounts_of(result.installments) == [997, 1, 1, 1]

    def test_over_budget_without_adjustable_reports_budget(self):
        plan = make_plan([300, 300, 400], paid={1}, custom={3})

        with pytest.raises(AdjustmentBudgetExceededException) as exc_info:
            plan_adjustment(1000, plan, target_no=2, new_amount=500)

        assert exc_info.value.max_allowed_amount == 300

    def test_no_adjustable_slot_requires_exact_amount(self):
        plan = make_plan([300, 300, 400], paid={1}, custom={3})

        with pytest.raises(ResidualMismatchException) as exc_info:
            plan_adjustment(1000, plan, target_no=2, new_amount=250)

        assert exc_info.value.required_amount == 300
        assert amounts_of(plan) == [300, 300, 400]

    def test_no_adjustable_slot_exact_amount_accepted(self):
        plan = make_plan([300, 250, 450], paid={1}, custom={3})

        with pytest.raises(ResidualMismatchException) as exc_info:
            plan_adjustment(1000, plan, target_no=2, new_amount=200)
        assert exc_info.value.required_amount == 250

        result = plan_adjustment(1000, plan, target_no=2, new_amount=250).installments
        assert amounts_of(result) == [300, 250, 450]
        assert result[1].is_custom is True

    def test_paid_target_rejected(self):
        plan = make_plan([333, 333, 334], paid={1})

        with pytest.raises(InstallmentAlreadyPaidException):
            plan_adjustment(1000, plan, target_no=1, new_amount=100)

    def test_cancelled_target_rejected(self):
        plan = make_plan([333, 333, 334])
        plan[0].status = InstallmentStatus.CANCELLED

        with pytest.raises(InstallmentStateException):
            plan_adjustment(1000, plan, target_no=1, new_amount=100)

    def test_missing_target_rejected(self):
        with pytest.raises(InstallmentNotFoundException):
            plan_adjustment(1000, make_plan([500, 500]), target_no=5, new_amount=100)

    @pytest.mark.parametrize("new_amount", [0, -10, 12.5, "100", True])
    def test_invalid_amount_rejected(self, new_amount):
        with pytest.raises(ValidationException):
            plan_adjustment(1000, make_plan([500, 500]), target_no=1, new_amount=new_amount)


# =============================================================================
# Reconciliation Tests
# =============================================================================

class TestReconcileTotal:
    """Tests for the single deterministic sum correction."""

    def test_no_drift_no_change(self):
        plan = make_plan([500, 500])
        assert reconcile_total(1000, plan) == 0
        assert amounts_of(plan) == [500, 500]

    def test_drift_goes_to_last_unpaid(self):
        plan = make_plan([500, 300, 199], paid={1})

        assert reconcile_total(1000, plan) == 1
        assert amounts_of(plan) == [500, 300, 200]

    def test_last_unpaid_skips_paid_tail(self):
        plan = make_plan([300, 300, 399], paid={3})

        reconcile_total(1000, plan)

        assert amounts_of(plan) == [300, 301, 399]

    def test_no_unpaid_installment_is_fatal(self):
        plan = make_plan([500, 499], paid={1, 2})

        with pytest.raises(InvariantViolationException):
            reconcile_total(1000, plan)

    def test_correction_that_leaves_non_positive_amount_is_fatal(self):
        plan = make_plan([600, 500])

        with pytest.raises(InvariantViolationException):
            reconcile_total(600, plan)
