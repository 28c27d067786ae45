"""
Initial amount allocation for installment plans.

Every rule here keeps the amounts positive integers that sum exactly to
the order total. Integer-division remainders always land on the last
eligible installment, so earlier installments stay predictable.
"""

from typing import Dict, List, Optional, Tuple

from src.domain.exceptions import ValidationException

from .settings import InstallmentSettings, installment_settings


def require_positive_int(value, field: str) -> int:
    """Reject booleans, non-integers, zero and negatives."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationException(
            f"{field} must be an integer",
            details={field: value},
        )
    if value <= 0:
        raise ValidationException(
            f"{field} must be positive",
            details={field: value},
        )
    return value


def validate_installment_count(
    count,
    settings: InstallmentSettings = installment_settings,
) -> int:
    count = require_positive_int(count, "installment_count")
    if count > settings.max_installment_count:
        raise ValidationException(
            f"installment_count must be at most {settings.max_installment_count}",
            details={
                "installment_count": count,
                "max_installment_count": settings.max_installment_count,
            },
        )
    return count


def split_evenly(amount: int, count: int) -> List[int]:
    """
    Split `amount` into `count` parts: floor on each, remainder on the last.

    Example:
        split_evenly(1000, 3) -> [333, 333, 334]
    """
    base = amount // count
    remainder = amount - base * count
    return [base] * (count - 1) + [base + remainder]


def plan_amounts(
    total_amount: int,
    count: int,
    first_payment_amount: Optional[int] = None,
) -> List[int]:
    """
    Amounts for a freshly built plan.

    Args:
        total_amount: Order total
        count: Number of installments
        first_payment_amount: Optional fixed amount for installment 1;
            the residual is split across the other count - 1. None or 0
            means an even split.

    Returns:
        `count` positive amounts summing to total_amount

    Raises:
        ValidationException: If no all-positive split exists
    """
    if not first_payment_amount:
        if total_amount < count:
            raise ValidationException(
                f"Total {total_amount} cannot be split into {count} positive installments",
                details={"total_amount": total_amount, "installment_count": count},
            )
        return split_evenly(total_amount, count)

    first = require_positive_int(first_payment_amount, "first_payment_amount")
    residual = total_amount - first

    if count == 1:
        if residual != 0:
            raise ValidationException(
                "A single-installment plan must have first_payment_amount equal to the total",
                details={"first_payment_amount": first, "total_amount": total_amount},
            )
        return [first]

    if residual < count - 1:
        raise ValidationException(
            f"first_payment_amount leaves {residual} for {count - 1} installments",
            details={
                "first_payment_amount": first,
                "max_first_payment_amount": total_amount - (count - 1),
            },
        )

    return [first] + split_evenly(residual, count - 1)


def custom_plan_amounts(
    total_amount: int,
    count: int,
    custom_plan: Dict[int, int],
) -> List[Tuple[int, bool]]:
    """
    Amounts for a checkout plan with some installments pinned.

    Installments named in `custom_plan` keep their amount and are marked
    custom; the others split the residual with the remainder on the last
    free installment.

    Returns:
        `count` (amount, is_custom) pairs in installment order
    """
    for installment_no, amount in custom_plan.items():
        if not isinstance(installment_no, int) or not 1 <= installment_no <= count:
            raise ValidationException(
                f"custom_plan installment {installment_no} is outside 1..{count}",
                details={"installment_no": installment_no},
            )
        require_positive_int(amount, f"custom_plan[{installment_no}]")

    custom_total = sum(custom_plan.values())
    residual = total_amount - custom_total
    free_slots = [no for no in range(1, count + 1) if no not in custom_plan]

    if residual < 0:
        raise ValidationException(
            f"custom_plan total {custom_total} exceeds order total {total_amount}",
            details={"custom_total": custom_total, "total_amount": total_amount},
        )
    if not free_slots and residual != 0:
        raise ValidationException(
            f"custom_plan must total exactly {total_amount} when every installment is fixed",
            details={"custom_total": custom_total, "total_amount": total_amount},
        )
    if free_slots and residual < len(free_slots):
        raise ValidationException(
            f"custom_plan leaves {residual} for {len(free_slots)} installments",
            details={"residual": residual, "free_installments": len(free_slots)},
        )

    free_amounts = {}
    if free_slots:
        free_amounts = dict(zip(free_slots, split_evenly(residual, len(free_slots))))

    return [
        (custom_plan[no], True) if no in custom_plan else (free_amounts[no], False)
        for no in range(1, count + 1)
    ]
