"""Due-date schedule for installment plans."""

from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from .settings import InstallmentSettings, installment_settings


def due_dates(
    count: int,
    start_date: Optional[date] = None,
    today: Optional[date] = None,
    settings: InstallmentSettings = installment_settings,
) -> List[date]:
    """
    Monthly due dates for a plan of `count` installments.

    Installment i (1-based) is due start_date + (i - 1) intervals.
    relativedelta clamps to the end of shorter months, so a plan
    starting on Jan 31 falls due on Feb 28/29, Mar 31, ...

    Args:
        count: Number of installments
        start_date: Due date of the first installment
        today: Reference date when start_date is omitted
        settings: Installment settings (uses defaults if not provided)

    Returns:
        List of `count` due dates
    """
    if start_date is None:
        start_date = (today or date.today()) + relativedelta(
            months=settings.first_due_offset_months
        )

    return [
        start_date + relativedelta(months=i * settings.due_interval_months)
        for i in range(count)
    ]
