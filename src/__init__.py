"""
Studio Billing - Installment Payment Plan Engine

A FastAPI-based service that builds installment plans for salon and
clinic orders, rebalances them on adjustment, records payments and
tracks overdue installments.
"""

__version__ = "0.1.0"
