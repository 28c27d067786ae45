#!/usr/bin/env python3
"""
Overdue sweep for cron.

Moves every UNPAID installment whose due date has passed to OVERDUE and
prints the number of rows changed. Safe to run as often as needed.

Usage:
    python scripts/mark_overdue.py
    python scripts/mark_overdue.py --as-of 2025-03-01
    python scripts/mark_overdue.py --database-url postgresql://... --json

Arguments:
    --as-of: Compare due dates against this date instead of today
    --database-url: Override DATABASE_URL
    --json: Output raw JSON instead of formatted text
"""
import argparse
import asyncio
import json
import os
import sys
from datetime import datetime

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from src.application.services import OverdueService
from src.core.config import settings
from src.core.dependencies import get_event_publisher
from src.core.logging import setup_logging
from src.domain.entities import Actor, Role
from src.infrastructure.clients import RoleBasedAccessGate
from src.infrastructure.database import db_manager
from src.infrastructure.repositories import SqlAlchemyUnitOfWork

SYSTEM_ACTOR = Actor(id="system:overdue-sweep", role=Role(settings.top_level_role))


async def run(as_of: datetime | None, database_url: str | None) -> dict:
    db_manager.init(database_url)
    try:
        service = OverdueService(
            unit_of_work=SqlAlchemyUnitOfWork(db_manager.session_factory),
            access_gate=RoleBasedAccessGate(),
            event_publisher=get_event_publisher(),
        )
        result = await service.mark_overdue(SYSTEM_ACTOR, now=as_of)
    finally:
        await db_manager.close()

    return {"marked_count": result.marked_count, "as_of": result.as_of}


def main():
    parser = argparse.ArgumentParser(
        description="Mark past-due installments as OVERDUE"
    )
    parser.add_argument(
        "--as-of",
        help="Reference date (YYYY-MM-DD), defaults to today",
        default=None
    )
    parser.add_argument(
        "--database-url",
        help="Database URL, defaults to DATABASE_URL",
        default=None
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output raw JSON"
    )

    args = parser.parse_args()

    setup_logging()

    as_of = None
    if args.as_of:
        try:
            as_of = datetime.strptime(args.as_of, "%Y-%m-%d")
        except ValueError:
            print(f"Error: --as-of must be YYYY-MM-DD, got {args.as_of}")
            sys.exit(1)

    result = asyncio.run(run(as_of, args.database_url))

    if args.json:
        print(json.dumps(result))
    else:
        print(f"Marked {result['marked_count']} installment(s) overdue as of {result['as_of']}")


if __name__ == "__main__":
    main()
