"""
Read-only transaction queries backing the dashboard and export views.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import InvalidInput
from database.models import Transaction
from utils.schemas import TransactionRecord

EXPORT_COLUMNS = ("id", "date", "amount", "category", "status", "user_id", "user_profile")


@dataclass(frozen=True)
class TransactionFilter:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[str] = None
    category: Optional[str] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None


def _is_set(value: Optional[str]) -> bool:
    return bool(value) and value.lower() != "all"


def _to_record(row: Transaction) -> TransactionRecord:
    return TransactionRecord(
        id=row.transaction_id,
        date=row.date,
        amount=float(row.amount),
        category=row.category,
        status=row.status,
        user_id=row.user_id,
        user_profile=row.user_profile,
    )


async def list_transactions(
    session: AsyncSession,
    flt: TransactionFilter | None = None,
) -> List[TransactionRecord]:
    """
    Return transactions matching ``flt``, oldest first.

    Date bounds are inclusive; status and category match case-insensitively
    (``"all"`` disables them); amount bounds apply to the absolute amount.
    """
    flt = flt or TransactionFilter()
    stmt = select(Transaction)
    if flt.start_date is not None:
        stmt = stmt.where(Transaction.date >= flt.start_date)
    if flt.end_date is not None:
        stmt = stmt.where(Transaction.date <= flt.end_date)
    if _is_set(flt.status):
        stmt = stmt.where(func.lower(Transaction.status) == flt.status.lower())
    if _is_set(flt.category):
        stmt = stmt.where(func.lower(Transaction.category) == flt.category.lower())
    if flt.min_amount is not None:
        stmt = stmt.where(func.abs(Transaction.amount) >= flt.min_amount)
    if flt.max_amount is not None:
        stmt = stmt.where(func.abs(Transaction.amount) <= flt.max_amount)
    stmt = stmt.order_by(Transaction.date, Transaction.transaction_id)

    result = await session.execute(stmt)
    return [_to_record(row) for row in result.scalars().all()]


def project_columns(
    records: Iterable[TransactionRecord],
    columns: Sequence[str] | None = None,
) -> List[Dict[str, Any]]:
    """Keep only ``columns`` (all export columns when empty), in the given order."""
    selected = [c for c in (columns or []) if c] or list(EXPORT_COLUMNS)
    unknown = [c for c in selected if c not in EXPORT_COLUMNS]
    if unknown:
        raise InvalidInput(f"Unknown columns: {', '.join(unknown)}")
    return [{c: getattr(rec, c) for c in selected} for rec in records]


async def add_transactions(session: AsyncSession, records: Iterable[TransactionRecord]) -> int:
    """Insert records (used by fixtures and data loads); returns the count."""
    rows = [
        Transaction(
            transaction_id=rec.id,
            date=rec.date,
            amount=rec.amount,
            category=rec.category,
            status=rec.status,
            user_id=rec.user_id,
            user_profile=rec.user_profile,
        )
        for rec in records
    ]
    session.add_all(rows)
    await session.flush()
    return len(rows)
