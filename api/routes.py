"""
Dashboard API routes — protected greeting, transactions, summary.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import get_current_user, get_optional_user
from database.session import get_db_session
from database.transactions import TransactionFilter, list_transactions, project_columns
from utils.schemas import (
    DashboardSummary,
    ProtectedResponse,
    TransactionPage,
    UserProfile,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.get("/protected", response_model=ProtectedResponse)
async def protected(user: UserProfile = Depends(get_current_user)) -> ProtectedResponse:
    return ProtectedResponse(message=f"Welcome {user.email}", user=user)


@router.get("/transactions", response_model=TransactionPage)
async def transactions(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[str] = None,
    category: Optional[str] = None,
    min_amount: Optional[float] = Query(None, ge=0),
    max_amount: Optional[float] = Query(None, ge=0),
    columns: Optional[str] = Query(None, description="Comma-separated column names"),
    session: AsyncSession = Depends(get_db_session),
    user: UserProfile = Depends(get_current_user),
) -> TransactionPage:
    """Filtered transactions, projected to the requested columns."""
    flt = TransactionFilter(
        start_date=start_date,
        end_date=end_date,
        status=status,
        category=category,
        min_amount=min_amount,
        max_amount=max_amount,
    )
    records = await list_transactions(session, flt)
    selected = [c.strip() for c in columns.split(",")] if columns else None
    rows = project_columns(records, selected)
    logger.debug("User %s listed %d transactions", user.id, len(rows))
    return TransactionPage(count=len(rows), transactions=rows)


@router.get("/dashboard/summary", response_model=DashboardSummary)
async def dashboard_summary(
    session: AsyncSession = Depends(get_db_session),
    user: Optional[UserProfile] = Depends(get_optional_user),
) -> DashboardSummary:
    """Headline stats; the greeting is personalized when a valid token is sent."""
    records = await list_transactions(session)
    revenue = sum(r.amount for r in records if r.amount >= 0)
    expenses = sum(-r.amount for r in records if r.amount < 0)

    name = (user.first_name or user.email) if user else None
    return DashboardSummary(
        greeting=f"Welcome back, {name}!" if name else "Welcome!",
        total_revenue=round(revenue, 2),
        total_expenses=round(expenses, 2),
        net=round(revenue - expenses, 2),
        transaction_count=len(records),
        pending_count=sum(1 for r in records if r.status.lower() == "pending"),
        active_clients=len({r.user_id for r in records}),
    )
