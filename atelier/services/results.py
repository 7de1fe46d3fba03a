from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Iterable, Mapping, Optional, Union

import pandas as pd

from atelier.models import Sale
from atelier.utils import parse_ts

WEEK = "week"
MONTH = "month"
YEAR = "year"
PERIODS = (WEEK, MONTH, YEAR)

UNKNOWN_PIECE = "Unknown piece"
TOP_N = 5

SaleLike = Union[Sale, Mapping[str, Any]]


@dataclass
class PieceProfit:
    name: str
    profit: float


@dataclass
class PeriodResults:
    period: str
    total_profit: float = 0.0
    total_revenue: float = 0.0
    total_cost: float = 0.0
    sales_count: int = 0
    top_pieces: list[PieceProfit] = field(default_factory=list)


def _normalize_period(period: Optional[str]) -> str:
    p = str(period or "").strip().lower()
    if p in PERIODS:
        return p
    raise ValueError("Invalid period. Use 'week', 'month' or 'year'.")


def _record(sale: SaleLike) -> dict:
    rec = sale.to_dict() if isinstance(sale, Sale) else dict(sale)
    # Older records carried the whole piece instead of a name snapshot.
    if not rec.get("pieceName") and isinstance(rec.get("piece"), Mapping):
        rec["pieceName"] = rec["piece"].get("name")
    return rec


def _sale_date(sale: SaleLike) -> Any:
    return sale.date if isinstance(sale, Sale) else sale.get("date")


def _align(ts: datetime, reference_now: datetime) -> datetime:
    """Expresses `ts` on the same clock as `reference_now` (local time when naive)."""
    if reference_now.tzinfo is None:
        return ts.astimezone().replace(tzinfo=None) if ts.tzinfo is not None else ts
    if ts.tzinfo is None:
        return ts.replace(tzinfo=reference_now.tzinfo)
    return ts.astimezone(reference_now.tzinfo)


def week_start(reference_now: datetime) -> datetime:
    """Midnight of the most recent Sunday (weeks start on Sunday)."""
    days_since_sunday = (reference_now.weekday() + 1) % 7
    start = reference_now - timedelta(days=days_since_sunday)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def _in_period(ts: datetime, period: str, now: datetime) -> bool:
    if period == WEEK:
        return ts >= week_start(now)
    if period == YEAR:
        return ts.year == now.year
    return ts.year == now.year and ts.month == now.month


def period_sales(
    sales: Iterable[SaleLike],
    period: str,
    reference_now: Optional[datetime] = None,
) -> list[SaleLike]:
    period = _normalize_period(period)
    now = reference_now or datetime.now()

    out: list[SaleLike] = []
    for s in sales:
        ts = parse_ts(_sale_date(s))
        if ts is None:
            continue
        if _in_period(_align(ts, now), period, now):
            out.append(s)
    return out


def compute_results(
    sales: Iterable[SaleLike],
    period: str,
    reference_now: Optional[datetime] = None,
) -> PeriodResults:
    """
    Totals and the top-5 pieces by profit for the sales inside the window.
    Missing or non-numeric amounts count as 0; a missing quantity counts as 1
    when weighting the per-unit cost.
    """
    period = _normalize_period(period)
    selected = period_sales(sales, period, reference_now)
    if not selected:
        return PeriodResults(period=period)

    df = pd.DataFrame([_record(s) for s in selected]).reindex(
        columns=["pieceName", "quantity", "salePrice", "baseCost", "profit"]
    )

    profit = pd.to_numeric(df["profit"], errors="coerce").fillna(0)
    revenue = pd.to_numeric(df["salePrice"], errors="coerce").fillna(0)
    unit_cost = pd.to_numeric(df["baseCost"], errors="coerce").fillna(0)
    quantity = pd.to_numeric(df["quantity"], errors="coerce").fillna(0)
    quantity = quantity.mask(quantity == 0, 1)

    names = df["pieceName"].fillna("").astype(str)
    names = names.mask(names == "", UNKNOWN_PIECE)

    # groupby(sort=False) keeps first-appearance order; the stable sort keeps it on ties.
    by_piece = profit.groupby(names, sort=False).sum()
    ranked = by_piece.sort_values(key=lambda s: -s, kind="stable").head(TOP_N)

    return PeriodResults(
        period=period,
        total_profit=float(profit.sum()),
        total_revenue=float(revenue.sum()),
        total_cost=float((unit_cost * quantity).sum()),
        sales_count=int(len(df)),
        top_pieces=[PieceProfit(name=str(n), profit=float(v)) for n, v in ranked.items()],
    )
