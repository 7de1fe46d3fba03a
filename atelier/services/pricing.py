from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from atelier.models import AtelierSettings


@dataclass
class PriceBreakdown:
    material_cost: float
    time_cost: float
    base_cost: float
    suggested_price: float


def _field(piece: Any, name: str) -> float:
    # Works for Piece records and for plain draft dicts from the edit form.
    if isinstance(piece, dict):
        return float(piece.get(name) or 0)
    return float(getattr(piece, name))


def time_cost(piece, hourly_rate: float) -> float:
    hours = _field(piece, "time_hours") + _field(piece, "time_minutes") / 60
    return hours * float(hourly_rate)


def material_cost(piece) -> float:
    return _field(piece, "yarn_cost") + _field(piece, "accessories_cost") + _field(piece, "other_costs")


def base_cost(piece, hourly_rate: float) -> float:
    """Per-unit cost: materials plus labour at `hourly_rate`."""
    return material_cost(piece) + time_cost(piece, hourly_rate)


def suggested_price(piece, settings: AtelierSettings) -> float:
    return base_cost(piece, settings.hourly_rate) * (1 + float(settings.profit_margin) / 100)


def price_breakdown(piece, settings: AtelierSettings) -> PriceBreakdown:
    mat = material_cost(piece)
    tc = time_cost(piece, settings.hourly_rate)
    base = mat + tc
    return PriceBreakdown(
        material_cost=mat,
        time_cost=tc,
        base_cost=base,
        suggested_price=base * (1 + float(settings.profit_margin) / 100),
    )
