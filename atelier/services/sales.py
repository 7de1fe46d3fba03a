from __future__ import annotations

import logging

from atelier.models import Piece, Sale
from atelier.schema import PIECES_KEY, SALES_KEY
from atelier.services.pieces import adjust_stock
from atelier.services.pricing import base_cost
from atelier.state import AtelierState
from atelier.utils import iso_now, new_id

logger = logging.getLogger(__name__)


def build_sale(piece: Piece, quantity: int, *, hourly_rate: float) -> Sale:
    """
    Freezes the piece's name/photo and its current per-unit cost.
    sale_price and profit are totals for the whole quantity.
    """
    unit_cost = base_cost(piece, hourly_rate)
    total_sale_price = piece.sale_price * quantity
    return Sale(
        id=new_id("sale"),
        piece_id=piece.id,
        piece_name=piece.name,
        piece_photo=piece.first_photo,
        quantity=int(quantity),
        sale_price=total_sale_price,
        base_cost=unit_cost,
        profit=total_sale_price - unit_cost * quantity,
        date=iso_now(),
    )


def register_sale(state: AtelierState, piece: Piece, quantity: int) -> Sale:
    # 0 < quantity <= piece.stock is the caller's job; stock is not clamped here.
    sale = build_sale(piece, int(quantity), hourly_rate=state.settings.hourly_rate)

    state.sales.insert(0, sale)
    adjust_stock(state, piece.id, -int(quantity))

    # Sale and stock change are written together or not at all.
    state.persist(SALES_KEY, PIECES_KEY)
    logger.info(
        "Sale registered: %s x%d total=%.2f profit=%.2f",
        sale.piece_name,
        sale.quantity,
        sale.sale_price,
        sale.profit,
    )
    return sale
