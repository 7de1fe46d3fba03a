from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional

from atelier.models import ORDER_STATUSES, PENDING, SENT, Order, OrderItem, Piece
from atelier.schema import ORDERS_KEY, PIECES_KEY
from atelier.services.pieces import adjust_stock
from atelier.state import AtelierState
from atelier.utils import iso_now, new_id

logger = logging.getLogger(__name__)


def _normalize_status(status: Optional[str]) -> str:
    s = str(status or "").strip().lower()
    if s in ORDER_STATUSES:
        return s
    raise ValueError("Invalid order status. Use 'pending' or 'sent'.")


def _as_items(items: Iterable[Any]) -> list[OrderItem]:
    out: list[OrderItem] = []
    for i in items or []:
        if isinstance(i, OrderItem):
            out.append(replace(i))
        else:
            out.append(OrderItem.from_dict(i))
    return out


def get_order(state: AtelierState, order_id: str) -> Optional[Order]:
    return next((o for o in state.orders if o.id == order_id), None)


def order_total(items: Iterable[OrderItem]) -> float:
    return sum(i.sale_price_per_unit * i.quantity for i in items)


# -------------------------
# Writers
# -------------------------

def save_order(state: AtelierState, data: Mapping[str, Any]) -> Optional[Order]:
    """
    Without an id: creates a pending order and takes every item out of stock.
    With an id: replaces client name and items of that order. Stock is NOT
    re-balanced on edit; unknown ids change nothing and return None.
    """
    client_name = str(data.get("client_name") or "")
    items = _as_items(data.get("items") or [])
    order_id = data.get("id")

    if order_id:
        for idx, existing in enumerate(state.orders):
            if existing.id == order_id:
                order = replace(existing, client_name=client_name, items=items)
                state.orders[idx] = order
                state.persist(ORDERS_KEY)
                logger.info("Order edited: %s (%s), stock unchanged", order.client_name, order.id)
                return order
        logger.info("Order %s not found, nothing edited", order_id)
        return None

    order = Order(
        id=new_id("order"),
        client_name=client_name,
        items=items,
        created_at=iso_now(),
        status=PENDING,
    )
    state.orders.insert(0, order)
    for item in order.items:
        adjust_stock(state, item.piece_id, -item.quantity)

    state.persist(ORDERS_KEY, PIECES_KEY)
    logger.info("Order created: %s (%s) with %d item(s)", order.client_name, order.id, len(order.items))
    return order


def delete_order(state: AtelierState, order_id: str) -> bool:
    order = get_order(state, order_id)
    if order is None:
        return False

    for item in order.items:
        adjust_stock(state, item.piece_id, item.quantity)
    state.orders[:] = [o for o in state.orders if o.id != order_id]

    state.persist(ORDERS_KEY, PIECES_KEY)
    logger.info("Order deleted: %s, stock restored for %d item(s)", order_id, len(order.items))
    return True


def update_order_status(state: AtelierState, order_id: str, status: str) -> Optional[Order]:
    status = _normalize_status(status)
    for idx, existing in enumerate(state.orders):
        if existing.id == order_id:
            order = replace(existing, status=status)
            state.orders[idx] = order
            state.persist(ORDERS_KEY)
            logger.info("Order %s marked %s", order_id, status)
            return order
    return None


def toggle_order_status(state: AtelierState, order_id: str) -> Optional[Order]:
    order = get_order(state, order_id)
    if order is None:
        return None
    return update_order_status(state, order_id, SENT if order.status == PENDING else PENDING)


# -------------------------
# Draft helpers (order form)
# -------------------------

def reserved_quantity(order: Optional[Order], piece_id: str) -> int:
    """Quantity a saved order already holds for a piece (0 for new orders)."""
    if order is None:
        return 0
    return next((i.quantity for i in order.items if i.piece_id == piece_id), 0)


def available_for_draft(pieces: Iterable[Piece], items: Iterable[OrderItem]) -> list[Piece]:
    in_draft = {i.piece_id: i.quantity for i in items}
    return [p for p in pieces if p.stock + in_draft.get(p.id, 0) > 0]


def clamp_quantity(piece: Piece, quantity: int, *, reserved: int = 0) -> int:
    return max(1, min(int(quantity), piece.stock + int(reserved)))


def set_draft_quantity(
    items: list[OrderItem],
    piece: Piece,
    quantity: int,
    *,
    reserved: int = 0,
) -> list[OrderItem]:
    qty = clamp_quantity(piece, quantity, reserved=reserved)
    return [replace(i, quantity=qty) if i.piece_id == piece.id else i for i in items]


def add_draft_item(items: list[OrderItem], piece: Piece, *, reserved: int = 0) -> list[OrderItem]:
    """A piece already in the draft gets +1 (clamped) instead of a second line."""
    existing = next((i for i in items if i.piece_id == piece.id), None)
    if existing is not None:
        return set_draft_quantity(items, piece, existing.quantity + 1, reserved=reserved)
    return [*items, OrderItem.from_piece(piece, 1)]


def remove_draft_item(items: list[OrderItem], piece_id: str) -> list[OrderItem]:
    return [i for i in items if i.piece_id != piece_id]
