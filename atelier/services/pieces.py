from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional

from atelier.models import NEW_PIECE_NAME, PIECE_FIELDS, Piece
from atelier.schema import PIECES_KEY
from atelier.state import AtelierState
from atelier.utils import iso_now, new_id

logger = logging.getLogger(__name__)

_NUMERIC_FIELDS = (
    "yarn_cost",
    "accessories_cost",
    "other_costs",
    "time_hours",
    "time_minutes",
    "stock",
    "sale_price",
)


def get_piece(state: AtelierState, piece_id: str) -> Optional[Piece]:
    return next((p for p in state.pieces if p.id == piece_id), None)


def pieces_in_stock(state: AtelierState) -> list[Piece]:
    return [p for p in state.pieces if p.stock > 0]


def _editable(data: Mapping[str, Any]) -> dict:
    return {k: v for k, v in data.items() if k in PIECE_FIELDS and v is not None}


def _merge_piece(existing: Piece, data: Mapping[str, Any]) -> Piece:
    changes = _editable(data)
    if "photos" in changes:
        changes["photos"] = list(changes["photos"])
    return replace(existing, **changes)


def _new_piece(data: Mapping[str, Any]) -> Piece:
    fields = _editable(data)
    for name in _NUMERIC_FIELDS:
        fields[name] = fields.get(name) or 0
    fields["name"] = fields.get("name") or NEW_PIECE_NAME
    fields["category"] = fields.get("category") or ""
    fields["photos"] = list(fields.get("photos") or [])
    return Piece(id=new_id("piece"), created_at=iso_now(), **fields)


def save_piece(state: AtelierState, data: Mapping[str, Any]) -> Piece:
    """
    Edit path: `data["id"]` names an existing piece, provided fields are merged
    over it and its identity/position are kept.
    Create path: anything else gets a fresh id, defaults, and goes first.
    """
    piece_id = data.get("id")
    for idx, existing in enumerate(state.pieces):
        if piece_id and existing.id == piece_id:
            piece = _merge_piece(existing, data)
            state.pieces[idx] = piece
            state.persist(PIECES_KEY)
            logger.info("Piece updated: %s (%s)", piece.name, piece.id)
            return piece

    piece = _new_piece(data)
    state.pieces.insert(0, piece)
    state.persist(PIECES_KEY)
    logger.info("Piece created: %s (%s)", piece.name, piece.id)
    return piece


def delete_piece(state: AtelierState, piece_id: str) -> None:
    # Sales and orders keep their own snapshots of the piece.
    before = len(state.pieces)
    state.pieces[:] = [p for p in state.pieces if p.id != piece_id]
    if len(state.pieces) != before:
        state.persist(PIECES_KEY)
        logger.info("Piece deleted: %s", piece_id)


def adjust_stock(state: AtelierState, piece_id: str, delta: int) -> bool:
    """Adds `delta` to a piece's stock in memory. Unknown ids are skipped (False)."""
    for idx, p in enumerate(state.pieces):
        if p.id == piece_id:
            state.pieces[idx] = replace(p, stock=p.stock + int(delta))
            return True
    logger.debug("Stock adjustment skipped, piece %s not found", piece_id)
    return False
