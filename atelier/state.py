from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field

from atelier.db import ensure_schema, read_value, write_values
from atelier.models import AtelierSettings, Order, Piece, Sale
from atelier.schema import ORDERS_KEY, PIECES_KEY, SALES_KEY, SETTINGS_KEY

logger = logging.getLogger(__name__)


@dataclass
class AtelierState:
    """
    Single owner of the settings and the three collections.

    Services mutate the lists in place and call `persist` with the keys they
    touched; the in-memory copy stays authoritative if a write fails.
    All collections are kept newest-first.
    """

    conn: sqlite3.Connection
    settings: AtelierSettings = field(default_factory=AtelierSettings)
    pieces: list[Piece] = field(default_factory=list)
    sales: list[Sale] = field(default_factory=list)
    orders: list[Order] = field(default_factory=list)

    @classmethod
    def load(cls, conn: sqlite3.Connection) -> "AtelierState":
        ensure_schema(conn)
        settings = read_value(conn, SETTINGS_KEY, None)
        state = cls(
            conn=conn,
            settings=AtelierSettings.from_dict(settings) if isinstance(settings, dict) else AtelierSettings(),
            pieces=[Piece.from_dict(d) for d in _as_records(read_value(conn, PIECES_KEY, []))],
            sales=[Sale.from_dict(d) for d in _as_records(read_value(conn, SALES_KEY, []))],
            orders=[Order.from_dict(d) for d in _as_records(read_value(conn, ORDERS_KEY, []))],
        )
        logger.info(
            "Loaded state: %d pieces, %d sales, %d orders",
            len(state.pieces),
            len(state.sales),
            len(state.orders),
        )
        return state

    def snapshot(self, key: str):
        if key == SETTINGS_KEY:
            return self.settings.to_dict()
        if key == PIECES_KEY:
            return [p.to_dict() for p in self.pieces]
        if key == SALES_KEY:
            return [s.to_dict() for s in self.sales]
        if key == ORDERS_KEY:
            return [o.to_dict() for o in self.orders]
        raise ValueError(f"Unknown state key: {key}")

    def persist(self, *keys: str) -> bool:
        return write_values(self.conn, {k: self.snapshot(k) for k in keys})


def _as_records(value) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


def save_settings(state: AtelierState, settings: AtelierSettings) -> AtelierSettings:
    state.settings = settings
    state.persist(SETTINGS_KEY)
    logger.info("Settings saved (rate=%s, margin=%s%%)", settings.hourly_rate, settings.profit_margin)
    return settings
