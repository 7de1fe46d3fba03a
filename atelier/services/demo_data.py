from __future__ import annotations

import logging
import random

from atelier.db import delete_all
from atelier.models import AtelierSettings, OrderItem
from atelier.services.orders import save_order
from atelier.services.pieces import save_piece
from atelier.services.sales import register_sale
from atelier.state import AtelierState

logger = logging.getLogger(__name__)

# name, category, yarn, accessories, other, hours, minutes, stock, price
DEMO_PIECES = [
    ("Amigurumi Bear", "Toys", 18.0, 6.0, 2.0, 4, 30, 6, 120.0),
    ("Granny Square Bag", "Bags", 35.0, 12.0, 0.0, 6, 0, 3, 210.0),
    ("Baby Booties", "Baby", 8.0, 1.5, 0.0, 1, 15, 10, 55.0),
    ("Table Runner", "Home", 25.0, 0.0, 4.0, 8, 0, 2, 260.0),
    ("Hair Scrunchie", "Accessories", 2.0, 0.5, 0.0, 0, 20, 25, 15.0),
]

CLIENTS = ["Ana", "Beatriz", "Carla", "Diego"]


def wipe_all(state: AtelierState) -> None:
    delete_all(state.conn)
    state.settings = AtelierSettings()
    state.pieces.clear()
    state.sales.clear()
    state.orders.clear()
    logger.info("All data wiped")


def load_demo_data(state: AtelierState, *, seed: int = 7) -> None:
    """Seeds pieces, a few sales and one order through the normal operations."""
    rng = random.Random(seed)

    pieces = []
    for name, category, yarn, acc, other, hours, minutes, stock, price in DEMO_PIECES:
        pieces.append(
            save_piece(
                state,
                {
                    "name": name,
                    "category": category,
                    "photos": [],
                    "yarn_cost": yarn,
                    "accessories_cost": acc,
                    "other_costs": other,
                    "time_hours": hours,
                    "time_minutes": minutes,
                    "stock": stock,
                    "sale_price": price,
                },
            )
        )

    for piece in pieces:
        qty = rng.randint(1, max(1, piece.stock // 3))
        register_sale(state, piece, qty)

    # Re-read: register_sale replaced the stored records with new stock values.
    current = {p.id: p for p in state.pieces}
    ordered = [current[p.id] for p in rng.sample(pieces, 2)]
    save_order(
        state,
        {
            "client_name": rng.choice(CLIENTS),
            "items": [OrderItem.from_piece(p, 1) for p in ordered if p.stock > 0],
        },
    )
    logger.info("Demo data loaded (seed=%d)", seed)
