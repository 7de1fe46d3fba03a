from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from atelier.utils import to_number

PENDING = "pending"
SENT = "sent"
ORDER_STATUSES = (PENDING, SENT)

NEW_PIECE_NAME = "New piece"


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.title() for p in rest)


def _to_int(v: Any) -> int:
    return int(to_number(v))


def _record_to_dict(obj) -> dict:
    out = {}
    for f in fields(obj):
        v = getattr(obj, f.name)
        out[_camel(f.name)] = list(v) if isinstance(v, list) else v
    return out


@dataclass
class Piece:
    id: str
    name: str
    created_at: str
    category: str = ""
    photos: list[str] = field(default_factory=list)
    yarn_cost: float = 0.0
    accessories_cost: float = 0.0
    other_costs: float = 0.0
    time_hours: int = 0
    time_minutes: int = 0
    stock: int = 0
    sale_price: float = 0.0

    @property
    def first_photo(self) -> str:
        return self.photos[0] if self.photos else ""

    def to_dict(self) -> dict:
        return _record_to_dict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Piece":
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name") or ""),
            created_at=str(d.get("createdAt") or ""),
            category=str(d.get("category") or ""),
            photos=[str(p) for p in (d.get("photos") or [])],
            yarn_cost=to_number(d.get("yarnCost")),
            accessories_cost=to_number(d.get("accessoriesCost")),
            other_costs=to_number(d.get("otherCosts")),
            time_hours=_to_int(d.get("timeHours")),
            time_minutes=_to_int(d.get("timeMinutes")),
            stock=_to_int(d.get("stock")),
            sale_price=to_number(d.get("salePrice")),
        )


# Fields a caller may set through save_piece (identity excluded).
PIECE_FIELDS = tuple(f.name for f in fields(Piece) if f.name not in ("id", "created_at"))


@dataclass
class Sale:
    """A completed transaction. `sale_price` and `profit` are totals, `base_cost` is per unit."""

    id: str
    piece_id: str
    piece_name: str
    piece_photo: str
    quantity: int
    sale_price: float
    base_cost: float
    profit: float
    date: str

    def to_dict(self) -> dict:
        return _record_to_dict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Sale":
        return cls(
            id=str(d.get("id", "")),
            piece_id=str(d.get("pieceId", "")),
            piece_name=str(d.get("pieceName") or ""),
            piece_photo=str(d.get("piecePhoto") or ""),
            quantity=_to_int(d.get("quantity")),
            sale_price=to_number(d.get("salePrice")),
            base_cost=to_number(d.get("baseCost")),
            profit=to_number(d.get("profit")),
            date=str(d.get("date") or ""),
        )


@dataclass
class OrderItem:
    piece_id: str
    piece_name: str
    piece_photo: str
    quantity: int
    sale_price_per_unit: float

    @property
    def total(self) -> float:
        return self.sale_price_per_unit * self.quantity

    def to_dict(self) -> dict:
        return _record_to_dict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "OrderItem":
        return cls(
            piece_id=str(d.get("pieceId", "")),
            piece_name=str(d.get("pieceName") or ""),
            piece_photo=str(d.get("piecePhoto") or ""),
            quantity=_to_int(d.get("quantity")),
            sale_price_per_unit=to_number(d.get("salePricePerUnit")),
        )

    @classmethod
    def from_piece(cls, piece: Piece, quantity: int = 1) -> "OrderItem":
        return cls(
            piece_id=piece.id,
            piece_name=piece.name,
            piece_photo=piece.first_photo,
            quantity=int(quantity),
            sale_price_per_unit=piece.sale_price,
        )


@dataclass
class Order:
    id: str
    client_name: str
    items: list[OrderItem]
    created_at: str
    status: str = PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "clientName": self.client_name,
            "items": [i.to_dict() for i in self.items],
            "createdAt": self.created_at,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Order":
        return cls(
            id=str(d.get("id", "")),
            client_name=str(d.get("clientName") or ""),
            items=[OrderItem.from_dict(i) for i in (d.get("items") or [])],
            created_at=str(d.get("createdAt") or ""),
            status=str(d.get("status") or PENDING),
        )


@dataclass
class AtelierSettings:
    atelier_name: str = "My Atelier"
    hourly_rate: float = 20.0
    profit_margin: float = 100.0  # percent

    def to_dict(self) -> dict:
        return _record_to_dict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "AtelierSettings":
        default = cls()
        return cls(
            atelier_name=str(d.get("atelierName") or default.atelier_name),
            hourly_rate=to_number(d.get("hourlyRate"), default.hourly_rate),
            profit_margin=to_number(d.get("profitMargin"), default.profit_margin),
        )
