from atelier.models import AtelierSettings, Order, OrderItem, Piece, Sale
from atelier.utils import bytes_to_data_url, data_url_to_bytes, format_currency, parse_ts, to_number


def test_to_number():
    assert to_number("3.5") == 3.5
    assert to_number(None) == 0
    assert to_number("abc") == 0
    assert to_number(float("nan"), 1.0) == 1.0


def test_parse_ts():
    assert parse_ts("2026-10-12T10:00:00Z").tzinfo is not None
    assert parse_ts("garbage") is None
    assert parse_ts("") is None


def test_data_url_roundtrip():
    url = bytes_to_data_url(b"\x89PNG", "image/png")
    assert url.startswith("data:image/png;base64,")
    assert data_url_to_bytes(url) == b"\x89PNG"
    assert data_url_to_bytes("https://example.com/x.png") is None


def test_format_currency():
    assert format_currency(1234.5, "BRL") == "R$ 1.234,50"
    assert format_currency(10, "USD") == "$ 10.00"


def test_records_read_legacy_json():
    piece = Piece.from_dict({"id": "piece-1", "name": "Bear", "stock": "4", "yarnCost": None})
    assert piece.stock == 4
    assert piece.yarn_cost == 0
    assert piece.first_photo == ""

    sale = Sale.from_dict({"id": "s", "pieceId": "piece-1", "profit": "x"})
    assert sale.profit == 0

    order = Order.from_dict({"id": "o", "clientName": "Ana", "items": [{"pieceId": "piece-1", "quantity": 2, "salePricePerUnit": 50}]})
    assert order.status == "pending"
    assert order.items == [OrderItem("piece-1", "", "", 2, 50.0)]
    assert order.to_dict()["items"][0]["salePricePerUnit"] == 50.0


def test_settings_null_name_uses_default():
    settings = AtelierSettings.from_dict({"atelierName": None, "hourlyRate": None})
    assert settings.atelier_name == "My Atelier"
    assert settings.hourly_rate == 20
