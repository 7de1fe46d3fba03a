SCHEMA_SQL = r"""
-- One JSON document per key (settings, pieces, sales, orders)
CREATE TABLE IF NOT EXISTS kv_store (
  key TEXT PRIMARY KEY,
  value TEXT NOT NULL,                   -- JSON
  updated_at TEXT NOT NULL               -- ISO datetime
);
"""

SETTINGS_KEY = "settings"
PIECES_KEY = "pieces"
SALES_KEY = "sales"
ORDERS_KEY = "orders"

STATE_KEYS = (SETTINGS_KEY, PIECES_KEY, SALES_KEY, ORDERS_KEY)
