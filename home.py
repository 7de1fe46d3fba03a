from __future__ import annotations

import streamlit as st

from atelier.config import get_settings
from atelier.services.pieces import pieces_in_stock
from atelier.models import PENDING
from atelier.session import get_state

st.set_page_config(page_title="Atelier Ledger", page_icon="🧶", layout="wide")

settings = get_settings()
state = get_state()

st.title(f"🧶 {state.settings.atelier_name}")
st.caption("Pieces, sales and orders for a handmade atelier: cost-based pricing, stock that follows sales and orders, and profit results.")

with st.sidebar:
    st.subheader("Environment")
    st.write(f"**Data directory:** `{settings.data_dir}`")
    st.write(f"**Database:** `{settings.db_path.name}`")

c1, c2, c3 = st.columns(3)
c1.metric("Pieces in stock", f"{len(pieces_in_stock(state))}")
c2.metric("Sales recorded", f"{len(state.sales)}")
c3.metric("Pending orders", f"{sum(1 for o in state.orders if o.status == PENDING)}")

st.info(
    "Start in **⚙️ Settings** with your hourly rate and margin, then add **Pieces**. "
    "Use **🧪 Data Management** to load demo data.",
    icon="ℹ️",
)
