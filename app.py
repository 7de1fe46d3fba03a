from __future__ import annotations

import streamlit as st

from atelier.config import configure_logging, get_settings

st.set_page_config(page_title="Atelier Ledger", page_icon="🧶", layout="wide")

configure_logging(get_settings().log_level)

pages = [
    st.Page("home.py", title="Home", icon="🏠"),
    st.Page("pages/1_🧶_Pieces.py", title="Pieces", icon="🧶"),
    st.Page("pages/2_🛒_Sales.py", title="Sales", icon="🛒"),
    st.Page("pages/3_📋_Orders.py", title="Orders", icon="📋"),
    st.Page("pages/4_📊_Results.py", title="Results", icon="📊"),
    st.Page("pages/5_⚙️_Settings.py", title="Settings", icon="⚙️"),
    st.Page("pages/6_🧪_Data_Management.py", title="Data Management", icon="🧪"),
]

st.navigation(pages).run()
