from __future__ import annotations

from pathlib import Path

import streamlit as st

from atelier.config import get_settings
from atelier.db import get_conn
from atelier.state import AtelierState


@st.cache_resource
def _state_for(db_path: Path) -> AtelierState:
    return AtelierState.load(get_conn(db_path))


def get_state() -> AtelierState:
    """The one state owner shared by every page for the current data directory."""
    return _state_for(get_settings().db_path)
