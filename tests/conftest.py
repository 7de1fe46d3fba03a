import pytest

from atelier.db import connect
from atelier.models import AtelierSettings
from atelier.services.pieces import save_piece
from atelier.state import AtelierState


@pytest.fixture
def state():
    conn = connect(":memory:")
    st = AtelierState.load(conn)
    st.settings = AtelierSettings(atelier_name="Test", hourly_rate=20, profit_margin=100)
    yield st
    conn.close()


@pytest.fixture
def bear(state):
    # yarn 10 + accessories 2 + 1h30 at 20/h -> base cost 42
    return save_piece(
        state,
        {
            "name": "Bear",
            "photos": ["data:image/png;base64,AAAA"],
            "yarn_cost": 10,
            "accessories_cost": 2,
            "other_costs": 0,
            "time_hours": 1,
            "time_minutes": 30,
            "stock": 5,
            "sale_price": 50,
        },
    )
