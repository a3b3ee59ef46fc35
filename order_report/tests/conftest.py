from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from order_report.app.db.load import reset_schema
from order_report.app.db.session import get_session_factory
from order_report.services.rates import RateTable


@pytest.fixture(scope="function")
def engine():
    """
    Base SQLite en mémoire, une par test.
    StaticPool : toutes les connexions partagent la même base.
    """
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    reset_schema(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture(scope="function")
def db_session(engine) -> Session:
    SessionLocal = get_session_factory(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def rates() -> RateTable:
    return RateTable(
        {
            "STANDARD": Decimal("0.20"),
            "REDUCED": Decimal("0.05"),
            "ZERO": Decimal("0"),
        }
    )


SOURCE_FILES = {
    "customers": "customer_id,customer_name,email\n"
    "C001,Ada Lovelace,ada@example.com\n"
    "C002,Grace Hopper,\n",
    "products": "sku,product_name,unit_price,vat_code\n"
    "SKU-001,Notebook,10.00,STANDARD\n"
    "SKU-002,Printed guide,5.00,ZERO\n"
    "SKU-003,Coffee beans,7.35,REDUCED\n",
    "stock_levels": "sku,qty_on_hand\n"
    "SKU-001,5\n"
    "SKU-002,0\n"
    "SKU-003,40\n",
    "orders": "order_id,customer_id,order_date\n"
    "O1,C001,2026-10-01\n"
    "O2,C002,2026-10-02\n"
    "O3,C002,2026-10-03\n",
    # ordre volontairement non trié : le tri sku ASC vient de la requête
    "order_lines": "order_id,sku,qty\n"
    "O1,SKU-002,1\n"
    "O1,SKU-001,2\n"
    "O2,SKU-003,4\n",
}


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Répertoire avec les 5 CSV sources + tax_rules.json."""
    for table, content in SOURCE_FILES.items():
        (tmp_path / f"{table}.csv").write_text(content, encoding="utf-8")
    (tmp_path / "tax_rules.json").write_text(
        '{"vat": {"STANDARD": 0.2, "REDUCED": 0.05, "ZERO": 0}}',
        encoding="utf-8",
    )
    return tmp_path
