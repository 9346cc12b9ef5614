from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect
from sqlalchemy.orm import sessionmaker

from storehouse.database import make_engine
from storehouse.services.warehouse import Warehouse
from storehouse.storage.sql import SqlStorage

ROOT = Path(__file__).resolve().parent.parent


def _alembic_config(url: str) -> Config:
    config = Config()
    config.set_main_option("script_location", str(ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", url)
    return config


def test_upgrade_creates_schema_the_models_can_use(tmp_path, clock):
    url = f"sqlite:///{tmp_path / 'storehouse.db'}"
    command.upgrade(_alembic_config(url), "head")

    engine = make_engine(url)
    tables = set(inspect(engine).get_table_names())
    assert {"storage_positions", "kanban_pallets", "movement_history"} <= tables

    db = sessionmaker(bind=engine)()
    try:
        warehouse = Warehouse(SqlStorage(db), clock=clock)
        assert warehouse.initialize() == 20
        warehouse.positions.fill("pos-1-1-AP1", {
            "product_name": "Widget",
            "product_code": "W1",
            "quantity": 1,
            "entry_date": "2024-01-15",
            "storage_type": "bulk",
        })
        warehouse.kanban.add("yellow", {
            "product_name": "Widget",
            "product_code": "W1",
            "quantity": 1,
            "entry_date": "2024-01-15",
        })
        assert len(warehouse.ledger.list_all()) == 2
    finally:
        db.close()
        engine.dispose()


def test_downgrade_removes_tables(tmp_path):
    url = f"sqlite:///{tmp_path / 'storehouse.db'}"
    config = _alembic_config(url)
    command.upgrade(config, "head")
    command.downgrade(config, "base")

    engine = make_engine(url)
    assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    engine.dispose()
