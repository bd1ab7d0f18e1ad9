from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect
from sqlmodel import create_engine

ROOT = Path(__file__).resolve().parents[1]


def _alembic_config() -> Config:
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "migrations"))
    return cfg


def test_upgrade_creates_tables_and_unique_indexes(tmp_path, monkeypatch):
    url = f"sqlite:///{(tmp_path / 'migrated.db').as_posix()}"
    monkeypatch.setenv("DATABASE_URL", url)

    command.upgrade(_alembic_config(), "head")

    engine = create_engine(url)
    try:
        insp = inspect(engine)
        assert {"user", "startup"} <= set(insp.get_table_names())
        cols = {c["name"] for c in insp.get_columns("startup")}
        assert {"cover_image_data", "pitch_deck_file_name", "startup_owner"} <= cols
        unique = {i["name"] for i in insp.get_indexes("startup") if i["unique"]}
        assert "ix_startup_name" in unique
    finally:
        engine.dispose()


def test_downgrade_drops_tables(tmp_path, monkeypatch):
    url = f"sqlite:///{(tmp_path / 'migrated.db').as_posix()}"
    monkeypatch.setenv("DATABASE_URL", url)
    cfg = _alembic_config()

    command.upgrade(cfg, "head")
    command.downgrade(cfg, "base")

    engine = create_engine(url)
    try:
        tables = set(inspect(engine).get_table_names())
        assert "startup" not in tables and "user" not in tables
    finally:
        engine.dispose()
