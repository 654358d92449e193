"""Unit tests for the Alembic migration chain.

The migrations are applied to a throwaway SQLite file and compared with the
tables declared on the SQLModel metadata.
"""

import io
from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from agrilink.core.database import Base
from agrilink.core.database import entities  # noqa: F401

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def _alembic_config(output_buffer=None) -> Config:
    config = Config(output_buffer=output_buffer)
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return config


@pytest.fixture
def database_file(tmp_path: Path, monkeypatch) -> Path:
    path = tmp_path / "migrated.db"
    monkeypatch.setenv("ALEMBIC_DATABASE_URL", f"sqlite+aiosqlite:///{path}")
    return path


class TestMigrationScripts:
    def test_single_head(self):
        script = ScriptDirectory.from_config(_alembic_config())

        assert len(script.get_heads()) == 1

    def test_offline_sql_creates_core_tables(self, monkeypatch):
        monkeypatch.setenv("ALEMBIC_DATABASE_URL", "sqlite+aiosqlite:///offline.db")
        buffer = io.StringIO()

        command.upgrade(_alembic_config(buffer), "head", sql=True)

        sql = buffer.getvalue()
        for table in ("devices", "telemetry", "alert_rules", "alerts", "listings", "orders"):
            assert f"CREATE TABLE {table}" in sql


class TestMigrationAgainstSqlite:
    def test_upgrade_matches_metadata(self, database_file: Path):
        command.upgrade(_alembic_config(), "head")

        engine = create_engine(f"sqlite:///{database_file}")
        try:
            inspector = inspect(engine)
            migrated = set(inspector.get_table_names()) - {"alembic_version"}
            assert migrated == set(Base.metadata.tables)

            for name, table in Base.metadata.tables.items():
                columns = {column["name"] for column in inspector.get_columns(name)}
                assert columns == set(table.columns.keys()), name

            telemetry_indexes = {index["name"] for index in inspector.get_indexes("telemetry")}
            assert "ix_telemetry_device_recorded_at" in telemetry_indexes
        finally:
            engine.dispose()

    def test_downgrade_removes_everything(self, database_file: Path):
        config = _alembic_config()
        command.upgrade(config, "head")

        command.downgrade(config, "base")

        engine = create_engine(f"sqlite:///{database_file}")
        try:
            assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
        finally:
            engine.dispose()
