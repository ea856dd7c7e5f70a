import os
import sys
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config as AlembicConfig

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from reflectai import create_app
from reflectai.core.auth.auth_service import issue_tokens
from reflectai.core.users.schemas import UserCreateRequest
from reflectai.core.users.services import create_user
from reflectai.extensions import db

DEFAULT_TEST_DB = "sqlite:///instance/test.db"


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")
    config.addinivalue_line("markers", "slow: Slow running tests")


def _alembic_config() -> AlembicConfig:
    cfg = AlembicConfig(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "reflectai" / "migrations"))
    cfg.set_main_option("reflectai_env", "testing")
    return cfg


def _remove_stale_sqlite() -> None:
    if os.environ.get("TEST_DATABASE_URL", DEFAULT_TEST_DB) != DEFAULT_TEST_DB:
        return
    db_path = ROOT / "instance" / "test.db"
    for suffix in ("", "-wal", "-shm"):
        candidate = Path(f"{db_path}{suffix}")
        if candidate.exists():
            candidate.unlink()


@pytest.fixture(scope="session", autouse=True)
def migrated_db():
    """Apply migrations once per session to mirror production schema."""
    _remove_stale_sqlite()
    command.upgrade(_alembic_config(), "head")
    yield


@pytest.fixture()
def app(migrated_db):
    """Per-test app; rows written by the test are deleted afterwards."""
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        db.session.rollback()
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        db.session.remove()
        db.engine.dispose()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    """Factory creating a user and returning its id with a fresh token pair."""

    def _make(email: str = "user@example.com", **overrides) -> dict:
        payload = {
            "email": email,
            "password": "secret123",
            "full_name": "Test User",
            "timezone": "UTC",
        }
        payload.update(overrides)
        user = create_user(UserCreateRequest(**payload))
        return {"user": user, "user_id": user.id, "tokens": issue_tokens(user)}

    return _make
