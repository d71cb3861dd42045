from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SECRET_KEY", "tests-secret-key")

from community_match_api.app.core.config import settings  # noqa: E402
from community_match_api.app.core.db import get_connection, init_db  # noqa: E402
from community_match_api.app.main import app  # noqa: E402

ADMIN_TOKEN = "tests-admin-token"
PASSWORD = "secret123"


@pytest.fixture()
def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "community.sqlite3"))
    monkeypatch.setattr(settings, "resend_api_key", "")
    monkeypatch.setattr(settings, "admin_token", ADMIN_TOKEN)
    init_db()
    return settings.database_url


@pytest.fixture()
def conn(database: str):
    connection = get_connection()
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture()
def client(database: str):
    with TestClient(app) as test_client:
        yield test_client


def auth_header(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def register_user(client: TestClient) -> Callable[..., Tuple[dict, str]]:
    """Register a member through the API and return ``(user, token)``."""

    def _register(
        name: str,
        email: str,
        city: str,
        offered: Optional[List[int]] = None,
        needed: Optional[List[int]] = None,
        password: str = PASSWORD,
    ) -> Tuple[dict, str]:
        response = client.post(
            "/api/v1/register",
            json={
                "name": name,
                "email": email,
                "password": password,
                "city": city,
                "servicesOffered": offered or [],
                "servicesNeeded": needed or [],
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"], body["token"]

    return _register
