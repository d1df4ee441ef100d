import csv
import io
import os

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from core.config import Settings
from core.spreadsheet import XLSX_MIME
from main import create_app

PASSWORD = "s3cret-pass"
ANSWER = "Rex"


def xlsx_bytes(rows) -> bytes:
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(list(row))
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def csv_bytes(rows) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf)
    for row in rows:
        writer.writerow(row)
    return buf.getvalue().encode("utf-8")


class InMemoryFileStore:
    """Dict-backed stand-in for LocalFileStore."""

    def __init__(self):
        self.files: dict[str, bytes] = {}
        self._counter = 0

    def save(self, content: bytes, original_name: str) -> str:
        self._counter += 1
        key = f"mem-{self._counter}{os.path.splitext(original_name)[1]}"
        self.files[key] = content
        return key

    def exists(self, key: str) -> bool:
        return key in self.files

    def read(self, key: str) -> bytes:
        return self.files[key]

    def copy(self, key: str) -> str:
        self._counter += 1
        base, ext = os.path.splitext(key)
        new_key = f"{base}-copy-{self._counter}{ext}"
        self.files[new_key] = self.files[key]
        return new_key

    def delete(self, key: str) -> bool:
        return self.files.pop(key, None) is not None


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        UPLOAD_DIR=str(tmp_path / "uploads"),
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    yield app
    app.state.engine.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def upload_dir(settings):
    return settings.UPLOAD_DIR


def signup(client, username="alice", email="alice@example.com", **overrides):
    body = {
        "name": username.title(),
        "username": username,
        "email": email,
        "password": PASSWORD,
        "securityQuestion": "First pet?",
        "securityAnswer": ANSWER,
    }
    body.update(overrides)
    return client.post("/api/auth/signup", json=body)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client):
    res = signup(client)
    assert res.status_code == 201, res.text
    return bearer(res.json()["token"])


@pytest.fixture
def other_headers(client):
    res = signup(client, username="bob", email="bob@example.com")
    assert res.status_code == 201, res.text
    return bearer(res.json()["token"])


SAMPLE_ROWS = [
    ["month", "sales", "cost", "size"],
    ["Jan", 10, 4, 1],
    ["Feb", 20, 8, 2],
    ["Mar", 30, 12, 3],
]


def create_project(client, headers, rows=SAMPLE_ROWS, filename="sales.xlsx", mime=XLSX_MIME, **form):
    content = csv_bytes(rows) if filename.endswith(".csv") else xlsx_bytes(rows)
    data = {"projectName": "Sales", "chartType": "bar", "xAxis": "month", "yAxis": "sales"}
    data.update(form)
    return client.post(
        "/api/projects",
        headers=headers,
        data=data,
        files={"excelFile": (filename, content, mime)},
    )
