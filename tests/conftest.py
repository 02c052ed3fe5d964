import pandas as pd
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models import db_models  # noqa: F401
from services import file_upload_service
from services.auth_service import register_user


def _write_workbook(path, sheets):
    """
    Write {sheet name: list of rows} to an .xlsx file. The first row of each
    sheet is written like any other row so it ends up as the header row.
    """
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=name, header=False, index=False)
    return str(path)


@pytest.fixture
def write_workbook():
    return _write_workbook


@pytest.fixture
def sales_rows():
    return [
        ["Month", "Revenue", "Units"],
        ["Jan", 100, 10],
        ["Feb", 200, 20],
        ["Mar", 300, 30],
    ]


@pytest.fixture
def workbook_path(tmp_path, sales_rows):
    return _write_workbook(
        tmp_path / "sales.xlsx",
        {
            "Sales": sales_rows,
            "Regions": [["Region", "Share"], ["North", 0.25], ["South", 0.75]],
        },
    )


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "uploads"
    target.mkdir()
    monkeypatch.setattr(file_upload_service, "UPLOAD_DIR", str(target))
    return target


@pytest.fixture
def client(session_factory, upload_dir):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _login(client, username, password):
    resp = client.post("/api/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    resp = client.post(
        "/api/register",
        json={
            "username": "alice",
            "email": "alice@example.com",
            "password": "secret123",
            "full_name": "Alice Example",
        },
    )
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def other_headers(client):
    resp = client.post(
        "/api/register",
        json={
            "username": "bob",
            "email": "bob@example.com",
            "password": "secret456",
            "full_name": "Bob Example",
        },
    )
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def admin_headers(client, session_factory):
    db = session_factory()
    try:
        register_user(db, "root", "root@example.com", "adminpass", "Admin User", role="admin")
    finally:
        db.close()
    return _login(client, "root", "adminpass")
