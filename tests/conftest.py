import os

os.environ["APP_NAME"] = "Face Attendance Test"
os.environ["APP_VERSION"] = "0.0.0-test"
os.environ["DEBUG"] = "false"
os.environ["DATABASE_URL"] = "sqlite:///./.pytest_attendance.db"
os.environ["ATLAS_APP_CODE"] = "FACE_ATTENDANCE"
os.environ["CRON_API_KEY"] = "test-cron-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOGGING_ENABLED"] = "false"
os.environ["ENCRYPTION_ENABLED"] = "false"
os.environ["FACEPP_API_KEY"] = ""
os.environ["FACEPP_API_SECRET"] = ""
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = ""

from datetime import datetime, time  # noqa: E402
from typing import Any, Dict, List, Optional, Tuple  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from atams.db import Base  # noqa: E402
from app import models  # noqa: E402,F401
from app.core import clock  # noqa: E402
from app.core.exceptions import ConfigurationError, ProviderError  # noqa: E402
from app.main import app  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.api.deps import require_auth  # noqa: E402
from app.api.v1.endpoints import face_match as face_match_endpoints  # noqa: E402
from app.api.v1.endpoints import users as users_endpoints  # noqa: E402
from app.models import User, Group, Department, Attendance  # noqa: E402

CRON_HEADERS = {"X-Cron-Key": "test-cron-key"}

# Kuala Lumpur city centre and Petaling Jaya
KL = (3.1390, 101.6869)
PJ = (3.1073, 101.6048)


class FakeFacepp:
    """Stands in for FaceppService; results are keyed by registered photo URL"""

    def __init__(self, configured: bool = True):
        self.configured = configured
        self.results: Dict[str, Any] = {}
        self.default: Any = {"confidence": 10.0}
        self.calls: List[Tuple[str, str]] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def compare(self, image_url1: str, image_url2: str) -> Dict[str, Any]:
        self.calls.append((image_url1, image_url2))
        result = self.results.get(image_url2, self.default)
        if isinstance(result, Exception):
            raise result
        return result


class FakeIdentity:
    """Stands in for IdentityService without network access"""

    def __init__(self, configured: bool = True):
        self.configured = configured
        self.deleted: List[str] = []
        self.recovery_emails: List[Tuple[str, str]] = []
        self.failing_emails: set = set()

    def ensure_configured(self) -> None:
        if not self.configured:
            raise ConfigurationError("Missing identity provider configuration")

    async def delete_account(self, auth_uuid: str) -> None:
        self.ensure_configured()
        self.deleted.append(auth_uuid)

    async def send_recovery_email(self, email: str, redirect_url: str) -> None:
        self.ensure_configured()
        if email in self.failing_emails:
            raise ProviderError(f"Failed to send recovery email to {email}")
        self.recovery_emails.append((email, redirect_url))


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def facepp(monkeypatch):
    fake = FakeFacepp()
    monkeypatch.setattr(face_match_endpoints.face_match_service, "facepp", fake)
    return fake


@pytest.fixture
def identity(monkeypatch):
    fake = FakeIdentity()
    monkeypatch.setattr(users_endpoints.user_service, "identity", fake)
    return fake


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[require_auth] = lambda: {"user_id": 1, "role_level": 100}
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def frozen_now(monkeypatch):
    """Pin utc_now() everywhere it is imported; returns a setter"""
    from app.services import attendance_service, daily_reset_service

    def freeze(moment: datetime) -> datetime:
        for module in (clock, attendance_service, daily_reset_service):
            monkeypatch.setattr(module, "utc_now", lambda: moment)
        return moment

    return freeze


def make_group(
    db,
    location: Optional[str] = None,
    radius: int = 500,
    start_time: Optional[time] = None,
    end_time: Optional[time] = None
) -> Group:
    group = Group(
        group_name="Field Team",
        group_location=location,
        geofence_radius=radius,
        start_time=start_time,
        end_time=end_time
    )
    db.add(group)
    db.commit()
    db.refresh(group)
    return group


def make_department(
    db,
    location: Optional[str] = None,
    radius: int = 500,
    start_time: Optional[time] = None,
    end_time: Optional[time] = None
) -> Department:
    department = Department(
        department_name="Operations",
        department_location=location,
        geofence_radius=radius,
        start_time=start_time,
        end_time=end_time
    )
    db.add(department)
    db.commit()
    db.refresh(department)
    return department


def make_user(db, **fields) -> User:
    fields.setdefault("first_name", "Aisyah")
    fields.setdefault("last_name", "Rahman")
    fields.setdefault("photo_url", "https://i.ibb.co/photo/aisyah.jpg")
    user = User(**fields)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_attendance(db, user: User, **fields) -> Attendance:
    fields.setdefault("status", "absent")
    if fields.get("created_at") is not None:
        fields.setdefault("attendance_date", clock.to_local(fields["created_at"]).date())
    record = Attendance(user_id=user.user_id, **fields)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record
