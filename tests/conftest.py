"""
Shared pytest fixtures.

Uses a SQLite database file so no Postgres is required for tests. Every
test gets its own freshly created user, so tests sharing the session-wide
tables never see each other's activities.
"""
import os
import uuid
from datetime import datetime
from decimal import Decimal

# Must be set before aurashift.core.config is imported.
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_aurashift.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from aurashift.core.security import create_access_token  # noqa: E402
from aurashift.db.base import Base, get_db  # noqa: E402
from aurashift.main import app  # noqa: E402
from aurashift.models.activity import Activity, ActivityType  # noqa: E402
from aurashift.models.user import SmokingProfile, User  # noqa: E402
from aurashift.services.users import create_user  # noqa: E402

SQLITE_URL = "sqlite:///./test_aurashift.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def user(db) -> User:
    return create_user(db, email=f"user-{uuid.uuid4().hex[:12]}@example.com", display_name="Test User")


@pytest.fixture()
def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def add_activity(db, user: User, activity_type: ActivityType, created_at: datetime) -> Activity:
    """Insert an activity with a controlled timestamp, bypassing recomputes."""
    activity = Activity(user_id=user.id, type=activity_type, created_at=created_at)
    db.add(activity)
    db.commit()
    db.refresh(activity)
    return activity


def give_profile(
    db,
    user: User,
    streak_start: datetime,
    cigarettes_per_day: int = 20,
    cost_per_cigarette: Decimal = Decimal("5"),
) -> User:
    user.set_smoking_history(SmokingProfile(
        years_smoked=Decimal("5"),
        cigarettes_per_day=cigarettes_per_day,
        cost_per_cigarette=cost_per_cigarette,
        motivations=["Save Money"],
    ))
    user.onboarding_completed = True
    user.streak_start_time = streak_start
    db.commit()
    db.refresh(user)
    return user
