import os

# Settings are read at import time, so the test environment goes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEND_EMAILS"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENABLE_SCHEDULER"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"

import itertools
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.database import Base, get_db, utcnow
from app.core.security import create_access_token, get_password_hash
from app.models.user import User, UserRole, DanceStyle, SkillLevel
from app.models.event import Event, EventStatus, EventType
from app.services.image_storage import StoredImage, get_image_storage, validate_image

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "Secret123"


class InMemoryImageStorage:
    """Stands in for the blob container; keeps uploads in a dict"""

    def __init__(self):
        self.blobs = {}
        self.deleted = []
        self._ids = itertools.count(1)

    def upload(self, content, filename, content_type, folder="events"):
        validate_image(filename, content_type, len(content))
        handle = f"{folder}/{next(self._ids)}-{filename}"
        self.blobs[handle] = content
        return StoredImage(url=f"https://images.example.com/{handle}", handle=handle)

    def delete(self, handle):
        self.deleted.append(handle)
        return self.blobs.pop(handle, None) is not None


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def other_session(db):
    """A second session on the same database, for interleaved requests"""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage():
    return InMemoryImageStorage()


@pytest.fixture
def client(db, storage):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(role=UserRole.USER, name=None, email=None, password=PASSWORD, **fields):
        n = next(counter)
        user = User(
            name=name or f"Dancer {n}",
            email=email or f"dancer{n}@example.com",
            hashed_password=get_password_hash(password),
            role=role,
            **fields
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_event(db):
    counter = itertools.count(1)

    def _make(organizer, status=EventStatus.APPROVED, days_ahead=7, **fields):
        n = next(counter)
        values = dict(
            title=f"Salsa night {n}",
            description="An evening of salsa and bachata with live music",
            organizer_id=organizer.id,
            date_time=utcnow() + timedelta(days=days_ahead),
            venue="Club Tropical",
            address="Via Roma 12",
            city="Milano",
            dance_style=DanceStyle.SALSA,
            skill_level=SkillLevel.ALL,
            event_type=EventType.SOCIAL,
            price=10,
            status=status,
        )
        values.update(fields)
        event = Event(**values)
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture
def organizer(make_user):
    return make_user(role=UserRole.ORGANIZER, name="Olga Organizer", email="organizer@example.com")


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN, name="Ada Admin", email="admin@example.com")


@pytest.fixture
def event_payload():
    def _payload(**overrides):
        payload = {
            "title": "Bachata Sensual Workshop",
            "description": "Three hours of bachata sensual technique and musicality",
            "date_time": (utcnow() + timedelta(days=10)).isoformat(),
            "location": {"venue": "Sala Caribe", "address": "Corso Italia 5", "city": "Torino"},
            "dance_style": "bachata",
            "skill_level": "intermedio",
            "event_type": "workshop",
            "price": 25,
            "max_participants": 30,
            "tags": ["bachata", "sensual"],
        }
        payload.update(overrides)
        return payload

    return _payload
