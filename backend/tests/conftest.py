import json
import os
from datetime import datetime, timedelta

# Keep app startup off the on-disk development database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from pitchside.database import get_session
from pitchside.main import app
from pitchside.models.player import Player
from pitchside.models.tournament import Tournament, TournamentStatus
from pitchside.models.tournament_slot import SlotStatus, TournamentSlot
from pitchside.models.user import ROLE_PLAYER, User

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. sqlite:///:memory: with StaticPool so ALL sessions share same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. Tables created and dropped per test (see session_fixture)
# 4. App dependency overridden to use test_engine (see client_fixture)
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

BASE_TIME = datetime(2026, 3, 1, 10, 0, 0)


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="session", scope="function")
def session_fixture():
    """Provide a test database session on a freshly created schema"""
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Provide a test client with overridden database session

    Override MUST be set BEFORE TestClient() and stay in place for the
    entire duration so the app never uses its own engine.
    """
    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch):
    """Retries still happen in tests, without the sleeps"""
    from pitchside.services import registration_service, waitlist_promotion

    monkeypatch.setattr(waitlist_promotion, "PROMOTION_RETRY_DELAY_MS", 0)
    monkeypatch.setattr(registration_service, "REGISTRATION_RETRY_DELAY_MS", 0)


def auth_header(user_id) -> dict:
    """Authorization header carrying the JSON identity claim"""
    return {"Authorization": json.dumps({"id": user_id})}


class Seeder:
    """Creates committed rows for tests"""

    def __init__(self, session: Session):
        self.session = session
        self._user_seq = 0

    def _save(self, obj):
        self.session.add(obj)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def user(self, role: str = ROLE_PLAYER) -> User:
        self._user_seq += 1
        return self._save(User(email=f"user{self._user_seq}@example.com", username=f"user{self._user_seq}", role=role))

    def player(self, name: str = "Player", user: User = None) -> Player:
        user = user or self.user()
        return self._save(Player(user_id=user.id, display_name=name))

    def tournament(
        self,
        total_slots: int = 2,
        host: User = None,
        status: str = TournamentStatus.registration_open.value,
    ) -> Tournament:
        host = host or self.user(role="host")
        return self._save(Tournament(name="Weekend Cup", host_id=host.id, total_slots=total_slots, status=status))

    def slot(
        self,
        tournament: Tournament,
        slot_number: int,
        player: Player = None,
        status: str = SlotStatus.approved.value,
        minutes: int = 0,
    ) -> TournamentSlot:
        return self._save(
            TournamentSlot(
                tournament_id=tournament.id,
                slot_number=slot_number,
                player_id=player.id if player else None,
                status=status,
                requested_at=BASE_TIME + timedelta(minutes=minutes),
            )
        )


@pytest.fixture
def seed(session: Session) -> Seeder:
    return Seeder(session)


@pytest.fixture
def auth():
    return auth_header
