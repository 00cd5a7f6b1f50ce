"""pytest configuration and shared fixtures."""

import shutil
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from workforce.core.database import get_db
from workforce.core.security import get_password_hash
from workforce.main import app
from workforce.models import Base, Team, TeamMember, User
from shared.enums import UserRole

PASSWORD = "secret123"


@pytest.fixture
def temp_db():
    """
    Creates a temporary SQLite database with every table.

    Yields:
        URL of the temporary database
    """
    temp_dir = tempfile.mkdtemp()
    db_path = Path(temp_dir) / "test.db"
    db_url = f"sqlite:///{db_path}"

    engine = create_engine(db_url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)

    yield db_url

    engine.dispose()
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def db_session(temp_db):
    """
    Database session bound to the temporary database.

    Yields:
        SQLAlchemy session
    """
    engine = create_engine(temp_db, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def test_client(db_session):
    """
    TestClient whose requests use the test session.

    The client is not entered as a context manager, so the lifespan
    (logging setup and the daily-reset scheduler) does not run.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def make_user(db, username: str, role: UserRole, **fields) -> User:
    user = User(
        username=username,
        password_hash=get_password_hash(PASSWORD),
        first_name=fields.pop("first_name", username.capitalize()),
        last_name=fields.pop("last_name", "Test"),
        role=role.value,
        **fields,
    )
    db.add(user)
    db.flush()
    return user


@pytest.fixture
def users(db_session):
    """
    One user per role plus a second agent, with the team leader leading a
    team that contains the first agent and reporting to the manager.

    Returns:
        Dict keyed by admin, hr, ops_manager, manager, team_leader, agent,
        other_agent and team
    """
    admin = make_user(db_session, "admin", UserRole.ADMIN)
    hr = make_user(db_session, "hr", UserRole.HR)
    ops = make_user(db_session, "opsmanager", UserRole.CONTACT_CENTER_OPS_MANAGER)
    manager = make_user(db_session, "manager", UserRole.CONTACT_CENTER_MANAGER, reports_to=ops.id)
    leader = make_user(db_session, "leader", UserRole.TEAM_LEADER, reports_to=manager.id)
    agent = make_user(db_session, "agent", UserRole.AGENT, reports_to=leader.id)
    other = make_user(db_session, "otheragent", UserRole.AGENT)

    team = Team(name="Leader Team", leader_id=leader.id)
    db_session.add(team)
    db_session.flush()
    db_session.add(TeamMember(team_id=team.id, user_id=agent.id))
    db_session.commit()

    return {
        "admin": admin,
        "hr": hr,
        "ops_manager": ops,
        "manager": manager,
        "team_leader": leader,
        "agent": agent,
        "other_agent": other,
        "team": team,
    }


@pytest.fixture
def login(test_client):
    """Returns a function producing Authorization headers for a username."""
    def _login(username: str, password: str = PASSWORD) -> dict:
        response = test_client.post(
            "/api/auth/login",
            json={"username": username, "password": password},
        )
        assert response.status_code == 200, f"Auth failed: {response.text}"
        token = response.json()["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _login


@pytest.fixture
def auth_headers(users, login):
    """Admin Authorization headers."""
    return login("admin")


@pytest.fixture
def password():
    """Password of every user created by the users fixture."""
    return PASSWORD
