from datetime import date, time, timedelta
import os

# Сервисы только делают flush, откатом управляет тестовая сессия
os.environ["TESTING"] = "true"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from hoops_admin.main import app
from hoops_admin.database import Base
from hoops_admin.dependencies import get_db
from hoops_admin.models import (
    User,
    UserRole,
    Branch,
    Package,
    Player,
    TrainingSession,
    AttendanceRecord,
    AttendanceStatus,
    PlayerPayment,
)
from hoops_admin.auth.jwt_handler import create_access_token

DATABASE_URL = "sqlite:///./test_database.db"

_first_test = True


@pytest.fixture(scope="function")
def db_session():
    """
    Фикстура для работы с одной общей сессией базы данных внутри каждого теста.
    """
    global _first_test

    # Удаляем файл базы данных только перед первым тестом
    if _first_test and os.path.exists("test_database.db"):
        os.remove("test_database.db")
        _first_test = False

    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    """
    Тестовый клиент FastAPI с переопределением зависимости `get_db` для работы с тестовой базой данных.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db, None)


def _auth_headers(user: User) -> dict:
    token_data = {"sub": user.email, "id": user.id, "role": user.role.value}
    return {"Authorization": f"Bearer {create_access_token(token_data)}"}


@pytest.fixture
def test_admin(db_session: Session) -> User:
    admin = User(
        name="Head Admin",
        email="admin@takeoverhoops.local",
        phone="0940597865",
        role=UserRole.ADMIN,
        is_active=True,
    )
    db_session.add(admin)
    db_session.commit()
    db_session.refresh(admin)
    return admin


@pytest.fixture
def test_coach(db_session: Session) -> User:
    coach = User(
        name="Coach Carter",
        email="coach@takeoverhoops.local",
        phone="1234567891",
        role=UserRole.COACH,
        is_active=True,
    )
    db_session.add(coach)
    db_session.commit()
    db_session.refresh(coach)
    return coach


@pytest.fixture
def test_second_coach(db_session: Session) -> User:
    coach = User(
        name="Second Coach",
        email="coach2@takeoverhoops.local",
        role=UserRole.COACH,
        is_active=True,
    )
    db_session.add(coach)
    db_session.commit()
    db_session.refresh(coach)
    return coach


@pytest.fixture
def auth_headers(test_admin):
    return _auth_headers(test_admin)


@pytest.fixture
def coach_auth_headers(test_coach):
    return _auth_headers(test_coach)


@pytest.fixture
def test_branch(db_session: Session) -> Branch:
    branch = Branch(name="Downtown Gym", address="1 Main St", city="Manila")
    db_session.add(branch)
    db_session.commit()
    db_session.refresh(branch)
    return branch


@pytest.fixture
def test_package_type(db_session: Session) -> Package:
    package = Package(name="Group 8", description="8 group sessions", is_active=True)
    db_session.add(package)
    db_session.commit()
    db_session.refresh(package)
    return package


@pytest.fixture
def test_player(db_session: Session, test_branch: Branch) -> Player:
    """Игрок с групповым пакетом на 8 сессий, срок еще не истек"""
    player = Player(
        name="Jordan Player",
        email="jordan@example.com",
        phone="9876543210",
        branch_id=test_branch.id,
        package_type="Group 8",
        sessions=8,
        remaining_sessions=8,
        enrollment_date=date.today() - timedelta(days=10),
        expiration_date=date.today() + timedelta(days=20),
        total_training_fee=5000,
        downpayment=1000,
        remaining_balance=4000,
    )
    db_session.add(player)
    db_session.commit()
    db_session.refresh(player)
    return player


@pytest.fixture
def test_personal_player(db_session: Session, test_branch: Branch) -> Player:
    player = Player(
        name="Personal Player",
        email="personal@example.com",
        branch_id=test_branch.id,
        package_type="Personal Training 10",
        sessions=10,
        remaining_sessions=10,
        enrollment_date=date.today() - timedelta(days=5),
        expiration_date=date.today() + timedelta(days=25),
    )
    db_session.add(player)
    db_session.commit()
    db_session.refresh(player)
    return player


@pytest.fixture
def make_session(db_session: Session, test_branch: Branch, test_coach: User):
    """
    Фабрика тренировок: создает сессию на дату и записи посещаемости для игроков.
    """
    counter = {"hour": 6}

    def _make(session_date=None, players=(), status=AttendanceStatus.PENDING, duration=1.0, cycle=None):
        counter["hour"] += 1
        training_session = TrainingSession(
            date=session_date or date.today() - timedelta(days=1),
            start_time=time(counter["hour"], 0),
            end_time=time(counter["hour"], 50),
            branch_id=test_branch.id,
            coach_id=test_coach.id,
        )
        db_session.add(training_session)
        db_session.flush()
        for player in players:
            db_session.add(AttendanceRecord(
                session_id=training_session.id,
                player_id=player.id,
                status=status,
                session_duration=duration,
                package_cycle=cycle,
            ))
        db_session.commit()
        db_session.refresh(training_session)
        return training_session

    return _make


@pytest.fixture
def test_session(make_session, test_player) -> TrainingSession:
    return make_session(players=[test_player])


@pytest.fixture
def test_attendance(db_session: Session, test_session, test_player) -> AttendanceRecord:
    return db_session.query(AttendanceRecord).filter(
        AttendanceRecord.session_id == test_session.id,
        AttendanceRecord.player_id == test_player.id,
    ).first()


@pytest.fixture
def test_payments(db_session: Session, test_player: Player):
    payments = [
        PlayerPayment(player_id=test_player.id, payment_amount=500, notes="first"),
        PlayerPayment(player_id=test_player.id, payment_amount=500, notes="second"),
    ]
    db_session.add_all(payments)
    test_player.remaining_balance = 3000
    db_session.commit()
    for payment in payments:
        db_session.refresh(payment)
    return payments
