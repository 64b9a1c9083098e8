import itertools
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ALGORITHM", "HS256")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from helpdesk.database import Base, get_db  # noqa: E402
from helpdesk.models import User, UserType, TicketType, HrType, ItType  # noqa: E402
from helpdesk.services.ticket_service import TicketService  # noqa: E402
from helpdesk.utils.security import hash_password, token_for_user  # noqa: E402
from main import app  # noqa: E402

PASSWORD = "Password@123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)
    hashed = hash_password(PASSWORD)

    def _make(username=None, user_type=UserType.EMPLOYEE, manager=None):
        n = next(counter)
        username = username or f"user{n}"
        user = User(
            username=username,
            email=f"{username}@company.com",
            name=username.title(),
            hashed_password=hashed,
            user_type=user_type,
            manager_id=manager.id if manager else None,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def org(make_user):
    """admin, hr, it, a manager with one report, and an unrelated employee"""
    admin = make_user("admin", UserType.ADMIN)
    hr = make_user("hrdesk", UserType.HR)
    it = make_user("itdesk", UserType.IT)
    manager = make_user("manager")
    employee = make_user("employee", manager=manager)
    loner = make_user("loner")
    return {
        "admin": admin,
        "hr": hr,
        "it": it,
        "manager": manager,
        "employee": employee,
        "loner": loner,
    }


class TicketFactory:
    """Creates tickets through the service so routing rules apply"""

    def __init__(self, db):
        self.service = TicketService(db)

    def hr(self, actor, hr_type=HrType.PAYROLL, title="Payroll question"):
        return self.service.create_ticket(actor, title, "Details", TicketType.HR, hr_type=hr_type)

    def it(self, actor, it_type=ItType.LAPTOP_BOOTUP, title="Laptop issue"):
        return self.service.create_ticket(actor, title, "Details", TicketType.IT, it_type=it_type)


@pytest.fixture
def tickets(db):
    return TicketFactory(db)


@pytest.fixture
def headers_for():
    def _headers(user):
        return {"Authorization": f"Bearer {token_for_user(user)}"}
    return _headers
