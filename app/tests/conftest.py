import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ['AUTO_MIGRATE'] = 'false'
os.environ.pop('ADMIN_EMAIL', None)

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from app.main import app
from app.database import engine
from app.domain.model_base import Base
from app.domain.user.models import User
from app.dependencies import get_db, create_access_token
from typing import Generator, Dict
import pytest
from .utils import create_test_user

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session() -> Generator[Session, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def client(session: Session) -> Generator[TestClient, None, None]:
    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()

def auth_headers(user: User) -> Dict[str, str]:
    return {'Authorization': f'Bearer {create_access_token(user.id)}'}

@pytest.fixture
def create_user(session: Session) -> User:
    return create_test_user(session, email='student@campus.edu', name='Student One')

@pytest.fixture
def create_admin(session: Session) -> User:
    return create_test_user(session, email='admin@campus.edu', name='Admin One', role='admin')

@pytest.fixture
def admin_headers(create_admin: User) -> Dict[str, str]:
    return auth_headers(create_admin)

@pytest.fixture
def authorized_client(client: TestClient, create_user: User) -> TestClient:
    client.headers.update(auth_headers(create_user))

    return client
