from fastapi.testclient import TestClient
from fastapi import status
from sqlalchemy.orm import Session
from app.dependencies import create_access_token
from app.domain.user.models import User
from app.domain.user.service import verify_password
from ..utils import DEFAULT_PASSWORD
import pytest


def test_root_health(client: TestClient):
    res = client.get('/')

    assert res.status_code == status.HTTP_200_OK
    assert res.json() == {'status': 'Campus Issues API Running'}

def test_register(client: TestClient, session: Session):
    res = client.post('/api/auth/register', json={
        'name': ' Jane Doe ',
        'email': 'Jane@Campus.edu',
        'password': 'secret1',
        'department': 'Physics'
    })
    body = res.json()

    assert res.status_code == status.HTTP_201_CREATED
    assert body['name'] == 'Jane Doe'
    assert body['email'] == 'jane@campus.edu'
    assert body['role'] == 'student'
    assert body['token']
    assert 'hashed_password' not in body
    assert 'password' not in body

    user = session.query(User).filter_by(email='jane@campus.edu').one()
    assert user.hashed_password != 'secret1'
    assert verify_password('secret1', user.hashed_password)

def test_register_cannot_choose_role(client: TestClient, session: Session):
    res = client.post('/api/auth/register', json={
        'name': 'Sneaky', 'email': 'sneaky@campus.edu', 'password': 'secret1', 'role': 'admin'
    })

    assert res.status_code == status.HTTP_201_CREATED
    assert res.json()['role'] == 'student'

@pytest.mark.parametrize(
    'body, expected_message',
    [
        ({'name': 'Student', 'email': 'student@campus.edu', 'password': 'secret1'}, 'User already exists'),
        ({'name': 'Student', 'email': 'STUDENT@campus.edu', 'password': 'secret1'}, 'User already exists'),
        ({'name': 'Short', 'email': 'short@campus.edu', 'password': '12345'}, None),
        ({'name': 'Nomail', 'email': 'not-an-email', 'password': 'secret1'}, None),
        ({'name': '  ', 'email': 'blank@campus.edu', 'password': 'secret1'}, None),
    ]
)
def test_register_rejected(
    client: TestClient,
    create_user: User,
    body: dict,
    expected_message: str | None
):
    res = client.post('/api/auth/register', json=body)

    assert res.status_code == status.HTTP_400_BAD_REQUEST
    if expected_message:
        assert res.json()['message'] == expected_message

@pytest.mark.parametrize(
    'email, password, expected_code',
    [
        ('student@campus.edu', DEFAULT_PASSWORD, status.HTTP_200_OK),
        (' Student@Campus.edu ', DEFAULT_PASSWORD, status.HTTP_200_OK),
        ('student@campus.edu', 'wrong-password', status.HTTP_401_UNAUTHORIZED),
        ('nobody@campus.edu', DEFAULT_PASSWORD, status.HTTP_401_UNAUTHORIZED),
    ]
)
def test_login(
    client: TestClient,
    create_user: User,
    email: str,
    password: str,
    expected_code: int
):
    res = client.post('/api/auth/login', json={'email': email, 'password': password})

    assert res.status_code == expected_code
    if expected_code == status.HTTP_200_OK:
        assert res.json()['id'] == create_user.id
        assert res.json()['token']
    else:
        assert res.json() == {'message': 'Invalid email or password'}

def test_login_token_authenticates(client: TestClient, create_user: User):
    token = client.post('/api/auth/login', json={'email': 'student@campus.edu', 'password': DEFAULT_PASSWORD}).json()['token']

    res = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})

    assert res.status_code == status.HTTP_200_OK
    assert res.json()['email'] == 'student@campus.edu'

def test_me(authorized_client: TestClient, create_user: User):
    res = authorized_client.get('/api/auth/me')
    body = res.json()

    assert res.status_code == status.HTTP_200_OK
    assert body['id'] == create_user.id
    assert body['department'] == 'Computer Science'
    assert 'hashed_password' not in body

@pytest.mark.parametrize(
    'headers, expected_message',
    [
        ({}, 'Not authorized, no token'),
        ({'Authorization': 'Bearer garbage'}, 'Not authorized, token failed'),
        ({'Authorization': f'Bearer {create_access_token(1, expires_minutes=-1)}'}, 'Not authorized, token expired'),
        ({'Authorization': f'Bearer {create_access_token(999)}'}, 'Not authorized, user not found'),
    ]
)
def test_me_rejected(
    client: TestClient,
    create_user: User,
    headers: dict,
    expected_message: str
):
    res = client.get('/api/auth/me', headers=headers)

    assert res.status_code == status.HTTP_401_UNAUTHORIZED
    assert res.json() == {'message': expected_message}

def test_profile_update(authorized_client: TestClient, session: Session, create_user: User):
    res = authorized_client.put('/api/auth/profile', json={'name': 'Renamed', 'password': 'new-secret'})

    assert res.status_code == status.HTTP_200_OK
    assert res.json()['name'] == 'Renamed'
    assert res.json()['department'] == 'Computer Science'

    session.refresh(create_user)
    assert verify_password('new-secret', create_user.hashed_password)
