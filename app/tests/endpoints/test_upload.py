from fastapi.testclient import TestClient
from fastapi import status
from app.config import MAX_UPLOAD_SIZE
from app.dependencies import get_image_host
from app.exceptions import ExternalServiceError
from app.main import app
import pytest


class FakeImageHost:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploaded = []
        self.destroyed = []

    async def upload(self, data: bytes, content_type: str) -> dict:
        if self.fail:
            raise ExternalServiceError('Invalid Signature')
        self.uploaded.append((data, content_type))
        return {'url': 'https://res.cloudinary.com/demo/image/upload/campus-issues/abc.png', 'public_id': 'campus-issues/abc'}

    async def destroy(self, public_id: str) -> None:
        if self.fail:
            raise ExternalServiceError('not found')
        self.destroyed.append(public_id)


@pytest.fixture
def image_host() -> FakeImageHost:
    host = FakeImageHost()
    app.dependency_overrides[get_image_host] = lambda: host
    return host

@pytest.fixture
def failing_image_host() -> FakeImageHost:
    host = FakeImageHost(fail=True)
    app.dependency_overrides[get_image_host] = lambda: host
    return host


def test_upload_image(authorized_client: TestClient, image_host: FakeImageHost):
    res = authorized_client.post('/api/upload', files={'image': ('photo.png', b'\x89PNG fake', 'image/png')})

    assert res.status_code == status.HTTP_200_OK
    assert res.json() == {
        'url': 'https://res.cloudinary.com/demo/image/upload/campus-issues/abc.png',
        'public_id': 'campus-issues/abc'
    }
    assert image_host.uploaded == [(b'\x89PNG fake', 'image/png')]

@pytest.mark.parametrize(
    'files, expected_message',
    [
        ({'image': ('notes.txt', b'hello', 'text/plain')}, 'Only image files are allowed'),
        ({'image': ('big.jpg', b'x' * (MAX_UPLOAD_SIZE + 1), 'image/jpeg')}, 'Image exceeds the 5MB size limit'),
        ({'image': ('empty.jpg', b'', 'image/jpeg')}, 'No image file provided'),
        (None, 'No image file provided'),
    ]
)
def test_upload_image_rejected(
    authorized_client: TestClient,
    image_host: FakeImageHost,
    files: dict | None,
    expected_message: str
):
    res = authorized_client.post('/api/upload', files=files)

    assert res.status_code == status.HTTP_400_BAD_REQUEST
    assert res.json() == {'message': expected_message}
    assert image_host.uploaded == []

def test_upload_image_host_failure(authorized_client: TestClient, failing_image_host: FakeImageHost):
    res = authorized_client.post('/api/upload', files={'image': ('photo.png', b'data', 'image/png')})

    assert res.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert res.json() == {'message': 'Failed to upload image: Invalid Signature'}

def test_upload_requires_token(client: TestClient, image_host: FakeImageHost):
    res = client.post('/api/upload', files={'image': ('photo.png', b'data', 'image/png')})

    assert res.status_code == status.HTTP_401_UNAUTHORIZED

def test_delete_image(authorized_client: TestClient, image_host: FakeImageHost):
    res = authorized_client.delete('/api/upload/abc')

    assert res.status_code == status.HTTP_200_OK
    assert res.json() == {'message': 'Image deleted successfully'}
    assert image_host.destroyed == ['abc']

def test_delete_image_host_failure(authorized_client: TestClient, failing_image_host: FakeImageHost):
    res = authorized_client.delete('/api/upload/abc')

    assert res.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert res.json() == {'message': 'Failed to delete image: not found'}
