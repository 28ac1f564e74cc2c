# tests/conftest.py
import pytest
from unittest.mock import MagicMock

from cloudinary_fs.adapter import CloudinaryAdapter
from cloudinary_fs.client import CloudinaryClient
from cloudinary_fs.config import Settings, get_settings

ENV_KEYS = [
    "CLOUDINARY_API_KEY",
    "CLOUDINARY_API_SECRET",
    "CLOUDINARY_CLOUD_NAME",
    "CLOUDINARY_PATH_PREFIX",
    "CLOUDINARY_SECURE",
    "CLOUDINARY_UPLOAD_PRESET",
    "CLOUDINARY_TAGS",
    "CLOUDINARY_RESOURCE_TYPE",
    "CLOUDINARY_URL",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """
    Makes sure no real Cloudinary configuration from the host leaks into a test,
    and that no settings instance cached by an earlier test is reused.
    """
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    return Settings(
        cloud_name="demo",
        api_key="test_key",
        api_secret="test_secret",
        path_prefix="uploads",
        secure=True,
        tags=["default"],
    )


@pytest.fixture
def mock_client():
    """A client double with the real CloudinaryClient signature and no network."""
    client = MagicMock(spec=CloudinaryClient)
    client.url.side_effect = (
        lambda public_id, secure=True, **options: f"{'https' if secure else 'http'}://res.cloudinary.com/demo/image/upload/{public_id}"
    )
    return client


@pytest.fixture
def adapter(settings, mock_client):
    return CloudinaryAdapter(settings, client=mock_client)


@pytest.fixture
def raw_resource():
    """A resource as returned by the Cloudinary Admin API."""
    return {
        "public_id": "uploads/photos/cat",
        "format": "jpg",
        "version": 1577836800,
        "resource_type": "image",
        "type": "upload",
        "created_at": "2020-01-01T00:00:00Z",
        "bytes": 120253,
        "width": 864,
        "height": 576,
        "url": "http://res.cloudinary.com/demo/image/upload/v1577836800/uploads/photos/cat.jpg",
        "secure_url": "https://res.cloudinary.com/demo/image/upload/v1577836800/uploads/photos/cat.jpg",
    }
