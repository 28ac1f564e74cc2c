# tests/test_main.py
import logging

import pytest
from unittest.mock import patch, MagicMock

from cloudinary_fs.adapter import CloudinaryAdapter
from cloudinary_fs.config import Settings
from cloudinary_fs.exceptions import ConfigurationError
from cloudinary_fs.main import create_adapter, main, setup_logging
from cloudinary_fs.storage.dto import ErrorKind, Result


@patch("cloudinary_fs.main.CloudinaryClient")
def test_create_adapter(MockClient, settings):
    adapter = create_adapter(settings)

    assert isinstance(adapter, CloudinaryAdapter)
    assert adapter.client == MockClient.return_value
    MockClient.assert_called_once_with(
        cloud_name="demo", api_key="test_key", api_secret="test_secret"
    )
    MockClient.return_value.ping.assert_not_called()


@patch("cloudinary_fs.main.CloudinaryClient")
def test_create_adapter_verifies_credentials(MockClient, settings):
    create_adapter(settings, verify=True)
    MockClient.return_value.ping.assert_called_once()


@patch("cloudinary_fs.main.CloudinaryClient")
def test_create_adapter_rejected_credentials(MockClient, settings):
    MockClient.return_value.ping.side_effect = Exception("Invalid api_key")

    with pytest.raises(ConfigurationError, match="Invalid api_key"):
        create_adapter(settings, verify=True)


def test_setup_logging_uses_settings_level():
    settings = Settings(cloud_name="demo", log_level="debug")
    root_logger = logging.getLogger()
    saved_level, saved_handlers = root_logger.level, list(root_logger.handlers)

    try:
        setup_logging(settings)

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0], logging.StreamHandler)
        assert logging.getLogger("urllib3").level == logging.WARNING
    finally:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
        for handler in saved_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(saved_level)


@pytest.fixture
def mock_adapter():
    with patch("cloudinary_fs.main.create_adapter") as mock_create, patch(
        "cloudinary_fs.main.setup_logging"
    ):
        adapter = MagicMock(spec=CloudinaryAdapter)
        mock_create.return_value = adapter
        yield adapter


def test_main_url(monkeypatch, mock_adapter, capsys):
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
    mock_adapter.get_url.return_value = "https://cdn/a.png"

    assert main(["--url", "a.png"]) == 0
    assert capsys.readouterr().out.strip() == "https://cdn/a.png"


def test_main_has_missing(monkeypatch, mock_adapter, capsys):
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
    mock_adapter.has.return_value = Result.failure(ErrorKind.NOT_FOUND)

    assert main(["--has", "a.png"]) == 1
    assert "not_found" in capsys.readouterr().out


def test_main_list(monkeypatch, mock_adapter, capsys):
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
    entry = MagicMock(path="uploads/a", size=3, mimetype="image/png", timestamp=1)
    mock_adapter.list_contents.return_value = Result.success([entry])

    assert main(["--list"]) == 0
    mock_adapter.list_contents.assert_called_once_with("")
    assert "uploads/a\t3\timage/png\t1" in capsys.readouterr().out


def test_main_invalid_configuration(capsys):
    # No CLOUDINARY_CLOUD_NAME in the environment
    with patch("cloudinary_fs.main.setup_logging"):
        assert main(["--url", "a.png"]) == 1
