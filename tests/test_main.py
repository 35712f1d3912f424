import logging

from fastapi.testclient import TestClient

from harakapay.core.logging import configure_logging
from harakapay.main import app

client = TestClient(app)


def test_read_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"app": "HarakaPay parent gateway", "status": "ok"}


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_theme_config():
    response = client.get("/config/theme")
    assert response.status_code == 200
    data = response.json()
    assert data["colors"]["primary"] == "#007bff"
    assert data["colors"]["secondary"] == "#ff3b30"
    assert data["spacing"] == {"small": 8, "medium": 16, "large": 24}
    assert data["languages"] == ["fr", "en"]
    assert data["default_language"] == "fr"


def test_configure_logging_adds_a_single_handler():
    logger = configure_logging("DEBUG")
    configure_logging("INFO")
    tagged = [h for h in logger.handlers if getattr(h, "_harakapay", False)]
    assert len(tagged) == 1
    assert logger.level == logging.INFO
