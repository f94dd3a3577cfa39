# tests/conftest.py
import os
import sys
import pathlib
from unittest.mock import Mock

import pytest

# ---------- PATH raíz del repo ----------
THIS = pathlib.Path(__file__).resolve()
ROOT = THIS.parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Forzar entorno de testing antes de importar la configuración
os.environ["APP_ENV"] = "test"
os.environ.pop("DATABASE_URL", None)

from contact_mailer.app import create_app  # noqa: E402
from contact_mailer.app.extensions import db, mail  # noqa: E402


# ---------- Config de pruebas ----------
class TestConfig:
    TESTING = True
    APP_ENV = "test"
    LOG_LEVEL = None  # Auto-detect per APP_ENV during tests
    SECRET_KEY = "testing-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MAIL_SUPPRESS_SEND = True
    MAIL_SERVER = "localhost"
    MAIL_PORT = 1025
    MAIL_USERNAME = "test@example.com"
    MAIL_PASSWORD = "dummy"
    MAIL_DEFAULT_SENDER = "noreply@example.com"
    CORS_ORIGINS = []
    CONTACT_ADDRESS = "owner@example.com"
    CONTACT_NAME = "Site Owner"
    ADMIN_EMAIL = "admin@example.org"
    SITE_URL = "https://www.example.com/blog"
    CONTACT_HONEYPOT_FIELD = "covfefe"
    CONTACT_AJAX_FIELD = "is_ajax"


VALID_FORM = {
    "name": "Juan Perez",
    "email": "juan@example.com",
    "company": "ACME",
    "message": "Hola, me interesa conocer más sobre el servicio.",
}


@pytest.fixture()
def app():
    app = create_app(TestConfig)

    with app.app_context():
        db_uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
        if "sqlite" not in db_uri.lower():
            raise RuntimeError(f"Solo se permite SQLite en tests: {db_uri}")
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client(use_cookies=True)


@pytest.fixture()
def valid_form():
    return dict(VALID_FORM)


@pytest.fixture()
def mail_outbox(monkeypatch):
    sent = []

    def fake_send(message):
        sent.append(message)

    monkeypatch.setattr(mail, "send", fake_send)
    return sent


@pytest.fixture()
def failing_mail(monkeypatch):
    """Transporte que siempre falla; registra cada intento."""
    attempts = []

    def fake_send(message):
        attempts.append(message)
        raise ConnectionRefusedError("SMTP connection refused")

    monkeypatch.setattr(mail, "send", fake_send)
    return attempts


@pytest.fixture()
def mock_mail():
    return Mock()
