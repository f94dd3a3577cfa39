"""Application configuration values."""
import os
import sys
import json
from typing import List, Optional
from pathlib import Path
from dotenv import load_dotenv


# --- Cargar variables de entorno ---
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BASE_DIR.parent
INSTANCE_DIR = PROJECT_ROOT / "instance"

_ENV_ALIASES = {
    "dev": "development",
    "development": "development",
    "prod": "production",
    "production": "production",
    "stage": "staging",
    "staging": "staging",
    "testing": "test",
    "tests": "test",
    "pytest": "test",
    "test": "test",
}

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _normalize_env(value: str) -> str:
    normalized = _ENV_ALIASES.get(value.strip().lower(), value.strip().lower())
    return normalized or "production"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


def detect_runtime_env() -> str:
    """Determina el entorno actual (production, staging, development, test)."""
    explicit = (
        os.getenv("APP_ENV")
        or os.getenv("FLASK_ENV")
        or os.getenv("ENV")
        or ""
    ).strip()
    if explicit:
        return _normalize_env(explicit)

    if os.getenv("PYTEST_CURRENT_TEST") or any("pytest" in arg for arg in sys.argv):
        return "test"

    debug_flag = os.getenv("FLASK_DEBUG", "").strip().lower()
    if debug_flag in _TRUTHY:
        return "development"

    return "production"


def _fallback_database_uri(runtime_env: str) -> Optional[str]:
    """Determina la URI según entorno cuando DATABASE_URL no está definida."""
    if runtime_env == "test":
        return "sqlite:///:memory:"
    if runtime_env == "development":
        INSTANCE_DIR.mkdir(parents=True, exist_ok=True)
        sqlite_path = INSTANCE_DIR / "dev.db"
        return f"sqlite:///{sqlite_path}"
    return None


def init_app_config(app) -> None:
    """Aplica valores derivados del entorno sin forzar evaluación temprana."""
    runtime_env = _normalize_env(
        str(app.config.get("APP_ENV", "") or app.config.get("ENV", "")).strip()
        or detect_runtime_env()
    )
    app.config["APP_ENV"] = runtime_env
    app.config["ENV"] = runtime_env

    if "TESTING" not in app.config:
        app.config["TESTING"] = runtime_env == "test"
    if "DEBUG" not in app.config:
        app.config["DEBUG"] = runtime_env == "development"

    # La cookie de sesión guarda el estado del formulario entre peticiones.
    secret_key = app.config.get("SECRET_KEY") or os.getenv("SECRET_KEY")
    if runtime_env == "production":
        if not secret_key or secret_key == "dev-secret-key":
            raise RuntimeError(
                "FATAL: SECRET_KEY no está definida para producción. "
                "Establece SECRET_KEY con un valor aleatorio y seguro antes de iniciar la aplicación."
            )
    if secret_key:
        app.config["SECRET_KEY"] = secret_key

    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or os.getenv("DATABASE_URL")

    if runtime_env == "test" or app.config.get("TESTING"):
        if db_uri and db_uri.startswith("postgresql"):
            app.logger.warning("Tests apuntando a PostgreSQL: se fuerza SQLite en memoria")
            db_uri = "sqlite:///:memory:"
        elif not db_uri:
            db_uri = "sqlite:///:memory:"
    elif not db_uri:
        db_uri = _fallback_database_uri(runtime_env)

    if not db_uri:
        raise RuntimeError(
            "FATAL: DATABASE_URL no está configurada y no existe fallback para producción. "
            "Establece DATABASE_URL antes de iniciar en producción."
        )

    app.config["SQLALCHEMY_DATABASE_URI"] = db_uri

    engine_options = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS") or {})
    if db_uri.startswith("sqlite:///"):
        engine_options.setdefault("connect_args", {"check_same_thread": False})
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = engine_options

    for key, default in (("CONTACT_HONEYPOT_FIELD", "covfefe"), ("CONTACT_AJAX_FIELD", "is_ajax")):
        value = str(app.config.get(key) or "").strip()
        app.config[key] = value or default


def parse_list_env(name: str) -> List[str]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return []
    if raw.startswith("["):
        try:
            return [str(s) for s in json.loads(raw)]
        except ValueError:
            return []
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    # clave secreta de flask
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

    # --- configuracion de base de datos (opciones del sitio) ---
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = None

    _runtime = detect_runtime_env()
    TESTING = _runtime == "test"
    ENV = _runtime
    DEBUG = _runtime == "development"

    # configuracion para correo ---
    MAIL_SERVER = os.getenv('MAIL_SERVER')
    MAIL_PORT = int(os.getenv('MAIL_PORT', 587))
    MAIL_USE_TLS = os.getenv('MAIL_USE_TLS', 'true').lower() == 'true'
    MAIL_USE_SSL = os.getenv('MAIL_USE_SSL', 'false').lower() == 'true'
    MAIL_USERNAME = os.getenv('MAIL_USERNAME')
    MAIL_PASSWORD = os.getenv('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.getenv('MAIL_DEFAULT_SENDER', os.getenv('MAIL_USERNAME'))

    # CORS
    CORS_ORIGINS = parse_list_env('CORS_ORIGINS')
    CORS_SUPPORTS_CREDENTIALS = os.getenv('CORS_SUPPORTS_CREDENTIALS', 'false').lower() == 'true'

    # --- formulario de contacto ---
    # Valores por defecto; la tabla site_options tiene prioridad.
    CONTACT_ADDRESS = os.getenv('CONTACT_ADDRESS')
    CONTACT_NAME = os.getenv('CONTACT_NAME', 'Admin')
    ADMIN_EMAIL = os.getenv('ADMIN_EMAIL')
    SITE_URL = os.getenv('SITE_URL')
    CONTACT_HONEYPOT_FIELD = os.getenv('CONTACT_HONEYPOT_FIELD', 'covfefe')
    CONTACT_AJAX_FIELD = os.getenv('CONTACT_AJAX_FIELD', 'is_ajax')

    # --- Logging Configuration ---
    LOG_LEVEL = os.getenv('LOG_LEVEL', None)  # None = auto-detect based on APP_ENV
    LOG_JSON_ENABLED = None  # None = auto-detect (True for production, False otherwise)
    _log_json_env = os.getenv('LOG_JSON_ENABLED', '').strip().lower()
    if _log_json_env in _TRUTHY:
        LOG_JSON_ENABLED = True
    elif _log_json_env in _FALSY:
        LOG_JSON_ENABLED = False
    del _log_json_env

    # --- Sentry Configuration ---
    SENTRY_DSN = os.getenv('SENTRY_DSN')
    SENTRY_ENVIRONMENT = os.getenv('SENTRY_ENVIRONMENT')  # None = auto-detect from APP_ENV

    try:
        _traces_sample_rate = float(os.getenv('SENTRY_TRACES_SAMPLE_RATE', '0.1'))
    except ValueError:
        _traces_sample_rate = 0.1
    SENTRY_TRACES_SAMPLE_RATE = max(0.0, min(1.0, _traces_sample_rate))
    del _traces_sample_rate

    SENTRY_ENABLE_IN_DEV = _env_flag('SENTRY_ENABLE_IN_DEV')
