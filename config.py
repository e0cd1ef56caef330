import os
from datetime import timedelta
from dotenv import load_dotenv
from werkzeug.security import generate_password_hash
load_dotenv()  # fine locally; real deployments set the environment


def _split(value):
    return [v.strip() for v in (value or "").split(",") if v.strip()]


def _admin_accounts():
    username = os.getenv("ADMIN_USERNAME", "admin")
    return {
        username: {
            "password_hash": os.getenv("ADMIN_PASSWORD_HASH")
            or generate_password_hash(os.getenv("ADMIN_PASSWORD", "admin123")),
            "email": os.getenv("ADMIN_EMAIL", f"{username}@modernagro.com"),
            "first_name": os.getenv("ADMIN_FIRST_NAME", "Admin"),
            "last_name": os.getenv("ADMIN_LAST_NAME", "User"),
        }
    }


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///duckfarm.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "0") == "1"
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    # origins allowed to send the session cookie cross-site; others get "*" without credentials
    CORS_ORIGINS = _split(os.getenv("CORS_ORIGINS"))

    # username -> password hash and profile; more than one account may be listed
    ADMIN_ACCOUNTS = _admin_accounts()

    # Externally issued identity tokens (Authorization: Bearer ...)
    TOKEN_SECRET = os.getenv("TOKEN_SECRET")
    TOKEN_ALGORITHMS = _split(os.getenv("TOKEN_ALGORITHMS", "HS256"))
    TOKEN_ISSUER = os.getenv("TOKEN_ISSUER")
    TOKEN_AUDIENCE = os.getenv("TOKEN_AUDIENCE")
    TOKEN_ADMIN_ALLOWLIST = _split(os.getenv("TOKEN_ADMIN_ALLOWLIST"))

    EMAIL_USER = os.getenv("EMAIL_USER")
    EMAIL_PASS = os.getenv("EMAIL_PASS")
    SMTP_SERVER = os.getenv("SMTP_SERVER", "smtp.office365.com")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    MAIL_SENDER = os.getenv("MAIL_SENDER", "orders@modernagro.com")
    ORDER_NOTIFY_EMAIL = os.getenv("ORDER_NOTIFY_EMAIL")
    CONTACT_NOTIFY_EMAIL = os.getenv("CONTACT_NOTIFY_EMAIL")

    SEED_SAMPLE_DATA = os.getenv("SEED_SAMPLE_DATA", "1") == "1"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class DevConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    ADMIN_ACCOUNTS = {
        "admin": {
            "password_hash": generate_password_hash("admin123"),
            "email": "admin@modernagro.com",
            "first_name": "Admin",
            "last_name": "User",
        }
    }
    TOKEN_SECRET = "test-token-secret"
    TOKEN_ALGORITHMS = ["HS256"]
    TOKEN_ISSUER = "https://id.example.test"
    TOKEN_AUDIENCE = "duckfarm"
    TOKEN_ADMIN_ALLOWLIST = ["farmer@modernagro.com"]
    CORS_ORIGINS = ["https://admin.modernagro.com"]
    ORDER_NOTIFY_EMAIL = None
    CONTACT_NOTIFY_EMAIL = None
    SEED_SAMPLE_DATA = False
    LOG_LEVEL = "WARNING"
