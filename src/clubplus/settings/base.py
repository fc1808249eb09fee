from pathlib import Path

from decouple import Csv, config

BASE_DIR = Path(__file__).resolve().parent.parent.parent

VERSION = "0.1.0"

SECRET_KEY = config("SECRET_KEY", default="insecure-dev-key-change-me-in-production-0123456789")

DEBUG = config("DEBUG", default=False, cast=bool)

ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1,testserver", cast=Csv())

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "ninja_extra",
    "ninja_jwt",
    "common",
    "accounts",
    "events",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "common.middleware.StructlogContextMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "clubplus.urls"

WSGI_APPLICATION = "clubplus.wsgi.application"

AUTH_USER_MODEL = "accounts.Member"

# Database
DB_ENGINE = config("DB_ENGINE", default="django.db.backends.sqlite3")
DB_CONNECT_TIMEOUT = config("DB_CONNECT_TIMEOUT", default=5, cast=int)
DB_STATEMENT_TIMEOUT_MS = config("DB_STATEMENT_TIMEOUT_MS", default=10_000, cast=int)
DB_TIMEOUT = config("DB_TIMEOUT", default=20, cast=int)

if DB_ENGINE == "django.db.backends.sqlite3":
    DATABASES = {
        "default": {
            "ENGINE": DB_ENGINE,
            "NAME": config("DB_NAME", default=str(BASE_DIR / "db.sqlite3")),
            # Write transactions take the database lock at BEGIN, so concurrent
            # allocators are serialized instead of failing on lock upgrade.
            "OPTIONS": {"transaction_mode": "IMMEDIATE", "timeout": DB_TIMEOUT},
            # Threaded tests need a file database shared between connections.
            "TEST": {"NAME": str(BASE_DIR / "test_db.sqlite3")},
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": DB_ENGINE,
            "NAME": config("DB_NAME", default="clubplus"),
            "USER": config("DB_USER", default="clubplus"),
            "PASSWORD": config("DB_PASSWORD", default="clubplus"),
            "HOST": config("DB_HOST", default="localhost"),
            "PORT": config("DB_PORT", default="5432"),
            "CONN_MAX_AGE": config("DB_CONN_MAX_AGE", default=60, cast=int),
            "OPTIONS": {
                "connect_timeout": DB_CONNECT_TIMEOUT,
                "options": f"-c statement_timeout={DB_STATEMENT_TIMEOUT_MS}",
            },
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
]

LANGUAGE_CODE = "en"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True
