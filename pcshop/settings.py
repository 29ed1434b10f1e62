from pathlib import Path
import os
from datetime import timedelta

from decouple import config as _decouple_config
from dotenv import load_dotenv

# ───────────── BASE / ENV ─────────────
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")


# ───────────── env helpers ─────────────
def _to_bool(v, default=False):
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    return s in ("1", "true", "t", "yes", "y", "on")


def env_str(key, default=""):
    return _decouple_config(key, default=default)


def env_bool(key, default=False):
    return _to_bool(env_str(key, None), default)


def env_int(key, default=0):
    v = env_str(key, None)
    try:
        return int(v) if v is not None else default
    except (TypeError, ValueError):
        return default


def env_list(key, default=""):
    return [x.strip() for x in env_str(key, default).split(",") if x.strip()]


# ───────────── Base Config ─────────────
SECRET_KEY = env_str("SECRET_KEY", "change-me")
DEBUG = env_bool("DEBUG", False)

ALLOWED_HOSTS = env_list("ALLOWED_HOSTS", "127.0.0.1,localhost,testserver")

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ───────────── Installed Apps ─────────────
INSTALLED_APPS = [
    "corsheaders",
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "apps.discounts",
]

# ───────────── Middleware ─────────────
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

# ───────────── Templates ─────────────
ROOT_URLCONF = "pcshop.urls"
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]
WSGI_APPLICATION = "pcshop.wsgi.application"

# ───────────── Database ─────────────
DB_ENGINE = env_str("DB_ENGINE", "sqlite").strip().lower()

if DB_ENGINE == "mysql":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.mysql",
            "NAME": env_str("DB_NAME", "pc_ecommerce"),
            "USER": env_str("DB_USER", "pcshop"),
            "PASSWORD": env_str("DB_PASSWORD", ""),
            "HOST": env_str("DB_HOST", "localhost"),
            "PORT": env_str("DB_PORT", "3306"),
            "OPTIONS": {
                "charset": "utf8mb4",
                "init_command": "SET sql_mode='STRICT_TRANS_TABLES'",
                "use_unicode": True,
            },
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": env_str("DB_NAME", "") or str(BASE_DIR / "db.sqlite3"),
        }
    }

# ───────────── Auth / JWT ─────────────
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "rest_framework_simplejwt.authentication.JWTAuthentication",
        "rest_framework.authentication.SessionAuthentication",
    ),
}

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=30),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=1),
    "AUTH_HEADER_TYPES": ("Bearer",),
}

# ───────────── i18n / TZ ─────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = env_str("TIME_ZONE", "Asia/Ho_Chi_Minh")
USE_I18N = True
USE_TZ = True

# ───────────── Static ─────────────
STATIC_URL = "/static/"
STATIC_ROOT = os.path.join(BASE_DIR, "staticfiles")

# ───────────── CORS / CSRF ─────────────
FRONTEND_URL = env_str("FRONTEND_URL", "http://localhost:3000").rstrip("/")

CORS_ALLOWED_ORIGINS = [FRONTEND_URL]
CORS_ALLOW_CREDENTIALS = True
CSRF_TRUSTED_ORIGINS = [FRONTEND_URL]

if DEBUG:
    CORS_ALLOWED_ORIGINS += [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

# ───────────── Discounts ─────────────
# STORE: "orm" (database) or "memory" (process-local, for demos/tests)
# CAP_STACKED_AUTOMATIC: clamp summed automatic discounts to the order total.
#   Off by default; stacked automatic rules are summed without a cap.
DISCOUNTS = {
    "STORE": env_str("DISCOUNTS_STORE", "orm"),
    "CURRENCY_DECIMAL_PLACES": env_int("DISCOUNTS_CURRENCY_DECIMAL_PLACES", 2),
    "CAP_STACKED_AUTOMATIC": env_bool("DISCOUNTS_CAP_STACKED_AUTOMATIC", False),
    "STATISTICS_TOP": env_int("DISCOUNTS_STATISTICS_TOP", 5),
}

# ───────────── Logging ─────────────
LOG_DIR = BASE_DIR / "logs"
os.makedirs(LOG_DIR, exist_ok=True)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "[{levelname}] {asctime} {name} :: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "verbose"},
        "file": {
            "class": "logging.FileHandler",
            "filename": str(LOG_DIR / "app.log"),
            "formatter": "verbose",
        },
    },
    "loggers": {
        "django": {"handlers": ["console", "file"], "level": "INFO"},
        "discounts": {
            "handlers": ["console", "file"],
            "level": env_str("DISCOUNTS_LOG_LEVEL", "DEBUG"),
            "propagate": False,
        },
    },
    "root": {"handlers": ["console", "file"], "level": "INFO"},
}
