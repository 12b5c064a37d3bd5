# backend/commission_backend/settings/dev.py
from .base import *

DEBUG = True

ALLOWED_HOSTS = ["*", "localhost", "127.0.0.1"]

# The frontend origin (Vite dev server)
FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN", "http://localhost:5173")

CSRF_TRUSTED_ORIGINS = [FRONTEND_ORIGIN]

DATABASES = {
    "default": {"ENGINE": "django.db.backends.sqlite3", "NAME": str(BASE_DIR / "db.sqlite3")}
}
