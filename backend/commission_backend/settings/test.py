from .base import *

DEBUG = False

DATABASES = {"default": {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"}}

STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}

REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"] = ["rest_framework.renderers.JSONRenderer"]

COMMISSION_PERIOD_STRATEGY = "BIWEEKLY"
COMMISSION_DEFAULT_RATE = "10"

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
