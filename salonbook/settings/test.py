"""
Test settings: SQLite, local-memory cache, UTC wall clock.
"""
import os

os.environ.setdefault('SECRET_KEY', 'test-secret-key')

from .base import *  # noqa: E402

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'salonbook-tests',
    }
}

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

TIME_ZONE = 'UTC'
SLOT_GRANULARITY_MINUTES = 30
AVAILABILITY_CACHE_TTL = 300

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

AXES_ENABLED = False
AUTHENTICATION_BACKENDS = ['django.contrib.auth.backends.ModelBackend']

LOGGING['loggers']['apps']['level'] = 'CRITICAL'
