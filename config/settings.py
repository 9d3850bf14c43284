"""
Django settings pour le tableau des promotions.

Toutes les valeurs sensibles ou propres à l'environnement sont lues depuis
les variables d'environnement (fichier .env chargé via python-dotenv).
"""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def env_int(name, default):
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-discounts-dev-key')

DEBUG = env_bool('DJANGO_DEBUG', False)

ALLOWED_HOSTS = [h.strip() for h in os.getenv('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',') if h.strip()]


# Applications

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.staticfiles',
    'discounts',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'

# Aucun modèle persistant : la base ne sert qu'au runner de tests Django
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}


# Cache : Redis si disponible, sinon mémoire locale (dev / tests)
# L'état du rafraîchissement y est partagé entre le web et les workers Celery :
# sans Redis, les tâches doivent tourner dans le processus web.

REDIS_URL = os.getenv('REDIS_URL')

CELERY_BROKER_URL = os.getenv('CELERY_BROKER_URL') or REDIS_URL or 'memory://'


def shared_cache_url(redis_url, broker_url):
    """URL Redis utilisable comme cache partagé (None si aucune)."""
    if redis_url:
        return redis_url
    if broker_url and broker_url.startswith(('redis://', 'rediss://')):
        return broker_url
    return None


SHARED_CACHE_URL = shared_cache_url(REDIS_URL, CELERY_BROKER_URL)

if SHARED_CACHE_URL:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.redis.RedisCache',
            'LOCATION': SHARED_CACHE_URL,
        }
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'discounts',
        }
    }
    # django-ratelimit exige un cache partagé en production
    SILENCED_SYSTEM_CHECKS = ['django_ratelimit.E003', 'django_ratelimit.W001']

RATELIMIT_ENABLE = env_bool('RATELIMIT_ENABLE', True)


# Internationalisation

LANGUAGE_CODE = 'de-de'

TIME_ZONE = 'Europe/Berlin'

USE_I18N = True

USE_TZ = True


STATIC_URL = 'static/'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# Celery

CELERY_TASK_ALWAYS_EAGER = env_bool('CELERY_TASK_ALWAYS_EAGER', False) or SHARED_CACHE_URL is None
CELERY_TASK_IGNORE_RESULT = True
CELERY_TIMEZONE = TIME_ZONE
CELERY_BROKER_CONNECTION_RETRY_ON_STARTUP = True


# Source des promotions (Google Sheet exporté en CSV)

DISCOUNTS_SPREADSHEET_ID = os.getenv('DISCOUNTS_SPREADSHEET_ID', '1iCp5Pf5CPu_sbv8K3MQhkpOB51gvYuB7iytoZS8BM4A')
DISCOUNTS_SHEET_GID = os.getenv('DISCOUNTS_SHEET_GID', '517842932')

# Timeout de chaque requête HTTP (secondes)
DISCOUNTS_FETCH_TIMEOUT = env_int('DISCOUNTS_FETCH_TIMEOUT', 15)

# Au-delà, un état "loading" est considéré comme abandonné (secondes)
DISCOUNTS_LOADING_TIMEOUT = env_int('DISCOUNTS_LOADING_TIMEOUT', 120)

# Durée de vie d'un résultat dans le cache (secondes, 0 = sans expiration)
DISCOUNTS_STATE_TTL = env_int('DISCOUNTS_STATE_TTL', 900)

# Intervalle du rafraîchissement périodique Celery Beat (minutes)
DISCOUNTS_REFRESH_MINUTES = env_int('DISCOUNTS_REFRESH_MINUTES', 30)

CELERY_BEAT_SCHEDULE = {
    'refresh-discounts': {
        'task': 'discounts.tasks.refresh_discounts_periodic',
        'schedule': 60.0 * DISCOUNTS_REFRESH_MINUTES,
        'options': {
            'expires': 60 * DISCOUNTS_REFRESH_MINUTES,
        },
    },
}


# Logging

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'discounts': {
            'handlers': ['console'],
            'level': os.getenv('DISCOUNTS_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
        'celery': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}
