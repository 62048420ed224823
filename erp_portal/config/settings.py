"""
Django settings for the ERP portal service.

Values are read from the environment (a local .env file is loaded when present).
"""
import os
from pathlib import Path

import dj_database_url
from dotenv import load_dotenv

# Load environment variables from a .env file if present (useful for local dev)
load_dotenv()


def env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-erp-portal-placeholder-key')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = env_bool('DJANGO_DEBUG', 'true')

ALLOWED_HOSTS = [host.strip() for host in os.getenv('DJANGO_ALLOWED_HOSTS', '*').split(',') if host.strip()]


# Application definition

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'django_filters',
    'erp_portal.core',
    'erp_portal.proxy',
    'erp_portal.accounts',
    'erp_portal.datagrid',
    'erp_portal.dashboard',
    'erp_portal.hr',
    'erp_portal.operations',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'erp_portal.config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'erp_portal.config.wsgi.application'


# Database
# https://docs.djangoproject.com/en/4.2/ref/settings/#databases

DATABASES = {
    'default': dj_database_url.config(
        default=f"sqlite:///{(BASE_DIR / 'db.sqlite3').resolve()}"
    )
}


# Cache: Redis when configured, local memory otherwise

REDIS_URL = os.getenv('REDIS_URL', '')
if REDIS_URL:
    CACHES = {
        'default': {
            'BACKEND': 'django_redis.cache.RedisCache',
            'LOCATION': REDIS_URL,
            'OPTIONS': {
                'CLIENT_CLASS': 'django_redis.client.DefaultClient',
                'IGNORE_EXCEPTIONS': True,
            },
            'KEY_PREFIX': 'erp_portal',
        }
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'erp-portal',
        }
    }


# Django REST framework

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'erp_portal.core.authentication.BackendTokenAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_FILTER_BACKENDS': [
        'django_filters.rest_framework.DjangoFilterBackend',
    ],
    'EXCEPTION_HANDLER': 'erp_portal.core.exceptions.api_exception_handler',
    'UNAUTHENTICATED_USER': None,
}


# External ERP backend reached through the proxy

ERP_BACKEND = {
    'BASE_URL': os.getenv('ERP_BACKEND_URL', ''),
    'REGISTRATION_ID': os.getenv('ERP_REGISTRATION_ID', ''),
    'TIMEOUT': env_int('ERP_BACKEND_TIMEOUT', 30),
    'AUTH_COOKIE': os.getenv('ERP_AUTH_COOKIE', 'auth-token'),
    'TOKEN_ALGORITHM': os.getenv('ERP_TOKEN_ALGORITHM', 'HS256'),
}

# Fallback decimal places when a tenant has no decimal settings
DEFAULT_DECIMALS = {
    'amtDec': env_int('DEFAULT_AMT_DEC', 2),
    'locAmtDec': env_int('DEFAULT_LOC_AMT_DEC', 2),
    'ctyAmtDec': env_int('DEFAULT_CTY_AMT_DEC', 2),
    'priceDec': env_int('DEFAULT_PRICE_DEC', 2),
    'qtyDec': env_int('DEFAULT_QTY_DEC', 2),
    'exhRateDec': env_int('DEFAULT_EXH_RATE_DEC', 2),
    'dateFormat': os.getenv('DEFAULT_DATE_FORMAT', 'yyyy-MM-dd'),
}

# Date format used by the UI when it sends dates as text
CLIENT_DATE_FORMAT = os.getenv('CLIENT_DATE_FORMAT', '%d/%m/%Y')


# Internationalization
# https://docs.djangoproject.com/en/4.2/topics/i18n/

LANGUAGE_CODE = 'en-us'

TIME_ZONE = os.getenv('TIME_ZONE', 'UTC')

USE_I18N = True

USE_TZ = True


# Static files (CSS, JavaScript, Images)

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# Logging

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

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
        'django': {
            'handlers': ['console'],
            'level': os.getenv('DJANGO_LOG_LEVEL', 'INFO').upper(),
            'propagate': False,
        },
        'erp_portal': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}
