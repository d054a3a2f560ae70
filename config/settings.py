# config/settings.py

from pathlib import Path
from decouple import config
import os
import dj_database_url

BASE_DIR = Path(__file__).resolve().parent.parent

# ═══════════════════════════════════════════════════════
# SEGURIDAD
# ═══════════════════════════════════════════════════════

SECRET_KEY = config('SECRET_KEY')
DEBUG = config('DEBUG', default=True, cast=bool)

ALLOWED_HOSTS = config(
    'ALLOWED_HOSTS',
    default='localhost,127.0.0.1'
).split(',')

# Agregar .onrender.com si estamos en Render
if not DEBUG:
    ALLOWED_HOSTS.append('.onrender.com')

# ═══════════════════════════════════════════════════════
# APLICACIONES
# ═══════════════════════════════════════════════════════

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third party
    'rest_framework',
    'corsheaders',

    # Local apps
    'apps.core',
    'apps.inspecciones',
    'apps.planes_accion',
    'apps.ml_recomendaciones',
    'django_extensions',

    'drf_spectacular',
    'drf_spectacular_sidecar',
]

# ═══════════════════════════════════════════════════════
# MIDDLEWARE
# ═══════════════════════════════════════════════════════

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
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

WSGI_APPLICATION = 'config.wsgi.application'

# ═══════════════════════════════════════════════════════
# BASE DE DATOS
# ═══════════════════════════════════════════════════════

# Si existe DATABASE_URL (Render/producción), usar esa
if os.environ.get('DATABASE_URL'):
    DATABASES = {
        'default': dj_database_url.config(
            default=os.environ.get('DATABASE_URL'),
            conn_max_age=600,
            conn_health_checks=True,
        )
    }
else:
    # Configuración local con decouple
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': config('DB_NAME'),
            'USER': config('DB_USER'),
            'PASSWORD': config('DB_PASSWORD'),
            'HOST': config('DB_HOST'),
            'PORT': config('DB_PORT'),
        }
    }

# ═══════════════════════════════════════════════════════
# INTERNACIONALIZACIÓN
# ═══════════════════════════════════════════════════════

LANGUAGE_CODE = 'es-pe'
TIME_ZONE = 'America/Lima'
USE_I18N = True
USE_TZ = True

# ═══════════════════════════════════════════════════════
# ARCHIVOS ESTÁTICOS
# ═══════════════════════════════════════════════════════

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# Whitenoise - Compresión y caché para archivos estáticos
STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage',
    },
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ═══════════════════════════════════════════════════════
# REST FRAMEWORK
# ═══════════════════════════════════════════════════════

# Sin autenticación: el acceso se controla fuera de este servicio
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.AllowAny',
    ),
    'UNAUTHENTICATED_USER': None,
    'EXCEPTION_HANDLER': 'apps.core.exceptions.manejador_excepciones',
    'DATETIME_FORMAT': '%Y-%m-%d %H:%M:%S',
    'DATE_FORMAT': '%Y-%m-%d',
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
}

# ═══════════════════════════════════════════════════════
# CORS
# ═══════════════════════════════════════════════════════

CORS_ALLOWED_ORIGINS = config(
    'CORS_ALLOWED_ORIGINS',
    default='http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173'
).split(',')

CORS_ALLOW_HEADERS = [
    'accept',
    'accept-encoding',
    'content-type',
    'dnt',
    'origin',
    'user-agent',
    'x-csrftoken',
    'x-requested-with',
]

CSRF_TRUSTED_ORIGINS = CORS_ALLOWED_ORIGINS

# ═══════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════

LOG_LEVEL = config('LOG_LEVEL', default='INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '[{asctime}] {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
        },
        'celery': {
            'handlers': ['console'],
            'level': 'INFO',
        },
        # Esto silencia los detalles excesivos de la conexión de red
        'httpx': {
            'handlers': ['console'],
            'level': 'WARNING',
        },
        'httpcore': {
            'handlers': ['console'],
            'level': 'WARNING',
        },
        'urllib3': {
            'handlers': ['console'],
            'level': 'WARNING',
        },
    },
}

# ═══════════════════════════════════════════════════════
# CELERY
# ═══════════════════════════════════════════════════════

CELERY_BROKER_URL = config('REDIS_URL', default='redis://localhost:6379/0')
CELERY_RESULT_BACKEND = config('REDIS_URL', default='redis://localhost:6379/0')
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_ALWAYS_EAGER = config('CELERY_TASK_ALWAYS_EAGER', default=False, cast=bool)
CELERY_TASK_TIME_LIMIT = 5 * 60

# Reintento periódico del feedback ML pendiente (broker caído o servicio con error)
CELERY_BEAT_SCHEDULE = {
    'reintentar-feedback-ml': {
        'task': 'apps.ml_recomendaciones.tasks.reintentar_feedback_ml',
        'schedule': config('ML_FEEDBACK_REINTENTO_SEGUNDOS', default=15 * 60, cast=int),
    },
}

# ═══════════════════════════════════════════════════════
# SERVICIO DE RECOMENDACIONES ML
# ═══════════════════════════════════════════════════════

ML_SERVICE_URL = config('ML_SERVICE_URL', default='http://localhost:8000')
ML_SERVICE_TIMEOUT = config('ML_SERVICE_TIMEOUT', default=10, cast=int)
ML_FEEDBACK_MAX_INTENTOS = config('ML_FEEDBACK_MAX_INTENTOS', default=5, cast=int)

# ═══════════════════════════════════════════════════════
# PLANES DE ACCIÓN
# ═══════════════════════════════════════════════════════

# Empresa usada cuando la lista de verificación no la informa
PLANES_ACCION_EMPRESA_DEFECTO = config('PLANES_ACCION_EMPRESA_DEFECTO', default='MSC')

# ═══════════════════════════════════════════════════════
# SUPABASE STORAGE (evidencias)
# ═══════════════════════════════════════════════════════

SUPABASE_URL = config('SUPABASE_URL', default='')
SUPABASE_KEY = config('SUPABASE_KEY', default='')
SUPABASE_BUCKET = config('SUPABASE_BUCKET', default='evidencias')
EVIDENCIAS_TAMANIO_MAXIMO_MB = config('EVIDENCIAS_TAMANIO_MAXIMO_MB', default=10, cast=int)

# ═══════════════════════════════════════════════════════
# DOCUMENTACIÓN OPENAPI
# ═══════════════════════════════════════════════════════

SPECTACULAR_SETTINGS = {
    'TITLE': 'API Planes de Acción',
    'DESCRIPTION': 'Generación y seguimiento de planes de acción desde inspecciones',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
    'SCHEMA_PATH_PREFIX': r'/api/',
    'SORT_OPERATION_PARAMETERS': True,
    'SWAGGER_UI_DIST': 'SIDECAR',
    'SWAGGER_UI_FAVICON_HREF': 'SIDECAR',
    'REDOC_DIST': 'SIDECAR',
}

# ═══════════════════════════════════════════════════════
# CONFIGURACIÓN DE SEGURIDAD PARA PRODUCCIÓN
# ═══════════════════════════════════════════════════════

if not DEBUG:
    # HTTPS
    SECURE_SSL_REDIRECT = True
    SESSION_COOKIE_SECURE = True
    CSRF_COOKIE_SECURE = True

    # Seguridad adicional
    SECURE_CONTENT_TYPE_NOSNIFF = True
    X_FRAME_OPTIONS = 'DENY'
    SECURE_HSTS_SECONDS = 31536000
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_HSTS_PRELOAD = True
