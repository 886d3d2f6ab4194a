"""
Configuration Django du logiciel de gestion locative SOPRIMEC.

Les valeurs sensibles ou propres à l'installation sont lues dans les variables
d'environnement, avec des valeurs par défaut adaptées au développement.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'soprimec-dev-secret-a-changer-en-production')

DEBUG = os.environ.get('DJANGO_DEBUG', '1') == '1'

ALLOWED_HOSTS = [h for h in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h]

INSTALLED_APPS = [
    'jazzmin',
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'loyers',
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

ROOT_URLCONF = 'soprimec.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'soprimec.wsgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('SOPRIMEC_DB_PATH', str(BASE_DIR / 'soprimec.sqlite3')),
        'ATOMIC_REQUESTS': True,
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
]

LANGUAGE_CODE = 'fr-fr'
TIME_ZONE = 'Africa/Dakar'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Paramètres métier de l'agence
SOPRIMEC = {
    'AGENCE_NOM': os.environ.get('SOPRIMEC_AGENCE_NOM', 'SOPRIMEC'),
    'AGENCE_TELEPHONE': os.environ.get('SOPRIMEC_AGENCE_TELEPHONE', '78 893 27 87'),
    'AGENCE_VILLE': os.environ.get('SOPRIMEC_AGENCE_VILLE', 'Dakar'),
    'DEVISE': 'FCFA',
    # Le loyer du mois en cours n'est exigible qu'à partir de ce jour du mois
    'JOUR_ECHEANCE': int(os.environ.get('SOPRIMEC_JOUR_ECHEANCE', '10')),
}

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework.authentication.SessionAuthentication',
        'rest_framework.authentication.BasicAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'EXCEPTION_HANDLER': 'loyers.exceptions.api_exception_handler',
}

JAZZMIN_SETTINGS = {
    'site_title': 'SOPRIMEC',
    'site_header': 'SOPRIMEC',
    'site_brand': 'SOPRIMEC',
    'welcome_sign': 'Gestion locative SOPRIMEC',
    'show_ui_builder': False,
    'icons': {
        'loyers.Bien': 'fas fa-building',
        'loyers.Locataire': 'fas fa-user',
        'loyers.Paiement': 'fas fa-money-bill',
        'loyers.Charge': 'fas fa-file-invoice',
        'loyers.Entretien': 'fas fa-tools',
    },
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '{asctime} {levelname} {name} : {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'loyers': {
            'handlers': ['console'],
            'level': os.environ.get('SOPRIMEC_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}
