"""
Configuration Celery pour le tableau des promotions.

Ce fichier configure Celery pour exécuter le rafraîchissement des
promotions en arrière-plan, à la demande et périodiquement.
"""
import os
from celery import Celery

# Définir le module de settings Django par défaut
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

# Créer l'application Celery
app = Celery('supermarket_discounts')

# Charger la configuration depuis Django settings
# - namespace='CELERY' signifie que toutes les variables de config
#   commençant par CELERY_ dans settings.py seront utilisées
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-découverte des tâches dans les applications Django
app.autodiscover_tasks()

# Le planning Celery Beat (CELERY_BEAT_SCHEDULE) est défini dans settings.py
