"""
Package de configuration du tableau des promotions.

Ce package contient les fichiers de configuration Django :
- settings.py: Django settings
- urls.py: URL routing
- celery.py: Configuration Celery pour les rafraîchissements en arrière-plan
- wsgi.py: WSGI application
"""

# Import Celery pour que les tâches soient auto-découvertes
from .celery import app as celery_app

__all__ = ('celery_app',)
