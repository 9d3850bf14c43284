"""
WSGI config du tableau des promotions.

Expose le callable WSGI sous le nom ``application``.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

application = get_wsgi_application()
