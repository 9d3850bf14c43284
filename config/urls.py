"""
URL configuration du tableau des promotions.

Toutes les routes sont portées par l'application discounts.
"""
from django.urls import path, include

urlpatterns = [
    path('', include('discounts.urls')),
]
