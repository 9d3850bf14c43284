from django.urls import path
from . import views

urlpatterns = [
    # Tableau des promotions
    path('', views.discount_board, name='discount_board'),
    path('refresh/', views.refresh_board, name='refresh_board'),

    # API de polling
    path('api/status/', views.discount_status_api, name='discount_status_api'),

    path('health', views.health_check, name='health'),
]
