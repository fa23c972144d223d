from django.urls import path
from . import views

app_name = 'transfers'

urlpatterns = [
    path('', views.create_transfer, name='create'),
    path('validate/', views.validate_transfer, name='validate'),
    path('history/', views.transfer_history, name='history'),
    path('daily/', views.daily_distribution, name='daily'),
]
