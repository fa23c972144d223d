from django.urls import path
from . import views

app_name = 'caching'

urlpatterns = [
    path('clear/', views.clear_cache, name='clear'),
]
