from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Restaurant dashboards
    path('restaurants/<uuid:restaurant_id>/daily/', views.daily_stats, name='daily-stats'),
    path('restaurants/<uuid:restaurant_id>/total/', views.total_stats, name='total-stats'),
    path('restaurants/<uuid:restaurant_id>/origins/', views.origin_breakdown, name='origin-breakdown'),
    path('restaurants/<uuid:restaurant_id>/trends/', views.performance_trends, name='performance-trends'),
    path('restaurants/<uuid:restaurant_id>/comparison/', views.restaurant_comparison, name='comparison'),

    # Cache
    path('restaurants/<uuid:restaurant_id>/cache/', views.clear_dashboard_cache, name='clear-cache'),
]
