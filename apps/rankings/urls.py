from django.urls import path
from . import views

app_name = 'rankings'

urlpatterns = [
    # Rankings
    path('overall/', views.overall_ranking, name='overall'),
    path('origin/<str:country>/', views.origin_ranking, name='origin'),
    path('nearby/', views.nearby_ranking, name='nearby'),

    # Drill-down
    path('restaurants/<uuid:restaurant_id>/statistics/', views.restaurant_statistics, name='statistics'),

    # Operations
    path('refresh/', views.refresh, name='refresh'),
]
