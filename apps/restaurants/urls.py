from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'restaurants'

router = DefaultRouter()
router.register(r'', views.RestaurantViewSet, basename='restaurant')

urlpatterns = [
    # GET    /api/restaurants/                  - List restaurants
    # POST   /api/restaurants/                  - Onboard restaurant (staff)
    # GET    /api/restaurants/{id}/             - Restaurant details
    # GET    /api/restaurants/{id}/transfers/   - Restaurant ledger
    path('', include(router.urls)),
]
