from django.urls import path
from . import views

app_name = 'rewards'

urlpatterns = [
    # Progress
    path('progress/', views.progress_summary, name='progress'),
    path('progress/daily/', views.daily_progress, name='daily-progress'),

    # Voucher
    path('voucher/', views.voucher, name='voucher'),
    path('voucher/qr/', views.voucher_qr, name='voucher-qr'),
    path('voucher/verify/', views.verify_voucher, name='voucher-verify'),
]
