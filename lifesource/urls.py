from django.contrib import admin
from django.urls import path, include
from . import views


urlpatterns = [
    # Main pages
    path('', views.home, name='home'),
    path('dashboard/', views.dashboard_router, name='dashboard_router'),

    # Admin
    path('admin/', admin.site.urls),
    path('api/', include('api.urls')),
    path('admin-dashboard/', views.super_admin_dashboard, name='super_admin_dashboard'),
    path('admin-dashboard/hospital/<int:hospital_id>/status/', views.update_hospital_status, name='update_hospital_status'),

    # Apps
    path('accounts/', include('accounts.urls')),
    path('donors/', include('donors.urls')),
    path('recipients/', include('recipients.urls')),
    path('hospitals/', include('hospitals.urls')),
    path('inventory/', include('inventory.urls')),
]
