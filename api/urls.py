# api/urls.py

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

# Create router and register viewsets
router = DefaultRouter()
router.register(r'inventory', views.InventoryViewSet, basename='inventory')
router.register(r'blood-requests', views.BloodRequestViewSet, basename='blood-request')
router.register(r'appointments', views.AppointmentViewSet, basename='appointment')
router.register(r'hospitals', views.HospitalViewSet, basename='hospital')

app_name = 'api'

urlpatterns = [
    # Router URLs
    path('', include(router.urls)),

    # Custom endpoints
    path('compatibility/<str:blood_type>/', views.compatibility, name='compatibility'),
    path('stats/', views.dashboard_stats, name='dashboard-stats'),
]

# Available endpoints:
# GET/POST /api/inventory/                         - Hospital inventory (staff/admin)
# DELETE   /api/inventory/{id}/                    - Remove an unmatched unit
# GET      /api/inventory/expiring/?days=7         - Units expiring soon
#
# GET/POST /api/blood-requests/                    - Requests (recipient: own, staff: hospital)
# POST     /api/blood-requests/{id}/match/         - Run allocation
# POST     /api/blood-requests/{id}/issue/         - Mark matched units used
# POST     /api/blood-requests/{id}/cancel/        - Recipient cancels (pending/unavailable)
# POST     /api/blood-requests/{id}/set_status/    - Manual status override
#
# GET/POST /api/appointments/                      - Donation appointments
# POST     /api/appointments/{id}/cancel/          - Donor cancels
# POST     /api/appointments/{id}/set_status/      - Hospital confirms/completes/...
#
# GET      /api/hospitals/                         - Verified hospitals
# POST     /api/hospitals/{id}/verify|suspend/     - Super admin
#
# GET      /api/compatibility/{blood_type}/        - Compatibility lookup
# GET      /api/stats/                             - Dashboard statistics
