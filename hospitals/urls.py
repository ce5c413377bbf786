# hospitals/urls.py
from django.urls import path
from . import views

urlpatterns = [
    # Dashboards
    path('dashboard/', views.staff_dashboard, name='hospital_staff_dashboard'),
    path('admin-dashboard/', views.admin_dashboard, name='hospital_admin_dashboard'),

    # Blood Requests
    path('requests/', views.all_blood_requests, name='all_blood_requests'),
    path('request/<int:request_id>/', views.view_blood_request, name='view_blood_request'),
    path('request/<int:request_id>/match/', views.match_request, name='match_request'),
    path('request/<int:request_id>/issue/', views.issue_units, name='issue_units'),
    path('request/<int:request_id>/status/', views.set_request_status, name='set_request_status'),

    # Donors & Recipients
    path('people/', views.donors_and_recipients, name='donors_and_recipients'),

    # Appointments
    path('appointment/<int:appointment_id>/update/', views.update_appointment, name='update_appointment'),

    # Hospital administration
    path('settings/', views.hospital_settings, name='hospital_settings'),
    path('staff/add/', views.add_staff, name='add_staff'),
]
