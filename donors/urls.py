# donors/urls.py

from django.urls import path
from donors import views

urlpatterns = [
    # Dashboard
    path('dashboard/', views.donor_dashboard, name='donor_dashboard'),

    # Profile
    path('profile/edit/', views.edit_profile, name='edit_profile'),

    # Appointments
    path('appointments/book/', views.book_donation, name='book_donation'),
    path('appointments/<int:appointment_id>/cancel/', views.cancel_donation, name='cancel_donation'),
]
