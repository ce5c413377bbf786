from django.urls import path
from recipients import views

urlpatterns = [
    path('dashboard/', views.recipient_dashboard, name='recipient_dashboard'),
    path('requests/new/', views.create_blood_request, name='create_blood_request'),
    path('requests/<int:request_id>/cancel/', views.cancel_blood_request, name='cancel_blood_request'),
]
