# inventory/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path('', views.inventory_list, name='inventory_list'),
    path('add/', views.add_blood_unit, name='add_blood_unit'),
    path('<int:unit_id>/status/', views.change_unit_status, name='change_unit_status'),
    path('<int:unit_id>/remove/', views.remove_blood_unit, name='remove_unit'),
]
